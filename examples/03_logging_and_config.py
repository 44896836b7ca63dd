"""
Logging and Configuration Examples

Structured JSON logs with correlation IDs, and loading ClientConfig
from environment variables or YAML files.
"""

import os
import tempfile

from resilient_client import (
    ClientConfig,
    ConfigFileLoader,
    LoggingConfig,
    ResilientClient,
    load_from_env,
)
from resilient_client.core.env_config import print_config_summary


def json_logging():
    """Request started / Attempt failed, retrying / Request completed events."""
    print("\n" + "=" * 60)
    print("JSON logging")
    print("=" * 60 + "\n")

    config = ClientConfig.create(
        base_url="https://httpbin.org",
        headers={"Authorization": "Bearer not-in-logs"},
        logging=LoggingConfig.create(level="DEBUG", format="json"),
    )

    with ResilientClient(config=config) as client:
        client.get("/get", headers={"X-Correlation-ID": "demo-request-1"})


def env_config():
    """RESILIENT_CLIENT_* variables."""
    print("\n" + "=" * 60)
    print("Environment configuration")
    print("=" * 60 + "\n")

    os.environ["RESILIENT_CLIENT_BASE_URL"] = "https://httpbin.org"
    os.environ["RESILIENT_CLIENT_MAX_RETRIES"] = "2"

    print_config_summary(load_from_env(timeout_ms=3000))


def yaml_config():
    """resilient_client section of a YAML file."""
    print("\n" + "=" * 60)
    print("YAML configuration")
    print("=" * 60 + "\n")

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "client.yaml")
        with open(path, "w") as f:
            f.write(
                "resilient_client:\n"
                "  base_url: https://httpbin.org\n"
                "  timeout_ms: 5000\n"
                "  fallbacks:\n"
                "    /data: {items: [], message: Using cached data}\n"
            )
        print_config_summary(ConfigFileLoader.from_file(path))


if __name__ == "__main__":
    json_logging()
    env_config()
    yaml_config()
