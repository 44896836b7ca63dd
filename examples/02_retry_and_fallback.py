"""
Retry and Fallback Examples

Shows the per-attempt deadline, linear backoff and static fallback payloads.
"""

from resilient_client import ApiError, ResilientClient, RetryPolicy

BASE_URL = "https://httpbin.org"


def retry_on_server_error():
    """5xx is retried: 1 + max_retries attempts, waiting 500ms, 1000ms, ..."""
    print("\n=== Retry on 503 ===")

    with ResilientClient(base_url=BASE_URL, max_retries=2, retry_delay_ms=500) as client:
        try:
            client.get("/status/503")
        except ApiError as e:
            print(f"Gave up: {e}")


def deadline_per_attempt():
    """Each attempt is bounded by timeout_ms; a slow server yields a timeout ApiError."""
    print("\n=== Per-attempt Deadline ===")

    with ResilientClient(base_url=BASE_URL, timeout_ms=500, max_retries=1) as client:
        try:
            client.get("/delay/3")
        except ApiError as e:
            print(f"Kind: {e.kind.value}, message: {e.message}")


def custom_policy_per_call():
    """RetryPolicy can be overridden for one call."""
    print("\n=== Custom Policy ===")

    policy = RetryPolicy(max_retries=3, backoff=lambda attempt: 200 * 2 ** attempt)
    with ResilientClient(base_url=BASE_URL) as client:
        result = client.get("/get", retry=policy)
        print(f"Status: {result.status_code}")


def fallback_payloads():
    """client.fallback.* never raises ApiError."""
    print("\n=== Fallback ===")

    fallbacks = {"/status/500": {"items": [], "message": "Using cached data"}}
    with ResilientClient(base_url=BASE_URL, max_retries=0, fallbacks=fallbacks) as client:
        result = client.fallback.get("/status/500")

    print(f"is_fallback: {result.is_fallback}")
    print(f"Data: {result.data}")
    print(f"Error: {result.error}")


if __name__ == "__main__":
    retry_on_server_error()
    deadline_per_attempt()
    custom_policy_per_call()
    fallback_payloads()
