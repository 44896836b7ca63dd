"""
Basic Resilient Client Usage Examples

Demonstrates GET/POST requests, ApiError handling and the async client.
"""

import asyncio

from resilient_client import ApiError, AsyncResilientClient, ResilientClient

BASE_URL = "https://jsonplaceholder.typicode.com"


def basic_get_request():
    """Simple GET request."""
    print("\n=== Basic GET Request ===")

    with ResilientClient(base_url=BASE_URL) as client:
        result = client.get("/posts/1")

    print(f"Status: {result.status_code}")
    print(f"Data: {result.data}")


def post_with_json():
    """POST request with JSON body."""
    print("\n=== POST with JSON ===")

    data = {
        "title": "My Post",
        "body": "This is the content",
        "userId": 1
    }

    with ResilientClient(base_url=BASE_URL) as client:
        result = client.post("/posts", data)

    print(f"Status: {result.status_code}")
    print(f"Created: {result.data}")


def handle_api_error():
    """Every failure surfaces as ApiError."""
    print("\n=== Error Handling ===")

    with ResilientClient(base_url=BASE_URL, max_retries=0) as client:
        try:
            client.get("/definitely-missing")
        except ApiError as e:
            print(f"Kind: {e.kind.value}")
            print(f"Status: {e.status_code}")
            print(f"Message: {e.message}")


async def async_parallel_requests():
    """Independent requests run concurrently and keep separate retry state."""
    print("\n=== Async Parallel Requests ===")

    async with AsyncResilientClient(base_url=BASE_URL) as client:
        results = await asyncio.gather(
            client.get("/posts/1"),
            client.get("/users/1"),
        )

    for result in results:
        print(f"Status: {result.status_code}")


if __name__ == "__main__":
    basic_get_request()
    post_with_json()
    handle_api_error()
    asyncio.run(async_parallel_requests())
