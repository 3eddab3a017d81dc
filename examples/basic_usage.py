"""
Strapi Python SDK - Basic Usage Example

This example demonstrates the basic usage of the Strapi Python SDK against a
local Strapi server (http://localhost:1337).
"""

import asyncio
import logging

from strapi_sdk import (
    StrapiClient,
    StrapiAsyncClient,
    AuthenticationData,
    HeadlessContext,
    InteractiveContext,
    NetworkError,
    StrapiError,
)


def sync_example():
    """Synchronous client example."""
    print("=== Sync Client Example ===\n")

    # Token persisted in ~/.strapi/storage.json
    client = StrapiClient({
        "url": "http://localhost:1337",
        "store": {"use_local_storage": True},
        "debug": True,
    })

    print(f"Client initialized (base_url={client.config.base_url})")

    try:
        result = client.login(AuthenticationData(
            identifier="user@example.com",
            password="SecurePassword123!",
        ))
        print(f"Logged in as: {result.user.get('username')}")

        articles = client.find("articles", {
            "filters": {"title": {"$containsi": "strapi"}},
            "populate": ["cover"],
            "pagination": {"page": 1, "pageSize": 10},
        })
        print(f"Found {len(articles.data)} articles, meta={articles.meta}")
    except NetworkError as e:
        print(f"Strapi unreachable: {e.message}")
    except StrapiError as e:
        print(f"Strapi error {e.status} {e.name}: {e.message}")

    client.close()


async def async_example():
    """Asynchronous client example."""
    print("\n=== Async Client Example ===\n")

    # Server-side: the session token never leaves the process
    async with StrapiAsyncClient(context=HeadlessContext()) as client:
        try:
            created = await client.create("articles", {"title": "Hello from Python"})
            print(f"Created: {created.data}")
        except StrapiError as e:
            print(f"Error (expected without real API): {e.name}")


def provider_example():
    """Provider login flow."""
    print("\n=== Provider Example ===\n")

    context = InteractiveContext()
    client = StrapiClient(context=context)

    # 1. Send the user here
    print(f"Redirect to: {client.get_provider_authentication_url('github')}")

    # 2. Strapi redirects back with ?access_token=...
    context.set_location("http://localhost:3000/connect/github/redirect?access_token=xxx")
    try:
        client.authenticate_provider("github")
    except StrapiError as e:
        print(f"Error (expected without real API): {e.name}")

    client.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    sync_example()
    asyncio.run(async_example())
    provider_example()

    print("\nExamples completed!")
