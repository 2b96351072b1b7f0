"""Quick check that the OpenAI-compatible API is reachable with the configured key."""

import sys

import httpx

from mentor_chat.config import (
    get_chat_model,
    get_embedding_model,
    get_openai_api_key,
    get_openai_url,
)


def main() -> None:
    """Check API connectivity and that the configured models are listed."""
    url = get_openai_url()
    api_key = get_openai_api_key()
    if api_key is None:
        print("  OPENAI_API_KEY is not set")
        sys.exit(1)

    wanted = [get_chat_model(), get_embedding_model()]
    print(f"Checking {url} for models {', '.join(wanted)}...")

    try:
        resp = httpx.get(
            f"{url}/models", headers={"Authorization": f"Bearer {api_key}"}, timeout=10.0
        )
        resp.raise_for_status()
        models = {m["id"] for m in resp.json().get("data", [])}
    except httpx.ConnectError:
        print(f"  Could not connect to {url}")
        sys.exit(1)
    except Exception as e:
        print(f"  Error: {e}")
        sys.exit(1)

    missing = [m for m in wanted if m not in models]
    for model in wanted:
        print(f"  {model}: {'available' if model not in missing else 'NOT FOUND'}")
    if missing:
        sys.exit(1)


if __name__ == "__main__":
    main()
