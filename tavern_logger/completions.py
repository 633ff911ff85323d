"""Placeholder OpenAI payloads. Nothing here looks at the conversation."""

import random
import string
import time
from typing import Any

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _mock_id() -> str:
    return "mock-" + "".join(random.choices(_ID_ALPHABET, k=9))


def mock_completion(model: str, content: str) -> dict[str, Any]:
    """A chat.completion response with one fixed assistant message."""
    return {
        "id": _mock_id(),
        "object": "chat.completion",
        "created": int(time.time()),
        "model": model,
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
        "usage": {
            "prompt_tokens": 0,
            "completion_tokens": 0,
            "total_tokens": 0,
        },
    }


def model_list(model: str) -> dict[str, Any]:
    """The /v1/models response advertising the single mock model."""
    return {
        "object": "list",
        "data": [{
            "id": model,
            "object": "model",
            "created": int(time.time() * 1000),
            "owned_by": "custom-owner",
        }],
    }
