"""Shared dependencies: bearer-token check and OpenAI-style errors."""

from fastapi import HTTPException, Request

from tavern_logger.config import Settings
from tavern_logger.pipeline import LogRouter


def api_error(status: int, message: str, error_type: str = "invalid_request_error") -> HTTPException:
    """HTTPException whose body is rendered as {"error": {"message", "type"}}."""
    return HTTPException(status, {"message": message, "type": error_type})


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_log_router(request: Request) -> LogRouter:
    return request.app.state.log_router


async def require_api_key(request: Request) -> str:
    """Accept `Authorization: Bearer <key>` for any configured key."""
    header = request.headers.get("authorization", "")
    key = header.removeprefix("Bearer ").strip()
    if not key or key not in get_settings(request).api_keys:
        raise api_error(401, "Invalid API key")
    return key
