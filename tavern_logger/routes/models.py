"""Pydantic request models for API endpoints."""

from pydantic import BaseModel, ConfigDict

from tavern_logger.models import Message


class ChatCompletionBody(BaseModel):
    # Sampling parameters etc. are accepted and ignored
    model_config = ConfigDict(extra="allow")

    model: str | None = None
    messages: list[Message] | None = None
