"""OpenAI-compatible endpoints: model list and (mock) chat completions."""

import logging

from fastapi import APIRouter, Depends

from tavern_logger.completions import mock_completion, model_list
from tavern_logger.config import Settings
from tavern_logger.pipeline import LogRouter, run_pipeline

from .deps import api_error, get_log_router, get_settings, require_api_key
from .models import ChatCompletionBody

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/v1/models")
async def list_models(settings: Settings = Depends(get_settings)):
    """Advertise the single mock model."""
    return model_list(settings.mock_model)


@router.post("/v1/chat/completions")
async def chat_completions(
    body: ChatCompletionBody,
    settings: Settings = Depends(get_settings),
    log_router: LogRouter = Depends(get_log_router),
):
    """Log the posted transcript under its character, return a placeholder reply."""
    if body.messages is None:
        raise api_error(400, "Messages array is required")

    result = await run_pipeline(body.messages, log_router)
    logger.info(
        "Chat request: %d message(s), character=%r, user=%r → %s",
        len(body.messages),
        result.characters.ai_entity,
        result.characters.user_entity,
        result.log.target.path if result.log else "-",
    )
    return mock_completion(settings.mock_model, settings.mock_response)
