"""FastAPI endpoints.

  GET  /health               liveness, no auth
  GET  /v1/models            mock model list (bearer auth)
  POST /v1/chat/completions  log the transcript, return a placeholder reply
                             (bearer auth)

Errors use the OpenAI shape: {"error": {"message": ..., "type": ...}}.
"""

from fastapi import APIRouter

from .completions import router as completions_router
from .health import router as health_router

router = APIRouter()
router.include_router(health_router)
router.include_router(completions_router)
