import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tavern_logger.config import Settings, load_settings
from tavern_logger.pipeline import LogRouter, SeenCache
from tavern_logger.routes import router
from tavern_logger.storage import LogStore

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)


def _error(status: int, message: str, error_type: str) -> JSONResponse:
    return JSONResponse({"error": {"message": message, "type": error_type}}, status_code=status)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)
    return _error(exc.status_code, str(exc.detail), "invalid_request_error")


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(tuple(e.get("loc", ())) in (("body",), ("body", "messages")) for e in errors):
        return _error(400, "Messages array is required", "invalid_request_error")
    details = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ())[1:])}: {e.get('msg', '')}" for e in errors
    )
    return _error(400, f"Invalid request: {details}", "invalid_request_error")


async def _server_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error", "server_error")


def create_app(settings: Settings | None = None) -> FastAPI:
    resolved = settings or load_settings()
    store = LogStore(resolved.logs_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Mock OpenAI server ready (model %s); logging to %s; %d API key(s) accepted",
            resolved.mock_model, store.logs_dir, len(resolved.api_keys),
        )
        yield

    app = FastAPI(title="Tavern Logger", lifespan=lifespan)
    app.state.settings = resolved
    app.state.log_router = LogRouter(
        store,
        SeenCache(),
        header_template=resolved.header_template,
        entry_template=resolved.entry_template,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _server_error)
    app.include_router(router)
    return app


# Default app instance for uvicorn (uses LOGS_DIR etc. from the environment)
app = create_app()
