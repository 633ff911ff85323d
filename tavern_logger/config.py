"""Environment-driven settings.

Variables (all optional):
  HOST                 bind address                  (0.0.0.0)
  PORT                 listen port                   (3000)
  API_KEY              accepted bearer token(s), comma separated (custom-key)
  LOGS_DIR             where transcripts are written (./logs)
  MOCK_MODEL           model id reported to clients  (mock-model-1)
  MOCK_RESPONSE        fixed completion text
  LOG_LEVEL            python logging level          (INFO)
  LOG_HEADER_TEMPLATE  Handlebars header override
  LOG_ENTRY_TEMPLATE   Handlebars entry override

A .env file at the repo root is loaded by the app and the launcher before
settings are read.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from tavern_logger.templates import DEFAULT_ENTRY_TEMPLATE, DEFAULT_HEADER_TEMPLATE

DEFAULT_LOGS_DIR = Path(__file__).parent.parent / "logs"

DEFAULT_MOCK_RESPONSE = "This is a mock response from the custom OpenAI-compatible server"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    api_keys: frozenset[str] = Field(default_factory=lambda: frozenset({"custom-key"}))
    logs_dir: Path = DEFAULT_LOGS_DIR
    mock_model: str = "mock-model-1"
    mock_response: str = DEFAULT_MOCK_RESPONSE
    log_level: str = "INFO"
    header_template: str = DEFAULT_HEADER_TEMPLATE
    entry_template: str = DEFAULT_ENTRY_TEMPLATE


def _split_keys(raw: str) -> frozenset[str]:
    return frozenset(k.strip() for k in raw.split(",") if k.strip())


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables (os.environ by default)."""
    env = os.environ if env is None else env
    fields: dict = {}
    if env.get("HOST"):
        fields["host"] = env["HOST"]
    if env.get("PORT"):
        fields["port"] = int(env["PORT"])
    if env.get("API_KEY"):
        keys = _split_keys(env["API_KEY"])
        if keys:
            fields["api_keys"] = keys
    if env.get("LOGS_DIR"):
        fields["logs_dir"] = Path(env["LOGS_DIR"])
    if env.get("MOCK_MODEL"):
        fields["mock_model"] = env["MOCK_MODEL"]
    if env.get("MOCK_RESPONSE"):
        fields["mock_response"] = env["MOCK_RESPONSE"]
    if env.get("LOG_LEVEL"):
        fields["log_level"] = env["LOG_LEVEL"].upper()
    if env.get("LOG_HEADER_TEMPLATE"):
        fields["header_template"] = env["LOG_HEADER_TEMPLATE"]
    if env.get("LOG_ENTRY_TEMPLATE"):
        fields["entry_template"] = env["LOG_ENTRY_TEMPLATE"]
    return Settings(**fields)
