"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM
    llm_api_key: str = Field(default="", description="API key for the OpenAI-compatible chat endpoint")
    llm_model_name: str = Field(default="llama-3.1-8b-instant", description="Chat model identifier")
    llm_base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description=(
            "Base URL of the OpenAI-compatible chat API. Leave empty to use "
            "OpenAI cloud."
        ),
    )
    llm_max_tokens: int = Field(default=300, gt=0)
    llm_temperature: float = 0.0
    llm_timeout_seconds: float = Field(default=60.0, gt=0)

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_concurrency: int = Field(
        default=1,
        ge=1,
        description="Parallel embedding calls during ingestion (1 = sequential)",
    )
    embedding_timeout_seconds: float | None = Field(default=None, gt=0)

    # Retrieval
    chunk_size: int = Field(default=1000, gt=0, description="Maximum characters per chunk")
    top_k: int = Field(default=3, gt=0)

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton — import `settings` wherever needed.
settings = Settings()


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure root logging and return the package logger."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    )
    return logging.getLogger("docchat")
