"""Environment-variable-based configuration."""

import os
from pathlib import Path


def get_db_path() -> Path:
    """Return the database file path from MENTOR_DB_PATH."""
    raw = os.environ.get("MENTOR_DB_PATH", "~/.local/share/mentor_chat/mentor.db")
    return Path(raw).expanduser()


def get_openai_api_key() -> str | None:
    """Return the API key from OPENAI_API_KEY, or None when unset or blank."""
    key = os.environ.get("OPENAI_API_KEY", "").strip()
    return key or None


def get_openai_url() -> str:
    """Return the OpenAI-compatible base URL from MENTOR_OPENAI_URL."""
    return os.environ.get("MENTOR_OPENAI_URL", "https://api.openai.com/v1").rstrip("/")


def get_embedding_model() -> str:
    """Return the embedding model name from MENTOR_EMBEDDING_MODEL."""
    return os.environ.get("MENTOR_EMBEDDING_MODEL", "text-embedding-3-small")


def get_embedding_dim() -> int:
    """Return the embedding vector dimensions from MENTOR_EMBEDDING_DIM."""
    return int(os.environ.get("MENTOR_EMBEDDING_DIM", "1536"))


def get_embedding_timeout() -> float:
    """Return the embedding request timeout in seconds from MENTOR_EMBEDDING_TIMEOUT."""
    return float(os.environ.get("MENTOR_EMBEDDING_TIMEOUT", "10.0"))


def get_chat_model() -> str:
    """Return the chat completion model name from MENTOR_CHAT_MODEL."""
    return os.environ.get("MENTOR_CHAT_MODEL", "gpt-4o-mini")


def get_completion_timeout() -> float:
    """Return the completion request timeout in seconds from MENTOR_COMPLETION_TIMEOUT."""
    return float(os.environ.get("MENTOR_COMPLETION_TIMEOUT", "60.0"))


def get_temperature() -> float:
    """Return the sampling temperature from MENTOR_TEMPERATURE."""
    return float(os.environ.get("MENTOR_TEMPERATURE", "0.7"))


def get_max_tokens() -> int:
    """Return the completion length cap from MENTOR_MAX_TOKENS."""
    return int(os.environ.get("MENTOR_MAX_TOKENS", "1000"))


def is_editor_mode() -> bool:
    """Return True if MENTOR_EDITOR is set to TRUE."""
    return os.environ.get("MENTOR_EDITOR", "").upper() == "TRUE"


def get_transport() -> str:
    """Return the server transport from MENTOR_TRANSPORT ("http" or "stdio")."""
    return os.environ.get("MENTOR_TRANSPORT", "http").lower()


def get_host() -> str:
    """Return the HTTP bind address from MENTOR_HOST."""
    return os.environ.get("MENTOR_HOST", "127.0.0.1")


def get_port() -> int:
    """Return the HTTP port from MENTOR_PORT."""
    return int(os.environ.get("MENTOR_PORT", "8000"))


def get_log_level() -> str:
    """Return the logging level from MENTOR_LOG_LEVEL."""
    return os.environ.get("MENTOR_LOG_LEVEL", "WARNING").upper()
