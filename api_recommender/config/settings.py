"""
Configuration management for the application.
Loads settings from environment variables and the project .env file.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from loguru import logger

# Find project root (where .env, api-docs/ and data/ live)
# This file is at api_recommender/config/settings.py, so project root is 3 levels up
_project_root = Path(__file__).resolve().parent.parent.parent

PROJECT_ROOT = _project_root

# Load environment variables from project root
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(dotenv_path=_env_file, override=True)
    logger.debug(f"Loaded .env from: {_env_file}")
else:
    logger.debug(f".env file not found at: {_env_file}")
    # Fallback to default behavior (current directory)
    load_dotenv(override=False)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # LLM Provider Selection
    llm_provider: str = Field(default="openai")  # Options: "openai" | "ollama"

    # OpenAI-compatible endpoint (NVIDIA, Groq, OpenAI, ...)
    openai_api_key: str = Field(default="")
    openai_base_url: str = Field(default="https://integrate.api.nvidia.com/v1")
    openai_model: str = Field(default="qwen/qwen3-coder-480b-a35b-instruct")

    # Ollama Configuration
    ollama_base_url: str = Field(default="http://localhost:11434")
    ollama_model: str = Field(default="llama3")

    llm_request_timeout: float = Field(default=60.0)  # Seconds per completion call
    max_output_tokens: int = Field(default=4000)

    # Per-step temperatures
    classification_temperature: float = Field(default=0.0)
    extraction_temperature: float = Field(default=0.0)
    followup_temperature: float = Field(default=0.3)
    answer_temperature: float = Field(default=0.3)
    selection_temperature: float = Field(default=0.0)
    payload_temperature: float = Field(default=0.2)

    # Conversation windows (number of turns handed to each step)
    classification_window_turns: int = Field(default=4)
    new_request_window_turns: int = Field(default=2)
    continuation_window_turns: int = Field(default=10)

    # Catalog and history
    api_docs_path: str = Field(default="api-docs/apis.md")
    history_db_path: str = Field(default="data/chat_memory.db")
    session_list_limit: int = Field(default=50)
    session_messages_limit: int = Field(default=100)

    # Server
    server_host: str = Field(default="0.0.0.0")
    server_port: int = Field(default=8080)
    cors_origins: str = Field(default="*")  # Comma separated

    log_level: str = Field(default="INFO")
    system_name: str = Field(default="UMI")  # Project name used in user-facing messages

    class Config:
        env_file = str(_project_root / ".env")
        env_file_encoding = "utf-8"
        extra = "allow"  # Allow extra fields from .env


def resolve_path(path: str) -> Path:
    """Resolve a settings path relative to the project root."""
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = _project_root / candidate
    return candidate


# Create global settings instance
settings = Settings()
