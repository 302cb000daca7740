"""
LLM client factory

Creates appropriate LLM instances based on provider configuration.
"""

from typing import Optional
from loguru import logger

from api_recommender.config.settings import settings


def describe_provider() -> str:
    """Log and return a one-line summary of the configured provider."""
    provider = settings.llm_provider.lower()
    if provider == "openai":
        if settings.openai_api_key:
            key = settings.openai_api_key
            masked_key = key[:8] + "..." + key[-4:] if len(key) > 12 else "***"
            summary = f"LLM Provider: OpenAI-compatible | URL: {settings.openai_base_url} | Model: {settings.openai_model} | API key loaded: {masked_key}"
            logger.info(f"✅ {summary}")
        else:
            summary = "LLM Provider: OpenAI-compatible but OPENAI_API_KEY not set - completion calls will fail"
            logger.warning(f"⚠️  {summary}")
    elif provider == "ollama":
        summary = f"LLM Provider: Ollama | Base URL: {settings.ollama_base_url} | Model: {settings.ollama_model}"
        logger.info(f"✅ {summary}")
    else:
        summary = f"Unknown LLM provider: {settings.llm_provider}. Supported: 'openai', 'ollama'"
        logger.warning(f"⚠️  {summary}")
    return summary


def create_llm(temperature: Optional[float] = None, max_completion_tokens: Optional[int] = None, model: Optional[str] = None):
    """
    Factory function to create appropriate LLM based on provider configuration.

    Args:
        temperature: Generation temperature (defaults to 0.0)
        max_completion_tokens: Max tokens for completion (defaults to settings.max_output_tokens)
        model: Model name (defaults to provider-specific model)

    Returns:
        LangChain ChatModel instance (ChatOpenAI or ChatOllama)
    """
    provider = settings.llm_provider.lower()
    max_tokens = max_completion_tokens or settings.max_output_tokens
    temperature = temperature if temperature is not None else 0.0

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER=openai")

        return ChatOpenAI(
            model=model or settings.openai_model,
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            temperature=temperature,
            max_completion_tokens=max_tokens,
            timeout=settings.llm_request_timeout,
            max_retries=0,
        )

    elif provider == "ollama":
        try:
            from langchain_community.chat_models import ChatOllama
        except ImportError:
            raise ImportError(
                "Ollama support requires 'langchain-community'. "
                "Install it with: pip install langchain-community"
            )

        return ChatOllama(
            model=model or settings.ollama_model,
            base_url=settings.ollama_base_url,
            temperature=temperature,
            num_predict=max_tokens,  # Ollama uses num_predict instead of max_completion_tokens
            timeout=int(settings.llm_request_timeout),
        )

    else:
        raise ValueError(f"Unsupported LLM provider: {provider}. Supported: 'openai', 'ollama'")
