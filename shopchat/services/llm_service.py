"""
LLM service for the open-domain responder.
Wraps a chat model with timeout, rate limiting and retry.
"""

import time
import asyncio
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_openai import ChatOpenAI
from langchain_google_genai import ChatGoogleGenerativeAI

from shopchat.utils.logger import get_logger

logger = get_logger(__name__)


class LLMError(Exception):
    """Base exception for LLM-related errors."""


class LLMTimeoutError(LLMError):
    """Raised when LLM call exceeds timeout threshold."""


def create_llm(
    model_name: str, api_key: str | None, temperature: float = 0.7
) -> BaseChatModel:
    """
    Factory function to create chat model instances.

    Args:
        model_name: Model identifier (e.g., "gpt-4o-mini", "gemini-2.5-flash")
        api_key: API key for the provider
        temperature: Sampling temperature

    Returns:
        Configured chat model instance

    Raises:
        ValueError: If model provider is not supported
    """
    if "gemini" in model_name:
        return ChatGoogleGenerativeAI(
            google_api_key=api_key, model=model_name, temperature=temperature
        )
    elif "gpt" in model_name:
        return ChatOpenAI(api_key=api_key, model=model_name, temperature=temperature)
    else:
        raise ValueError(
            f"Unsupported model: {model_name}. "
            "Model name must contain 'gpt' or 'gemini'"
        )


class LLMService:
    """
    Async access to a chat model with per-call timeout, a concurrency
    semaphore and exponential-backoff retries.
    """

    def __init__(
        self,
        model: BaseChatModel,
        max_retries: int = 3,
        timeout: int = 30,
        rate_limit: int = 3,
    ):
        """
        Initialize async LLM service.

        Args:
            model: Configured chat model instance
            max_retries: Maximum attempts for failed calls
            timeout: Timeout in seconds for each LLM call
            rate_limit: Maximum concurrent LLM requests (Semaphore)
        """
        self.model = model
        self.max_retries = max_retries
        self.timeout = timeout
        self.semaphore = asyncio.Semaphore(rate_limit)

    async def invoke_with_retry(
        self,
        messages: list[BaseMessage] | str,
        timeout: int | None = None,
    ) -> BaseMessage:
        """
        Invokes the model with retry, timeout and rate limiting.

        Args:
            messages: Input messages or single prompt string
            timeout: Override default timeout (seconds)

        Returns:
            LLM response as BaseMessage

        Raises:
            LLMTimeoutError: If the last attempt exceeded the timeout
            LLMError: If the call fails after all retries
        """
        timeout = timeout or self.timeout
        start_time = time.time()

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(LLMError),
            reraise=True,
        ):
            with attempt:
                attempt_number = attempt.retry_state.attempt_number
                try:
                    logger.info(
                        "llm_call_started",
                        attempt=attempt_number,
                        timeout=timeout,
                        model=getattr(self.model, "model_name", "unknown"),
                    )

                    async with self.semaphore:
                        response = await asyncio.wait_for(
                            self.model.ainvoke(messages), timeout=timeout
                        )

                    self._log_usage(response, time.time() - start_time)
                    return response

                except asyncio.TimeoutError as e:
                    logger.error(
                        "llm_call_timeout",
                        elapsed=time.time() - start_time,
                        timeout=timeout,
                        attempt=attempt_number,
                    )
                    raise LLMTimeoutError(
                        f"LLM call exceeded timeout of {timeout}s"
                    ) from e
                except Exception as e:
                    logger.error(
                        "llm_call_failed",
                        exc_info=True,
                        elapsed=time.time() - start_time,
                        attempt=attempt_number,
                        error=str(e),
                    )
                    raise LLMError(f"LLM invocation failed: {e}") from e

    def _log_usage(self, response: BaseMessage, elapsed: float) -> None:
        usage = getattr(response, "usage_metadata", None)
        if usage:
            logger.info(
                "llm_usage",
                input_tokens=usage.get("input_tokens", 0),
                output_tokens=usage.get("output_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
                elapsed=elapsed,
            )
        else:
            logger.info("llm_call_completed", elapsed=elapsed)
