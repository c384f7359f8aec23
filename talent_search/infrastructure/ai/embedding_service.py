"""
Embedding Service

Text to vector conversion for player records and recruiter queries:
- Single and batched embedding through an OpenAI-compatible API
- Deadline per request, surfaced separately from provider outages
- Exponential backoff for transient provider failures
- Partial-failure batches (failed items come back as None)
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

import structlog
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    BadRequestError,
    OpenAIError,
    PermissionDeniedError,
    RateLimitError,
)
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from talent_search.core.config import get_settings
from talent_search.domain.exceptions import (
    DomainException,
    InvalidInputError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from talent_search.domain.interfaces import IEmbeddingProvider

logger = structlog.get_logger(__name__)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, ProviderUnavailableError) and getattr(exc, "retryable", False)


class EmbeddingService(IEmbeddingProvider):
    """
    Embedding client over ``AsyncOpenAI``.

    Error classification:
    - empty or oversized text: InvalidInputError, never sent
    - transport errors, rate limits, 5xx: ProviderUnavailableError, retried
    - deadline exceeded: ProviderTimeoutError, not retried
    - credential problems: ProviderUnavailableError, not retried
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: Optional[str] = None,
        retry_wait=None,
    ):
        self.settings = get_settings()
        self.client = client
        self._model = model or self.settings.OPENAI_EMBEDDING_MODEL
        self._retry_wait = retry_wait or wait_exponential(multiplier=0.5, min=0.5, max=8)
        self._metrics = {
            "embeddings_generated": 0,
            "requests": 0,
            "failures": 0,
            "timeouts": 0,
            "batch_fallbacks": 0,
        }

    @property
    def model_name(self) -> str:
        return self._model

    def _validate(self, text: str) -> str:
        if text is None or not text.strip():
            raise InvalidInputError("Text cannot be empty")
        if len(text) > self.settings.EMBEDDING_MAX_INPUT_CHARS:
            raise InvalidInputError(
                f"Text exceeds {self.settings.EMBEDDING_MAX_INPUT_CHARS} characters"
            )
        return text.strip()

    async def embed(self, text: str) -> List[float]:
        """Generate an embedding vector for one text."""
        cleaned = self._validate(text)
        vectors = await self._create_with_retry([cleaned])
        self._metrics["embeddings_generated"] += 1
        return vectors[0]

    async def embed_batch(self, texts: Sequence[str]) -> List[Optional[List[float]]]:
        """
        Embed many texts, preserving order.

        Invalid texts are None without a provider call. A chunk whose request
        fails is retried item by item so one bad item cannot fail the batch.
        """
        results: List[Optional[List[float]]] = [None] * len(texts)
        valid: List[tuple] = []
        for position, text in enumerate(texts):
            try:
                valid.append((position, self._validate(text)))
            except InvalidInputError:
                logger.debug("Skipping invalid embedding input", position=position)

        chunk_size = max(1, self.settings.EMBEDDING_BATCH_SIZE)
        for start in range(0, len(valid), chunk_size):
            chunk = valid[start:start + chunk_size]
            try:
                vectors = await self._create_with_retry([text for _, text in chunk])
            except DomainException as e:
                self._metrics["batch_fallbacks"] += 1
                logger.warning(
                    "Embedding chunk failed, retrying items individually",
                    chunk_size=len(chunk),
                    error=str(e),
                )
                for position, text in chunk:
                    try:
                        results[position] = await self.embed(text)
                    except DomainException as item_error:
                        logger.warning(
                            "Embedding item failed",
                            position=position,
                            error=str(item_error),
                        )
                continue

            for (position, _), vector in zip(chunk, vectors):
                results[position] = vector
            self._metrics["embeddings_generated"] += len(chunk)

        return results

    async def _create_with_retry(self, inputs: List[str]) -> List[List[float]]:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.settings.EMBEDDING_MAX_RETRIES)),
            wait=self._retry_wait,
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._create(inputs)
        raise ProviderUnavailableError("Embedding provider retries exhausted")

    async def _create(self, inputs: List[str]) -> List[List[float]]:
        self._metrics["requests"] += 1
        try:
            response = await asyncio.wait_for(
                self.client.embeddings.create(model=self._model, input=inputs),
                timeout=self.settings.EMBEDDING_TIMEOUT_SECONDS,
            )
        except (asyncio.TimeoutError, APITimeoutError) as e:
            self._metrics["timeouts"] += 1
            logger.warning("Embedding request timed out", inputs=len(inputs))
            raise ProviderTimeoutError("Embedding request timed out") from e
        except BadRequestError as e:
            self._metrics["failures"] += 1
            raise InvalidInputError(f"Embedding provider rejected input: {e}") from e
        except (AuthenticationError, PermissionDeniedError) as e:
            self._metrics["failures"] += 1
            error = ProviderUnavailableError(f"Embedding provider refused credentials: {e}")
            error.retryable = False
            raise error from e
        except (APIConnectionError, RateLimitError) as e:
            self._metrics["failures"] += 1
            logger.warning("Embedding provider unavailable", error=str(e))
            raise ProviderUnavailableError(f"Embedding provider unavailable: {e}") from e
        except APIStatusError as e:
            self._metrics["failures"] += 1
            if e.status_code >= 500:
                raise ProviderUnavailableError(f"Embedding provider error {e.status_code}") from e
            raise InvalidInputError(f"Embedding provider rejected request: {e.status_code}") from e
        except OpenAIError as e:
            self._metrics["failures"] += 1
            logger.warning("Embedding provider returned an unusable response", error=str(e), error_type=type(e).__name__)
            error = ProviderUnavailableError(f"Embedding provider error: {e}")
            error.retryable = False
            raise error from e

        data = sorted(response.data, key=lambda item: item.index)
        if len(data) != len(inputs):
            raise ProviderUnavailableError(
                f"Embedding provider returned {len(data)} vectors for {len(inputs)} inputs"
            )
        return [list(item.embedding) for item in data]

    async def check_health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "model": self._model,
            "metrics": dict(self._metrics),
        }

    def get_metrics(self) -> Dict[str, Any]:
        return dict(self._metrics)


__all__ = ["EmbeddingService"]
