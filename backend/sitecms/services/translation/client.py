"""HTTP client for the external translation API."""
import logging
import time
from typing import Any, Callable, Optional

import httpx

from sitecms.domain.exceptions import TranslationApiError
from .config import TranslationConfig

logger = logging.getLogger(__name__)

# 408 is the only 4xx that counts as a timeout
RETRYABLE_STATUS_CODES = {408, 500, 502, 503, 504}


def backoff_delay(attempt: int, base: float, cap: float) -> float:
    """Exponential backoff: ``base * 2**attempt`` capped at ``cap``."""
    return min(base * (2 ** attempt), cap)


def is_retryable(exc: Exception) -> bool:
    """Timeouts and network failures are retried; API rejections are not."""
    if isinstance(exc, httpx.TimeoutException):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    if isinstance(exc, httpx.TransportError):
        return True
    return False


class TranslationClient:
    """Translation API client.

    Sends ``{q, target, source?, format: "text"}`` to ``<api_url>?key=<api_key>``
    and reads ``data.translations[0].translatedText`` back.

    Attributes:
        config: Pipeline configuration (endpoint, key, timeout, retry policy)
    """

    def __init__(
        self,
        config: TranslationConfig,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self._sleep = sleep
        self._client = httpx.Client(timeout=config.timeout, transport=transport)

    def __enter__(self) -> "TranslationClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def translate(self, text: str, target: str, source: Optional[str] = None) -> str:
        """Translate a single piece of plain text.

        Args:
            text: Text to translate (already chunked to the API size limit)
            target: Target language code
            source: Source language code, auto-detected when omitted

        Returns:
            str: Translated text

        Raises:
            TranslationApiError: If the API rejects the request, returns an
                unexpected body, or keeps failing after every retry
        """
        if not self.config.api_key:
            raise TranslationApiError("Translation API key is not configured")

        payload = {"q": text, "target": target, "format": "text"}
        if source and source != "default":
            payload["source"] = source

        attempt = 0
        while True:
            try:
                response = self._client.post(
                    self.config.api_url,
                    params={"key": self.config.api_key},
                    json=payload,
                )
                response.raise_for_status()
                break
            except httpx.HTTPError as exc:
                status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
                retryable = is_retryable(exc)

                if not retryable or attempt >= self.config.max_retries:
                    logger.error(
                        "Translation request failed",
                        extra={
                            "target": target,
                            "status_code": status,
                            "attempts": attempt + 1,
                            "error": str(exc),
                        },
                    )
                    raise TranslationApiError(
                        f"Translation API request failed: {exc}",
                        status_code=status,
                        retryable=retryable,
                    ) from exc

                delay = backoff_delay(attempt, self.config.backoff_base, self.config.backoff_cap)
                attempt += 1
                logger.warning(
                    "Retrying translation request in %.1fs (attempt %s/%s): %s",
                    delay,
                    attempt,
                    self.config.max_retries,
                    exc,
                )
                self._sleep(delay)

        return self._parse(response)

    @staticmethod
    def _parse(response: httpx.Response) -> str:
        try:
            body = response.json()
            translated = body["data"]["translations"][0]["translatedText"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise TranslationApiError("Unexpected translation API response") from exc

        if not isinstance(translated, str):
            raise TranslationApiError("Unexpected translation API response")
        return translated
