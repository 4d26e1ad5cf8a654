from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class TranslationConfig:
    """Tuning knobs of the translation pipeline, injected at construction."""

    api_url: str = "https://translation.googleapis.com/language/translate/v2"
    api_key: Optional[str] = None
    timeout: float = 60.0
    batch_size: int = 5
    batch_delay: float = 0.2
    max_chunk_bytes: int = 4500
    max_retries: int = 3
    backoff_base: float = 1.0
    backoff_cap: float = 10.0

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "TranslationConfig":
        return cls(
            api_url=config.get("TRANSLATION_API_URL", cls.api_url),
            api_key=config.get("GOOGLE_TRANSLATE_API_KEY"),
            timeout=float(config.get("TRANSLATION_TIMEOUT", cls.timeout)),
            batch_size=max(1, int(config.get("TRANSLATION_BATCH_SIZE", cls.batch_size))),
            batch_delay=float(config.get("TRANSLATION_BATCH_DELAY", cls.batch_delay)),
            max_chunk_bytes=int(config.get("TRANSLATION_MAX_CHUNK_BYTES", cls.max_chunk_bytes)),
            max_retries=int(config.get("TRANSLATION_MAX_RETRIES", cls.max_retries)),
            backoff_base=float(config.get("TRANSLATION_BACKOFF_BASE", cls.backoff_base)),
            backoff_cap=float(config.get("TRANSLATION_BACKOFF_CAP", cls.backoff_cap)),
        )
