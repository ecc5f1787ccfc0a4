"""Client wrapper for generating narrative text with Google Gemini models."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError, NotFound

from app.core.config import GeminiSettings


_TEXT_FALLBACKS: tuple[str, ...] = (
    "gemini-2.5-flash",
    "gemini-1.5-flash",
    "gemini-1.5-pro",
)

logger = logging.getLogger(__name__)


class GeminiModelError(RuntimeError):
    """Raised when Gemini cannot fulfill a request."""


class GeminiClient:
    """Thin async facade over the synchronous Gemini SDK."""

    def __init__(self, settings: GeminiSettings) -> None:
        self._settings = settings
        if settings.enabled:
            # Configure the global client once per process.
            genai.configure(api_key=settings.api_key)

    @property
    def enabled(self) -> bool:
        return self._settings.enabled

    async def generate_text(self, prompt: str) -> str:
        """Produce a free-form text response using the configured model."""
        if not self.enabled:
            raise GeminiModelError("GEMINI_API_KEY is not configured.")

        def _invoke() -> str:
            return self._invoke_with_models(
                models=self._text_model_candidates(),
                error_prefix="Gemini generate_content failed",
                call=lambda model: model.generate_content(prompt).text or "",
            )

        return await asyncio.to_thread(_invoke)

    def _invoke_with_models(
        self,
        *,
        models: Iterable[str],
        error_prefix: str,
        call: Callable[[genai.GenerativeModel], Any],
    ) -> Any:
        """Try the configured model followed by fallbacks when available."""

        model_sequence = list(models)
        last_not_found: NotFound | None = None
        for index, model_name in enumerate(model_sequence):
            generative_model = genai.GenerativeModel(model_name)
            try:
                return call(generative_model)
            except NotFound as exc:  # pragma: no cover - network call
                last_not_found = exc
                logger.warning(
                    "Gemini model '%s' not found (attempt %d/%d); trying fallback.",
                    model_name,
                    index + 1,
                    len(model_sequence),
                )
                continue
            except GoogleAPIError as exc:
                # Covers call errors and RetryError raised on deadlines.
                raise GeminiModelError(f"{error_prefix}: {exc}") from exc
            except ValueError as exc:
                # Blocked or empty candidates surface when reading .text.
                raise GeminiModelError(f"{error_prefix}: {exc}") from exc

        if last_not_found is not None:
            primary = model_sequence[0] if model_sequence else "unknown"
            raise GeminiModelError(
                f"Gemini model '{primary}' is not available. "
                "Update GEMINI_MODEL_NAME to a supported value."
            ) from last_not_found

        raise GeminiModelError(f"{error_prefix}: Unknown error invoking Gemini.")

    def _text_model_candidates(self) -> list[str]:
        """Return distinct model names prioritizing the configured value."""
        seen: set[str] = set()
        candidates: list[str] = []
        for name in (self._settings.model_name, *_TEXT_FALLBACKS):
            if not name:
                continue
            cleaned = name.strip()
            if not cleaned or cleaned in seen:
                continue
            seen.add(cleaned)
            candidates.append(cleaned)
        return candidates


__all__ = ["GeminiClient", "GeminiModelError"]
