"""Clients for the external translation service."""

import re
import time
from typing import Protocol

import httpx

from backend.app.core.errors import TranslationUnavailable
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

TARGET_NAMES = {
    "gu": "Gujarati (Gujarati script)",
    "en": "English",
    "gu-Latn": "Gujarati transliterated into Latin letters (Ginlish)",
}

_BRACED = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)


class TranslationService(Protocol):
    def translate(self, text: str, *, source_hint: str | None = None, target: str = "gu") -> str:
        ...

    def enhance(self, text: str) -> str:
        ...


def build_translation_prompt(text: str, source_hint: str | None, target: str) -> str:
    target_name = TARGET_NAMES.get(target, target)
    source = f" from {TARGET_NAMES.get(source_hint, source_hint)}" if source_hint else ""
    return (
        f"Translate the following invoice line-item description{source} into {target_name}. "
        f"Return only the translation inside {{{{ }}}}:\n\n\"{text}\""
    )


def build_enhance_prompt(text: str) -> str:
    return (
        "Enhance the following text professionally while preserving its formatting "
        "(bold, italic, lists, headings, and code blocks). "
        f"Return only the improved version inside {{{{ }}}}:\n\n\"{text}\""
    )


def extract_braced_answer(raw_text: str) -> str:
    match = _BRACED.search(raw_text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return raw_text.strip()


class GeminiTranslationClient:
    """Calls the Gemini generateContent endpoint with a bounded timeout."""

    def __init__(self, api_key: str, model: str, base_url: str, timeout: float = 30.0, http_client: httpx.Client | None = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = http_client

    def _post(self, url: str, payload: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
        return httpx.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)

    def translate(self, text: str, *, source_hint: str | None = None, target: str = "gu") -> str:
        if not text or not text.strip():
            raise TranslationUnavailable("Text is required")
        translated = self._generate(build_translation_prompt(text, source_hint, target))
        if not translated:
            raise TranslationUnavailable("Empty translation")
        return translated

    def enhance(self, text: str) -> str:
        if not text or not text.strip():
            raise TranslationUnavailable("Text is required")
        enhanced = self._generate(build_enhance_prompt(text))
        if not enhanced:
            raise TranslationUnavailable("Empty enhancement")
        return enhanced

    def _generate(self, prompt: str) -> str:
        url = f"{self.base_url}/{self.model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        start_time = time.time()
        try:
            response = self._post(url, payload)
        except httpx.TimeoutException as exc:
            logger.warning("Translation service timed out after %.1fs", self.timeout)
            raise TranslationUnavailable("Translation service timed out", {"timeout": self.timeout}) from exc
        except httpx.RequestError as exc:
            logger.warning("Failed to reach translation service: %s", exc)
            raise TranslationUnavailable(f"Failed to reach translation service: {exc}") from exc
        logger.debug("Translation service returned in %.2f seconds", time.time() - start_time)

        if response.status_code != 200:
            logger.error("Translation service error: %s", response.status_code)
            raise TranslationUnavailable(
                f"Translation service error: {response.status_code}", {"status_code": response.status_code}
            )

        try:
            data = response.json()
            raw_text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise TranslationUnavailable("Malformed translation service response") from exc

        return extract_braced_answer(raw_text)


GLOSSARY = {
    "gu": {
        "lagan mandap": "લગ્ન મંડપ",
        "dom": "ડોમ",
        "stage": "સ્ટેજ",
        "table": "ટેબલ",
        "chair": "ખુરશી",
        "tent": "તંબુ",
        "main gate": "મેન ગેટ",
        "sound system": "સાઉન્ડ સિસ્ટમ",
        "lighting": "લાઇટિંગ",
        "ac": "એસી",
    },
    "gu-Latn": {
        "lagan mandap": "lagna mandap",
        "dom": "dom",
        "stage": "stage",
        "table": "tebal",
        "chair": "khurshi",
        "tent": "tambu",
        "main gate": "main gate",
        "sound system": "sound system",
        "lighting": "lighting",
        "ac": "AC",
    },
}


class GlossaryTranslationClient:
    """Offline translator backed by a fixed glossary of common mandap-service items."""

    def __init__(self, glossary: dict[str, dict[str, str]] | None = None):
        self.glossary = glossary or GLOSSARY

    def translate(self, text: str, *, source_hint: str | None = None, target: str = "gu") -> str:
        key = (text or "").strip()
        if target == "en":
            for english, gujarati in self.glossary.get("gu", {}).items():
                if gujarati == key:
                    return english
        elif source_hint == "gu" and target == "gu-Latn":
            english = self.translate(key, source_hint="gu", target="en")
            return self.translate(english, source_hint="en", target="gu-Latn")
        else:
            translated = self.glossary.get(target, {}).get(key.lower())
            if translated:
                return translated
        raise TranslationUnavailable(f"No glossary translation for {text!r}", {"target": target})

    def enhance(self, text: str) -> str:
        raise TranslationUnavailable("Text enhancement needs the Gemini service")


def get_translation_service(settings) -> TranslationService:
    if settings.gemini_api_key:
        return GeminiTranslationClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.translation_timeout_seconds,
        )
    logger.info("No Gemini API key configured; using the offline glossary translator")
    return GlossaryTranslationClient()
