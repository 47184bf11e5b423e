"""
Translation backends used by the translation batcher.

Each backend receives the already joined batch text and the delimiter
that separates its items, and returns the raw translated text. Backends
raise TranslationBackendError on any failure.

Supported providers:
- 'openai' (default): chat completion with a translator prompt
- 'google': Google Translate via deep-translator, no API key needed
"""

from typing import Optional, Protocol

from deep_translator import GoogleTranslator
from openai import OpenAI, OpenAIError

from config import settings
from utils.error_handling import TranslationBackendError
from logger_config import logger


GOOGLE_MAX_CHARS = 5000

LANGUAGE_NAMES = {
    "vi": "Vietnamese",
    "en": "English",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
}


class TranslationClient(Protocol):
    """Interface of a batch translation backend."""

    def translate_batch(self, combined_text: str, delimiter: str) -> str:
        """Translate delimiter-joined text in a single call."""
        ...


def build_prompt(combined_text: str, delimiter: str, target_language: str) -> str:
    """
    Build the translator prompt for a joined batch.

    Args:
        combined_text: Source texts joined by the delimiter
        delimiter: Sentinel separating the texts
        target_language: Target language code

    Returns:
        Prompt text
    """
    language = LANGUAGE_NAMES.get(target_language, target_language)
    return (
        "Act as a professional translator.\n"
        f"Task: translate the following texts into {language} naturally "
        "and in context.\n"
        f'The texts are separated by "{delimiter}".\n'
        "Important requirements:\n"
        f'- Return the translations separated by the same "{delimiter}"\n'
        "- Return only the translated text, no explanations\n"
        "- Keep the texts in the same order\n"
        "\n"
        "Texts to translate:\n"
        f"{combined_text}"
    )


class OpenAITranslationClient:
    """Batch translation through an OpenAI chat model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        target_language: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[OpenAI] = None
    ):
        self.model = model or settings.translation_model
        self.target_language = target_language or settings.translation_target_language
        self.timeout = timeout if timeout is not None else settings.translation_timeout
        self.client = client or OpenAI(
            api_key=api_key or settings.openai_api_key,
            timeout=self.timeout,
            max_retries=1
        )

    def translate_batch(self, combined_text: str, delimiter: str) -> str:
        prompt = build_prompt(combined_text, delimiter, self.target_language)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0
            )
        except OpenAIError as e:
            raise TranslationBackendError(f"OpenAI request failed: {e}")

        if not response.choices:
            raise TranslationBackendError("OpenAI returned no choices")
        return (response.choices[0].message.content or "").strip()


class GoogleTranslationClient:
    """
    Batch translation through Google Translate (deep-translator).

    deep-translator rejects payloads longer than GOOGLE_MAX_CHARS, so a
    batch of more than a few dozen definitions cannot be translated with
    this provider and stays untranslated. Use the 'openai' provider for
    large imports, or fill the gaps later with the retranslate command.
    """

    def __init__(self, target_language: Optional[str] = None):
        self.target_language = target_language or settings.translation_target_language
        self.translator = GoogleTranslator(source="auto", target=self.target_language)

    def translate_batch(self, combined_text: str, delimiter: str) -> str:
        if len(combined_text) > GOOGLE_MAX_CHARS:
            raise TranslationBackendError(
                f"Batch of {len(combined_text)} characters exceeds the Google "
                f"Translate limit of {GOOGLE_MAX_CHARS}"
            )
        # Plain machine translation keeps the sentinel untouched
        try:
            result = self.translator.translate(combined_text)
        except Exception as e:
            raise TranslationBackendError(f"Google Translate failed: {e}")
        return (result or "").strip()


def create_translation_client(provider: Optional[str] = None) -> Optional[TranslationClient]:
    """
    Build the configured translation backend.

    Args:
        provider: 'openai', 'google' or 'none'; defaults to settings

    Returns:
        Backend instance, or None when translation is disabled
    """
    provider = (provider or settings.translation_provider or "none").lower()

    if provider == "openai":
        if not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY not set, batch translation disabled")
            return None
        return OpenAITranslationClient()
    if provider == "google":
        return GoogleTranslationClient()
    if provider != "none":
        logger.warning(f"Unknown translation provider '{provider}', batch translation disabled")
    return None
