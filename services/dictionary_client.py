"""
Dictionary lookup client.

Fetches phonetics, pronunciation audio and meanings for a single
English word from the Free Dictionary API. Lookups are best-effort:
any failure yields None and the import carries on without enrichment.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import quote

import requests

from config import settings
from models import PARTS_OF_SPEECH
from logger_config import logger


AUDIO_SUFFIXES = {
    "us": "-us.mp3",
    "uk": "-uk.mp3",
    "au": "-au.mp3",
}


@dataclass
class DictionaryDefinition:
    """One definition with an optional example sentence."""

    definition: str
    example: str = ""


@dataclass
class DictionaryMeaning:
    """Meaning of a word for one part of speech."""

    part_of_speech: str
    definitions: List[DictionaryDefinition] = field(default_factory=list)
    synonyms: List[str] = field(default_factory=list)
    antonyms: List[str] = field(default_factory=list)


@dataclass
class DictionaryEntry:
    """Enrichment data extracted from a dictionary response."""

    word: str
    phonetic: str = ""
    audio_url_us: str = ""
    audio_url_uk: str = ""
    audio_url_au: str = ""
    meanings: List[DictionaryMeaning] = field(default_factory=list)


def map_part_of_speech(value: Optional[str]) -> str:
    """
    Map a dictionary part of speech onto the supported set.

    Args:
        value: Raw part of speech from the API

    Returns:
        Supported part of speech, 'noun' when unknown
    """
    normalized = (value or "").strip().lower()
    return normalized if normalized in PARTS_OF_SPEECH else "noun"


def _string_list(values) -> List[str]:
    if not isinstance(values, list):
        return []
    return [str(v).strip() for v in values if v and str(v).strip()]


def parse_entry(
    word: str,
    data: dict,
    definitions_per_meaning: int = 3
) -> DictionaryEntry:
    """
    Build a DictionaryEntry from the first element of an API response.

    Args:
        word: Word that was looked up
        data: Raw JSON entry
        definitions_per_meaning: Maximum definitions kept per meaning

    Returns:
        Parsed entry
    """
    phonetics = [p for p in data.get("phonetics") or [] if isinstance(p, dict)]

    phonetic = (data.get("phonetic") or "").strip()
    if not phonetic:
        phonetic = next(
            ((p.get("text") or "").strip() for p in phonetics if (p.get("text") or "").strip()),
            ""
        )

    audio = {}
    for region, suffix in AUDIO_SUFFIXES.items():
        audio[region] = next(
            (p["audio"] for p in phonetics
             if isinstance(p.get("audio"), str) and p["audio"].endswith(suffix)),
            ""
        )

    meanings = []
    for raw_meaning in data.get("meanings") or []:
        if not isinstance(raw_meaning, dict):
            continue
        definitions = []
        for raw_definition in raw_meaning.get("definitions") or []:
            if not isinstance(raw_definition, dict):
                continue
            text = (raw_definition.get("definition") or "").strip()
            if not text:
                continue
            definitions.append(DictionaryDefinition(
                definition=text,
                example=(raw_definition.get("example") or "").strip()
            ))
            if len(definitions) >= definitions_per_meaning:
                break
        meanings.append(DictionaryMeaning(
            part_of_speech=map_part_of_speech(raw_meaning.get("partOfSpeech")),
            definitions=definitions,
            synonyms=_string_list(raw_meaning.get("synonyms")),
            antonyms=_string_list(raw_meaning.get("antonyms"))
        ))

    return DictionaryEntry(
        word=(data.get("word") or word).strip(),
        phonetic=phonetic,
        audio_url_us=audio["us"],
        audio_url_uk=audio["uk"],
        audio_url_au=audio["au"],
        meanings=meanings
    )


class DictionaryClient:
    """Client for the dictionary lookup service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        definitions_per_meaning: Optional[int] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize client.

        Args:
            base_url: Entries endpoint; the word is appended to it
            timeout: Request timeout in seconds
            definitions_per_meaning: Maximum definitions kept per meaning
            session: Optional preconfigured HTTP session
        """
        self.base_url = (base_url or settings.dictionary_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.dictionary_timeout
        self.definitions_per_meaning = (
            definitions_per_meaning or settings.definitions_per_meaning
        )
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "Vocabdesk/1.0",
            "Accept": "application/json"
        })

    def lookup(self, word: str) -> Optional[DictionaryEntry]:
        """
        Look up a word.

        Args:
            word: Word to look up

        Returns:
            DictionaryEntry or None if unavailable or not found
        """
        if not word or not word.strip():
            return None

        url = f"{self.base_url}/{quote(word.strip())}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            if response.status_code == 404:
                logger.info(f"Dictionary has no entry for '{word}'")
                return None
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.warning(f"Dictionary lookup failed for '{word}': {e}")
            return None
        except ValueError as e:
            logger.warning(f"Dictionary returned invalid JSON for '{word}': {e}")
            return None

        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            logger.info(f"Dictionary returned no usable entry for '{word}'")
            return None

        try:
            return parse_entry(word, data[0], self.definitions_per_meaning)
        except (AttributeError, KeyError, TypeError) as e:
            logger.warning(f"Could not parse dictionary entry for '{word}': {e}")
            return None

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
