"""
Spreadsheet parsing for the bulk vocabulary import.

Reads a CSV or Excel upload and yields one ParsedRow per data row.
Expected columns: word (required), translation (optional) and topicId
(required). Header matching ignores case, spaces and underscores.
"""

import csv
import io
from dataclasses import dataclass
from itertools import chain
from pathlib import Path
from typing import Dict, Iterator, Optional

import pandas as pd
from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator

from utils.error_handling import InvalidImportFileError
from utils.text_utils import clean_cell, normalize_header
from logger_config import logger


CSV_EXTENSIONS = {".csv"}
EXCEL_EXTENSIONS = {".xlsx", ".xls"}

# normalized header -> ImportRow field
COLUMN_ALIASES = {
    "word": "word",
    "translation": "translation",
    "topicid": "topic_id",
}

MISSING_TOPIC_ID = "missing topicId"


class ImportRow(BaseModel):
    """A validated spreadsheet row."""

    word: str
    translation: Optional[str] = None
    topic_id: str

    @field_validator("word", "topic_id")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("translation")
    @classmethod
    def empty_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


@dataclass
class ParsedRow:
    """Outcome of parsing one row: a valid ImportRow or a failure reason."""

    word: str
    row: Optional[ImportRow] = None
    error: Optional[str] = None


class RowParser:
    """Turns an uploaded spreadsheet into import rows."""

    def parse(self, content: bytes, filename: str) -> Iterator[ParsedRow]:
        """
        Parse an upload.

        The file is opened and checked eagerly; rows are produced lazily
        and can only be consumed once. Rows with an empty word are
        dropped silently.

        Args:
            content: Raw file bytes
            filename: Original file name, used to pick the reader

        Returns:
            Iterator of parsed rows

        Raises:
            InvalidImportFileError: unsupported, unreadable or empty file
        """
        if not content:
            raise InvalidImportFileError("Uploaded file is empty")

        extension = Path(filename or "").suffix.lower()
        if extension in CSV_EXTENSIONS:
            records = self._read_csv(content)
        elif extension in EXCEL_EXTENSIONS:
            records = self._read_excel(content)
        else:
            raise InvalidImportFileError(
                f"Unsupported file type '{extension or filename}', "
                f"expected .csv, .xlsx or .xls"
            )

        first = next(records, None)
        if first is None:
            raise InvalidImportFileError("File contains no rows")

        return self._parse_records(chain([first], records))

    def _parse_records(self, records: Iterator[Dict[str, str]]) -> Iterator[ParsedRow]:
        for record in records:
            parsed = self.parse_record(record)
            if parsed is not None:
                yield parsed

    @staticmethod
    def parse_record(record: Dict[str, str]) -> Optional[ParsedRow]:
        """
        Validate one normalized record.

        Args:
            record: Values keyed by ImportRow field name

        Returns:
            ParsedRow, or None for a row without a word
        """
        word = record.get("word", "")
        if not word:
            return None

        topic_id = record.get("topic_id", "")
        if not topic_id:
            return ParsedRow(word=word, error=MISSING_TOPIC_ID)

        try:
            row = ImportRow(
                word=word,
                translation=record.get("translation") or None,
                topic_id=topic_id
            )
        except PydanticValidationError as e:
            reason = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            return ParsedRow(word=word, error=f"invalid row: {reason}")
        return ParsedRow(word=row.word, row=row)

    @staticmethod
    def _map_headers(headers) -> Dict[str, str]:
        """Map raw column names to ImportRow fields."""
        mapping = {}
        for header in headers:
            field = COLUMN_ALIASES.get(normalize_header(header))
            if field and field not in mapping.values():
                mapping[header] = field
        if "word" not in mapping.values():
            raise InvalidImportFileError("Missing required column: word")
        return mapping

    def _read_csv(self, content: bytes) -> Iterator[Dict[str, str]]:
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise InvalidImportFileError(f"CSV file is not valid UTF-8: {e}")

        reader = csv.DictReader(io.StringIO(text))
        mapping = self._map_headers(reader.fieldnames or [])
        return self._iter_csv(reader, mapping)

    @staticmethod
    def _iter_csv(reader: csv.DictReader, mapping: Dict[str, str]) -> Iterator[Dict[str, str]]:
        try:
            for raw in reader:
                yield {
                    field: clean_cell(raw.get(header))
                    for header, field in mapping.items()
                }
        except csv.Error as e:
            raise InvalidImportFileError(f"Malformed CSV at line {reader.line_num}: {e}")

    def _read_excel(self, content: bytes) -> Iterator[Dict[str, str]]:
        try:
            frame = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=object)
        except Exception as e:
            logger.warning(f"Could not read Excel upload: {e}")
            raise InvalidImportFileError(f"Could not read Excel file: {e}")

        mapping = self._map_headers(list(frame.columns))
        return (
            {field: clean_cell(raw.get(header)) for header, field in mapping.items()}
            for raw in frame.to_dict(orient="records")
        )
