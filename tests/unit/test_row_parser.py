"""
Unit tests for spreadsheet parsing.
"""

import io

import pandas as pd
import pytest

from services.row_parser import MISSING_TOPIC_ID, RowParser
from utils.error_handling import InvalidImportFileError


def csv_bytes(text: str) -> bytes:
    return text.encode("utf-8")


def excel_bytes(rows: list) -> bytes:
    buffer = io.BytesIO()
    pd.DataFrame(rows).to_excel(buffer, index=False)
    return buffer.getvalue()


def test_parse_csv_rows():
    """Valid CSV rows become ImportRows in file order."""
    content = csv_bytes(
        "word,translation,topicId\n"
        "apple,quả táo,t1\n"
        "  pear ,,t2\n"
    )

    rows = list(RowParser().parse(content, "words.csv"))

    assert [r.word for r in rows] == ["apple", "pear"]
    assert rows[0].row.translation == "quả táo"
    assert rows[0].row.topic_id == "t1"
    assert rows[1].row.translation is None
    assert all(r.error is None for r in rows)


def test_headers_ignore_case_spaces_and_underscores():
    content = csv_bytes("Word, Translation ,topic_id\nplum,quả mận,t1\n")

    rows = list(RowParser().parse(content, "words.CSV"))

    assert rows[0].row.word == "plum"
    assert rows[0].row.translation == "quả mận"
    assert rows[0].row.topic_id == "t1"


def test_utf8_bom_is_accepted():
    content = "\ufeffword,topicId\napple,t1\n".encode("utf-8")

    rows = list(RowParser().parse(content, "words.csv"))

    assert rows[0].word == "apple"


def test_rows_with_empty_word_are_skipped():
    """Blank words vanish from the output entirely."""
    content = csv_bytes("word,topicId\napple,t1\n,t1\n   ,t1\npear,t1\n")

    rows = list(RowParser().parse(content, "words.csv"))

    assert [r.word for r in rows] == ["apple", "pear"]


def test_missing_topic_id_is_a_row_failure():
    content = csv_bytes("word,topicId\napple,\npear,t1\n")

    rows = list(RowParser().parse(content, "words.csv"))

    assert rows[0].word == "apple"
    assert rows[0].row is None
    assert rows[0].error == MISSING_TOPIC_ID
    assert rows[1].row is not None


def test_missing_topic_column_fails_every_row():
    content = csv_bytes("word,translation\napple,táo\n")

    rows = list(RowParser().parse(content, "words.csv"))

    assert rows[0].error == MISSING_TOPIC_ID


def test_parse_excel_rows():
    """Excel uploads are read from the first sheet; numeric ids are stringified."""
    content = excel_bytes([
        {"word": "apple", "translation": "quả táo", "topicId": "t1"},
        {"word": None, "translation": "bỏ qua", "topicId": "t1"},
        {"word": "pear", "translation": None, "topicId": 42},
    ])

    rows = list(RowParser().parse(content, "words.xlsx"))

    assert [r.word for r in rows] == ["apple", "pear"]
    assert rows[0].row.translation == "quả táo"
    assert rows[1].row.translation is None
    assert rows[1].row.topic_id == "42"


def test_missing_word_column_is_rejected():
    with pytest.raises(InvalidImportFileError) as exc_info:
        RowParser().parse(csv_bytes("term,topicId\napple,t1\n"), "words.csv")

    assert "word" in exc_info.value.message


def test_unsupported_extension_is_rejected():
    with pytest.raises(InvalidImportFileError):
        RowParser().parse(b"word,topicId\napple,t1\n", "words.txt")


def test_empty_upload_is_rejected():
    with pytest.raises(InvalidImportFileError):
        RowParser().parse(b"", "words.csv")


def test_header_only_file_is_rejected():
    with pytest.raises(InvalidImportFileError):
        RowParser().parse(csv_bytes("word,translation,topicId\n"), "words.csv")


def test_unreadable_excel_is_rejected():
    with pytest.raises(InvalidImportFileError):
        RowParser().parse(b"definitely not a workbook", "words.xlsx")


@pytest.mark.parametrize("record, expected", [
    ({"word": "", "topic_id": "t1"}, None),
    ({"word": "apple", "topic_id": ""}, MISSING_TOPIC_ID),
])
def test_parse_record_edge_cases(record, expected):
    parsed = RowParser.parse_record(record)

    if expected is None:
        assert parsed is None
    else:
        assert parsed.error == expected
