"""Tests for reading a stream of fields."""

import io
import json
import logging
from typing import Any

import pytest
from pytest_golden.plugin import GoldenTestFixture

from icalfields.exceptions import (
    ErrorKind,
    FieldParseError,
    LineBreakError,
    ParseError,
    StreamReadError,
)
from icalfields.field_stream import FieldStream, parse_fields
from icalfields.options import ParserOptions
from icalfields.parsing.field import Field, encode_fields
from icalfields.parsing.lines import ReaderState


class BrokenSource:
    """A byte source whose connection drops after the first line."""

    def __init__(self) -> None:
        self._lines = [b"BEGIN:VEVENT\r\n"]

    def readline(self) -> bytes:
        if self._lines:
            return self._lines.pop(0)
        raise OSError("Connection reset by peer")


def read_results(stream: FieldStream) -> list[Any]:
    """Read all fields, recording the kind of error for malformed lines."""
    results: list[Any] = []
    while True:
        try:
            results.append(next(stream))
        except StopIteration:
            return results
        except ParseError as err:
            results.append({"error": err.kind.name})


@pytest.mark.golden_test("testdata/field_stream/*.yaml")
def test_parse_fields_golden(
    golden: GoldenTestFixture, json_encoder: json.JSONEncoder
) -> None:
    """Fixture to read golden file and compare to golden output."""
    stream = FieldStream.from_ics(golden["input"])
    values = json.loads(json_encoder.encode(read_results(stream)))
    assert values == golden["output"]
    assert stream.state == ReaderState.EXHAUSTED


def test_empty_stream() -> None:
    """Test that an empty source ends cleanly without any fields."""
    stream = FieldStream(io.BytesIO(b""))
    with pytest.raises(StopIteration):
        next(stream)
    with pytest.raises(StopIteration):
        next(stream)
    assert list(parse_fields(io.BytesIO(b""))) == []


def test_folded_description() -> None:
    """Test a folded line where the continuation keeps a literal space."""
    stream = FieldStream.from_ics(b"DESCRIPTION:This\r\n  is a long\r\n")
    assert list(stream) == [Field(name="DESCRIPTION", value="This is a long")]


def test_continue_after_error() -> None:
    """Test that a caller may skip a malformed line and keep reading."""
    stream = FieldStream.from_ics(
        "BEGIN:VEVENT\r\nRDATE;VALUE=DATE\r\nSUMMARY:a\rb\r\nEND:VEVENT\r\n"
    )
    assert next(stream) == Field("BEGIN", "VEVENT")
    with pytest.raises(FieldParseError) as exc_info:
        next(stream)
    assert exc_info.value.kind == ErrorKind.NO_VALUE
    with pytest.raises(LineBreakError) as exc_info:
        next(stream)
    assert exc_info.value.kind == ErrorKind.BARE_CARRIAGE_RETURN
    assert next(stream) == Field("END", "VEVENT")
    with pytest.raises(StopIteration):
        next(stream)


def test_parse_fields_strict() -> None:
    """Test that strict parsing raises on the first malformed line."""
    fields = parse_fields(io.BytesIO(b"A:1\r\n;B=2:3\r\nC:4\r\n"))
    assert next(fields) == Field("A", "1")
    with pytest.raises(FieldParseError) as exc_info:
        next(fields)
    assert exc_info.value.kind == ErrorKind.NO_NAME


def test_parse_fields_lenient(caplog: pytest.LogCaptureFixture) -> None:
    """Test that lenient parsing skips malformed lines."""
    with caplog.at_level(logging.WARNING):
        fields = list(
            parse_fields(io.BytesIO(b"A:1\r\n;B=2:3\r\nC:4\r\n"), strict=False)
        )
    assert fields == [Field("A", "1"), Field("C", "4")]
    assert "Skipping invalid content line" in caplog.text
    assert "Field has no name" in caplog.text


def test_read_failure() -> None:
    """Test that a failed source ends the stream with an error."""
    stream = FieldStream(BrokenSource())
    with pytest.raises(StreamReadError):
        next(stream)
    assert stream.state == ReaderState.FAILED
    with pytest.raises(StreamReadError):
        next(stream)


def test_read_failure_not_skipped() -> None:
    """Test that lenient parsing does not hide a failed source."""
    with pytest.raises(StreamReadError):
        list(parse_fields(BrokenSource(), strict=False))


def test_options() -> None:
    """Test options are used by both the line reader and the field parser."""
    content = b"SUMMARY:Caf\xe9\n\nEND:VEVENT\n"
    stream = FieldStream.from_ics(
        content, ParserOptions(encoding="latin-1", skip_blank_lines=True)
    )
    assert list(stream) == [Field("SUMMARY", "Café"), Field("END", "VEVENT")]

    stream = FieldStream.from_ics(content, ParserOptions(allow_bare_lf=False))
    assert read_results(stream) == [
        {"error": "BARE_LINE_FEED"},
        {"error": "BARE_LINE_FEED"},
        {"error": "BARE_LINE_FEED"},
    ]


def test_encode_round_trip() -> None:
    """Test that encoded fields are read back unchanged."""
    fields = [
        Field("BEGIN", "VEVENT"),
        Field(
            "DESCRIPTION",
            "A very long description that will certainly need to be folded "
            "across more than a single physical line when it is encoded",
            {"ALTREP": ["cid:part1.0001@example.org"]},
        ),
        Field(
            "ATTENDEE",
            "mailto:c@example.com",
            {"MEMBER": ["mailto:a@example.com", "mailto:b@example.com"]},
        ),
        Field("END", "VEVENT"),
    ]
    content = encode_fields(fields)
    assert max(len(line) for line in content.split("\r\n")) <= 75
    assert list(FieldStream.from_ics(content)) == fields
