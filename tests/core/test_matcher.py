from __future__ import annotations

from pathlib import Path

import pytest

from magicverify.core.matcher import Matcher, header_hex, identify_extension, match_header
from magicverify.core.signatures import load_signature_table
from magicverify.core.types import NOT_APPLICABLE, UNKNOWN_EXTENSION

_TABLE = load_signature_table(
    {
        ".png": "89504e470d0a1a0a",
        ".jpg": "ffd8ff",
        ".pdf": "255044462D",
        ".zip": "504B0304",
    }
)


@pytest.mark.parametrize("extension,expected_hex", list(_TABLE.items()))
def test_matching_prefix_passes_for_every_entry(extension: str, expected_hex: str) -> None:
    signature = bytes.fromhex(expected_hex)
    sample = signature + b"\x00" * (_TABLE.max_signature_bytes - len(signature))

    result = match_header(Path(f"file{extension}"), sample, _TABLE)

    assert result.passed is True
    assert result.expected_magic == expected_hex
    assert result.identified_extension == extension
    assert len(result.actual_magic) == 2 * _TABLE.max_signature_bytes


def test_png_scenario_pass_and_fail() -> None:
    table = load_signature_table({".png": "89504E47"})

    good = match_header(Path("a.png"), bytes.fromhex("89504E470D0A1A0A")[:4], table)
    bad = match_header(Path("b.png"), bytes(4), table)

    assert good.passed is True
    assert good.identified_extension == ".png"
    assert bad.passed is False
    assert bad.actual_magic == "00000000"
    assert bad.identified_extension == UNKNOWN_EXTENSION


def test_identification_finds_real_type_of_renamed_file() -> None:
    table = load_signature_table({".png": "89504E47", ".jpg": "FFD8FF"})

    result = match_header(Path("x.png"), bytes.fromhex("FFD8FF00"), table, identify=True)

    assert result.passed is False
    assert result.expected_magic == "89504E47"
    assert result.actual_magic == "FFD8FF00"
    assert result.identified_extension == ".jpg"


def test_identification_skipped_when_not_requested() -> None:
    table = load_signature_table({".png": "89504E47", ".jpg": "FFD8FF"})

    result = match_header(Path("x.png"), bytes.fromhex("FFD8FF00"), table)

    assert result.passed is False
    assert result.identified_extension == UNKNOWN_EXTENSION


def test_identification_for_unlisted_extension() -> None:
    result = match_header(
        Path("payload.bin"), bytes.fromhex("504B030414000600"), _TABLE, identify=True
    )

    assert result.passed is None
    assert result.pass_label == NOT_APPLICABLE
    assert result.expected_magic == NOT_APPLICABLE
    assert result.identified_extension == ".zip"


def test_unlisted_extension_without_match_stays_unknown() -> None:
    result = match_header(Path("notes.txt"), b"hello world!", _TABLE, identify=True)

    assert result.passed is None
    assert result.identified_extension == UNKNOWN_EXTENSION
    assert result.actual_magic == b"hello wo".hex().upper()


def test_short_sample_fails_and_reports_no_actual_magic() -> None:
    result = match_header(Path("tiny.jpg"), b"\xff\xd8", _TABLE)

    assert result.passed is False
    assert result.actual_magic == NOT_APPLICABLE


def test_sample_shorter_than_table_maximum_can_still_pass() -> None:
    result = match_header(Path("photo.jpg"), bytes.fromhex("FFD8FFE0"), _TABLE)

    assert result.passed is True
    assert result.actual_magic == NOT_APPLICABLE


def test_zero_length_sample() -> None:
    listed = match_header(Path("empty.png"), b"", _TABLE, identify=True)
    unlisted = match_header(Path("empty.dat"), b"", _TABLE, identify=True)

    assert listed.passed is False
    assert listed.actual_magic == NOT_APPLICABLE
    assert listed.identified_extension == UNKNOWN_EXTENSION
    assert unlisted.passed is None
    assert unlisted.actual_magic == NOT_APPLICABLE


def test_extension_lookup_is_case_insensitive() -> None:
    result = match_header(Path("SCAN.PDF"), b"%PDF-1.7\n", _TABLE)

    assert result.extension == ".PDF"
    assert result.passed is True


def test_explicit_extension_overrides_suffix() -> None:
    result = match_header(Path("download"), b"%PDF-1.7\n", _TABLE, extension=".pdf")

    assert result.passed is True
    assert result.extension == ".pdf"


def test_identify_prefers_longest_signature() -> None:
    table = load_signature_table({".zip": "504B", ".docx": "504B0304"})

    assert identify_extension(bytes.fromhex("504B0304"), table) == ".docx"
    assert identify_extension(bytes.fromhex("504B0506"), table) == ".zip"
    assert identify_extension(b"", table) is None


def test_identify_tie_resolves_to_first_configured_entry() -> None:
    table = load_signature_table({".zip": "504B0304", ".jar": "504B0304"})

    result = match_header(Path("archive.bin"), bytes.fromhex("504B0304"), table, identify=True)

    assert result.identified_extension == ".zip"


def test_header_hex() -> None:
    assert header_hex(b"\x01\xab\xff", 2) == "01AB"
    assert header_hex(b"\x01", 2) == NOT_APPLICABLE
    assert header_hex(b"\x01", 0) == NOT_APPLICABLE


def test_matcher_needs_read_only_for_listed_or_identify() -> None:
    plain = Matcher(_TABLE)
    identifying = Matcher(_TABLE, identify=True)

    assert plain.needs_read(".png") is True
    assert plain.needs_read(".txt") is False
    assert identifying.needs_read(".txt") is True


def test_matcher_unread_result_is_all_not_applicable() -> None:
    result = Matcher(_TABLE).unread(Path("readme.txt"))

    assert result.to_row() == ("readme.txt", ".txt", "N/A", "N/A", "N/A", "Unknown")
