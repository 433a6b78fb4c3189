from __future__ import annotations

import json
from pathlib import Path

import pytest

from magicverify.core.signatures import (
    SignatureTable,
    load_signature_file,
    load_signature_table,
    normalise_extension,
)
from magicverify.core.types import ConfigError


def test_load_signature_table_normalises_keys_and_values() -> None:
    table = load_signature_table({".PNG": "89504e47", "jpg": "ff d8 ff"})

    assert list(table) == [".png", ".jpg"]
    assert table.lookup(".png") == "89504E47"
    assert table.lookup(".PNG") == "89504E47"
    assert table.lookup("jpg") == "FFD8FF"
    assert table.signature_bytes(".jpg") == b"\xff\xd8\xff"
    assert ".Jpg" in table
    assert ".gif" not in table
    assert table.lookup(".gif") is None


def test_max_signature_bytes_uses_longest_entry() -> None:
    table = load_signature_table({".png": "89504E470D0A1A0A", ".jpg": "FFD8FF", ".bmp": "424D"})

    assert table.max_signature_bytes == 8
    assert len(table) == 3


def test_identification_order_prefers_longest_then_insertion_order() -> None:
    table = load_signature_table(
        {
            ".zip": "504B0304",
            ".gz": "1F8B",
            ".jar": "504B0304",
            ".docx": "504B030414000600",
        }
    )

    order = [extension for extension, _signature in table.identification_order()]

    assert order == [".docx", ".zip", ".jar", ".gz"]


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {},
        [(".png", "89504E47")],
        {".png": "89504E4"},
        {".png": "ZZ504E47"},
        {".png": ""},
        {".png": "   "},
        {".png": 0x89504E47},
        {"": "89504E47"},
        {".": "89504E47"},
        {7: "89504E47"},
        {".png": "89504E47", "PNG": "89504E47"},
    ],
)
def test_load_signature_table_rejects_malformed_configuration(raw: object) -> None:
    with pytest.raises(ConfigError):
        load_signature_table(raw)  # type: ignore[arg-type]


def test_signature_table_requires_entries() -> None:
    with pytest.raises(ConfigError):
        SignatureTable([])


def test_config_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        load_signature_table({".png": "XYZ"})


def test_normalise_extension_handles_missing_dot_and_blank() -> None:
    assert normalise_extension("PNG") == ".png"
    assert normalise_extension(" .Tar ") == ".tar"
    assert normalise_extension("") == ""


def test_load_signature_file_reads_json(tmp_path: Path) -> None:
    config = tmp_path / "signatures.json"
    config.write_text(json.dumps({".png": "89504E47", ".pdf": "25504446"}), encoding="utf-8")

    table = load_signature_file(config)

    assert table.to_dict() == {".png": "89504E47", ".pdf": "25504446"}


def test_load_signature_file_accepts_utf8_bom(tmp_path: Path) -> None:
    config = tmp_path / "signatures.json"
    config.write_bytes(b"\xef\xbb\xbf" + b'{".gif": "47494638"}')

    assert load_signature_file(config).lookup(".gif") == "47494638"


def test_load_signature_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc:
        load_signature_file(tmp_path / "missing.json")

    assert "not found" in str(exc.value)


def test_load_signature_file_invalid_json(tmp_path: Path) -> None:
    config = tmp_path / "broken.json"
    config.write_text("{'.png': 89504E47", encoding="utf-8")

    with pytest.raises(ConfigError) as exc:
        load_signature_file(config)

    assert "Invalid JSON" in str(exc.value)


def test_load_signature_file_requires_object(tmp_path: Path) -> None:
    config = tmp_path / "list.json"
    config.write_text('[".png", "89504E47"]', encoding="utf-8")

    with pytest.raises(ConfigError):
        load_signature_file(config)


def test_load_signature_file_rejects_duplicate_keys(tmp_path: Path) -> None:
    config = tmp_path / "dupes.json"
    config.write_text('{".png": "89504E47", ".png": "FFD8FF"}', encoding="utf-8")

    with pytest.raises(ConfigError) as exc:
        load_signature_file(config)

    assert "Duplicate" in str(exc.value)


def test_load_signature_file_rejects_binary_content(tmp_path: Path) -> None:
    config = tmp_path / "image.json"
    config.write_bytes(b"\xff\xfe\x00garbage")

    with pytest.raises(ConfigError) as exc:
        load_signature_file(config)

    assert "Unable to read signature configuration" in str(exc.value)
