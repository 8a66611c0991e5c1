from __future__ import annotations

import base64
import json

import pytest

from core.domain.models import BinaryPayload, PartKind
from core.errors import MarshalError
from core.services.field_normalizer import normalize, normalize_field

PNG_BYTES = b"\x89PNG\x00\x01\xfe\xff"
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("hello", "hello"),
        (123, "123"),
        (1.5, "1.5"),
        (True, "true"),
        (False, "false"),
        ("", ""),
    ],
)
def test_scalars_become_text_parts(value, expected):
    part = normalize_field("field", value)

    assert part is not None
    assert part.kind is PartKind.TEXT
    assert part.content == expected
    assert part.mime_type is None


def test_structured_object_is_compact_json():
    part = normalize_field("meta", {"k": 1, "nested": {"name": "ñandú"}, "tags": ["a", "b"]})

    assert part.kind is PartKind.TEXT
    assert part.content == '{"k":1,"nested":{"name":"ñandú"},"tags":["a","b"]}'
    assert json.loads(part.content) == {"k": 1, "nested": {"name": "ñandú"}, "tags": ["a", "b"]}


def test_list_is_serialized_as_json():
    part = normalize_field("items", [1, "two", None])

    assert part.content == '[1,"two",null]'


def test_data_url_is_decoded_to_binary():
    part = normalize_field("image", PNG_DATA_URL)

    assert part.kind is PartKind.BINARY
    assert part.content == PNG_BYTES
    assert part.mime_type == "image/png"
    assert part.filename == "image.png"


def test_malformed_base64_raises_marshal_error():
    with pytest.raises(MarshalError) as exc_info:
        normalize({"ok": "text", "image": "data:image/jpeg;base64,@@not*base64@@"})

    assert str(exc_info.value).startswith("Upload failed: ")
    assert "image/jpeg" in exc_info.value.reason


def test_unpadded_base64_is_decoded():
    part = normalize_field("image", "data:image/png;base64,iVBORw0KGgo")

    assert part.kind is PartKind.BINARY
    assert part.content == b"\x89PNG\r\n\x1a\n"


def test_truncated_base64_raises_marshal_error():
    with pytest.raises(MarshalError):
        normalize_field("image", "data:image/png;base64,iVBORw0KG")


def test_circular_object_falls_back_to_text():
    meta: dict = {"k": 1}
    meta["self"] = meta

    part = normalize_field("meta", meta)

    assert part.kind is PartKind.TEXT
    assert part.content == str(meta)


def test_non_string_keys_fall_back_to_text():
    part = normalize_field("meta", {(1, 2): "v"})

    assert part.kind is PartKind.TEXT
    assert part.content == "{(1, 2): 'v'}"


def test_shared_references_are_not_circular():
    shared = {"x": 1}

    part = normalize_field("meta", {"a": shared, "b": shared})

    assert part.content == '{"a":{"x":1},"b":{"x":1}}'


def test_non_finite_floats_serialize_like_json_stringify():
    part = normalize_field("meta", {"a": float("nan"), "b": [float("inf")], "c": 2.5})

    assert part.content == '{"a":null,"b":[null],"c":2.5}'


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1.0, "1"), (-3.0, "-3"), (float("nan"), "NaN"), (float("-inf"), "-Infinity")],
)
def test_floats_render_like_javascript_strings(value, expected):
    assert normalize_field("n", value).content == expected


def test_data_prefix_without_base64_marker_stays_text():
    part = normalize_field("note", "data: this is just a sentence")

    assert part.kind is PartKind.TEXT
    assert part.content == "data: this is just a sentence"


def test_binary_payload_keeps_mime_and_filename():
    payload = BinaryPayload(content=b"%PDF-1.7", mime_type="application/pdf", filename="report.pdf")

    part = normalize_field("doc", payload)

    assert part.kind is PartKind.BINARY
    assert part.content == b"%PDF-1.7"
    assert part.mime_type == "application/pdf"
    assert part.filename == "report.pdf"


def test_raw_bytes_default_to_octet_stream():
    part = normalize_field("blob", bytearray(b"\x00\x01"))

    assert part.kind is PartKind.BINARY
    assert part.content == b"\x00\x01"
    assert part.mime_type == "application/octet-stream"
    assert part.filename == "blob.bin"


def test_empty_binary_is_not_dropped():
    parts = normalize({"empty": b"", "empty_url": "data:image/gif;base64,"})

    assert [p.key for p in parts] == ["empty", "empty_url"]
    assert all(p.kind is PartKind.BINARY for p in parts)
    assert all(p.content == b"" for p in parts)
    assert parts[1].filename == "empty_url.gif"


def test_none_values_are_skipped():
    parts = normalize({"a": "1", "missing": None, "b": "2"})

    assert [p.key for p in parts] == ["a", "b"]


def test_order_follows_mapping_iteration():
    form = {"z": "last?", "a": {"x": 1}, "m": PNG_DATA_URL, "b": 7}

    parts = normalize(form)

    assert [p.key for p in parts] == ["z", "a", "m", "b"]
    assert [p.kind for p in parts] == [PartKind.TEXT, PartKind.TEXT, PartKind.BINARY, PartKind.TEXT]
