"""Unit tests for ref and commit parsing helpers."""

from datetime import UTC, timedelta

import pytest

from gitvault.repository._refs import (
    decode_bytes,
    is_valid_tag_name,
    parse_author_line,
    tag_ref,
)


class TestDecodeBytes:
    def test_decodes_bytes(self) -> None:
        assert decode_bytes(b"abc") == "abc"

    def test_passes_str_through(self) -> None:
        assert decode_bytes("abc") == "abc"

    def test_replaces_invalid_utf8(self) -> None:
        assert decode_bytes(b"a\xffb") == "a�b"


class TestTagRef:
    def test_prefixes_tag_namespace(self) -> None:
        assert tag_ref("1.0") == b"refs/tags/1.0"


class TestIsValidTagName:
    @pytest.mark.parametrize("name", ["1.0", "v2", "release/2024-01", "feature_x"])
    def test_valid(self, name: str) -> None:
        assert is_valid_tag_name(name)

    @pytest.mark.parametrize(
        "name", ["", "a..b", "x.lock", "with space", "a:b", "a^b", "a@{b", ".hidden", "a/"]
    )
    def test_invalid(self, name: str) -> None:
        assert not is_valid_tag_name(name)


class TestParseAuthorLine:
    def test_splits_name_and_email(self) -> None:
        name, email, _ = parse_author_line(b"Jane Doe <jane@example.com>", 0, 0)

        assert name == "Jane Doe"
        assert email == "jane@example.com"

    def test_missing_email(self) -> None:
        name, email, _ = parse_author_line(b"Jane Doe", 0, 0)

        assert name == "Jane Doe"
        assert email == ""

    def test_applies_timezone_offset(self) -> None:
        _, _, timestamp = parse_author_line(b"J <j@x>", 1_700_000_000, 7200)

        assert timestamp.utcoffset() == timedelta(hours=2)
        assert timestamp.astimezone(UTC).timestamp() == 1_700_000_000

    def test_negative_timezone_offset(self) -> None:
        _, _, timestamp = parse_author_line(b"J <j@x>", 0, -5 * 3600)
        assert timestamp.utcoffset() == timedelta(hours=-5)
