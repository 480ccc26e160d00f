"""
Unit tests for key encoding and listing entries.

These tests touch no backend and no HTTP stack.
"""

from datetime import datetime, timezone

import pytest

from cloudconsole.core.objects import StoredObject, decode_key, display_name, encode_key


# ---------------------------------------------------------------------------
# encode_key / decode_key
# ---------------------------------------------------------------------------

class TestEncodeKey:
    """Keys must fit in one URL path segment."""

    def test_plain_key_is_unchanged(self):
        assert encode_key("report-2024_final.v2.txt") == "report-2024_final.v2.txt"

    def test_slash_is_encoded(self):
        """A key is a flat identifier, so '/' must not split the URL path."""
        assert encode_key("photos/2024/cat.jpg") == "photos%2F2024%2Fcat.jpg"

    def test_space_and_percent_are_encoded(self):
        assert encode_key("100% done.txt") == "100%25%20done.txt"

    def test_non_ascii_is_utf8_encoded(self):
        assert encode_key("café.txt") == "caf%C3%A9.txt"

    def test_uri_component_marks_are_kept(self):
        """Same unreserved set as encodeURIComponent in browsers."""
        assert encode_key("it's (final)!*~.txt") == "it's%20(final)!*~.txt"

    def test_reserved_characters_are_encoded(self):
        assert encode_key("a+b&c=d?e#f") == "a%2Bb%26c%3Dd%3Fe%23f"


class TestKeyRoundTrip:
    """decode_key(encode_key(key)) must give back the exact key."""

    @pytest.mark.parametrize(
        "key",
        [
            "simple.txt",
            "nested/path/to/file.txt",
            "/leading-slash",
            "trailing-slash/",
            "with space.txt",
            "100% sure.txt",
            "%41",
            "plus+sign.txt",
            "naïve résumé.pdf",
            "日本語/ファイル.txt",
            "emoji 🎉.png",
            "cafÃ©.txt",
        ],
    )
    def test_round_trip(self, key):
        assert decode_key(encode_key(key)) == key

    def test_decode_is_applied_once(self):
        """An encoded percent sign decodes to '%', not further."""
        assert decode_key("%2541") == "%41"

    def test_invalid_utf8_escape_is_rejected(self):
        """'%E9' alone is not UTF-8; decoding must fail, not substitute U+FFFD."""
        with pytest.raises(UnicodeDecodeError):
            decode_key("caf%E9.txt")


# ---------------------------------------------------------------------------
# display_name
# ---------------------------------------------------------------------------

class TestDisplayName:
    """
    display_name is best-effort.

    It repairs keys whose UTF-8 bytes were read as Latin-1, and is
    knowingly wrong for keys that merely look like such mojibake.
    """

    def test_ascii_key_is_unchanged(self):
        assert display_name("notes/readme.md") == "notes/readme.md"

    def test_latin1_misread_utf8_is_repaired(self):
        assert display_name("cafÃ©.txt") == "café.txt"

    def test_misread_cjk_is_repaired(self):
        misread = "日本".encode("utf-8").decode("latin-1")
        assert display_name(misread) == "日本"

    def test_correct_unicode_key_is_kept(self):
        """Characters above U+00FF can't be single bytes, so nothing is reinterpreted."""
        assert display_name("日本.txt") == "日本.txt"

    def test_latin1_key_that_is_not_utf8_is_kept(self):
        """'é' alone is byte 0xE9, which is not valid UTF-8."""
        assert display_name("café.txt") == "café.txt"

    def test_is_lossy_for_keys_that_resemble_mojibake(self):
        """A key that genuinely is 'Ã©' is displayed as 'é'. Known limitation."""
        key = "Ã©"
        assert display_name(key) == "é"
        assert display_name(key) != key


# ---------------------------------------------------------------------------
# StoredObject
# ---------------------------------------------------------------------------

class TestStoredObject:
    """Listing entries expose both derived names."""

    def test_derived_fields(self):
        obj = StoredObject(
            key="docs/cafÃ© menu.pdf",
            size=12,
            last_modified=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        assert obj.display_name == "docs/café menu.pdf"
        assert obj.encoded_key == "docs%2Fcaf%C3%83%C2%A9%20menu.pdf"
        assert decode_key(obj.encoded_key) == obj.key

    def test_is_immutable(self):
        obj = StoredObject(key="a", size=1, last_modified=datetime.now(timezone.utc))

        with pytest.raises(AttributeError):
            obj.key = "b"
