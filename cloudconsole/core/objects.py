"""
Domain models for buckets and stored objects.

These models have no dependencies on FastAPI or boto3. The storage
clients build them from backend responses and the API layer turns
them into JSON.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import quote, unquote

# Characters encodeURIComponent leaves alone, beyond what quote() already keeps.
_SEGMENT_SAFE = "!~*'()"


def encode_key(key: str) -> str:
    """
    Percent-encode an object key so it fits in a single URL path segment.

    Slashes are encoded too: the key is a flat identifier, not a path.
    Non-ASCII characters are encoded as UTF-8.
    """
    return quote(key, safe=_SEGMENT_SAFE)


def decode_key(encoded_key: str) -> str:
    """
    Reverse encode_key. decode_key(encode_key(k)) == k for every key.

    Raises UnicodeDecodeError when the escapes are not valid UTF-8.
    """
    return unquote(encoded_key, errors="strict")


def display_name(key: str) -> str:
    """
    Best-effort human-readable name for a stored key.

    Multipart filenames are often sent as UTF-8 bytes but read back one
    byte per character (Latin-1), which leaves keys like "cafÃ©.txt" in
    the bucket. Treating each character as a byte and reinterpreting the
    result as UTF-8 undoes that. Keys that can't be reinterpreted are
    returned unchanged.

    This is lossy: a key that really is "Ã©" is shown as "é". Never use
    the result to address an object; use the raw key or encode_key().
    """
    if any(ord(char) > 0xFF for char in key):
        return key
    try:
        return key.encode("latin-1").decode("utf-8")
    except UnicodeDecodeError:
        return key


@dataclass(frozen=True)
class Bucket:
    """A top-level container as reported by the backend."""
    name: str
    creation_date: Optional[datetime] = None


@dataclass(frozen=True)
class StoredObject:
    """
    One entry of an object listing.

    Frozen because listing entries are snapshots of backend state,
    not handles to the object.
    """
    key: str
    size: int
    last_modified: datetime
    etag: Optional[str] = None
    storage_class: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Best-effort readable name. See display_name()."""
        return display_name(self.key)

    @property
    def encoded_key(self) -> str:
        """Key encoded for use as a URL path segment."""
        return encode_key(self.key)
