"""
Core rules for the object-storage gateway.

This module is framework-agnostic - it doesn't import FastAPI or boto3.
Key encoding and listing normalization live here so they can be tested
without a backend or an HTTP stack.
"""

from .objects import Bucket, StoredObject, decode_key, display_name, encode_key

__all__ = [
    "Bucket",
    "StoredObject",
    "decode_key",
    "display_name",
    "encode_key",
]
