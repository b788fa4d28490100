"""
Image relay package: URL <-> local path codec and the relay itself.
"""

from .codec import (
    CONTENT_TYPES,
    ImageReference,
    content_type_for,
    decode_to_absolute_url,
    encode_local_path,
    split_local_path,
)
from .relay import ImageRelay, RelayedImage

__all__ = [
    "CONTENT_TYPES",
    "ImageReference",
    "content_type_for",
    "decode_to_absolute_url",
    "encode_local_path",
    "split_local_path",
    "ImageRelay",
    "RelayedImage",
]
