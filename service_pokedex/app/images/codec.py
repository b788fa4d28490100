"""
Mapping between external image URLs and local relay paths.

An absolute image URL ``{scheme}://{host}{path}`` is rewritten to
``/img/{scheme}/{host}{path}`` so the browser asks this service for the
image. When that path is requested the URL is rebuilt and served through
the cache-aside resolver.
"""

import posixpath
from dataclasses import dataclass
from urllib.parse import urlsplit

from shared.errors import InvalidArgument, UnsupportedMediaType


LOCAL_PREFIX = "/img"
SUPPORTED_SCHEMES = ("http", "https")

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".svg": "image/svg+xml",
}


@dataclass(frozen=True)
class ImageReference:
    """Parsed parts of a relayable image URL."""
    scheme: str
    host: str
    path: str

    @classmethod
    def from_url(cls, absolute_url: str) -> "ImageReference":
        parts = urlsplit(absolute_url)
        if parts.scheme not in SUPPORTED_SCHEMES:
            raise InvalidArgument("Image URL must be http or https", details={"url": absolute_url})
        if not parts.netloc or "@" in parts.netloc:
            raise InvalidArgument("Image URL must name a host", details={"url": absolute_url})
        if parts.query or parts.fragment or absolute_url.endswith(("?", "#")):
            raise InvalidArgument("Image URL must not carry a query or fragment", details={"url": absolute_url})
        if not parts.path.startswith("/") or parts.path == "/":
            raise InvalidArgument("Image URL must have a path", details={"url": absolute_url})
        return cls(scheme=parts.scheme, host=parts.netloc, path=parts.path)

    @classmethod
    def from_local(cls, scheme: str, host: str, path_tail: str) -> "ImageReference":
        if scheme not in SUPPORTED_SCHEMES:
            raise InvalidArgument("Unsupported image scheme", details={"scheme": scheme})
        if not host or "/" in host or "@" in host:
            raise InvalidArgument("Invalid image host", details={"host": host})
        # The tail is everything after "{host}/", so a leading slash is part of the path
        path = "/" + path_tail
        if path == "/":
            raise InvalidArgument("Image path is empty", details={"host": host})
        return cls(scheme=scheme, host=host, path=path)

    @property
    def local_path(self) -> str:
        return f"{LOCAL_PREFIX}/{self.scheme}/{self.host}{self.path}"

    @property
    def absolute_url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"

    @property
    def content_type(self) -> str:
        return content_type_for(self.path)


def encode_local_path(absolute_url: str) -> str:
    """``https://host/a/b.png`` -> ``/img/https/host/a/b.png``."""
    return ImageReference.from_url(absolute_url).local_path


def decode_to_absolute_url(scheme: str, host: str, path_tail: str) -> str:
    """Inverse of ``encode_local_path`` given the path's three parts."""
    return ImageReference.from_local(scheme, host, path_tail).absolute_url


def split_local_path(local_path: str) -> ImageReference:
    """Parse a full ``/img/{scheme}/{host}/...`` path."""
    prefix = LOCAL_PREFIX + "/"
    if not local_path.startswith(prefix):
        raise InvalidArgument("Not an image relay path", details={"path": local_path})
    parts = local_path[len(prefix):].split("/", 2)
    if len(parts) < 3:
        raise InvalidArgument("Image relay path is incomplete", details={"path": local_path})
    scheme, host, tail = parts
    return ImageReference.from_local(scheme, host, tail)


def content_type_for(path: str) -> str:
    """Content type from the last segment's extension, case-insensitive."""
    extension = posixpath.splitext(posixpath.basename(path))[1].lower()
    try:
        return CONTENT_TYPES[extension]
    except KeyError:
        raise UnsupportedMediaType(path, extension) from None
