"""Parsing helpers for opaque object-store paths."""
import os
from dataclasses import dataclass
from urllib.parse import urlparse
from athenacli.core.exceptions import InvalidPathError

S3_SCHEME = "s3"
FILE_SCHEME = "file"


@dataclass(frozen=True)
class ObjectPath:
    """A bucket/key pair addressed by an s3:// URL."""

    bucket: str
    key: str
    scheme: str = S3_SCHEME

    def __str__(self) -> str:
        if not self.key:
            return f"{self.scheme}://{self.bucket}"
        return f"{self.scheme}://{self.bucket}/{self.key}"


def scheme_of(path: str) -> str:
    """Return the lower-cased URL scheme of path, or "" for bare paths."""
    return urlparse(path).scheme.lower()


def parse_s3_path(url: str) -> ObjectPath:
    """
    Parse an s3://bucket/key URL.

    Args:
        url: The URL to parse

    Returns:
        ObjectPath: Parsed bucket and key (key has no leading slash)

    Raises:
        InvalidPathError: If the URL is empty, unparsable or not s3://
    """
    if not url:
        raise InvalidPathError("empty URL")
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidPathError(f"could not parse URL {url!r}: {e}") from e

    if parsed.scheme != S3_SCHEME:
        raise InvalidPathError(
            f"wrong s3 URL scheme: {parsed.scheme!r}, expected: {S3_SCHEME!r}"
        )
    if not parsed.netloc:
        raise InvalidPathError(f"s3 bucket empty in {url!r}")

    return ObjectPath(bucket=parsed.netloc, key=parsed.path.lstrip("/"))


def local_path(url: str) -> str:
    """
    Resolve a file:// URL or bare path to a filesystem path.

    file://relative/dir keeps the host as the first path element so
    that relative locations survive the round trip.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("", FILE_SCHEME):
        raise InvalidPathError(f"not a local path: {url!r}")
    if parsed.scheme == "":
        return url
    combined = os.path.join(parsed.netloc, parsed.path.lstrip("/")) if parsed.netloc else parsed.path
    if not combined:
        raise InvalidPathError(f"empty file path in {url!r}")
    return combined
