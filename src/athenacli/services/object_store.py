"""Object store accessors: fetch and store byte blobs by opaque path."""
import asyncio
import logging
import os
from typing import Dict, Optional, Protocol, runtime_checkable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from athenacli.core.exceptions import (
    FetchError,
    InvalidPathError,
    ObjectAccessError,
    ObjectNotFoundError,
    StoreError,
    UnsupportedPathError,
)
from athenacli.core.paths import FILE_SCHEME, S3_SCHEME, local_path, parse_s3_path, scheme_of
from athenacli.services.boto_calls import client_config, run_blocking

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "404", "NotFound"}
ACCESS_DENIED_CODES = {"AccessDenied", "403", "Forbidden", "AllAccessDisabled"}

# us-east-1 rejects an explicit LocationConstraint
DEFAULT_S3_REGION = "us-east-1"


@runtime_checkable
class ObjectStore(Protocol):
    """Protocol for a blob store addressed by opaque paths."""

    async def fetch(self, path: str) -> bytes:
        """Read the full contents at path."""
        ...

    async def store(self, data: bytes, path: str) -> None:
        """Write data to path, creating its namespace when needed."""
        ...

    async def ensure_namespace(self, path: str) -> None:
        """Make sure the container that holds path exists."""
        ...


class S3ObjectStore:
    """ObjectStore backed by S3 buckets."""

    def __init__(self, region: str, timeout_seconds: Optional[float] = None, client=None):
        """
        Initialize store.

        Args:
            region: Region used when a bucket has to be created
            timeout_seconds: Invocation timeout capping socket timeouts
            client: Pre-built boto3 s3 client (tests inject fakes)
        """
        self.region = region
        self._client = client or boto3.client(
            "s3", region_name=region, config=client_config(timeout_seconds)
        )

    async def fetch(self, path: str) -> bytes:
        """
        Download the object at path.

        Raises:
            ObjectNotFoundError: If bucket or key does not exist
            ObjectAccessError: If access is denied
            FetchError: For any other failure
        """
        try:
            location = parse_s3_path(path)
        except InvalidPathError as e:
            raise FetchError(f"error parsing s3 URL: {e.message}") from e

        try:
            data = await run_blocking(
                _get_object, self._client, location.bucket, location.key
            )
        except ClientError as e:
            code = _error_code(e)
            if code in NOT_FOUND_CODES:
                raise ObjectNotFoundError(f"no result at {path!r}: {e}") from e
            if code in ACCESS_DENIED_CODES:
                raise ObjectAccessError(f"access denied to {path!r}: {e}") from e
            raise FetchError(f"could not get result from {path!r}: {e}") from e
        except BotoCoreError as e:
            raise FetchError(f"could not read result from {path!r}: {e}") from e

        logger.debug(f"Fetched {len(data)} bytes from {path}")
        return data

    async def store(self, data: bytes, path: str) -> None:
        """
        Upload data to path, creating the bucket if it is missing.

        Raises:
            StoreError: If the path is invalid or the upload fails
        """
        try:
            location = parse_s3_path(path)
        except InvalidPathError as e:
            raise StoreError(e.message) from e
        if not location.key:
            raise StoreError(f"s3 bucket or key empty in {path!r}")

        await self.ensure_namespace(path)
        try:
            await run_blocking(
                self._client.put_object,
                Body=data,
                Bucket=location.bucket,
                Key=location.key,
            )
        except (ClientError, BotoCoreError) as e:
            raise StoreError(f"could not upload result to {path!r}: {e}") from e
        logger.info(f"Wrote {len(data)} bytes to {path}")

    async def ensure_namespace(self, path: str) -> None:
        """
        Create the bucket of path unless the caller already owns it.

        Raises:
            StoreError: If the bucket belongs to someone else or creation fails
        """
        try:
            location = parse_s3_path(path)
        except InvalidPathError as e:
            raise StoreError(e.message) from e

        kwargs = {"Bucket": location.bucket}
        if self.region and self.region != DEFAULT_S3_REGION:
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self.region}

        try:
            await run_blocking(self._client.create_bucket, **kwargs)
            logger.info(f"Created bucket {location.bucket}")
        except ClientError as e:
            code = _error_code(e)
            if code == "BucketAlreadyOwnedByYou":
                return
            if code == "BucketAlreadyExists":
                raise StoreError(
                    f"bucket {location.bucket!r} already exists and is owned by another account"
                ) from e
            raise StoreError(f"could not create bucket {location.bucket!r}: {e}") from e
        except BotoCoreError as e:
            raise StoreError(f"could not create bucket {location.bucket!r}: {e}") from e


class LocalObjectStore:
    """ObjectStore backed by the local filesystem (file:// URLs and bare paths)."""

    async def fetch(self, path: str) -> bytes:
        try:
            filename = local_path(path)
        except InvalidPathError as e:
            raise FetchError(e.message) from e
        try:
            return await asyncio.to_thread(_read_file, filename)
        except FileNotFoundError as e:
            raise ObjectNotFoundError(f"no result at {path!r}") from e
        except PermissionError as e:
            raise ObjectAccessError(f"access denied to {path!r}") from e
        except OSError as e:
            raise FetchError(f"could not read {path!r}: {e}") from e

    async def store(self, data: bytes, path: str) -> None:
        try:
            filename = local_path(path)
        except InvalidPathError as e:
            raise StoreError(e.message) from e
        try:
            await asyncio.to_thread(_write_file, filename, data)
        except OSError as e:
            raise StoreError(f"could not write result to {path!r}: {e}") from e
        logger.info(f"Wrote {len(data)} bytes to {filename}")

    async def ensure_namespace(self, path: str) -> None:
        """Create the directory that will hold path."""
        try:
            directory = os.path.dirname(local_path(path))
            if directory:
                await asyncio.to_thread(os.makedirs, directory, exist_ok=True)
        except (InvalidPathError, OSError) as e:
            raise StoreError(f"could not create directory for {path!r}: {e}") from e


class ObjectStoreRouter:
    """
    ObjectStore that dispatches on the path's URL scheme.

    Bare paths ("out.csv") are handled by the file store.
    """

    def __init__(self, stores: Dict[str, ObjectStore]):
        self._stores = dict(stores)

    @classmethod
    def default(
        cls, region: str, timeout_seconds: Optional[float] = None, s3_client=None
    ) -> "ObjectStoreRouter":
        local = LocalObjectStore()
        return cls({
            S3_SCHEME: S3ObjectStore(region, timeout_seconds=timeout_seconds, client=s3_client),
            FILE_SCHEME: local,
            "": local,
        })

    def resolve(self, path: str) -> ObjectStore:
        """
        Pick the store for path.

        Raises:
            UnsupportedPathError: If no store handles the scheme
        """
        store: Optional[ObjectStore] = self._stores.get(scheme_of(path))
        if store is None:
            raise UnsupportedPathError(f"unknown scheme in {path!r}")
        return store

    async def fetch(self, path: str) -> bytes:
        try:
            store = self.resolve(path)
        except UnsupportedPathError as e:
            raise FetchError(e.message) from e
        return await store.fetch(path)

    async def store(self, data: bytes, path: str) -> None:
        try:
            store = self.resolve(path)
        except UnsupportedPathError as e:
            raise StoreError(e.message) from e
        await store.store(data, path)

    async def ensure_namespace(self, path: str) -> None:
        try:
            store = self.resolve(path)
        except UnsupportedPathError as e:
            raise StoreError(e.message) from e
        await store.ensure_namespace(path)


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def _get_object(client, bucket: str, key: str) -> bytes:
    response = client.get_object(Bucket=bucket, Key=key)
    body = response["Body"]
    try:
        return body.read()
    finally:
        body.close()


def _read_file(filename: str) -> bytes:
    with open(filename, "rb") as f:
        return f.read()


def _write_file(filename: str, data: bytes) -> None:
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filename, "wb") as f:
        f.write(data)
