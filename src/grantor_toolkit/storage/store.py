"""
Module: storage.store

Purpose:
    Abstract interface for fetching applicant documents by storage key,
    with an S3 implementation and a local-directory implementation.

Key Classes:
    - ObjectStore: Abstract base class for object access
    - S3ObjectStore: boto3-backed store (production)
    - LocalObjectStore: Directory-backed store (development, CLI)
    - StorageSettings: Credentials and bucket read from the environment

Dependencies:
    - boto3 / botocore: S3 client, timeouts and error codes

Used By:
    - report.output.merger: External document merge
    - api.app: Per-request store construction
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})
DEFAULT_REGION = "us-east-1"


class StorageError(Exception):
    """Object store failure."""
    pass


class StorageConfigError(StorageError):
    """Storage credentials or bucket not configured."""
    pass


class ObjectNotFoundError(StorageError):
    """Requested key does not exist."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Object not found: {key}")
        self.key = key


class StorageTimeoutError(StorageError):
    """Object store did not answer in time."""

    def __init__(self, key: str, reason: str = "") -> None:
        super().__init__(f"Timed out fetching {key}: {reason}".rstrip(": "))
        self.key = key


class ObjectStore(ABC):
    """
    Abstract interface for reading stored objects.

    Implementations must raise ObjectNotFoundError for missing keys and
    StorageTimeoutError when the backend does not respond in time.
    """

    @abstractmethod
    def get_object(self, key: str) -> bytes:
        """
        Get the bytes stored under key.

        Args:
            key: Storage key like "root/submission_files/APP1/documents/..."

        Returns:
            Object bytes (may be empty)

        Raises:
            ObjectNotFoundError: If the key does not exist
            StorageTimeoutError: If the request timed out
            StorageError: For other backend failures
        """
        pass


@dataclass(frozen=True)
class StorageSettings:
    """
    S3 connection settings (immutable).

    Attributes:
        bucket: Bucket holding submission files
        access_key_id: AWS access key
        secret_access_key: AWS secret key
        region: AWS region
        connect_timeout: Seconds to wait for a connection
        read_timeout: Seconds to wait for the object body
        max_attempts: Total attempts per request (including the first)
        endpoint_url: Optional S3-compatible endpoint override
    """
    bucket: str
    access_key_id: str = field(repr=False)
    secret_access_key: str = field(repr=False)
    region: str = DEFAULT_REGION
    connect_timeout: float = 5.0
    read_timeout: float = 20.0
    max_attempts: int = 2
    endpoint_url: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate settings on construction."""
        missing = [
            name for name, value in (
                ("AWS_ACCESS_KEY_ID", self.access_key_id),
                ("AWS_SECRET_ACCESS_KEY", self.secret_access_key),
                ("AWS_S3_BUCKET", self.bucket),
            )
            if not value
        ]
        if missing:
            raise StorageConfigError(
                "AWS S3 is not configured. Please set "
                + ", ".join(missing)
                + " environment variables."
            )
        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            raise StorageConfigError("Storage timeouts must be positive")
        if self.max_attempts < 1:
            raise StorageConfigError(f"max_attempts must be at least 1: {self.max_attempts}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> StorageSettings:
        """
        Read settings from environment variables.

        Raises:
            StorageConfigError: If credentials or bucket are missing
        """
        env = os.environ if environ is None else environ
        try:
            read_timeout = float(env.get("REPORT_FETCH_TIMEOUT", "20"))
            max_attempts = int(env.get("REPORT_FETCH_ATTEMPTS", "2"))
        except ValueError as e:
            raise StorageConfigError(f"Invalid storage timeout setting: {e}") from e
        return cls(
            bucket=env.get("AWS_S3_BUCKET", "").strip(),
            access_key_id=env.get("AWS_ACCESS_KEY_ID", "").strip(),
            secret_access_key=env.get("AWS_SECRET_ACCESS_KEY", "").strip(),
            region=env.get("AWS_REGION", "").strip() or DEFAULT_REGION,
            read_timeout=read_timeout,
            max_attempts=max_attempts,
            endpoint_url=env.get("AWS_S3_ENDPOINT_URL") or None,
        )


class S3ObjectStore(ObjectStore):
    """
    Object store backed by an S3 bucket.

    Example:
        >>> store = S3ObjectStore(StorageSettings.from_env())
        >>> data = store.get_object("enroll_iq_files/submission_files/APP1/documents/cv/cv.pdf")
    """

    def __init__(self, settings: StorageSettings, client: Any = None) -> None:
        self.settings = settings
        self._client = client or boto3.client(
            "s3",
            region_name=settings.region,
            aws_access_key_id=settings.access_key_id,
            aws_secret_access_key=settings.secret_access_key,
            endpoint_url=settings.endpoint_url,
            config=BotoConfig(
                connect_timeout=settings.connect_timeout,
                read_timeout=settings.read_timeout,
                retries={"max_attempts": settings.max_attempts, "mode": "standard"},
            ),
        )

    def get_object(self, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self.settings.bucket, Key=key)
            body = response.get("Body")
            if body is None:
                raise ObjectNotFoundError(key)
            try:
                return body.read()
            finally:
                body.close()
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from e
            raise StorageError(f"S3 error {code} for {key}: {e}") from e
        except (ConnectTimeoutError, ReadTimeoutError, EndpointConnectionError) as e:
            raise StorageTimeoutError(key, str(e)) from e
        except BotoCoreError as e:
            raise StorageError(f"S3 request failed for {key}: {e}") from e


class LocalObjectStore(ObjectStore):
    """
    Object store reading keys as paths below a root directory.

    Keys that resolve outside the root are treated as missing.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()

    def get_object(self, key: str) -> bytes:
        path = (self.root / key.lstrip("/")).resolve()
        if path != self.root and self.root not in path.parents:
            logger.warning(f"Rejected key outside store root: {key}")
            raise ObjectNotFoundError(key)
        if not path.is_file():
            raise ObjectNotFoundError(key)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e
