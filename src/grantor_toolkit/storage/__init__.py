"""
Module: storage

Purpose:
    Access to applicant documents kept in object storage.

Key Classes:
    - ObjectStore: Abstract object access
    - S3ObjectStore, LocalObjectStore: Implementations
    - StorageSettings: Environment-driven S3 settings

Dependencies:
    - boto3: S3 client

Used By:
    - report.output.merger: External document merge
    - api.app, cli: Store construction
"""

from .store import (
    LocalObjectStore,
    ObjectNotFoundError,
    ObjectStore,
    S3ObjectStore,
    StorageConfigError,
    StorageError,
    StorageSettings,
    StorageTimeoutError,
)

__all__ = [
    "LocalObjectStore",
    "ObjectNotFoundError",
    "ObjectStore",
    "S3ObjectStore",
    "StorageConfigError",
    "StorageError",
    "StorageSettings",
    "StorageTimeoutError",
]
