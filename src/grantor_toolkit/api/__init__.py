"""HTTP endpoints used by the grantor dashboard."""

from .app import create_app, default_store_factory

__all__ = ["create_app", "default_store_factory"]
