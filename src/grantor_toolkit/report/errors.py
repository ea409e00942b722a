"""
Module: report.errors

Purpose:
    Exceptions raised while assembling an application report.

Key Classes:
    - ReportError: Base class for report failures
    - ReportInputError: Missing or malformed request fields (client error)
    - ImageDecodeError: Captured image could not be decoded (aborts report)
"""

from __future__ import annotations


class ReportError(Exception):
    """Error during report assembly."""
    pass


class ReportInputError(ReportError):
    """Required request input is missing or malformed."""
    pass


class ImageDecodeError(ReportError):
    """A caller-supplied image could not be decoded."""

    def __init__(self, label: str, reason: str) -> None:
        super().__init__(f"Failed to decode image '{label}': {reason}")
        self.label = label
        self.reason = reason
