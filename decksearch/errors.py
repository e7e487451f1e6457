"""
Error types raised across the search pipeline.

Optional-source absence (the case-study index) and unresolvable AI
references are deliberately not represented here: neither is an error.
"""
from typing import Optional


class ConfigurationError(ValueError):
    """A required setting or source is missing (credential, manifest)."""


class DeckLoadError(RuntimeError):
    """The deck set could not be loaded in full; no partial result exists."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class UpstreamError(RuntimeError):
    """The external ranking service failed or replied with unusable content."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
