"""Interchangeable AI providers."""

from .base import AIProvider
from .mock import MockProvider
from .remote import RemoteProvider, detect_provider_mode

__all__ = [
    "AIProvider",
    "MockProvider",
    "RemoteProvider",
    "detect_provider_mode",
]
