"""Shared error types for secstruc."""

from __future__ import annotations


class SecstrucError(Exception):
    """Base error type for secstruc."""


class InputError(SecstrucError, ValueError):
    """Raised when user input is invalid or unsupported."""


class BackboneError(SecstrucError, RuntimeError):
    """Raised when a classifier cannot run on the backbone it was given."""
