"""Exception types for scenedoc.

Validation itself never raises: the ``is_*_document`` gates return
``False``.  The exceptions here are raised by the helpers that turn a
failed gate or a declined permission into control flow.  I/O errors
from the file primitives are never wrapped and propagate unchanged.
"""
from __future__ import annotations


class ScenedocError(Exception):
    """Base class for all errors raised by scenedoc."""


class AbortError(ScenedocError):
    """Raised when a save is aborted before any write was attempted.

    The only producer is the save-in-place path: the previously granted
    file handle no longer has write permission and the user did not
    grant it again.  Callers typically treat this as a silent cancel
    rather than a failure.
    """

    def __init__(self, message: str = "Request aborted") -> None:
        super().__init__(message)


class InvalidDocumentError(ScenedocError, ValueError):
    """Raised when decoded data does not pass the document gate.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    expected_type:
        The discriminant the caller was expecting, e.g. ``"excalidraw"``.
    """

    def __init__(self, message: str, expected_type: str | None = None) -> None:
        self.expected_type = expected_type
        super().__init__(message)
