# src/voice_todo/core/errors.py

"""
Error taxonomy for the command pipeline.

Every error here is recoverable at the request boundary: the pipeline turns it
into an error payload (see VoiceTodoError.to_payload) instead of crashing.
`status` is an HTTP-like code a web layer can reuse as-is.
"""

from __future__ import annotations

from typing import Any


class VoiceTodoError(Exception):
    status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class InvalidRequest(VoiceTodoError):
    status = 400


class MalformedResponse(VoiceTodoError):
    """Model output could not be turned into an intent object."""

    status = 502

    def __init__(self, message: str, *, original: str = "", extracted: str = "") -> None:
        super().__init__(message)
        self.original = original
        self.extracted = extracted


class UnknownIntent(VoiceTodoError):
    status = 400

    def __init__(self, intent: Any) -> None:
        super().__init__(f"Unknown intent: {intent}")
        self.intent = intent


class MissingField(VoiceTodoError):
    status = 400

    def __init__(self, message: str, *, fields: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.fields = fields


class TaskNotFound(VoiceTodoError):
    status = 404

    def __init__(self, message: str, *, available_tasks: list[str] | None = None) -> None:
        super().__init__(message)
        self.available_tasks = list(available_tasks or [])

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "availableTasks": list(self.available_tasks)}


# ---- model invocation ----


class ModelInvocationError(VoiceTodoError):
    status = 502


class ModelResponseTruncated(ModelInvocationError):
    """Completion stopped on the token limit before producing any content."""


class ModelResponseBlocked(ModelInvocationError):
    """Completion stopped by a safety / recitation / content filter."""

    def __init__(self, message: str, *, finish_reason: str = "") -> None:
        super().__init__(message)
        self.finish_reason = finish_reason


class ModelResponseIncomplete(ModelInvocationError):
    def __init__(self, message: str, *, finish_reason: str = "") -> None:
        super().__init__(message)
        self.finish_reason = finish_reason


class ModelTimeout(ModelInvocationError):
    status = 504


class LLMConfigurationError(RuntimeError):
    """LLM client cannot be built (missing key / base URL / models)."""
