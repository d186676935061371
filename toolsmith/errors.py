from __future__ import annotations

from typing import Dict


class ToolsmithError(Exception):
    """Base for every failure an operation reports back to its caller.

    ``kind`` is the stable name clients switch on; ``status_code`` is what the
    HTTP layer answers with.
    """

    kind = "Error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, str]:
        return {"error": self.kind, "message": self.message}


class InvalidInput(ToolsmithError):
    kind = "InvalidInput"
    status_code = 400


class Unauthorized(ToolsmithError):
    kind = "Unauthorized"
    status_code = 401


class FetchError(ToolsmithError):
    kind = "FetchError"
    status_code = 502


class FetchTimeout(FetchError):
    kind = "TimeoutError"
    status_code = 504


class ExtractionEmpty(ToolsmithError):
    kind = "ExtractionEmpty"
    status_code = 422


class GenerationError(ToolsmithError):
    kind = "GenerationError"
    status_code = 502


class ConfigurationError(ToolsmithError):
    kind = "ConfigurationError"
    status_code = 503


class StoreError(ToolsmithError):
    kind = "StoreError"
    status_code = 502


class ConflictError(StoreError):
    kind = "ConflictError"
    status_code = 409
