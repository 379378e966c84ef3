"""
Uniform response envelope returned by every settings endpoint.

Every payload is ``{"success": bool, "data": ..., "message": str}``. A
successful response carries data (a list may be empty); a failed one always
carries ``data = None`` and a non-empty message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

GENERIC_ERROR_MESSAGE = "Server error!"


@dataclass(frozen=True, slots=True)
class ApiResponse:
    """The ``{success, data, message}`` envelope."""

    success: bool
    data: Any
    message: str

    @classmethod
    def ok(cls, data: Any, message: str) -> "ApiResponse":
        return cls(True, data, message)

    @classmethod
    def failure(cls, exc: BaseException | None = None) -> "ApiResponse":
        """Build a failed envelope from an exception.

        The exception text becomes the message; when it is empty the generic
        ``Server error!`` is used instead so the message is never blank.
        """
        message = str(exc).strip() if exc is not None else ""
        return cls(False, None, message or GENERIC_ERROR_MESSAGE)

    def to_dict(self) -> Dict[str, Any]:
        data = self.data
        if isinstance(data, list):
            data = [_serialize(item) for item in data]
        else:
            data = _serialize(data)
        return {"success": self.success, "data": data, "message": self.message}


def _serialize(item: Any) -> Any:
    to_dict = getattr(item, "to_dict", None)
    return to_dict() if callable(to_dict) else item
