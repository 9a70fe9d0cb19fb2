"""Error body shared by every failing response."""

from typing import Literal

from pydantic import BaseModel

ErrorCode = Literal["INTERNAL_ERROR", "INVALID_QUERY"]


class ErrorResponse(BaseModel):
    """
    JSON error body.

    Every internal failure produces the same body; the failure class is
    only visible in the logs.
    """
    detail: str
    code: ErrorCode

    @classmethod
    def internal(cls) -> "ErrorResponse":
        return cls(detail="Internal server error", code="INTERNAL_ERROR")

    @classmethod
    def invalid_query(cls) -> "ErrorResponse":
        return cls(detail="Invalid query parameters", code="INVALID_QUERY")
