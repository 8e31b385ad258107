"""
Errors raised by the response analytics engine
"""
from typing import Any, List, Optional

from response_analytics.models import ErrorDetail, ResponseEvent


class ValidationError(ValueError):
    """A response candidate violates a domain constraint"""

    def __init__(self, field: str, constraint: str, value: Any = None):
        self.field = field
        self.constraint = constraint
        self.value = value
        super().__init__(f"{field}: {constraint}")

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(
            message=str(self),
            code="VALIDATION_ERROR",
            field=self.field
        )


class StorageError(RuntimeError):
    """The response store failed to append or fetch"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        # Events already appended when a batch was cut short
        self.accepted: Optional[List[ResponseEvent]] = None
        super().__init__(message)

    def to_detail(self) -> ErrorDetail:
        accepted_count = len(self.accepted) if self.accepted is not None else None
        return ErrorDetail(message=str(self), code="STORAGE_ERROR", accepted_count=accepted_count)
