# crud_scaffold/core/result.py

"""
Uniform result envelope returned by every data operation.

Callers branch on ``status.code`` instead of catching storage exceptions:

    res = dao.read(42)
    if res.code is ErrorCode.NOT_FOUND:
        ...
    elif res.error:
        ...
    else:
        user = res.result

"Not found" is flagged ``error=True`` even though it is an ordinary outcome,
so ``error`` alone does not distinguish an absent record from a failure.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorCode(str, enum.Enum):
    SUCCESS = "success"
    CREATED = "created"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    DATABASE_ERROR = "database_error"
    INTERNAL_SERVER_ERROR = "internal_server_error"


@dataclass(frozen=True)
class ResultStatus:
    error: bool
    code: ErrorCode

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "code": self.code.value}


@dataclass
class Result(Generic[T]):
    """
    Outcome of a single data operation.

    ``result`` is None whenever ``status.error`` is True, except for a
    delete that matched nothing, which reports ``NOT_FOUND`` with ``0``.
    """

    status: ResultStatus
    message: str
    result: Optional[T] = None

    @classmethod
    def ok(
        cls,
        result: Optional[T] = None,
        *,
        message: str = "Success",
        code: ErrorCode = ErrorCode.SUCCESS,
        **extra: Any,
    ) -> "Result[T]":
        return cls(
            status=ResultStatus(error=False, code=code),
            message=message,
            result=result,
            **extra,
        )

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        *,
        result: Optional[T] = None,
        **extra: Any,
    ) -> "Result[T]":
        return cls(
            status=ResultStatus(error=True, code=code),
            message=message,
            result=result,
            **extra,
        )

    @property
    def error(self) -> bool:
        return self.status.error

    @property
    def code(self) -> ErrorCode:
        return self.status.code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.to_dict(),
            "message": self.message,
            "result": self.result,
        }


@dataclass
class CountedResult(Result[T]):
    """
    Result of a paginated read.

    ``count`` is the total number of matching rows, independent of the
    page window. It is None when the read failed.
    """

    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["count"] = self.count
        return data


__all__ = ["ErrorCode", "ResultStatus", "Result", "CountedResult"]
