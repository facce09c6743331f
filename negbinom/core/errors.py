"""
negbinom.core.errors
====================

Exception taxonomy for distribution queries.

Every exception carries the public operation that raised it, the offending
value, and the value a `FALLBACK` policy returns in its place. Each class
also subclasses the closest builtin so callers can catch `ValueError` or
`OverflowError` without importing this module.

Examples
--------
>>> from negbinom.core.errors import DomainError
>>> err = DomainError("negative number of failures", function="pdf", value=-1.0)
>>> isinstance(err, ValueError), err.kind.value
(True, 'domain')
"""

from __future__ import annotations
import math
from typing import Optional

from negbinom.core.names import ErrorKind


class NegBinomError(Exception):
    """Base class for all errors signalled by negbinom queries."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        function: Optional[str] = None,
        value: Optional[float] = None,
        fallback: Optional[float] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.function = function
        self.value = value
        self.fallback = self.default_fallback() if fallback is None else fallback

    def default_fallback(self) -> float:
        return math.nan

    def __str__(self) -> str:
        if self.function:
            return f"{self.function}: {self.message}"
        return self.message


class DomainError(NegBinomError, ValueError):
    """A parameter or argument is outside the declared domain."""

    kind = ErrorKind.DOMAIN


class ResultOverflowError(NegBinomError, OverflowError):
    """The result is mathematically infinite or too large to represent."""

    kind = ErrorKind.OVERFLOW

    def default_fallback(self) -> float:
        return math.inf


class ResultUnderflowError(NegBinomError, ArithmeticError):
    """A nonzero result rounded to zero in the result precision."""

    kind = ErrorKind.UNDERFLOW

    def default_fallback(self) -> float:
        return 0.0


class DenormalResultError(ResultUnderflowError):
    """A result rounded to a subnormal value in the result precision."""

    kind = ErrorKind.DENORM

    def default_fallback(self) -> float:
        return self.value if self.value is not None else 0.0


class EvaluationError(NegBinomError, RuntimeError):
    """An iterative inversion failed to bracket or converge on a root."""

    kind = ErrorKind.EVALUATION
