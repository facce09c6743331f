"""
negbinom.core.names
===================

Typed names shared across the package.

- `ErrorKind`: an Enum for the categories of numerical error a query can hit.
- `ErrorAction`: an Enum for what the error policy does with each category.
- `Precision`: the result precisions a policy may select.

Examples
--------
>>> from negbinom.core.names import ErrorKind, ErrorAction
>>> ErrorKind.DOMAIN.value
'domain'
>>> ErrorAction("quiet_nan") is ErrorAction.QUIET_NAN
True
"""

from __future__ import annotations
from enum import Enum
from typing import Literal


class ErrorKind(str, Enum):
    """Categories of error raised by distribution queries.

    - DOMAIN: a parameter or argument is outside its declared range
    - OVERFLOW: the result is infinite or exceeds the representable range
    - UNDERFLOW: a nonzero result rounds to zero in the result precision
    - DENORM: a result rounds to a subnormal in the result precision
    - EVALUATION: an iterative inversion failed to converge
    """

    DOMAIN = "domain"
    OVERFLOW = "overflow"
    UNDERFLOW = "underflow"
    DENORM = "denorm"
    EVALUATION = "evaluation"


class ErrorAction(str, Enum):
    """What the error policy does when an error of some kind is signalled.

    - RAISE: propagate the exception to the caller
    - QUIET_NAN: return a quiet NaN
    - FALLBACK: return the fixed fallback value for the error kind
    """

    RAISE = "raise"
    QUIET_NAN = "quiet_nan"
    FALLBACK = "fallback"


Precision = Literal["float32", "float64"]
