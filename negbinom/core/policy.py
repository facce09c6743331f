"""
negbinom.core.policy
====================

Error-handling and precision policy for distribution queries.

A `Policy` decides, independently for each `ErrorKind`, whether a signalled
error is raised, turned into a quiet NaN, or replaced by the kind's fallback
value (`+inf` for overflow, `0` for underflow, the subnormal itself for
denormals, NaN for domain errors, the best estimate for failed inversions).
It also fixes the result precision and the root-finding iteration budget.

Policies are plain frozen values. A distribution may carry one; estimators
accept one as a keyword argument; otherwise the process-wide default applies.
The default is read from ``NEGBINOM_*`` environment variables the first time
it is needed, so deployments can switch behaviour without code changes.

Examples
--------
>>> from negbinom.core.policy import Policy
>>> p = Policy(on_overflow="raise", precision="float32")
>>> p.on_overflow.value, p.precision
('raise', 'float32')
>>> Policy.from_env({"NEGBINOM_ON_DOMAIN_ERROR": "quiet_nan"}).on_domain_error.value
'quiet_nan'
"""

from __future__ import annotations
import functools
import logging
import math
import os
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import numpy as np

from negbinom.core.errors import (
    DenormalResultError,
    NegBinomError,
    ResultOverflowError,
    ResultUnderflowError,
)
from negbinom.core.names import ErrorAction, ErrorKind, Precision

logger = logging.getLogger(__name__)

_PRECISIONS = ("float32", "float64")

_ENV_FIELDS = {
    "NEGBINOM_ON_DOMAIN_ERROR": "on_domain_error",
    "NEGBINOM_ON_OVERFLOW": "on_overflow",
    "NEGBINOM_ON_UNDERFLOW": "on_underflow",
    "NEGBINOM_ON_DENORM": "on_denorm",
    "NEGBINOM_ON_EVALUATION_ERROR": "on_evaluation_error",
    "NEGBINOM_PRECISION": "precision",
}

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class Policy:
    """
    Configuration for error handling and result precision.

    Parameters
    ----------
    on_domain_error : ErrorAction, default="raise"
        Invalid parameters or arguments.
    on_overflow : ErrorAction, default="fallback"
        Infinite results, e.g. the quantile at probability 1 (fallback ``+inf``).
    on_underflow : ErrorAction, default="fallback"
        Nonzero results that round to zero (fallback ``0``).
    on_denorm : ErrorAction, default="fallback"
        Results that round to a subnormal (fallback keeps the subnormal).
    on_evaluation_error : ErrorAction, default="raise"
        Root finding that fails to converge (fallback is the best estimate).
    precision : {"float32", "float64"}, default="float64"
        Precision results are rounded to; root-finding tolerances follow it.
    max_root_iterations : int, default=200
        Budget shared by bracketing and refinement in every inversion.
    """

    on_domain_error: ErrorAction = ErrorAction.RAISE
    on_overflow: ErrorAction = ErrorAction.FALLBACK
    on_underflow: ErrorAction = ErrorAction.FALLBACK
    on_denorm: ErrorAction = ErrorAction.FALLBACK
    on_evaluation_error: ErrorAction = ErrorAction.RAISE
    precision: Precision = "float64"
    max_root_iterations: int = 200

    def __post_init__(self) -> None:
        for name in (
            "on_domain_error",
            "on_overflow",
            "on_underflow",
            "on_denorm",
            "on_evaluation_error",
        ):
            object.__setattr__(self, name, ErrorAction(getattr(self, name)))
        self.validate()

    def validate(self) -> None:
        """Validate policy configuration."""
        if self.precision not in _PRECISIONS:
            raise ValueError(
                f"precision must be one of {_PRECISIONS}, got {self.precision!r}"
            )
        if int(self.max_root_iterations) != self.max_root_iterations:
            raise ValueError(
                f"max_root_iterations must be an integer, got {self.max_root_iterations}"
            )
        if self.max_root_iterations < 1:
            raise ValueError(
                f"max_root_iterations must be positive, got {self.max_root_iterations}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Policy":
        """Build a policy from ``NEGBINOM_*`` variables; unset ones keep defaults."""
        env = os.environ if environ is None else environ
        kwargs: Dict[str, Any] = {}
        for var, name in _ENV_FIELDS.items():
            raw = env.get(var, "").strip()
            if raw:
                kwargs[name] = raw.lower()
        iterations = env.get("NEGBINOM_MAX_ROOT_ITERATIONS", "").strip()
        if iterations:
            kwargs["max_root_iterations"] = int(iterations)
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "Policy":
        """Return a copy with some fields changed."""
        return replace(self, **changes)

    # ---- precision ----

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.precision)

    @property
    def epsilon(self) -> float:
        return float(np.finfo(self.dtype).eps)

    @property
    def root_tolerance(self) -> float:
        """Relative tolerance for root refinement in this precision."""
        return max(4.0 * float(np.finfo(np.float64).eps), 4.0 * self.epsilon)

    # ---- error dispatch ----

    def action_for(self, kind: ErrorKind) -> ErrorAction:
        return {
            ErrorKind.DOMAIN: self.on_domain_error,
            ErrorKind.OVERFLOW: self.on_overflow,
            ErrorKind.UNDERFLOW: self.on_underflow,
            ErrorKind.DENORM: self.on_denorm,
            ErrorKind.EVALUATION: self.on_evaluation_error,
        }[kind]

    def handle(self, error: NegBinomError) -> float:
        """Raise `error` or return its replacement value, as configured."""
        action = self.action_for(error.kind)
        if action is ErrorAction.RAISE:
            raise error
        logger.debug("absorbed %s error (%s): %s", error.kind.value, action.value, error)
        if action is ErrorAction.QUIET_NAN:
            return math.nan
        return float(error.fallback)

    def narrow(self, value: float, function: str) -> float:
        """Round a double result to the policy precision, signalling range loss."""
        wide = float(value)
        if math.isnan(wide) or (self.precision == "float64" and not _is_subnormal(wide)):
            return wide
        with np.errstate(over="ignore", under="ignore"):
            narrowed = float(self.dtype.type(wide))
        if math.isinf(narrowed) and not math.isinf(wide):
            return self.handle(
                ResultOverflowError(
                    f"result {wide!r} overflows {self.precision}",
                    function=function,
                    value=wide,
                    fallback=math.copysign(math.inf, wide),
                )
            )
        if narrowed == 0.0 and wide != 0.0:
            return self.handle(
                ResultUnderflowError(
                    f"result {wide!r} underflows {self.precision}",
                    function=function,
                    value=wide,
                )
            )
        if narrowed != 0.0 and abs(narrowed) < float(np.finfo(self.dtype).tiny):
            return self.handle(
                DenormalResultError(
                    f"result {narrowed!r} is subnormal in {self.precision}",
                    function=function,
                    value=narrowed,
                )
            )
        return narrowed


def _is_subnormal(x: float) -> bool:
    return x != 0.0 and abs(x) < float(np.finfo(np.float64).tiny)


_default_policy: Optional[Policy] = None


def get_default_policy() -> Policy:
    """Return the process-wide policy, reading the environment on first use."""
    global _default_policy
    if _default_policy is None:
        _default_policy = Policy.from_env()
    return _default_policy


def set_default_policy(policy: Policy) -> None:
    """Replace the process-wide policy."""
    global _default_policy
    if not isinstance(policy, Policy):
        raise TypeError(f"expected a Policy, got {type(policy).__name__}")
    _default_policy = policy


def reset_default_policy() -> None:
    """Forget the process-wide policy so the next query re-reads the environment."""
    global _default_policy
    _default_policy = None


def resolve_policy(policy: Optional[Policy]) -> Policy:
    return policy if policy is not None else get_default_policy()


def guarded(function: str) -> Callable[[F], F]:
    """
    Wrap a public query so signalled errors go through the active policy.

    The policy is taken from a ``policy`` keyword argument, else from the
    ``policy`` attribute of the first positional argument (a distribution),
    else the process default. Results are narrowed to the policy precision.
    """

    def decorate(method: F) -> F:
        @functools.wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> float:
            policy = kwargs.get("policy")
            if policy is None and args:
                policy = getattr(args[0], "policy", None)
            active = resolve_policy(policy)
            try:
                value = method(*args, **kwargs)
            except NegBinomError as exc:
                if exc.function is None:
                    exc.function = function
                return active.handle(exc)
            return active.narrow(value, function)

        return wrapper  # type: ignore[return-value]

    return decorate
