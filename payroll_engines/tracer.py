"""
payroll_engines.tracer -- Engine invocation tracer emitting PAYROLL_ENGINE_TRACE.

Responsibility:
    Provide a lightweight decorator (``@traced_engine``) that wraps pure
    engine invocations with structured trace logging.  The trace captures
    engine_name, engine_version, input_fingerprint (deterministic SHA-256
    over selected arguments) and duration_ms.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Does NOT introduce I/O into engines; emits a log record only.

Invariants enforced:
    - Fingerprints are deterministic: arguments go through the kernel's
      canonical JSON (Decimal normalised, dates ISO, dataclasses as dicts).
    - The decorator never mutates inputs and never swallows exceptions.

Usage:
    from payroll_engines.tracer import traced_engine

    @traced_engine("payroll", "1.0", fingerprint_fields=("employee", "attendance"))
    def compute_payroll(employee, attendance, period_start, period_end):
        ...
"""

from __future__ import annotations

import functools
import inspect
import time
from collections.abc import Callable, Iterator
from typing import Any

from payroll_kernel.logging_config import get_logger
from payroll_kernel.utils.hashing import hash_payload

logger = get_logger("engines.tracer")


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """Deterministic 16-hex-char fingerprint of the selected arguments.

    Missing fields are recorded as null.  One-shot iterators are recorded by
    type only, never consumed.  Values the canonical JSON cannot encode fall
    back to ``repr``.
    """
    payload: dict[str, Any] = {}
    for field in fingerprint_fields:
        val = arguments.get(field)
        if isinstance(val, Iterator):
            val = f"<{type(val).__name__}>"
        elif isinstance(val, (set, frozenset)):
            val = sorted(val, key=repr)
        payload[field] = val
    try:
        return hash_payload(payload)[:16]
    except TypeError:
        return hash_payload({k: repr(v) for k, v in payload.items()})[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits PAYROLL_ENGINE_TRACE for pure engine invocations.

    Args:
        engine_name: Engine identifier (e.g., "payroll").
        engine_version: Engine version (e.g., "1.0").
        fingerprint_fields: Parameter names (positional or keyword) to
            include in the input fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fp = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fp = compute_input_fingerprint(fingerprint_fields, dict(bound.arguments))

            t0 = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - t0) * 1000, 2)

            logger.debug(
                "PAYROLL_ENGINE_TRACE",
                extra={
                    "trace_type": "PAYROLL_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fp,
                    "duration_ms": duration_ms,
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
