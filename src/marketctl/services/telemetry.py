"""Request timing for service operations.

Off by default; ``--verbose`` switches it on for the process.  While on,
each ``@traced`` service call opens a root span, ``trace_span`` blocks
inside it open child spans, and the finished tree lands in
``ServiceResult.meta["telemetry"]``.

When off, the only cost is one ContextVar lookup per call.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from marketctl.services.result import ServiceResult

log = structlog.get_logger("marketctl.telemetry")

_enabled: ContextVar[bool] = ContextVar("marketctl_telemetry_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("marketctl_current_span", default=None)


@dataclass
class Span:
    """One timed region. Children are nested regions in start order."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _open_span(name: str, parent: Span | None) -> Iterator[Span]:
    span = Span(name=name, parent=parent)
    if parent is not None:
        parent.children.append(span)
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a block as a child of the active span.

    Yields None (and records nothing) when telemetry is off or no
    ``@traced`` call is active.
    """
    parent = _current_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    with _open_span(name, parent) as span:
        yield span


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach the span tree to its result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        with _open_span(func.__qualname__, None) as span:
            result = func(*args, **kwargs)

        if not isinstance(result, ServiceResult):
            return result
        log.debug(
            "span.complete",
            span_name=span.name,
            op=result.op,
            ok=result.ok,
            duration_ms=round(span.duration_ms, 2),
        )
        meta = {**(result.meta or {}), "telemetry": span.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on (AppContext does this for ``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    """Turn span collection off."""
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost active span, for ad-hoc annotation. None when off."""
    return _current_span.get() if _enabled.get() else None
