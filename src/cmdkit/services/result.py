"""DispatchResult and DispatchError: the outcome contract of one dispatch.

INVARIANT: Every gate failure is reported to the subject as a message and
still returns ``handled=True``. Only an unknown top-level label returns
``handled=False`` so the host can fall back to its own handling.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from cmdkit.domain.types import ErrorCode


class DispatchError(BaseModel):
    """Structured failure payload within a DispatchResult."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class DispatchResult(BaseModel):
    """Outcome of routing one invocation through the command tree.

    Attributes:
        handled: Whether the engine took responsibility for the input.
        ok: Whether the handler ran (or help was shown) without a gate failure.
        op: Qualified path of the node that produced the outcome.
        label: Label the subject typed.
        help_shown: True when generated help replaced a missing handler.
        error: Populated when ``ok`` is False.
        messages: Messages sent to the subject by the engine itself.
    """

    model_config = {"frozen": True}

    handled: bool = True
    ok: bool
    op: str
    label: str = ""
    help_shown: bool = False
    error: DispatchError | None = None
    messages: list[str] = Field(default_factory=list)


def ok_result(
    op: str,
    label: str,
    *,
    help_shown: bool = False,
    messages: list[str] | None = None,
) -> DispatchResult:
    return DispatchResult(
        ok=True,
        op=op,
        label=label,
        help_shown=help_shown,
        messages=messages or [],
    )


def error_result(
    op: str,
    label: str,
    code: ErrorCode,
    message: str,
    *,
    handled: bool = True,
    **detail: Any,
) -> DispatchResult:
    return DispatchResult(
        handled=handled,
        ok=False,
        op=op,
        label=label,
        error=DispatchError(code=code, message=message, detail=detail),
        messages=[message] if handled else [],
    )
