"""Batch schema parsing and schema-driven completion.

``parse_arguments`` walks a node's schema left-to-right against the
trailing tokens:

- each non-greedy kind consumes exactly one token, whether or not it
  parses, so later kinds keep their positional alignment;
- a greedy kind joins every remaining token with single spaces and ends
  the walk;
- a failed position is omitted from the values and recorded in
  ``ParsedArguments.failures``; it never aborts the rest of the walk.

Both functions use the same :class:`~cmdkit.domain.arguments.ArgParser`
instances a handler would use directly, so batch and standalone parsing
share one policy.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from cmdkit.domain.arguments import DEFAULT_LIMITS, ArgumentKind, ArgumentLimits
from cmdkit.domain.results import Failure
from cmdkit.domain.types import ErrorCode
from cmdkit.domain.values import ArgumentFailure, ParsedArguments

if TYPE_CHECKING:
    from cmdkit.domain.resolvers import ResolverRegistry

logger = logging.getLogger(__name__)


def parse_arguments(
    tokens: Sequence[str],
    schema: Sequence[ArgumentKind],
    *,
    limits: ArgumentLimits = DEFAULT_LIMITS,
    resolvers: ResolverRegistry | None = None,
) -> ParsedArguments:
    """Convert *tokens* into named values according to *schema*.

    Examples:
        >>> from cmdkit.domain.arguments import IntegerKind, TextKind
        >>> args = parse_arguments(["x", "hello"], [IntegerKind("a"), TextKind("b")])
        >>> dict(args)
        {'b': 'hello'}
    """
    values: dict[str, Any] = {}
    failures: dict[str, ArgumentFailure] = {}
    cursor = 0

    for position, kind in enumerate(schema):
        if kind.greedy:
            token = " ".join(tokens[cursor:]) if cursor < len(tokens) else None
        else:
            token = tokens[cursor] if cursor < len(tokens) else None
            cursor += 1

        if token is None:
            if not kind.optional:
                failures[kind.name] = ArgumentFailure(
                    name=kind.name,
                    position=position,
                    code=ErrorCode.MISSING_ARGUMENT,
                    message=f"Missing argument at position {position + 1}",
                )
        else:
            result = kind.parser(limits, resolvers).parse(token)
            if isinstance(result, Failure):
                failures[kind.name] = ArgumentFailure(
                    name=kind.name,
                    position=position,
                    code=result.code,
                    message=result.message,
                    token=token,
                )
            else:
                values[kind.name] = result.value

        if kind.greedy:
            break

    if failures:
        logger.debug("Omitted arguments: %s", ", ".join(sorted(failures)))
    return ParsedArguments(values, failures)


def argument_completions(
    index: int,
    current: str,
    schema: Sequence[ArgumentKind],
    *,
    limits: ArgumentLimits = DEFAULT_LIMITS,
    resolvers: ResolverRegistry | None = None,
) -> list[str]:
    """Suggestions for the schema entry at *index*, given the partial *current*."""
    if index < 0 or index >= len(schema):
        return []
    return schema[index].parser(limits, resolvers).complete(current)


def render_usage(path: str, schema: Sequence[ArgumentKind]) -> str:
    """Build a usage line such as ``/give <target> <amount> [reason...]``."""
    parts = [f"/{path}"] + [kind.usage() for kind in schema]
    return " ".join(parts)
