"""CompletionEngine: suggestions for partially typed input.

The last token is always the one being completed. Routing walks the same
case-insensitive child keys as dispatch, and no suggestion ever crosses a
failed permission check.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from cmdkit.domain.arguments import DEFAULT_LIMITS, ArgumentLimits
from cmdkit.domain.parsing import argument_completions
from cmdkit.services.context import CompletionContext

if TYPE_CHECKING:
    from cmdkit.domain.node import CommandNode
    from cmdkit.domain.resolvers import ResolverRegistry
    from cmdkit.domain.subject import Subject
    from cmdkit.services.registry import CommandRegistry


def _dedupe(items: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(items))


class CompletionEngine:
    """Produces ordered, de-duplicated suggestions for a node tree."""

    def __init__(
        self,
        registry: CommandRegistry,
        resolvers: ResolverRegistry | None = None,
        *,
        limits: ArgumentLimits = DEFAULT_LIMITS,
    ) -> None:
        self._registry = registry
        self._resolvers = resolvers
        self._limits = limits

    def complete(self, subject: Subject, label: str, tokens: Sequence[str]) -> list[str]:
        """Suggestions for *tokens* typed after *label*. Unknown labels give none."""
        node = self._registry.get(label)
        if node is None:
            return []
        return self.complete_node(node, subject, tokens)

    def complete_labels(self, subject: Subject, partial: str = "") -> list[str]:
        """Top-level command keys *subject* may run, prefix-filtered."""
        prefix = partial.lower()
        keys: list[str] = []
        for node in self._registry.list_all():
            if node.permits(subject):
                keys.extend(key for key in node.keys if key.startswith(prefix))
        return sorted(keys)

    def complete_node(
        self,
        node: CommandNode,
        subject: Subject,
        tokens: Sequence[str],
    ) -> list[str]:
        if not node.permits(subject):
            return []
        args = list(tokens)

        if not args:
            return self._custom(node, subject, args)

        if len(args) == 1:
            current = args[0]
            prefix = current.lower()
            children = [
                key
                for key, child in node.children.items()
                if key.startswith(prefix) and child.permits(subject)
            ]
            schema = self._schema(node, 0, current)
            return _dedupe([*children, *schema, *self._custom(node, subject, args)])

        child = node.child(args[0])
        if child is not None:
            return self.complete_node(child, subject, args[1:])
        if node.completer is not None:
            return self._custom(node, subject, args)
        return self._schema(node, len(args) - 1, args[-1])

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _schema(self, node: CommandNode, index: int, current: str) -> list[str]:
        return argument_completions(
            index,
            current,
            node.arguments,
            limits=self._limits,
            resolvers=self._resolvers,
        )

    def _custom(self, node: CommandNode, subject: Subject, args: list[str]) -> list[str]:
        if node.completer is None:
            return []
        ctx = CompletionContext(
            subject,
            args,
            node=node,
            limits=self._limits,
            resolvers=self._resolvers,
        )
        return list(node.completer(ctx))
