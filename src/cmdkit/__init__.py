"""cmdkit: command trees, typed arguments, cooldowns, dispatch and completion."""

from __future__ import annotations

from cmdkit.domain.arguments import ArgParser, ArgumentKind
from cmdkit.domain.node import CommandNode, NodeBuilder, NodeConfig, build_node
from cmdkit.domain.results import Failure, ParseResult, Success, failure, success
from cmdkit.domain.subject import ConsoleSubject, SessionSubject, Subject
from cmdkit.domain.types import ErrorCode
from cmdkit.services.context import CommandContext, CompletionContext
from cmdkit.services.runtime import CommandRuntime

__version__ = "0.1.0"

__all__ = [
    "ArgParser",
    "ArgumentKind",
    "CommandContext",
    "CommandNode",
    "CommandRuntime",
    "CompletionContext",
    "ConsoleSubject",
    "ErrorCode",
    "Failure",
    "NodeBuilder",
    "NodeConfig",
    "ParseResult",
    "SessionSubject",
    "Subject",
    "Success",
    "__version__",
    "build_node",
    "failure",
    "success",
]
