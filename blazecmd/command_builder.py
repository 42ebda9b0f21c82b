"""Assembly of build tool invocations for running or debugging one target."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from .debug_flags import InsertionPoint, debug_flags_for
from .targets import ExecutionMode, Label, RuleType, TargetKind


TOOL_TAG_FLAG = "--tool_tag=blazecmd"
SEPARATOR = "--"


class ConfigurationError(ValueError):
    """Raised when the build tool cannot be invoked as configured."""


class CommandName(str, Enum):
    BUILD = "build"
    TEST = "test"
    RUN = "run"
    COVERAGE = "coverage"
    QUERY = "query"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class CommandSpec:
    tool_path: str
    command: str
    tool_flags: Tuple[str, ...]
    target: str
    target_args: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _require(self.tool_path, "Build tool path")
        _require(self.command, "Command verb")

    def to_argv(self) -> List[str]:
        argv = [self.tool_path, self.command, TOOL_TAG_FLAG, *self.tool_flags]
        # The target is target-scoped, so the separator is always present.
        argv.append(SEPARATOR)
        argv.append(self.target)
        argv.extend(self.target_args)
        return argv

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tool_path": self.tool_path,
            "command": self.command,
            "tool_flags": list(self.tool_flags),
            "target": self.target,
            "target_args": list(self.target_args),
            "argv": self.to_argv(),
        }


def _coerce_kind(kind: TargetKind | str | None) -> TargetKind | None:
    if kind is None or isinstance(kind, TargetKind):
        return kind
    return TargetKind.from_rule_name(str(kind))


def _require(value: str | None, what: str) -> str:
    if value is None or not str(value).strip():
        raise ConfigurationError(f"{what} must not be empty")
    return str(value)


def plan_command(
    tool_path: str,
    command_verb: str | CommandName,
    base_flags: Iterable[str],
    target: Label | str,
    kind: TargetKind | str | None,
    mode: ExecutionMode,
    extra_binary_args: Iterable[str] = (),
) -> CommandSpec:
    """Describe the invocation of ``command_verb`` on ``target``.

    Debug flags for test kinds join the tool flags ahead of the separator;
    debug flags for binary kinds are placed right after the target. Unknown
    kinds receive no debug flags.

    Raises:
        ConfigurationError: ``tool_path`` or ``command_verb`` is empty.
    """

    tool = _require(tool_path, "Build tool path")
    verb = command_verb.value if isinstance(command_verb, CommandName) else command_verb
    verb = _require(verb, "Command verb")

    tool_flags: List[str] = list(base_flags)
    target_args: List[str] = []

    debug = debug_flags_for(_coerce_kind(kind), mode)
    if debug.position is InsertionPoint.BEFORE_SEPARATOR:
        tool_flags.extend(debug.tokens)
    else:
        target_args.extend(debug.tokens)
    target_args.extend(extra_binary_args)

    return CommandSpec(
        tool_path=tool,
        command=verb,
        tool_flags=tuple(tool_flags),
        target=str(target),
        target_args=tuple(target_args),
    )


def build_command(
    tool_path: str,
    command_verb: str | CommandName,
    base_flags: Iterable[str],
    target: Label | str,
    kind: TargetKind | str | None,
    mode: ExecutionMode,
    extra_binary_args: Iterable[str] = (),
) -> List[str]:
    """Return the argument vector for one invocation; see :func:`plan_command`."""

    return plan_command(
        tool_path,
        command_verb,
        base_flags,
        target,
        kind,
        mode,
        extra_binary_args,
    ).to_argv()


def default_command_for(kind: TargetKind | str | None) -> CommandName:
    resolved = _coerce_kind(kind)
    if resolved is not None and resolved.rule_type is RuleType.TEST:
        return CommandName.TEST
    return CommandName.RUN


__all__ = [
    "CommandName",
    "CommandSpec",
    "ConfigurationError",
    "SEPARATOR",
    "TOOL_TAG_FLAG",
    "build_command",
    "default_command_for",
    "plan_command",
]
