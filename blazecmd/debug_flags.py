"""Debug flag injection keyed on rule type and execution mode."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .targets import ExecutionMode, RuleType, TargetKind


DEBUG_PORT = 5005


class InsertionPoint(str, Enum):
    BEFORE_SEPARATOR = "before-separator"
    AFTER_TARGET = "after-target"


@dataclass(frozen=True, slots=True)
class DebugFlags:
    tokens: Tuple[str, ...] = ()
    position: InsertionPoint = InsertionPoint.BEFORE_SEPARATOR

    def __bool__(self) -> bool:
        return bool(self.tokens)


NO_DEBUG_FLAGS = DebugFlags()

_DEBUG_SPEC = f"--debug={DEBUG_PORT}"

# Binary debug flags belong to the launcher script and must follow the target.
_DEBUG_FLAG_TABLE: Dict[Tuple[RuleType, ExecutionMode], DebugFlags] = {
    (RuleType.TEST, ExecutionMode.DEBUG): DebugFlags(
        tokens=("--java_debug", f"--test_arg={_DEBUG_SPEC}"),
        position=InsertionPoint.BEFORE_SEPARATOR,
    ),
    (RuleType.BINARY, ExecutionMode.DEBUG): DebugFlags(
        tokens=(f"--wrapper_script_flag={_DEBUG_SPEC}",),
        position=InsertionPoint.AFTER_TARGET,
    ),
}


def debug_flags_for(kind: TargetKind | None, mode: ExecutionMode) -> DebugFlags:
    """Return the flags to inject for ``kind`` launched in ``mode``.

    Unknown kinds and rule types without a table entry yield no flags.
    """

    rule_type = kind.rule_type if kind is not None else RuleType.UNKNOWN
    return _DEBUG_FLAG_TABLE.get((rule_type, ExecutionMode(mode)), NO_DEBUG_FLAGS)


__all__ = [
    "DEBUG_PORT",
    "DebugFlags",
    "InsertionPoint",
    "NO_DEBUG_FLAGS",
    "debug_flags_for",
]
