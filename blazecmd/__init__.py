"""Build tool command assembly for running and debugging single targets."""

from .cli import main
from .command_builder import (
    CommandName,
    CommandSpec,
    ConfigurationError,
    TOOL_TAG_FLAG,
    build_command,
    plan_command,
)
from .targets import ExecutionMode, Label, RuleType, TargetKind

__all__ = [
    "CommandName",
    "CommandSpec",
    "ConfigurationError",
    "ExecutionMode",
    "Label",
    "RuleType",
    "TOOL_TAG_FLAG",
    "TargetKind",
    "build_command",
    "main",
    "plan_command",
]
