"""Collaborators that resolve target kinds and locate the build tool."""
from __future__ import annotations

from enum import Enum
from typing import Mapping, Protocol
import logging
import shutil

from .command_builder import ConfigurationError
from .targets import Label, TargetKind


logger = logging.getLogger(__name__)


class TargetResolver(Protocol):
    def resolve(self, target: Label | str) -> TargetKind | None:
        ...


class MappingTargetResolver:
    """Resolve kinds from a ``label -> rule name`` mapping.

    ``kinds`` holds project-defined kinds, consulted before the registry.
    """

    def __init__(self, mapping: Mapping[str, str], kinds: Mapping[str, TargetKind] | None = None) -> None:
        self._mapping = {str(label).strip(): rule for label, rule in mapping.items()}
        self._kinds = dict(kinds or {})

    def resolve(self, target: Label | str) -> TargetKind | None:
        rule_name = self._mapping.get(str(target).strip())
        if rule_name is None:
            logger.debug("No kind configured for %s", target)
            return None
        kind = TargetKind.from_rule_name(rule_name, self._kinds)
        if kind is None:
            logger.debug("Rule '%s' for %s is not a registered kind", rule_name, target)
        return kind


class BuildSystem(str, Enum):
    BLAZE = "blaze"
    BAZEL = "bazel"

    @classmethod
    def parse(cls, value: str) -> "BuildSystem":
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(member.value for member in cls)
            raise ConfigurationError(f"Unknown build system '{value}'. Allowed: {allowed}") from exc


class ToolLocator:
    def __init__(self, build_system: BuildSystem | str = BuildSystem.BLAZE, binary_path: str | None = None) -> None:
        if not isinstance(build_system, BuildSystem):
            build_system = BuildSystem.parse(build_system)
        self.build_system = build_system
        self._binary_path = binary_path

    def tool_path(self) -> str:
        if self._binary_path:
            return self._binary_path
        located = shutil.which(self.build_system.value)
        if not located:
            raise ConfigurationError(
                f"{self.build_system.value} is not configured: set [build_system].binary_path "
                f"or put '{self.build_system.value}' on PATH"
            )
        return located


__all__ = ["BuildSystem", "MappingTargetResolver", "TargetResolver", "ToolLocator"]
