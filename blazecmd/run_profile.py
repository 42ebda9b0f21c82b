"""Turn a saved run configuration into a build tool invocation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple
import logging

from .command_builder import CommandName, CommandSpec, default_command_for, plan_command
from .config_loader import ProjectSettings
from .flags import BuildFlagsProvider, FlagSource
from .resolver import MappingTargetResolver, TargetResolver, ToolLocator
from .targets import ExecutionMode, Label, TargetKind


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunConfiguration:
    target: Label
    command: str | None = None
    user_flags: Tuple[str, ...] = ()
    extra_args: Tuple[str, ...] = ()
    kind: str | None = None


@dataclass(slots=True)
class RunProfile:
    """Resolve a :class:`RunConfiguration` through the configured collaborators."""

    resolver: TargetResolver
    flag_source: FlagSource
    locator: ToolLocator
    kinds: Dict[str, TargetKind] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        settings: ProjectSettings,
        *,
        providers: Sequence[BuildFlagsProvider] = (),
    ) -> "RunProfile":
        kinds = settings.target_kinds()
        return cls(
            resolver=MappingTargetResolver(settings.targets, kinds),
            flag_source=FlagSource(
                build_flags=settings.build_flags,
                test_flags=settings.test_flags,
                providers=providers,
            ),
            locator=ToolLocator(settings.build_system, settings.binary_path),
            kinds=kinds,
        )

    def resolve_kind(self, configuration: RunConfiguration) -> TargetKind | None:
        if configuration.kind:
            return TargetKind.from_rule_name(configuration.kind, self.kinds)
        return self.resolver.resolve(configuration.target)

    def command_spec(self, configuration: RunConfiguration, mode: ExecutionMode) -> CommandSpec:
        kind = self.resolve_kind(configuration)
        command: str | CommandName = configuration.command or default_command_for(kind)
        flags = self.flag_source.with_user_flags(configuration.user_flags).current_flags(command, mode)
        tool_path = self.locator.tool_path()
        logger.debug(
            "Building %s command for %s (kind=%s, mode=%s)",
            command.value if isinstance(command, CommandName) else command,
            configuration.target,
            kind or "unknown",
            ExecutionMode(mode).value,
        )
        return plan_command(
            tool_path,
            command,
            flags,
            configuration.target,
            kind,
            mode,
            configuration.extra_args,
        )

    def argv(self, configuration: RunConfiguration, mode: ExecutionMode) -> List[str]:
        return self.command_spec(configuration, mode).to_argv()


__all__ = ["RunConfiguration", "RunProfile"]
