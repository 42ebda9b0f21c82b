"""Base flag collection from providers, project settings and the user."""
from __future__ import annotations

from typing import Callable, Iterable, List, Sequence

from .command_builder import CommandName
from .targets import ExecutionMode


BuildFlagsProvider = Callable[[str, ExecutionMode], Iterable[str]]
"""Callable contributing flags for a ``(command, mode)`` pair."""

_TEST_COMMANDS = frozenset({CommandName.TEST.value, CommandName.COVERAGE.value})


class FlagSource:
    def __init__(
        self,
        *,
        build_flags: Sequence[str] = (),
        test_flags: Sequence[str] = (),
        user_flags: Sequence[str] = (),
        providers: Sequence[BuildFlagsProvider] = (),
    ) -> None:
        self._build_flags = list(build_flags)
        self._test_flags = list(test_flags)
        self._user_flags = list(user_flags)
        self._providers = list(providers)

    def with_user_flags(self, user_flags: Sequence[str]) -> "FlagSource":
        return FlagSource(
            build_flags=self._build_flags,
            test_flags=self._test_flags,
            user_flags=[*self._user_flags, *user_flags],
            providers=self._providers,
        )

    def current_flags(self, command: str | CommandName, mode: ExecutionMode = ExecutionMode.RUN) -> List[str]:
        """Return flags in provider, project, test-only, user order.

        Duplicates are preserved.
        """

        verb = command.value if isinstance(command, CommandName) else str(command)
        flags: List[str] = []
        for provider in self._providers:
            flags.extend(provider(verb, mode))
        flags.extend(self._build_flags)
        if verb in _TEST_COMMANDS:
            flags.extend(self._test_flags)
        flags.extend(self._user_flags)
        return flags


__all__ = ["BuildFlagsProvider", "FlagSource"]
