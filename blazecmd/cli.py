"""Command line interface for blazecmd."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Iterable, List, Sequence
import json
import logging
import sys

from .command_builder import ConfigurationError
from .command_runner import CommandRunner, SubprocessCommandRunner
from .config_loader import ProjectSettings, load_settings
from .debug_flags import debug_flags_for
from .run_profile import RunConfiguration, RunProfile
from .targets import ExecutionMode, Label, TargetKind


logger = logging.getLogger(__name__)


def _split_passthrough(argv: Sequence[str]) -> tuple[List[str], List[str]]:
    """Split ``argv`` at the first ``--`` into CLI arguments and target arguments."""

    items = list(argv)
    if "--" in items:
        index = items.index("--")
        return items[:index], items[index + 1 :]
    return items, []


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="blazecmd", description="Assemble build tool command lines for running and debugging targets")
    parser.add_argument("-C", "--workspace", type=Path, default=None, help="Workspace root (defaults to the current directory)")
    parser.add_argument("--config", type=Path, default=None, help="Project configuration file to use")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for mode in ExecutionMode:
        mode_parser = subparsers.add_parser(mode.value, help=f"Print or execute the command that would {mode.value} a target")
        mode_parser.add_argument("target", help="Target label, e.g. //java/com/foo:FooTest")
        mode_parser.add_argument("--command", dest="verb", help="Build tool command (defaults to test for test targets, run otherwise)")
        mode_parser.add_argument("--flag", dest="flags", action="append", default=[], metavar="FLAG", help="Additional build tool flag (repeatable)")
        mode_parser.add_argument("--kind", help="Rule kind of the target, overriding configuration")
        mode_parser.add_argument("--json", action="store_true", help="Print the command description as JSON")
        mode_parser.add_argument("--execute", action="store_true", help="Run the command instead of printing it")
        mode_parser.set_defaults(mode=mode)

    subparsers.add_parser("kinds", help="List registered target kinds and their debug handling")

    return parser.parse_args(list(argv))


def main(argv: Iterable[str] | None = None) -> int:
    cli_args, passthrough = _split_passthrough(list(sys.argv[1:] if argv is None else argv))
    args = _parse_arguments(cli_args)
    _configure_logging(args.verbose)
    workspace = (args.workspace or Path.cwd()).resolve()

    try:
        settings = load_settings(workspace, config_path=args.config)
    except (FileNotFoundError, TypeError, ValueError) as exc:
        print(f"Error: {exc}")
        return 2

    if args.command == "kinds":
        return _handle_kinds(settings)
    if args.command in {mode.value for mode in ExecutionMode}:
        return _handle_launch(args, settings, workspace, passthrough)
    raise ValueError(f"Unknown command: {args.command}")


def _handle_launch(args: Namespace, settings: ProjectSettings, workspace: Path, passthrough: List[str]) -> int:
    configuration = RunConfiguration(
        target=Label.create(args.target),
        command=args.verb,
        user_flags=tuple(args.flags),
        extra_args=tuple(passthrough),
        kind=args.kind,
    )
    try:
        profile = RunProfile.from_settings(settings)
        spec = profile.command_spec(configuration, args.mode)
    except ConfigurationError as exc:
        print(f"Error: {exc}")
        return 2

    argv = spec.to_argv()
    if not args.execute:
        if args.json:
            print(json.dumps(spec.to_dict(), indent=2))
        else:
            print(CommandRunner.format_command(argv))
        return 0

    runner = SubprocessCommandRunner()
    try:
        returncode = runner.run(argv, cwd=workspace)
    except OSError as exc:
        print(f"Error: {exc}")
        return 2
    if returncode != 0:
        logger.warning("%s exited with status %d", spec.command, returncode)
    return returncode


def _handle_kinds(settings: ProjectSettings) -> int:
    kinds = {kind.rule_name: kind for kind in TargetKind.registered()}
    kinds.update(settings.target_kinds())
    for _, kind in sorted(kinds.items()):
        debug = debug_flags_for(kind, ExecutionMode.DEBUG)
        handling = f"{' '.join(debug.tokens)} ({debug.position.value})" if debug else "no debug flags"
        print(f"{kind.rule_name:<28} {kind.rule_type.value:<8} {handling}")
    return 0


__all__ = ["main"]
