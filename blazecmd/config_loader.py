"""Locating, loading and validating blazecmd configuration files."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Sequence
import json
import logging
import os
import tomllib

import yaml

from .targets import RuleType, TargetKind


logger = logging.getLogger(__name__)

ConfigLoader = Callable[[Any], Mapping[str, Any]]

FILE_LOADERS: Dict[str, ConfigLoader] = {
    ".toml": lambda stream: tomllib.load(stream),
    ".json": lambda stream: json.load(stream),
    ".yaml": lambda stream: yaml.safe_load(stream),
    ".yml": lambda stream: yaml.safe_load(stream),
}
"""Mapping of file suffixes to loader callables."""

CONFIG_ENV_VAR = "BLAZECMD_CONFIG"
PROJECT_CONFIG_STEM = ".blazecmd"
USER_CONFIG_DIR = Path("~/.config/blazecmd")
USER_CONFIG_STEM = "config"


def load_config_file(path: Path) -> Mapping[str, Any]:
    """Load and decode a configuration mapping from ``path``."""

    suffix = path.suffix.lower()
    loader = FILE_LOADERS.get(suffix)
    if loader is None:
        supported = ", ".join(sorted(FILE_LOADERS)) or "<none>"
        raise ValueError(
            f"Unsupported configuration file extension: {suffix}. Supported: {supported}"
        )

    mode = "rb" if suffix == ".toml" else "r"
    kwargs: Dict[str, Any] = {}
    if mode == "r":
        kwargs["encoding"] = "utf-8"

    with path.open(mode, **kwargs) as handle:
        data = loader(handle)

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"Configuration file '{path}' must contain a mapping at the root")

    return data


def find_config_file(directory: Path, stem: str) -> Path | None:
    """Return the single ``stem.<ext>`` file in ``directory``, if any."""

    if not directory.is_dir():
        return None
    found = [directory / f"{stem}{suffix}" for suffix in FILE_LOADERS]
    found = [path for path in found if path.is_file()]
    if len(found) > 1:
        names = ", ".join(f"'{path.name}'" for path in found)
        raise ValueError(
            f"Multiple configuration files found for '{stem}': {names}. "
            "Only one format per configuration entry is allowed."
        )
    return found[0] if found else None


def merge_mappings(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep merge two mapping objects."""

    result: Dict[str, Any] = dict(base)
    for key, value in overlay.items():
        existing = result.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            result[key] = merge_mappings(existing, value)
        else:
            result[key] = value
    return result


def normalize_string_list(value: Any, *, field_name: str | None = None) -> List[str]:
    """Coerce ``value`` into a list of trimmed strings."""

    if value is None:
        return []

    if isinstance(value, (str, bytes)):
        text = str(value).strip()
        return [text] if text else []

    if isinstance(value, Sequence):
        items: List[str] = []
        for item in value:
            if not isinstance(item, (str, bytes)):
                label = f"{field_name} " if field_name else ""
                raise TypeError(f"{label}entries must be strings")
            text = str(item).strip()
            if text:
                items.append(text)
        return items

    label = f"{field_name} " if field_name else ""
    raise TypeError(f"{label}must be a string or sequence of strings")


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"[{name}] must be a mapping")
    return value


def _reject_unknown(data: Mapping[str, Any], allowed: set[str], *, where: str) -> None:
    unknown = {str(key) for key in data.keys() if str(key) not in allowed}
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"{where} contains unknown keys: {joined}")


def _ensure_no_builtin_conflict(rule_name: str, rule_type: RuleType) -> None:
    builtin = TargetKind.from_rule_name(rule_name)
    if builtin is not None and builtin.rule_type is not RuleType(rule_type):
        raise ValueError(
            f"Kind '{rule_name}' is built in as {builtin.rule_type.value} and cannot be redefined as {RuleType(rule_type).value}"
        )


@dataclass(slots=True)
class ProjectSettings:
    build_system: str = "blaze"
    binary_path: str | None = None
    build_flags: List[str] = field(default_factory=list)
    test_flags: List[str] = field(default_factory=list)
    targets: Dict[str, str] = field(default_factory=dict)
    kinds: Dict[str, RuleType] = field(default_factory=dict)
    sources: List[Path] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProjectSettings":
        _reject_unknown(data, {"build_system", "flags", "targets", "kinds"}, where="Configuration")

        build_system_section = _section(data, "build_system")
        _reject_unknown(build_system_section, {"name", "binary_path"}, where="[build_system]")
        name = str(build_system_section.get("name", "blaze")).strip().lower() or "blaze"
        binary_value = build_system_section.get("binary_path")
        binary_path = None
        if isinstance(binary_value, str) and binary_value.strip():
            binary_path = binary_value.strip()

        flags_section = _section(data, "flags")
        _reject_unknown(flags_section, {"build_flags", "test_flags"}, where="[flags]")
        build_flags = normalize_string_list(flags_section.get("build_flags"), field_name="build_flags")
        test_flags = normalize_string_list(flags_section.get("test_flags"), field_name="test_flags")

        targets: Dict[str, str] = {}
        for label, rule_name in _section(data, "targets").items():
            if not isinstance(rule_name, str):
                raise TypeError(f"Rule kind for target '{label}' must be a string")
            targets[str(label).strip()] = rule_name.strip()

        kinds: Dict[str, RuleType] = {}
        for rule_name, rule_type in _section(data, "kinds").items():
            try:
                parsed = RuleType(str(rule_type).strip().lower())
            except ValueError as exc:
                allowed = ", ".join(member.value for member in RuleType)
                raise ValueError(
                    f"Kind '{rule_name}' has unknown rule type '{rule_type}'. Allowed: {allowed}"
                ) from exc
            kind_name = str(rule_name).strip()
            _ensure_no_builtin_conflict(kind_name, parsed)
            kinds[kind_name] = parsed

        return cls(
            build_system=name,
            binary_path=binary_path,
            build_flags=build_flags,
            test_flags=test_flags,
            targets=targets,
            kinds=kinds,
        )

    def target_kinds(self) -> Dict[str, TargetKind]:
        """Return the configured kinds; the process-wide registry is left untouched."""

        result: Dict[str, TargetKind] = {}
        for rule_name, rule_type in self.kinds.items():
            _ensure_no_builtin_conflict(rule_name, rule_type)
            result[rule_name] = TargetKind(rule_name=rule_name, rule_type=RuleType(rule_type))
        return result


def _project_config_path(workspace: Path, explicit: Path | None) -> Path | None:
    if explicit is not None:
        return explicit
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        path = Path(env_value).expanduser()
        return path if path.is_absolute() else (workspace / path)
    return find_config_file(workspace, PROJECT_CONFIG_STEM)


def load_settings(
    workspace: Path,
    *,
    config_path: Path | None = None,
    user_config_dir: Path | None = None,
) -> ProjectSettings:
    """Load user settings overlaid with project settings for ``workspace``.

    Missing files are treated as empty configuration, except an explicitly
    requested file which must exist.
    """

    merged: Dict[str, Any] = {}
    sources: List[Path] = []

    user_dir = (user_config_dir or USER_CONFIG_DIR).expanduser()
    user_path = find_config_file(user_dir, USER_CONFIG_STEM)
    if user_path is not None:
        merged = merge_mappings(merged, load_config_file(user_path))
        sources.append(user_path)

    project_path = _project_config_path(workspace, config_path)
    if project_path is not None:
        if not project_path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {project_path}")
        merged = merge_mappings(merged, load_config_file(project_path))
        sources.append(project_path)

    settings = ProjectSettings.from_mapping(merged)
    settings.sources = sources
    logger.debug("Loaded settings from %s", ", ".join(map(str, sources)) or "<defaults>")
    return settings


__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigLoader",
    "FILE_LOADERS",
    "ProjectSettings",
    "find_config_file",
    "load_config_file",
    "load_settings",
    "merge_mappings",
    "normalize_string_list",
]
