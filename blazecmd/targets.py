"""Target identities, rule kinds and execution modes."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Iterable, List, Mapping


class ExecutionMode(str, Enum):
    RUN = "run"
    DEBUG = "debug"


class RuleType(str, Enum):
    TEST = "test"
    BINARY = "binary"
    LIBRARY = "library"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Label:
    """A build target address such as ``//java/com/foo:FooTest``.

    The label is kept as an opaque string; ``package`` and ``target_name`` are
    convenience views and never reject input.
    """

    text: str

    @classmethod
    def create(cls, text: str) -> "Label":
        return cls(str(text).strip())

    @property
    def package(self) -> str:
        body = self.text[2:] if self.text.startswith("//") else self.text
        package, _, _ = body.partition(":")
        return package

    @property
    def target_name(self) -> str:
        body = self.text[2:] if self.text.startswith("//") else self.text
        package, sep, name = body.partition(":")
        if sep:
            return name
        return package.rsplit("/", 1)[-1]

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class TargetKind:
    rule_name: str
    rule_type: RuleType
    language: str | None = None

    _registry: ClassVar[Dict[str, "TargetKind"]] = {}

    @classmethod
    def register(cls, rule_name: str, rule_type: RuleType | str, language: str | None = None) -> "TargetKind":
        name = rule_name.strip()
        if not name:
            raise ValueError("Rule name must not be empty")
        kind = cls(rule_name=name, rule_type=RuleType(rule_type), language=language)
        existing = cls._registry.get(name)
        if existing is not None:
            if existing.rule_type is not kind.rule_type:
                raise ValueError(
                    f"Kind '{name}' is already registered as {existing.rule_type.value}"
                )
            return existing
        cls._registry[name] = kind
        return kind

    @classmethod
    def from_rule_name(
        cls,
        rule_name: str | None,
        extra: Mapping[str, "TargetKind"] | None = None,
    ) -> "TargetKind | None":
        """Look up ``rule_name`` in ``extra`` first, then in the registry."""

        if not rule_name:
            return None
        name = rule_name.strip()
        if extra and name in extra:
            return extra[name]
        return cls._registry.get(name)

    @classmethod
    def registered(cls) -> List["TargetKind"]:
        return sorted(cls._registry.values(), key=lambda kind: kind.rule_name)

    @classmethod
    def unregister(cls, rule_name: str) -> None:
        cls._registry.pop(rule_name, None)

    def __str__(self) -> str:
        return self.rule_name


def _register_defaults(rule_type: RuleType, language: str, names: Iterable[str]) -> None:
    for name in names:
        TargetKind.register(name, rule_type, language)


_register_defaults(RuleType.TEST, "java", ["java_test", "android_robolectric_test", "android_local_test"])
_register_defaults(RuleType.TEST, "scala", ["scala_test", "scala_junit_test"])
_register_defaults(RuleType.TEST, "kotlin", ["kt_jvm_test"])
_register_defaults(RuleType.BINARY, "java", ["java_binary"])
_register_defaults(RuleType.BINARY, "scala", ["scala_binary"])
_register_defaults(RuleType.BINARY, "kotlin", ["kt_jvm_binary"])
_register_defaults(RuleType.LIBRARY, "java", ["java_library", "java_import"])
_register_defaults(RuleType.LIBRARY, "scala", ["scala_library"])
_register_defaults(RuleType.LIBRARY, "kotlin", ["kt_jvm_library"])

JAVA_TEST = TargetKind.from_rule_name("java_test")
JAVA_BINARY = TargetKind.from_rule_name("java_binary")


__all__ = [
    "ExecutionMode",
    "JAVA_BINARY",
    "JAVA_TEST",
    "Label",
    "RuleType",
    "TargetKind",
]
