from __future__ import annotations

import unittest
from unittest.mock import patch

from blazecmd.command_builder import ConfigurationError
from blazecmd.resolver import BuildSystem, MappingTargetResolver, ToolLocator
from blazecmd.targets import JAVA_BINARY, JAVA_TEST, Label


class MappingTargetResolverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = MappingTargetResolver(
            {
                "//label:rule": "java_test",
                "//label:java_binary_rule": "java_binary",
                "//label:native": "cc_binary",
            }
        )

    def test_resolves_configured_labels(self) -> None:
        self.assertIs(self.resolver.resolve(Label.create("//label:rule")), JAVA_TEST)
        self.assertIs(self.resolver.resolve("//label:java_binary_rule"), JAVA_BINARY)

    def test_unknown_labels_and_rules_resolve_to_none(self) -> None:
        self.assertIsNone(self.resolver.resolve("//label:missing"))
        self.assertIsNone(self.resolver.resolve("//label:native"))


class ToolLocatorTests(unittest.TestCase):
    def test_configured_binary_path_wins(self) -> None:
        locator = ToolLocator("bazel", "/opt/bazel/bin/bazel")
        with patch("blazecmd.resolver.shutil.which") as which:
            self.assertEqual(locator.tool_path(), "/opt/bazel/bin/bazel")
        which.assert_not_called()

    def test_looks_up_build_system_on_path(self) -> None:
        locator = ToolLocator(BuildSystem.BAZEL)
        with patch("blazecmd.resolver.shutil.which", return_value="/usr/local/bin/bazel") as which:
            self.assertEqual(locator.tool_path(), "/usr/local/bin/bazel")
        which.assert_called_once_with("bazel")

    def test_missing_tool_raises_configuration_error(self) -> None:
        locator = ToolLocator()
        with patch("blazecmd.resolver.shutil.which", return_value=None):
            with self.assertRaises(ConfigurationError) as ctx:
                locator.tool_path()
        self.assertIn("blaze is not configured", str(ctx.exception))

    def test_unknown_build_system_is_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            ToolLocator("make")

    def test_build_system_parsing_is_case_insensitive(self) -> None:
        self.assertIs(BuildSystem.parse(" Bazel "), BuildSystem.BAZEL)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
