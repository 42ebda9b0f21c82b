from __future__ import annotations

import unittest

from blazecmd.debug_flags import NO_DEBUG_FLAGS, InsertionPoint, debug_flags_for
from blazecmd.targets import JAVA_BINARY, JAVA_TEST, ExecutionMode, Label, RuleType, TargetKind


class LabelTests(unittest.TestCase):
    def test_create_strips_whitespace_and_keeps_text(self) -> None:
        label = Label.create("  //java/com/foo:FooTest ")
        self.assertEqual(str(label), "//java/com/foo:FooTest")
        self.assertEqual(label.package, "java/com/foo")
        self.assertEqual(label.target_name, "FooTest")

    def test_target_name_defaults_to_last_package_segment(self) -> None:
        label = Label.create("//java/com/foo")
        self.assertEqual(label.package, "java/com/foo")
        self.assertEqual(label.target_name, "foo")

    def test_labels_are_immutable_values(self) -> None:
        label = Label.create("//a:b")
        self.assertEqual(label, Label("//a:b"))
        with self.assertRaises(AttributeError):
            label.text = "//c:d"  # type: ignore[misc]


class TargetKindRegistryTests(unittest.TestCase):
    def test_default_jvm_kinds_are_registered(self) -> None:
        self.assertEqual(JAVA_TEST.rule_type, RuleType.TEST)
        self.assertEqual(JAVA_BINARY.rule_type, RuleType.BINARY)
        self.assertEqual(TargetKind.from_rule_name("kt_jvm_binary").rule_type, RuleType.BINARY)
        self.assertEqual(TargetKind.from_rule_name("java_library").rule_type, RuleType.LIBRARY)

    def test_unknown_rule_name_resolves_to_none(self) -> None:
        self.assertIsNone(TargetKind.from_rule_name("cc_binary"))
        self.assertIsNone(TargetKind.from_rule_name(""))
        self.assertIsNone(TargetKind.from_rule_name(None))

    def test_register_accepts_rule_type_names(self) -> None:
        kind = TargetKind.register("groovy_test", "test", "groovy")
        self.addCleanup(TargetKind.unregister, "groovy_test")
        self.assertIs(TargetKind.from_rule_name("groovy_test"), kind)
        self.assertIn(kind, TargetKind.registered())

    def test_register_refuses_to_change_rule_type(self) -> None:
        with self.assertRaises(ValueError):
            TargetKind.register("java_test", RuleType.LIBRARY)
        self.assertIs(TargetKind.from_rule_name("java_test"), JAVA_TEST)
        self.assertIs(TargetKind.register("java_test", RuleType.TEST), JAVA_TEST)

    def test_extra_kinds_are_consulted_first(self) -> None:
        local = TargetKind(rule_name="groovy_binary", rule_type=RuleType.BINARY)
        self.assertIs(TargetKind.from_rule_name("groovy_binary", {"groovy_binary": local}), local)
        self.assertIsNone(TargetKind.from_rule_name("groovy_binary"))

    def test_register_rejects_empty_name(self) -> None:
        with self.assertRaises(ValueError):
            TargetKind.register("  ", RuleType.TEST)


class DebugFlagTableTests(unittest.TestCase):
    def test_test_kinds_inject_before_separator(self) -> None:
        flags = debug_flags_for(JAVA_TEST, ExecutionMode.DEBUG)
        self.assertEqual(flags.tokens, ("--java_debug", "--test_arg=--debug=5005"))
        self.assertIs(flags.position, InsertionPoint.BEFORE_SEPARATOR)

    def test_binary_kinds_inject_after_target(self) -> None:
        flags = debug_flags_for(JAVA_BINARY, ExecutionMode.DEBUG)
        self.assertEqual(flags.tokens, ("--wrapper_script_flag=--debug=5005",))
        self.assertIs(flags.position, InsertionPoint.AFTER_TARGET)

    def test_run_mode_and_unhandled_kinds_have_no_flags(self) -> None:
        self.assertIs(debug_flags_for(JAVA_TEST, ExecutionMode.RUN), NO_DEBUG_FLAGS)
        self.assertIs(debug_flags_for(JAVA_BINARY, ExecutionMode.RUN), NO_DEBUG_FLAGS)
        self.assertIs(debug_flags_for(None, ExecutionMode.DEBUG), NO_DEBUG_FLAGS)
        self.assertIs(debug_flags_for(TargetKind.from_rule_name("java_library"), ExecutionMode.DEBUG), NO_DEBUG_FLAGS)
        self.assertFalse(NO_DEBUG_FLAGS)

    def test_mode_may_be_given_by_value(self) -> None:
        self.assertEqual(debug_flags_for(JAVA_TEST, "debug"), debug_flags_for(JAVA_TEST, ExecutionMode.DEBUG))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
