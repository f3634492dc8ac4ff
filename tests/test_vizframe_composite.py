from __future__ import annotations

import unittest

from vizframe.data import TableDataSet
from vizframe.errors import ConfigError
from vizframe.frames.categorical import CategoricalColorFrame
from vizframe.frames.composite import CompositeFrame
from vizframe.frames.continuous import GradientColorFrame, LinearSizeFrame
from vizframe.frames.static import StaticColorFrame
from vizframe.legend import build_legends


RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
GRAY = (128, 128, 128, 255)


class CompositeFrameTests(unittest.TestCase):
    def setUp(self) -> None:
        self.data = TableDataSet({"override": ["x", None, None], "cat": ["a", "b", None]})

    def test_cell_lookup_is_first_match_wins(self) -> None:
        specific = CategoricalColorFrame("override", [GREEN], assignments={"x": RED})
        shared = CategoricalColorFrame("cat", [GREEN, BLUE])
        frame = CompositeFrame(specific, shared)
        frame.init(self.data)
        self.assertEqual(frame.get_attribute_at(self.data, "cat", 0), RED)
        self.assertEqual(frame.get_attribute_at(self.data, "cat", 1), BLUE)

    def test_cell_lookup_falls_back_to_gray(self) -> None:
        frame = CompositeFrame(CategoricalColorFrame("missing"), CategoricalColorFrame("cat"))
        frame.init(self.data)
        self.assertEqual(frame.get_attribute_at(self.data, "cat", 2), GRAY)

    def test_size_composite_fallback_is_default_size(self) -> None:
        frame = CompositeFrame(LinearSizeFrame("missing", smallest=None))
        self.assertEqual(frame.fallback, 1.0)

    def test_value_lookup_uses_first_visible_child(self) -> None:
        static = StaticColorFrame(RED)
        categorical = CategoricalColorFrame("cat", [GREEN, BLUE])
        frame = CompositeFrame(static, categorical)
        frame.init(self.data)
        self.assertIs(frame.guide_frame(), categorical)
        self.assertEqual(frame.get_attribute("b"), BLUE)
        self.assertEqual(frame.get_values(), ["a", "b"])
        self.assertEqual(frame.get_title(), "cat")
        self.assertTrue(frame.is_visible())

    def test_hidden_composite_shows_no_legend(self) -> None:
        frame = CompositeFrame(CategoricalColorFrame("cat", [GREEN, BLUE]))
        frame.init(self.data)
        self.assertTrue(frame.is_visible())
        frame.legend_spec.visible = False
        self.assertFalse(frame.is_visible())
        self.assertEqual(build_legends([frame]), [])

    def test_without_guide_static_wins_over_categorical(self) -> None:
        unbound = CategoricalColorFrame(palette=[GREEN])
        frame = CompositeFrame(unbound, StaticColorFrame(RED))
        self.assertIsNone(frame.guide_frame())
        self.assertEqual(frame.get_attribute("anything"), RED)
        self.assertFalse(frame.is_visible())
        self.assertEqual(frame.get_values(), [])

    def test_without_guide_or_static_categorical_answers(self) -> None:
        unbound = CategoricalColorFrame(palette=[GREEN], assignments={"m": BLUE})
        frame = CompositeFrame(GradientColorFrame(), unbound)
        self.assertEqual(frame.get_attribute("m"), BLUE)

    def test_field_and_scale_changes_go_to_guide(self) -> None:
        first = CategoricalColorFrame("cat")
        second = CategoricalColorFrame("override")
        frame = CompositeFrame(first, second)
        frame.field = "other"
        self.assertEqual(first.field, "other")
        self.assertEqual(second.field, "override")
        self.assertEqual(frame.field, "other")

    def test_rejects_mixed_kinds(self) -> None:
        frame = CompositeFrame(StaticColorFrame(RED))
        with self.assertRaises(ConfigError):
            frame.add_frame(LinearSizeFrame("v"))
        with self.assertRaises(TypeError):
            frame.add_frame(object())  # type: ignore[arg-type]

    def test_copy_copies_children(self) -> None:
        categorical = CategoricalColorFrame("cat", [GREEN, BLUE])
        frame = CompositeFrame(categorical)
        frame.init(self.data)
        clone = frame.copy()
        clone.frames[0].set_attribute("a", RED)
        self.assertEqual(frame.get_attribute("a"), GREEN)
        self.assertEqual(clone.get_attribute("a"), RED)


if __name__ == "__main__":
    unittest.main()
