from __future__ import annotations

import unittest

from vizframe.data import TableDataSet
from vizframe.errors import ConfigError
from vizframe.frames.categorical import CategoricalColorFrame
from vizframe.frames.composite import CompositeFrame
from vizframe.frames.continuous import GradientColorFrame, LinearSizeFrame
from vizframe.frames.stacked import StackedMeasuresFrame
from vizframe.frames.static import StaticColorFrame
from vizframe.frames.text import TextFrame
from vizframe.legend import build_legends
from vizframe.scales import LinearScale


RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


class StackedDispatchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.data = TableDataSet(
            {
                "sales": [10, 20],
                "profit": [1, 2],
                "cost": [5, 6],
                "region": ["east", "west"],
            }
        )

    def test_registered_measure_never_uses_default(self) -> None:
        silent = CategoricalColorFrame("missing")
        frame = StackedMeasuresFrame(StaticColorFrame(BLUE), {"sales": StaticColorFrame(RED), "profit": silent})
        frame.init(self.data)
        self.assertEqual(frame.get_attribute_at(self.data, "sales", 0), RED)
        self.assertIsNone(frame.get_attribute_at(self.data, "profit", 0))
        self.assertEqual(frame.get_attribute_at(self.data, "cost", 1), BLUE)

    def test_measure_column_is_the_lookup_key(self) -> None:
        by_value = GradientColorFrame(waypoints=[(0, 0, 0), (255, 0, 0)])
        by_value.scale = LinearScale("sales", min=0, max=20)
        frame = StackedMeasuresFrame(frames={"sales": by_value})
        self.assertEqual(frame.get_attribute_at(self.data, "sales", 0), (128, 0, 0, 255))
        self.assertIsNone(frame.get_attribute_at(self.data, "cost", 0))

    def test_value_lookup_tries_measures_then_default(self) -> None:
        first = CategoricalColorFrame(palette=[GREEN], assignments={"east": RED})
        second = CategoricalColorFrame(palette=[GREEN], assignments={"west": GREEN})
        frame = StackedMeasuresFrame(StaticColorFrame(BLUE), {"sales": first, "profit": second})
        self.assertEqual(frame.get_attribute("east"), RED)
        self.assertEqual(frame.get_attribute("west"), GREEN)
        self.assertEqual(frame.get_attribute("north"), BLUE)
        self.assertIsNone(StackedMeasuresFrame().get_attribute("north"))

    def test_same_field_categorical_measures_merge(self) -> None:
        frame = StackedMeasuresFrame(
            frames={
                "sales": CategoricalColorFrame("region", [RED, GREEN]),
                "profit": CompositeFrame(CategoricalColorFrame("region", [BLUE])),
            }
        )
        frame.init(self.data)
        policy = frame.legend_policy()
        self.assertTrue(policy.merged)
        self.assertEqual(policy.frames, (frame,))
        self.assertEqual(frame.field, "region")
        self.assertEqual(frame.get_values(), ["east", "west"])
        self.assertTrue(frame.is_visible())

    def test_merged_legend_keeps_first_measure_labels(self) -> None:
        a = CategoricalColorFrame("region", [RED, GREEN])
        a.text_frame = TextFrame(labels={"east": "East"})
        a.legend_spec.title = "Region"
        b = CategoricalColorFrame("region", [BLUE])
        frame = StackedMeasuresFrame(frames={"sales": a, "profit": b})
        frame.init(self.data)
        self.assertEqual(frame.get_title(), "Region")
        self.assertEqual(frame.get_labels(), ["East", "west"])
        (legend,) = build_legends([frame])
        self.assertEqual(legend.title, "Region")
        self.assertEqual([item.label for item in legend.items], ["East", "west"])

    def test_mixed_measures_keep_individual_legends(self) -> None:
        sales = CategoricalColorFrame("region")
        profit = GradientColorFrame("profit")
        frame = StackedMeasuresFrame(frames={"sales": sales, "profit": profit})
        frame.init(self.data)
        policy = frame.legend_policy()
        self.assertFalse(policy.merged)
        self.assertEqual(policy.frames, (sales, profit))

    def test_different_fields_keep_individual_legends(self) -> None:
        a = CategoricalColorFrame("region")
        b = CategoricalColorFrame("sales")
        frame = StackedMeasuresFrame(frames={"sales": a, "profit": b})
        self.assertFalse(frame.legend_policy().merged)

    def test_continuous_default_shows_band(self) -> None:
        default = GradientColorFrame("sales")
        frame = StackedMeasuresFrame(default)
        frame.init(self.data)
        policy = frame.legend_policy()
        self.assertTrue(policy.band)
        self.assertEqual(policy.frames, (default,))
        self.assertEqual(frame.get_values(), default.get_values())

    def test_rejects_mixed_kinds(self) -> None:
        frame = StackedMeasuresFrame(StaticColorFrame(RED))
        with self.assertRaises(ConfigError):
            frame.set_frame("sales", LinearSizeFrame("sales"))

    def test_copy_is_independent(self) -> None:
        sub = CategoricalColorFrame("region", [RED, GREEN])
        frame = StackedMeasuresFrame(frames={"sales": sub})
        frame.init(self.data)
        clone = frame.copy()
        clone.get_frame("sales").set_attribute("east", BLUE)
        self.assertEqual(sub.get_attribute("east"), RED)
        self.assertEqual(clone.get_frame("sales").get_attribute("east"), BLUE)


if __name__ == "__main__":
    unittest.main()
