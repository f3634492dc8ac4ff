from __future__ import annotations

import threading
import unittest

from vizframe.attributes import CROSS, FILLED_CIRCLE, SHAPES
from vizframe.data import TableDataSet
from vizframe.errors import ConfigError
from vizframe.frames.categorical import (
    CategoricalColorFrame,
    CategoricalShapeFrame,
    CategoricalSizeFrame,
)
from vizframe.scales import CategoricalScale
from vizframe.style import MappingStyleResolver


RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


def _frame(values: list[object], palette: list[object]) -> CategoricalColorFrame:
    frame = CategoricalColorFrame("k", palette)
    frame.init(TableDataSet({"k": values}))
    return frame


class CategoricalAssignmentTests(unittest.TestCase):
    def test_values_cycle_through_palette(self) -> None:
        frame = _frame(["A", "B", "C", "D"], [RED, GREEN, BLUE])
        got = [frame.get_attribute(v) for v in "ABCD"]
        self.assertEqual(got, [RED, GREEN, BLUE, RED])

    def test_explicit_color_is_never_reused(self) -> None:
        frame = _frame(["A", "B", "C", "D"], [RED, GREEN, BLUE])
        frame.set_color("C", GREEN)
        self.assertEqual(frame.get_attribute("A"), RED)
        self.assertEqual(frame.get_attribute("B"), BLUE)
        self.assertEqual(frame.get_attribute("C"), GREEN)
        self.assertEqual(frame.get_attribute("D"), RED)

    def test_explicit_assignments_win_for_any_palette_size_and_order(self) -> None:
        for size in range(1, 6):
            palette = [(i * 40, 10, 10) for i in range(size)]
            frame = _frame(list("ABCDEFG"), palette)
            frame.get_attribute("G")
            frame.set_color("E", "#123456")
            frame.set_color(5, "#654321")
            for value in reversed("ABCDEFG"):
                frame.get_attribute(value)
            self.assertEqual(frame.get_attribute("E"), (0x12, 0x34, 0x56, 255))
            self.assertEqual(frame.get_attribute("5"), (0x65, 0x43, 0x21, 255))
            self.assertEqual(frame.get_attribute(5.0), (0x65, 0x43, 0x21, 255))

    def test_unassigned_values_never_take_a_claimed_color(self) -> None:
        values = [f"v{i}" for i in range(10)]
        for size in range(1, 7):
            palette = [(i * 30, 0, 0, 255) for i in range(size)]
            for pinned in range(size):
                frame = _frame(values, palette)
                for i in range(pinned):
                    frame.set_color(values[i], palette[size - 1 - i])
                claimed = set(frame.assignments().values())
                for v in values[pinned:]:
                    self.assertNotIn(frame.get_attribute(v), claimed, (size, pinned, v))

    def test_value_outside_scale_returns_default(self) -> None:
        frame = _frame(["A"], [RED])
        self.assertIsNone(frame.get_attribute("Z"))
        frame = CategoricalColorFrame("k", [RED], default=BLUE)
        frame.init(TableDataSet({"k": ["A"]}))
        self.assertEqual(frame.get_attribute("Z"), BLUE)
        self.assertEqual(frame.get_attribute(None), BLUE)

    def test_formatted_key_matches_explicit_assignment(self) -> None:
        frame = _frame([1.0, 2.0], [RED, GREEN])
        frame.legend_spec.text_format = "{:.0f}%"
        frame.set_color("2%", BLUE)
        self.assertEqual(frame.get_attribute(2.0), BLUE)
        self.assertEqual(frame.get_attribute(1.0), RED)

    def test_negative_values_use_independent_palette(self) -> None:
        frame = CategoricalColorFrame("k", [RED, GREEN], negative_palette=[BLUE, "#111111"])
        frame.init(TableDataSet({"k": [-2, 1, -1, 2]}))
        self.assertEqual(frame.get_attribute(-2), BLUE)
        self.assertEqual(frame.get_attribute(-1), (17, 17, 17, 255))
        self.assertEqual(frame.get_attribute(1), RED)
        self.assertEqual(frame.get_attribute(2), GREEN)

    def test_numeric_string_query_follows_stored_negative_value(self) -> None:
        frame = CategoricalColorFrame("k", [RED, GREEN], negative_palette=[BLUE], assignments={2: RED})
        frame.init(TableDataSet({"k": [-1, 1, 2]}))
        self.assertEqual(frame.get_attribute(-1), BLUE)
        self.assertEqual(frame.get_attribute("-1"), BLUE)
        self.assertEqual(frame.get_attribute("1"), GREEN)

    def test_change_during_cache_build_is_not_kept(self) -> None:
        frame = _frame(["A", "B"], [RED, GREEN])
        calls: list[int] = []

        class SwitchingResolver:
            def resolve(self, kind: str, index: int) -> None:
                if not calls:
                    frame.set_palette([BLUE, GREEN])
                calls.append(index)
                return None

        frame.style_resolver = SwitchingResolver()
        self.assertEqual(frame.get_attribute("A"), BLUE)
        self.assertEqual(frame.palette, (BLUE, GREEN))
        self.assertEqual(frame.get_attribute("A"), BLUE)
        self.assertIs(frame.unused_palette(), frame.unused_palette())

    def test_mutation_invalidates_unused_cache(self) -> None:
        frame = _frame(["A", "B"], [RED, GREEN])
        first = frame.unused_palette()
        self.assertIs(frame.unused_palette(), first)
        frame.set_palette([BLUE, GREEN])
        self.assertIsNot(frame.unused_palette(), first)
        self.assertEqual(frame.get_attribute("A"), BLUE)
        second = frame.unused_palette()
        frame.set_color("B", RED)
        self.assertIsNot(frame.unused_palette(), second)
        frame.remove_attribute("B")
        self.assertEqual(frame.get_attribute("B"), GREEN)

    def test_style_resolver_overrides_palette_slot(self) -> None:
        frame = _frame(["A", "B"], [RED, GREEN])
        self.assertEqual(frame.get_attribute("A"), RED)
        frame.style_resolver = MappingStyleResolver({"color": {0: "#0000FF"}})
        self.assertEqual(frame.get_attribute("A"), BLUE)
        self.assertEqual(frame.get_attribute("B"), GREEN)

    def test_invalid_style_override_is_ignored(self) -> None:
        frame = _frame(["A"], [RED])
        with self.assertLogs("vizframe.frames.categorical", level="WARNING"):
            frame.style_resolver = MappingStyleResolver({"color": {0: "not-a-color"}})
            self.assertEqual(frame.get_attribute("A"), RED)

    def test_copy_does_not_share_assignments(self) -> None:
        frame = _frame(["A", "B"], [RED, GREEN])
        clone = frame.copy()
        clone.set_color("A", BLUE)
        clone.set_palette_entry(1, BLUE)
        self.assertEqual(frame.get_attribute("A"), RED)
        self.assertEqual(frame.get_attribute("B"), GREEN)
        self.assertEqual(clone.get_attribute("A"), BLUE)
        self.assertIsNot(clone.scale, frame.scale)

    def test_init_twice_is_idempotent(self) -> None:
        data = TableDataSet({"k": ["A", "B", "A"]})
        frame = CategoricalColorFrame("k", [RED, GREEN, BLUE])
        frame.init(data)
        scale = frame.scale
        before = [frame.get_attribute(v) for v in "AB"]
        frame.init(data)
        self.assertIs(frame.scale, scale)
        self.assertEqual(frame.scale.values(), ["A", "B"])
        self.assertEqual([frame.get_attribute(v) for v in "AB"], before)

    def test_sort_key_orders_values(self) -> None:
        frame = CategoricalColorFrame("k", [RED, GREEN, BLUE])
        frame.sort_key = str
        frame.init(TableDataSet({"k": ["c", "a", "b"]}))
        self.assertEqual(frame.get_values(), ["a", "b", "c"])
        self.assertEqual(frame.get_attribute("a"), RED)

    def test_concurrent_reads_see_complete_cache(self) -> None:
        values = [f"v{i}" for i in range(200)]
        frame = _frame(values, [(i, i, i) for i in range(7)])
        frame.set_color("v3", (3, 3, 3))
        expected = {v: frame.get_attribute(v) for v in values}
        errors: list[str] = []

        def worker() -> None:
            for _ in range(20):
                frame.set_palette_entry(0, (0, 0, 0))
                for v in values:
                    if frame.get_attribute(v) != expected[v]:
                        errors.append(v)

        threads = [threading.Thread(target=worker) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(errors, [])

    def test_explicit_scale_without_dataset(self) -> None:
        frame = CategoricalColorFrame(palette=[RED, GREEN])
        frame.scale = CategoricalScale(values=["x", "y", "z"])
        self.assertEqual(frame.get_attribute("z"), RED)


class CategoricalKindsTests(unittest.TestCase):
    def test_shape_frame_uses_default_shapes(self) -> None:
        frame = CategoricalShapeFrame("k")
        frame.init(TableDataSet({"k": ["a", "b"]}))
        self.assertEqual(frame.get_attribute("a"), SHAPES[0])
        self.assertEqual(frame.get_attribute("b"), SHAPES[1])
        frame.set_attribute("b", CROSS)
        self.assertEqual(frame.get_attribute("b"), CROSS)

    def test_shape_frame_rejects_non_shapes(self) -> None:
        frame = CategoricalShapeFrame("k")
        with self.assertRaises(ConfigError):
            frame.set_attribute("a", "circle")

    def test_size_frame_spaces_sizes_evenly(self) -> None:
        frame = CategoricalSizeFrame("k", smallest=2.0, largest=10.0)
        frame.init(TableDataSet({"k": ["a", "b", "c"]}))
        self.assertEqual([frame.get_attribute(v) for v in "abc"], [2.0, 6.0, 10.0])
        self.assertEqual(frame.get_attribute("zzz"), 2.0)

    def test_size_frame_skips_pinned_size(self) -> None:
        frame = CategoricalSizeFrame("k", [1.0, 5.0, 9.0])
        frame.init(TableDataSet({"k": ["a", "b", "c"]}))
        frame.set_attribute("c", 1.0)
        self.assertEqual(frame.get_attribute("a"), 5.0)
        self.assertEqual(frame.get_attribute("b"), 9.0)

    def test_default_palette_is_not_aliased(self) -> None:
        frame = CategoricalShapeFrame("k")
        frame.set_palette_entry(0, FILLED_CIRCLE)
        self.assertEqual(CategoricalShapeFrame.default_palette, SHAPES)


if __name__ == "__main__":
    unittest.main()
