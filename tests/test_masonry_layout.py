import random
import unittest

from app.masonrygrid.layout.masonry import (
    FALLBACK_ITEM_HEIGHT,
    MasonryItem,
    column_heights,
    layout_masonry,
)


def _square(key):
    return MasonryItem(key, width=1, height=1)


class TestMasonryLayout(unittest.TestCase):
    def test_basic_positions_shortest_column(self):
        # 2 columns, fixed widths
        items = [_square("a"), _square("b"), _square("c")]
        layout = layout_masonry(
            container_width_px=220, columns=2, gutter_px=20, items=items
        )
        placements = layout.positions
        # usable=200 => col_w=100
        self.assertEqual(layout.column_width, 100)
        self.assertEqual([p.width for p in placements], [100, 100, 100])

        # First item in col0 at y=0
        self.assertEqual((placements[0].column, placements[0].x, placements[0].y), (0, 0, 0))
        # Second item in col1 at y=0
        self.assertEqual((placements[1].column, placements[1].x, placements[1].y), (1, 120, 0))
        # Third item goes back to col0 (tie resolved to lowest index)
        self.assertEqual((placements[2].column, placements[2].x, placements[2].y), (0, 0, 120))

        # Total height: max(column heights) minus gutter
        self.assertEqual(layout.container_height, 220)
        self.assertEqual(layout.current_columns, 2)

    def test_three_items_two_columns(self):
        items = [
            MasonryItem("1", width=200, height=300),
            MasonryItem("2", width=200, height=400),
            MasonryItem("3", width=200, height=250),
        ]
        layout = layout_masonry(
            container_width_px=440, columns=2, gutter_px=20, items=items
        )
        # (440 - 20) / 2
        self.assertEqual(layout.column_width, 210)
        p1, p2, p3 = layout.positions
        self.assertEqual((p1.x, p1.y, p1.height), (0, 0, 315))
        self.assertEqual((p2.x, p2.y, p2.height), (230, 0, 420))
        # col0 is 315+20=335, col1 is 420+20=440
        self.assertEqual((p3.column, p3.x, p3.y, p3.height), (0, 0, 335, 262.5))
        self.assertEqual(layout.container_height, 597.5)

    def test_fallback_height_when_dimensions_unknown(self):
        items = [
            MasonryItem("x"),
            MasonryItem("y", width=100),
            MasonryItem("z", width=0, height=50),
        ]
        layout = layout_masonry(
            container_width_px=300, columns=3, gutter_px=0, items=items
        )
        self.assertEqual([p.height for p in layout.positions], [FALLBACK_ITEM_HEIGHT] * 3)
        self.assertEqual(layout.container_height, 200)

    def test_empty_items(self):
        layout = layout_masonry(
            container_width_px=500, columns=4, gutter_px=10, items=[]
        )
        self.assertEqual(layout.positions, ())
        self.assertEqual(layout.container_height, 0)
        self.assertEqual(layout.current_columns, 4)

    def test_accepts_generator_and_keeps_order(self):
        layout = layout_masonry(
            container_width_px=900,
            columns=3,
            gutter_px=10,
            items=(MasonryItem(str(i), width=10, height=i + 1) for i in range(7)),
        )
        self.assertEqual([p.key for p in layout.positions], [str(i) for i in range(7)])

    def test_items_not_mutated(self):
        items = [MasonryItem("a", width=3, height=4, data={"title": "A"})]
        before = list(items)
        layout_masonry(container_width_px=100, columns=1, gutter_px=0, items=items)
        self.assertEqual(items, before)
        self.assertEqual(items[0].data, {"title": "A"})

    def test_invalid_inputs(self):
        with self.assertRaises(ValueError):
            layout_masonry(container_width_px=0, columns=3, gutter_px=10, items=[])
        with self.assertRaises(ValueError):
            layout_masonry(container_width_px=100, columns=0, gutter_px=10, items=[])
        with self.assertRaises(ValueError):
            layout_masonry(container_width_px=100, columns=-2, gutter_px=10, items=[])
        with self.assertRaises(ValueError):
            layout_masonry(container_width_px=100, columns=2.0, gutter_px=10, items=[])
        with self.assertRaises(ValueError):
            layout_masonry(container_width_px=10, columns=2, gutter_px=20, items=[])
        with self.assertRaises(ValueError):
            layout_masonry(container_width_px=100, columns=2, gutter_px=-1, items=[])

    def test_non_finite_inputs(self):
        for width, gap in [
            (float("inf"), 10),
            (float("nan"), 10),
            (100, float("inf")),
            (100, float("nan")),
        ]:
            with self.subTest(width=width, gap=gap):
                with self.assertRaises(ValueError):
                    layout_masonry(container_width_px=width, columns=2, gutter_px=gap, items=[])

    def test_single_column_minimum(self):
        layout = layout_masonry(
            container_width_px=100, columns=1, gutter_px=50, items=[_square("a"), _square("b")]
        )
        self.assertEqual(layout.column_width, 100)
        self.assertEqual([p.y for p in layout.positions], [0, 150])
        self.assertEqual(layout.container_height, 250)


class TestMasonryLayoutProperties(unittest.TestCase):
    def _random_items(self, rng, n):
        items = []
        for i in range(n):
            if rng.random() < 0.2:
                items.append(MasonryItem(str(i)))
            else:
                items.append(
                    MasonryItem(str(i), width=rng.uniform(50, 2000), height=rng.uniform(50, 2000))
                )
        return items

    def test_counts_and_non_negative_height(self):
        rng = random.Random(1234)
        for _ in range(200):
            n = rng.randint(0, 40)
            columns = rng.randint(1, 8)
            gap = rng.choice([0, 4, 16, 24.5])
            width = rng.uniform(columns * (gap + 1), 3000)
            items = self._random_items(rng, n)
            layout = layout_masonry(
                container_width_px=width, columns=columns, gutter_px=gap, items=items
            )
            self.assertEqual(len(layout.positions), n)
            self.assertGreaterEqual(layout.container_height, 0)
            for p in layout.positions:
                self.assertGreaterEqual(p.x, 0)
                self.assertGreaterEqual(p.y, 0)
                self.assertEqual(p.width, layout.column_width)

    def test_column_balance_bound(self):
        rng = random.Random(99)
        for _ in range(200):
            columns = rng.randint(1, 6)
            gap = rng.choice([0, 10])
            items = self._random_items(rng, rng.randint(1, 50))
            layout = layout_masonry(
                container_width_px=1200, columns=columns, gutter_px=gap, items=items
            )
            heights = column_heights(layout, gap)
            tallest = max(p.height for p in layout.positions)
            self.assertLessEqual(max(heights) - min(heights), tallest + gap + 1e-9)

    def test_deterministic(self):
        rng = random.Random(7)
        items = self._random_items(rng, 60)
        a = layout_masonry(container_width_px=1024, columns=4, gutter_px=12, items=items)
        b = layout_masonry(container_width_px=1024, columns=4, gutter_px=12, items=items)
        self.assertEqual(a, b)

    def test_aspect_ratio_preserved(self):
        rng = random.Random(5)
        items = [
            MasonryItem(str(i), width=rng.uniform(1, 5000), height=rng.uniform(1, 5000))
            for i in range(100)
        ]
        layout = layout_masonry(container_width_px=1337, columns=5, gutter_px=8, items=items)
        for item, p in zip(items, layout.positions):
            self.assertAlmostEqual(p.height / p.width, item.height / item.width, places=9)


if __name__ == "__main__":
    unittest.main()
