import unittest

from sockwatch.stateful_list import StatefulList


class TestStatefulList(unittest.TestCase):
    def test_with_items_starts_unselected(self):
        for items in (["a"], ["a", "b", "c"], list(range(50))):
            lst = StatefulList.with_items(items)
            self.assertIsNone(lst.selected)
            self.assertEqual(lst.items, items)

    def test_next_selects_first_then_wraps(self):
        lst = StatefulList.with_items(["a", "b", "c"])
        lst.next()
        self.assertEqual(lst.selected, 0)
        lst.next()
        lst.next()
        self.assertEqual(lst.selected, 2)
        lst.next()
        self.assertEqual(lst.selected, 0)

    def test_n_nexts_from_unselected_return_to_zero(self):
        for n in range(1, 8):
            lst = StatefulList.with_items(list(range(n)))
            lst.next()
            for _ in range(n):
                lst.next()
            self.assertEqual(lst.selected, 0, f"n={n}")

    def test_previous_from_unselected_selects_first(self):
        lst = StatefulList.with_items(["a", "b"])
        lst.previous()
        self.assertEqual(lst.selected, 0)

    def test_previous_from_zero_wraps_to_last(self):
        lst = StatefulList.with_items(["a", "b", "c", "d"])
        lst.next()
        lst.previous()
        self.assertEqual(lst.selected, 3)
        lst.previous()
        self.assertEqual(lst.selected, 2)

    def test_navigation_on_empty_list_stays_unselected(self):
        lst = StatefulList.with_items([])
        lst.next()
        self.assertIsNone(lst.selected)
        lst.previous()
        self.assertIsNone(lst.selected)
        self.assertIsNone(lst.selected_item())

    def test_replace_keeps_valid_index(self):
        lst = StatefulList.with_items(["a", "b", "c"])
        lst.next()
        lst.next()
        lst.replace_items(["x", "y", "z", "w"])
        self.assertEqual(lst.selected, 1)
        self.assertEqual(lst.selected_item(), "y")

    def test_replace_clamps_out_of_range_index(self):
        lst = StatefulList.with_items(["A", "B", "C"])
        lst.previous()
        lst.previous()  # wraps to 2
        self.assertEqual(lst.selected, 2)
        lst.replace_items(["X", "Y"])
        self.assertEqual(lst.selected, 1)
        self.assertEqual(lst.selected_item(), "Y")

    def test_replace_with_empty_resets(self):
        lst = StatefulList.with_items(["a", "b"])
        lst.next()
        lst.replace_items([])
        self.assertIsNone(lst.selected)
        self.assertEqual(len(lst), 0)

    def test_replace_keeps_unselected(self):
        lst = StatefulList.with_items(["a"])
        lst.replace_items(["x", "y"])
        self.assertIsNone(lst.selected)

    def test_replace_copies_sequence(self):
        src = ["a", "b"]
        lst = StatefulList.with_items(src)
        src.append("c")
        self.assertEqual(len(lst), 2)


if __name__ == "__main__":
    unittest.main()
