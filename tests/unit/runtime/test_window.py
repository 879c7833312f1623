"""Tests for window sizing."""

from __future__ import annotations

import unittest

from lazylauncher.runtime.window import TerminalWindow, WindowSize, window_size_for


class WindowSizeTests(unittest.TestCase):
    def test_width_depends_on_indirect_visibility(self) -> None:
        self.assertEqual(window_size_for(False, 3).width, 352)
        self.assertEqual(window_size_for(True, 3).width, 520)

    def test_height_clamps_row_count(self) -> None:
        self.assertEqual(window_size_for(False, 0).height, 240)
        self.assertEqual(window_size_for(False, 1).height, 240)
        self.assertEqual(window_size_for(False, 5).height, 496)
        self.assertEqual(window_size_for(False, 40).height, 496)

    def test_terminal_window_records_requests(self) -> None:
        window = TerminalWindow()
        self.assertFalse(window.hidden)

        window.resize(WindowSize(520, 304))
        window.hide()

        self.assertEqual(window.size, WindowSize(520, 304))
        self.assertTrue(window.hidden)


if __name__ == "__main__":
    unittest.main()
