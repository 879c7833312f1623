"""Tests for raw terminal byte decoding."""

from __future__ import annotations

import os
import unittest

from lazylauncher.input import reader
from lazylauncher.input.keys import BACKSPACE, DOWN, ENTER, ESC, LEFT, RIGHT, TAB, UP, KeyEvent


class KeyReaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        reader._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)
        reader._PENDING_BYTES.clear()

    def feed(self, data: bytes) -> KeyEvent | None:
        os.write(self.write_fd, data)
        return reader.read_key(self.read_fd, timeout_ms=50)

    def test_timeout_returns_none(self) -> None:
        self.assertIsNone(reader.read_key(self.read_fd, timeout_ms=0))

    def test_plain_and_control_bytes(self) -> None:
        self.assertEqual(self.feed(b"a"), KeyEvent("a"))
        self.assertEqual(self.feed(b"\t"), KeyEvent(TAB))
        self.assertEqual(self.feed(b"\r"), KeyEvent(ENTER))
        self.assertEqual(self.feed(b"\x7f"), KeyEvent(BACKSPACE))
        self.assertEqual(self.feed(b"\x03"), KeyEvent("c", ctrl=True))

    def test_arrow_sequences(self) -> None:
        self.assertEqual(self.feed(b"\x1b[A"), KeyEvent(UP))
        self.assertEqual(self.feed(b"\x1b[B"), KeyEvent(DOWN))
        self.assertEqual(self.feed(b"\x1bOC"), KeyEvent(RIGHT))
        self.assertEqual(self.feed(b"\x1bOD"), KeyEvent(LEFT))

    def test_shift_tab_and_modified_arrows(self) -> None:
        self.assertEqual(self.feed(b"\x1b[Z"), KeyEvent(TAB, shift=True))
        self.assertEqual(self.feed(b"\x1b[1;5A"), KeyEvent(UP, ctrl=True))
        self.assertEqual(self.feed(b"\x1b[1;3D"), KeyEvent(LEFT, alt=True))

    def test_lone_escape_and_alt_letter(self) -> None:
        self.assertEqual(self.feed(b"\x1b"), KeyEvent(ESC))
        self.assertEqual(self.feed(b"\x1bx"), KeyEvent("x", alt=True))

    def test_utf8_character(self) -> None:
        self.assertEqual(self.feed("é".encode()), KeyEvent("é"))


if __name__ == "__main__":
    unittest.main()
