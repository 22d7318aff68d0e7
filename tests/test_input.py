"""Regression tests for raw-key decoding and key dispatch.

Covers ESC timing, arrow/paging sequences, SGR mouse tokens, and the
combo registry used by every screen handler.
"""

import os
import time
import unittest

from swordtui.input import keys as keys_mod
from swordtui.input import KeyComboBinding, KeyComboRegistry, parse_mouse_token


def _read_all(data: bytes, count: int) -> list[str]:
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, data)
        return [keys_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
    finally:
        os.close(read_fd)
        os.close(write_fd)


class ReadKeyRegressionTests(unittest.TestCase):
    def setUp(self) -> None:
        keys_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        keys_mod._PENDING_BYTES.clear()

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        key = _read_all(b"\x1b", 1)[0]
        elapsed = time.monotonic() - started

        self.assertEqual(key, "ESC")
        self.assertLess(elapsed, 0.2)

    def test_arrow_sequences(self) -> None:
        self.assertEqual(_read_all(b"\x1b[A\x1b[B\x1bOC\x1b[D", 4), ["UP", "DOWN", "RIGHT", "LEFT"])

    def test_paging_sequences(self) -> None:
        self.assertEqual(_read_all(b"\x1b[5~\x1b[6~\x1b[H\x1b[4~", 4), ["PAGE_UP", "PAGE_DOWN", "HOME", "END"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(_read_all(b"\x1ba", 2), ["ESC", "a"])

    def test_control_keys(self) -> None:
        self.assertEqual(_read_all(b"\x03\x04\x15\r\x7f", 5), ["CTRL_C", "CTRL_D", "CTRL_U", "ENTER", "BACKSPACE"])

    def test_utf8_character_is_one_key(self) -> None:
        self.assertEqual(_read_all("é".encode("utf-8"), 1), ["é"])

    def test_timeout_returns_empty_token(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            self.assertEqual(keys_mod.read_key(read_fd, timeout_ms=10), "")
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_sgr_mouse_events(self) -> None:
        keys = _read_all(b"\x1b[<0;12;5M\x1b[<0;12;5m\x1b[<64;3;4M\x1b[<65;3;4M", 4)
        self.assertEqual(
            keys,
            ["MOUSE_LEFT_DOWN:12:5", "MOUSE_LEFT_UP:12:5", "MOUSE_WHEEL_UP:3:4", "MOUSE_WHEEL_DOWN:3:4"],
        )


class MouseTokenTests(unittest.TestCase):
    def test_parse_mouse_token(self) -> None:
        self.assertEqual(parse_mouse_token("MOUSE_LEFT_DOWN:12:5"), ("MOUSE_LEFT_DOWN", 12, 5))

    def test_non_mouse_tokens(self) -> None:
        for key in ("q", "MOUSE", "MOUSE_LEFT_DOWN:x:1"):
            with self.subTest(key=key):
                self.assertIsNone(parse_mouse_token(key))


class KeyComboRegistryTests(unittest.TestCase):
    def test_dispatch_runs_matching_binding(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP", "k"), lambda: calls.append("up")),
            KeyComboBinding(("q",), lambda: calls.append("quit")),
        )
        self.assertTrue(registry.dispatch("k"))
        self.assertTrue(registry.dispatch("q"))
        self.assertFalse(registry.dispatch("x"))
        self.assertEqual(calls, ["up", "quit"])


if __name__ == "__main__":
    unittest.main()
