"""Tests for terminal mode control sequences.

Verifies raw-mode lifecycle safety and the enter/leave sequences that
switch SGR mouse reporting on and off.
"""

from __future__ import annotations

import termios
import unittest
from unittest import mock

from swordtui.runtime.terminal import ENTER_TUI, LEAVE_TUI, TerminalController


def _controller() -> TerminalController:
    with mock.patch("swordtui.runtime.terminal.termios.tcgetattr", return_value=[0]):
        return TerminalController(stdin_fd=0, stdout_fd=1)


class TerminalBehaviorTests(unittest.TestCase):
    def test_enable_and_disable_tui_mode_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("swordtui.runtime.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "swordtui.runtime.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("swordtui.runtime.terminal.os.write") as write_mock, mock.patch(
            "swordtui.runtime.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            controller.disable_tui_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(write_mock.call_args_list[0].args, (1, ENTER_TUI))
        self.assertEqual(write_mock.call_args_list[1].args, (1, LEAVE_TUI))
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        controller = _controller()

        with mock.patch.object(controller, "enable_tui_mode") as enable_mock, mock.patch.object(
            controller, "disable_tui_mode"
        ) as disable_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        disable_mock.assert_called_once()


if __name__ == "__main__":
    unittest.main()
