from __future__ import annotations

import sys
from typing import Sequence, TextIO

from counterduel.counter.observer import Frame

CLEAR_LINE = "\r\x1b[K"
CURSOR_UP = "\x1b[A"


def format_frame(frame: Frame) -> str:
    return f"→ Objective {frame.target}: Miss = {frame.miss} | Counter = {frame.value}"


class ConsoleRenderer:
    """Redraws the live counter line in place."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def __call__(self, frame: Frame) -> None:
        self.stream.write(CLEAR_LINE + format_frame(frame))
        self.stream.flush()


class Console:
    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def renderer(self) -> ConsoleRenderer:
        return ConsoleRenderer(self.stdout)

    def write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def line(self, text: str = "") -> None:
        self.write(text + "\n")

    def read_line(self) -> str:
        line = self.stdin.readline()
        if not line:
            raise EOFError("Input closed")
        return line

    def wait_for_enter(self) -> None:
        self.read_line()

    def clear_previous_line(self) -> None:
        self.write(CURSOR_UP + CLEAR_LINE)

    def print_heading(self, text: str, level: int) -> None:
        if level == 1:
            self.line(f"##### {text} #####")
        elif level == 2:
            self.line(f"## {text} ##")
        elif level == 3:
            self.line(f"# {text} #")
        else:
            self.line(text)

    def get_user_choice(self, prompt: str, options: Sequence[str]) -> int:
        """Ask for a 1-based choice and return the 0-based index; invalid input picks the first option."""
        self.line(prompt)
        for idx, option in enumerate(options, start=1):
            self.line(f"→ {idx}: {option}")
        self.write(">")
        raw = self.read_line().strip()
        try:
            choice = int(raw)
        except ValueError:
            choice = 0
        if 1 <= choice <= len(options):
            return choice - 1
        self.line("Invalid choice. Selecting the first option by default.")
        return 0

    def confirm(self, prompt: str) -> bool:
        self.write(f"{prompt} [Y/N]\n>")
        try:
            answer = self.read_line()
        except EOFError:
            return False
        return answer.strip().lower() == "y"
