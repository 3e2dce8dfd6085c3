"""
Console I/O for the shell: the input source and the prompting protocol.

Every component that needs interactive input takes a Console, so the REPL,
paging sessions and parameter prompts all read from the same source, and tests
can swap in a ScriptedInput.
"""

import sys
from collections import deque

from errors import InputClosedError


class ConsoleInput:
    """Reads lines from the terminal."""

    def read(self, prompt: str) -> str:
        return input(prompt)


class ScriptedInput:
    """Replays a fixed list of lines, then behaves like a closed stdin."""

    def __init__(self, lines):
        self.lines = deque(lines)
        self.prompts = []  # Every prompt shown, in order

    def read(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.popleft()


class Console:
    """Input source plus output sinks (stdout for results, stderr for errors)."""

    def __init__(self, source=None, out=None, err=None):
        self.source = source or ConsoleInput()
        self._out = out
        self._err = err

    @property
    def out(self):
        # Resolved per call so redirected sys.stdout is honoured
        return self._out or sys.stdout

    @property
    def err(self):
        return self._err or sys.stderr

    def say(self, text: str = ""):
        print(text, file=self.out)

    def error(self, text: str):
        print(f"❌ {text}", file=self.err)

    def warn(self, text: str):
        print(f"⚠️ {text}", file=self.err)

    def ask(self, prompt: str) -> str:
        """Read one stripped line. Raises InputClosedError at end of input."""
        self.out.flush()
        try:
            return self.source.read(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            raise InputClosedError("Input closed.") from None

    # --- Parameter prompting protocol ---

    def ask_int(self, prompt: str, default=None, minimum=None, maximum=None) -> int:
        """Prompt until a whole number (or blank for the default) is entered."""
        suffix = f" (Default: {default}): " if default is not None else ": "
        while True:
            raw = self.ask(prompt + suffix)
            if not raw and default is not None:
                return default
            try:
                value = int(raw)
            except ValueError:
                self.error("Invalid input. Please enter a whole number.")
                continue
            if minimum is not None and value < minimum:
                self.error(f"Invalid input. Please enter a number of at least {minimum}.")
                continue
            if maximum is not None and value > maximum:
                self.error(f"Invalid input. Please enter a number no greater than {maximum}.")
                continue
            return value

    def ask_choice(self, prompt: str, choices) -> int:
        """Show a numbered menu and prompt until one of its keys is entered.

        `choices` is a sequence of (key, label) pairs with int keys.
        """
        keys = [str(key) for key, _ in choices]
        listing = "/".join(keys)
        or_list = ", ".join(keys[:-1]) + f" or {keys[-1]}" if len(keys) > 1 else keys[0]
        while True:
            for key, label in choices:
                self.say(f"> [{key}] {label}")
            raw = self.ask(f"{prompt} [{listing}]: ")
            if raw in keys:
                return int(raw)
            self.error(f"Invalid choice. Please enter {or_list}.")
