"""
Line readers: the collaborators a Repl pulls input lines from.

Contract
- readline(prompt) returns one line of text (without the trailing newline),
  raises EOFError at end of input, or raises LineReadError on a transient
  failure the repl should report and survive.
- add_history(line) appends an accepted line to the in-memory history.
- set_completer(names) offers completion over the given command names
  (None disables it). A candidate matches when it *contains* the partial
  input, not only when it starts with it.

Readers
- ConsoleReader: interactive terminal input through rich's Console.input,
  with GNU readline history and tab completion where the platform has it.
- ScriptedReader: lines from any iterable (scripts, pipes, tests).
"""
import logging
from abc import ABC, abstractmethod

from rich.console import Console

from .faults import LineReadError

try:
    import readline
except ImportError:  # not available on every platform
    readline = None

logger = logging.getLogger(__name__)


def completions(names, text, /):
    """Sorted names that contain text as a substring."""
    return sorted(name for name in names if text in name)


class LineReader(ABC):
    # interactive readers get the styled prompt, others the plain one
    interactive = False

    def __init__(self):
        self._history = []
        self._names = None

    @property
    def history(self):
        return tuple(self._history)

    @abstractmethod
    def readline(self, prompt, /):
        raise NotImplementedError

    def add_history(self, line, /):
        self._history.append(line)

    def set_completer(self, names, /):
        self._names = None if names is None else tuple(names)

    def complete(self, text, /):
        """Completion candidates for the partial input text."""
        if self._names is None:
            return []
        return completions(self._names, text)


class ConsoleReader(LineReader):
    """Terminal reader built on rich's Console.input and stdlib readline."""
    interactive = True

    def __init__(self, console=None):
        super().__init__()
        self.console = Console() if console is None else console
        self._matches = []

    def readline(self, prompt, /):
        try:
            return self.console.input(prompt)
        except KeyboardInterrupt:
            # leave the cursor on a fresh line after ^C
            self.console.print()
            raise LineReadError("Interrupted") from None
        except OSError as error:
            raise LineReadError(error) from error

    def add_history(self, line, /):
        super().add_history(line)
        if readline is not None:
            readline.add_history(line)

    def set_completer(self, names, /):
        super().set_completer(names)
        if readline is None:
            return
        if names is None:
            readline.set_completer(None)
            return
        try:
            readline.set_completer(self._complete)
            readline.parse_and_bind("tab: complete")
        except Exception as error:
            logger.warning("failed to setup readline completion: %s", error)

    def _complete(self, text, state):
        """readline completer hook (called with state 0, 1, ... until None)."""
        if state == 0:
            self._matches = self.complete(text)
        try:
            return self._matches[state]
        except IndexError:
            return None


class ScriptedReader(LineReader):
    """
    Reader over an iterable of lines.

    Items that are exception instances are raised as LineReadError when
    reached, which makes transient failures scriptable.
    """

    def __init__(self, lines, /):
        super().__init__()
        self._lines = iter(lines)
        self.prompts = []

    def readline(self, prompt, /):
        self.prompts.append(str(prompt))
        try:
            line = next(self._lines)
        except StopIteration:
            raise EOFError from None
        if isinstance(line, BaseException):
            raise LineReadError(line) from line
        return line.removesuffix("\n")


__all__ = (
    "completions",
    "LineReader",
    "ConsoleReader",
    "ScriptedReader",
)
