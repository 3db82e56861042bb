"""
Help index and help viewers.

- HelpEntry: snapshot of one command (name, (parameter, required) pairs, summary).
- HelpContext: the help index. Application name/version/description plus the
  entries sorted by command name. Built once, right before the repl loop starts.
- HelpViewer: abstract presentation strategy; swap it on the Repl to replace
  the whole help output.
- DefaultHelpViewer: rich-based rendering.

Default output
    > help
    MyApp v0.1.0: My very cool app
    ------------------------------
    add - Add two numbers together
    > help add
    add: Add two numbers together
    Usage:
        add first second
"""
from abc import ABC, abstractmethod
from typing import NamedTuple

from rich.console import Console
from rich.text import Text

from .utils import palette


class HelpEntry(NamedTuple):
    command: str
    parameters: tuple
    summary: str | None

    @classmethod
    def of(cls, command, /):
        return cls(
            command.name,
            tuple((parameter.name, parameter.required) for parameter in command.parameters),
            command.help_summary,
        )

    @property
    def usage(self):
        return self.command + "".join(
            f" {name}" if required else f" [{name}]" for name, required in self.parameters
        )


class HelpContext:
    """Read-only, name-sorted snapshot of the registered commands."""

    def __init__(self, name, version, description, entries, /):
        self._name = name
        self._version = version
        self._description = description
        self._entries = tuple(sorted(entries, key=lambda entry: entry.command))

    @classmethod
    def build(cls, name, version, description, commands, /):
        return cls(name, version, description, map(HelpEntry.of, commands))

    @property
    def name(self):
        return self._name

    @property
    def version(self):
        return self._version

    @property
    def description(self):
        return self._description

    @property
    def entries(self):
        return self._entries

    @property
    def header(self):
        return f"{self._name} {self._version}: {self._description}"

    def lookup(self, command, /):
        """Exact-name lookup; None when no entry matches."""
        for entry in self._entries:
            if entry.command == command:
                return entry
        return None


class HelpViewer(ABC):
    """
    Presentation strategy for the reserved 'help' command.

    help(None, context) renders general help; help(name, context) renders the
    help of one command. A missing command is a soft miss reported by the
    viewer itself, never an error for the repl's error handler.
    """

    @abstractmethod
    def help(self, command, context, /):
        raise NotImplementedError


class DefaultHelpViewer(HelpViewer):
    """
    Render help on rich consoles.

    Palette keys
    - header, header-rule, command-name, summary, usage-label, usage, miss
    """

    def __init__(self, console=None, errors=None, *, colorful=True):
        self.console = Console() if console is None else console
        self.errors = Console(stderr=True) if errors is None else errors
        self.colorful = colorful

    def _styles(self):
        return palette({
            "header": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "header-rule": "#4B5563",  # slate rule
            "command-name": "bold #36C5F0",  # SKY-BLUE commands
            "summary": "#9CA3AF",  # muted gray
            "usage-label": "bold #00E6FF",  # CYAN signature label
            "usage": "bold #FFD600",  # AMBER usage line
            "miss": "#EF4444",  # red notice
        })

    def help(self, command, context, /):
        styles = self._styles()

        def text(fragment, style):
            return Text(fragment, styles[style] if self.colorful else "")

        if command is None:
            header = context.header
            self.console.print(text(header, "header"), soft_wrap=True)
            self.console.print(text("-" * len(header), "header-rule"), soft_wrap=True)
            for entry in context.entries:
                line = text(entry.command, "command-name")
                if entry.summary:
                    line.append_text(text(f" - {entry.summary}", "summary"))
                self.console.print(line, soft_wrap=True)
            return

        entry = context.lookup(command)
        if entry is None:
            self.errors.print(text(f"No help for {command} found", "miss"), soft_wrap=True)
            return

        if entry.summary:
            self.console.print(
                Text.assemble(text(entry.command, "command-name"), text(f": {entry.summary}", "summary")),
                soft_wrap=True,
            )
        self.console.print(text("Usage:", "usage-label"), soft_wrap=True)
        self.console.print(Text.assemble("    ", text(entry.usage, "usage")), soft_wrap=True)


__all__ = (
    "HelpEntry",
    "HelpContext",
    "HelpViewer",
    "DefaultHelpViewer",
)
