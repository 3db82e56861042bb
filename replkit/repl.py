"""
Replkit run loop: read a line, dispatch it, print the outcome, repeat.

States
    WAITING ──line──▶ PROCESSING ──done──▶ WAITING
       │                   │
       └──end of input──▶ TERMINATED ◀──error handler raised──┘

- WAITING: block on the line reader. End of input terminates cleanly; a
  transient read error is reported on the error console and the loop keeps
  waiting.
- PROCESSING: tokenize the line. Blank lines are ignored. The reserved 'help'
  command renders the help index; any other name is looked up, its arguments
  bound, and its callback invoked with the binding map and the context.
  A returned str/renderable is printed, None prints nothing, and a raised
  ReplError goes to the error handler.
- The error handler either returns (the loop continues) or raises, which
  unwinds run() and ends the session.

Configuration is builder-style: every with_*() call validates its argument
and returns the repl, so calls chain:

    repl = (
        Repl(Context())
        .with_name("MyApp")
        .with_version("v0.1.0")
        .with_description("My very cool app")
        .add_command(
            Command("hello", hello)
            .with_parameter(Parameter("who", required=True))
            .with_help("Greetings!")
        )
    )
    repl.run()

Callbacks run one at a time on the loop's thread and receive the context
object itself; nothing else holds it while a callback runs.
"""
import builtins
import importlib.metadata
import logging
from enum import Enum

from rich.console import Console
from rich.text import Text

from .commands import Command, command
from .binding import bind
from .faults import LineReadError, ReplError, UnknownCommandError, report
from .help import DefaultHelpViewer, HelpContext, HelpViewer
from .readers import ConsoleReader, LineReader
from .tokens import split
from .utils import Unset, coalesce, palette

logger = logging.getLogger(__name__)

HELP = "help"


def _distribution(name, /):
    """(name, version, summary) of an installed distribution, with placeholders when absent."""
    try:
        metadata = importlib.metadata.metadata(name)
    except importlib.metadata.PackageNotFoundError:
        return name, "0.0.0", ""
    return metadata["Name"], metadata["Version"], metadata.get("Summary") or ""


class State(Enum):
    WAITING = "waiting"
    PROCESSING = "processing"
    TERMINATED = "terminated"


def default_error_handler(error, repl, /):
    """Render the error on the repl's error console and keep looping."""
    report(error, repl.errors, prog=repl.name, colorful=repl.colorful)


class Repl:
    """
    The command dispatcher and its configuration.

    Parameters
    - context: application state handed to every callback (defaults to None).
    """

    def __init__(self, context=None, /):
        self._name, self._version, self._description = _distribution("replkit")
        self._prompt = Unset
        self._styled_prompt = Unset
        self._commands = {}
        self._context = context
        self._help_context = None
        self._help_viewer = Unset
        self._error_handler = default_error_handler
        self._completion = True
        self._reader = Unset
        self._console = Console()
        self._errors = Console(stderr=True)
        self._colorful = True
        self._state = State.WAITING

    # --- introspection ---

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
    def context(self):
        return self._context

    @property
    def commands(self):
        return dict(self._commands)

    @property
    def state(self):
        return self._state

    @property
    def console(self):
        return self._console

    @property
    def errors(self):
        return self._errors

    @property
    def colorful(self):
        return self._colorful

    @property
    def completion(self):
        return self._completion

    @property
    def help_context(self):
        """The help index (built on first use, then fixed for the session)."""
        if self._help_context is None:
            self._help_context = HelpContext.build(
                self._name, self._version, self._description, self._commands.values()
            )
        return self._help_context

    @property
    def help_viewer(self):
        return coalesce(self._help_viewer) or DefaultHelpViewer(
            self._console, self._errors, colorful=self._colorful
        )

    @property
    def reader(self):
        return coalesce(self._reader) or ConsoleReader(self._console)

    @property
    def prompt(self):
        """Plain prompt text (for non-interactive readers and width-sensitive contexts)."""
        if self._prompt is Unset:
            return f"{self._name}> "
        return str(self._prompt() if builtins.callable(self._prompt) else self._prompt)

    @property
    def styled_prompt(self):
        """Prompt shown by interactive readers."""
        if not self._colorful:
            return Text(self.prompt)
        if self._styled_prompt is not Unset:
            prompt = self._styled_prompt() if builtins.callable(self._styled_prompt) else self._styled_prompt
            return prompt if isinstance(prompt, Text) else Text.from_markup(str(prompt))
        if self._prompt is not Unset:
            return Text(self.prompt)
        return Text(self.prompt, palette({"prompt": "bold green"})["prompt"])

    # --- configuration ---

    def with_name(self, name, /):
        if not isinstance(name, str) or not name.strip():
            raise ValueError("repl 'name' must be a non-empty string")
        self._name = name.strip()
        return self

    def with_version(self, version, /):
        if not isinstance(version, str):
            raise TypeError("repl 'version' must be a string")
        self._version = version
        return self

    def with_description(self, description, /):
        if not isinstance(description, str):
            raise TypeError("repl 'description' must be a string")
        self._description = description
        return self

    def with_prompt(self, prompt, /):
        """Plain prompt: a string, any object with a str() form, or a zero-argument callable."""
        if prompt is None:
            raise TypeError("repl 'prompt' cannot be None")
        self._prompt = prompt
        return self

    def with_styled_prompt(self, prompt, /):
        """Interactive prompt: rich markup, a rich Text, or a zero-argument callable returning one."""
        if prompt is None:
            raise TypeError("repl 'styled prompt' cannot be None")
        self._styled_prompt = prompt
        return self

    def with_help_viewer(self, viewer, /):
        if not isinstance(viewer, HelpViewer):
            raise TypeError("repl 'help viewer' must be a HelpViewer")
        self._help_viewer = viewer
        return self

    def with_error_handler(self, handler, /):
        """handler(error, repl): return to keep looping, raise to end the session."""
        if not builtins.callable(handler):
            raise TypeError("repl 'error handler' must be callable")
        self._error_handler = handler
        return self

    def with_completion(self, enabled=True, /):
        if not isinstance(enabled, bool):
            raise TypeError("repl 'completion' must be a boolean")
        self._completion = enabled
        return self

    def with_reader(self, reader, /):
        if not isinstance(reader, LineReader):
            raise TypeError("repl 'reader' must be a LineReader")
        self._reader = reader
        return self

    def with_console(self, console=Unset, errors=Unset, /):
        """Replace the output console and/or the error console."""
        for candidate in (console, errors):
            if candidate is not Unset and not isinstance(candidate, Console):
                raise TypeError("repl consoles must be rich consoles")
        self._console = coalesce(console, self._console)
        self._errors = coalesce(errors, self._errors)
        return self

    def with_colorful(self, colorful=True, /):
        if not isinstance(colorful, bool):
            raise TypeError("repl 'colorful' must be a boolean")
        self._colorful = colorful
        return self

    def add_command(self, command, /):
        """Register a command; a later command with the same name replaces the earlier one."""
        if not isinstance(command, Command):
            raise TypeError("add_command() argument must be a command")
        if command.name == HELP:
            logger.warning("command %r is shadowed by the built-in help", command.name)
        if command.name in self._commands:
            logger.debug("replacing command %r", command.name)
        self._commands[command.name] = command
        return self

    def command(self, source=Unset, /, *parameters, help=Unset):
        """Decorator form of add_command(); accepts the same arguments as replkit.command()."""
        if builtins.callable(source) and not isinstance(source, str):
            result = command(source, *parameters, help=help)
            self.add_command(result)
            return result

        def wrapper(callback, /):
            result = command(source, *parameters, help=help)(callback)
            self.add_command(result)
            return result

        return wrapper

    # --- dispatch ---

    def _show_help(self, args):
        self.help_viewer.help(args[0] if args else None, self.help_context)

    def _handle_command(self, name, args):
        if name == HELP:
            logger.debug("rendering help for %r", args[0] if args else None)
            return self._show_help(args)

        if (definition := self._commands.get(name)) is None:
            raise UnknownCommandError(name)

        arguments = bind(definition, args)
        logger.debug("dispatching %r with %r", name, arguments)
        result = definition(arguments, self._context)
        if result is None:
            return
        if isinstance(result, str):
            self._console.print(result, markup=False, emoji=False, highlight=False, soft_wrap=True)
        else:
            self._console.print(result)

    def process_line(self, line, /):
        """
        Dispatch one input line.

        Dispatch errors (unknown command, argument errors, callback errors)
        are raised as ReplError; run() routes them to the error handler.
        """
        name, args = split(line)
        if name is None:
            return
        self._handle_command(name, args)

    def run(self):
        """
        Run the loop until end of input.

        Returns normally on end of input. Anything raised by the error handler
        propagates and ends the session.
        """
        self._help_context = HelpContext.build(
            self._name, self._version, self._description, self._commands.values()
        )
        reader = self.reader
        reader.set_completer(sorted(self._commands) if self._completion else None)

        self._console.print(
            f"Welcome to {self._name} {self._version}", markup=False, emoji=False, highlight=False, soft_wrap=True
        )
        self._state = State.WAITING
        try:
            while True:
                try:
                    line = reader.readline(self.styled_prompt if reader.interactive else self.prompt)
                except EOFError:
                    break
                except LineReadError as error:
                    report(error, self._errors, prog=self._name, colorful=self._colorful)
                    continue

                if line.strip():
                    reader.add_history(line)

                self._state = State.PROCESSING
                try:
                    self.process_line(line)
                except ReplError as error:
                    self._error_handler(error, self)
                self._state = State.WAITING
        finally:
            self._state = State.TERMINATED
        logger.debug("session ended")


__all__ = (
    "State",
    "Repl",
    "default_error_handler",
)
