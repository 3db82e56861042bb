"""
Replkit faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing error.
  Codes are grouped by domain so logs and searches stay predictable.
- ReplError: base type for every engine error. Each subclass is a structured,
  data-carrying variant (named fields, not a bare message) so callers can branch
  on content, and each knows how to render itself on a rich console.
- report(): render a fault on the error sink with runtime options merged in.

Taxonomy
- construction (101xx): IllegalRequiredError, IllegalDefaultError
- binding (102xx): MissingRequiredArgumentError, TooManyArgumentsError,
  ConversionError, ArgumentConversionError
- dispatch (103xx): UnknownCommandError, LineReadError
- application (104xx): CommandError (and anything subclassing ReplError)

Application errors
- Callbacks signal failures by raising ReplError subclasses. Richer application
  error types subclass ReplError (or CommandError) and are routed through the
  same error handler as the engine's own faults.

Rendering
- str(error) is the plain message ("Error: Unknown command 'xyz'").
- __rich__ renders "[ prog — code | title ]", the message and a hint.
- Styles can be overridden by a __styles__ mapping in __main__; codes can be
  relabeled by a __codes__ mapping in __main__.
"""
import copy
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import palette

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - construction (101xx): ILLEGAL_REQUIRED, ILLEGAL_DEFAULT
    - binding (102xx): MISSING_REQUIRED_ARGUMENT, TOO_MANY_ARGUMENTS,
      CONVERSION, ARGUMENT_CONVERSION
    - dispatch (103xx): UNKNOWN_COMMAND, LINE_READ
    - application (104xx): COMMAND_ERROR
    """
    # --- construction errors (101xx) ---
    ILLEGAL_REQUIRED          = 10101
    ILLEGAL_DEFAULT           = 10102

    # --- binding errors (102xx) ---
    MISSING_REQUIRED_ARGUMENT = 10201
    TOO_MANY_ARGUMENTS        = 10202
    CONVERSION                = 10203
    ARGUMENT_CONVERSION       = 10204

    # --- dispatch errors (103xx) ---
    UNKNOWN_COMMAND           = 10301
    LINE_READ                 = 10302

    # --- application errors (104xx) ---
    COMMAND_ERROR             = 10401

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ReplError(Exception):
    """
    Base class of every engine error.

    Subclasses declare
    - __fields__: names of the positional, data-carrying fields.
    - code / title / hint: rendering metadata.
    - template: str.format template over the fields producing the message.

    Runtime options (prog, colorful, ...) are kept apart from the fields in a
    read-only mapping and only influence rendering.
    """
    __fields__ = ()
    code = FaultCode.COMMAND_ERROR
    title = "command error"
    hint = None
    template = "Error"

    def __init__(self, *values, **options):
        fields = type(self).__fields__
        if len(values) != len(fields):
            raise TypeError(
                f"{type(self).__name__}() takes {len(fields)} positional arguments but {len(values)} were given"
            )
        super().__init__(*values)
        for field, value in zip(fields, values):
            setattr(self, field, value)
        self.options = MappingProxyType(options)

    @property
    def fields(self):
        """Read-only mapping of the error's data-carrying fields."""
        return MappingProxyType({field: getattr(self, field) for field in type(self).__fields__})

    def __str__(self):
        return self.template.format_map(self.fields)

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(map(repr, self.fields.values()))})"

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return dict(self.fields) == dict(other.fields)

    def __hash__(self):
        return hash((type(self), tuple(map(str, self.fields.values()))))

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        prog = self.options.get("prog") or getattr(main, "__prog__", "replkit")

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        renders = [header, text(self, "error-message")]
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint.format_map(self.fields), "hint")))
        return Group(*renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        # subclasses may keep extra state set by their own __init__
        replica = type(self).__new__(type(self), *self.args)
        replica.__dict__.update(self.__dict__)
        replica.options = MappingProxyType({**self.options, **overrides})
        replica.__cause__ = self.__cause__
        return replica


class IllegalRequiredError(ReplError):
    __fields__ = ("parameter",)
    code = FaultCode.ILLEGAL_REQUIRED
    title = "illegal required parameter"
    hint = "required parameters must come before optional ones and cannot carry a default"
    template = "Error: Parameter '{parameter}' cannot be required"


class IllegalDefaultError(ReplError):
    __fields__ = ("parameter",)
    code = FaultCode.ILLEGAL_DEFAULT
    title = "illegal default"
    hint = "only optional parameters can have a default"
    template = "Error: Parameter '{parameter}' cannot have a default"


class MissingRequiredArgumentError(ReplError):
    __fields__ = ("command", "parameter")
    code = FaultCode.MISSING_REQUIRED_ARGUMENT
    title = "missing argument"
    hint = "try 'help {command}' for usage"
    template = "Error: Missing required argument '{parameter}' for command '{command}'"


class TooManyArgumentsError(ReplError):
    __fields__ = ("command", "max_count")
    code = FaultCode.TOO_MANY_ARGUMENTS
    title = "too many arguments"
    hint = "try 'help {command}' for usage"
    template = "Error: Command '{command}' can have no more than {max_count} arguments"


class CommandError(ReplError):
    __fields__ = ("message",)
    code = FaultCode.COMMAND_ERROR
    title = "command error"
    template = "Error: {message}"


class ConversionError(CommandError):
    """Raised when a Value cannot be converted to the requested type."""
    __fields__ = ("text", "target")
    code = FaultCode.CONVERSION
    title = "conversion error"
    template = "Error: Cannot convert '{text}' to {target}"

    @property
    def message(self):
        return str(self).removeprefix("Error: ")


class ArgumentConversionError(CommandError):
    """Raised by the binder when a parameter's declared type rejects its token."""
    __fields__ = ("command", "parameter", "cause")
    code = FaultCode.ARGUMENT_CONVERSION
    title = "invalid argument"
    hint = "try 'help {command}' for usage"
    template = "Error: Invalid value for parameter '{parameter}' of command '{command}': {cause}"

    @property
    def message(self):
        return str(self).removeprefix("Error: ")


class UnknownCommandError(ReplError):
    __fields__ = ("command",)
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"
    hint = "try 'help' to list the available commands"
    template = "Error: Unknown command '{command}'"


class LineReadError(ReplError):
    __fields__ = ("cause",)
    code = FaultCode.LINE_READ
    title = "read error"
    template = "Error reading line: {cause}"


def report(fault, /, sink=None, **options):
    """
    render a fault on the error sink with the given runtime options.

    contract
    - fault must provide a __replace__ method (see ReplError).
    - options are merged into the fault via copy.replace(fault, **options).
    - sink defaults to the module-level stderr console.
    """
    if not hasattr(fault, "__replace__") or not callable(fault.__replace__):
        raise TypeError("report() argument must have a __replace__ method")
    (console if sink is None else sink).print(copy.replace(fault, **options))


__all__ = (
    "FaultCode",
    "ReplError",
    "IllegalRequiredError",
    "IllegalDefaultError",
    "MissingRequiredArgumentError",
    "TooManyArgumentsError",
    "CommandError",
    "ConversionError",
    "ArgumentConversionError",
    "UnknownCommandError",
    "LineReadError",
    "report",
)
