"""
Replkit command layer: declare commands and their parameter contracts.

What this module provides
- Command: a name, an ordered list of Parameter contracts, a callback and an
  optional help summary.
- command(...): decorator factory that wraps a callback into a Command.

Parameter ordering
- Once an optional parameter has been appended, no required parameter may
  follow it. with_parameter() checks this against every parameter added so far
  and rejects the offending one with IllegalRequiredError; a rejected append
  leaves the command unchanged.
- Parameter names are unique within a command.
- Appended parameters are copied, so later changes to the original Parameter
  object cannot break the ordering rule after the fact.

Callback contract
- callback(args, context) where args maps parameter names to Value objects
  (or converted objects for typed parameters) and context is the repl's
  application state.
- Returning None prints nothing; returning a str or any rich renderable prints
  it on the output console; raising a ReplError subclass routes the error to
  the repl's error handler.

Quick start
    from replkit import command, Parameter

    @command("add", Parameter("first", required=True), Parameter("second", required=True))
    def add(args, context):
        "Add two numbers together"
        return str(args["first"].to_int() + args["second"].to_int())
"""
import builtins
import copy
import inspect

from .faults import IllegalRequiredError
from .parameters import Parameter
from .utils import Unset, coalesce, rename


def _sanitize_name(name, /):
    if not isinstance(name, str):
        raise TypeError("command 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError("command 'name' cannot be empty")
    elif any(char.isspace() for char in name):
        raise ValueError("command 'name' cannot contain whitespace")
    return name


def _sanitize_help(help, /):
    if not isinstance(help, str):
        raise TypeError("command 'help' must be a string")
    elif not (help := help.strip()):
        raise ValueError("command 'help' cannot be empty")
    return help


class Command:
    """
    A named command bound to a callback.

    Lifecycle
    - Built with a name and a callback, then extended with with_parameter()
      and with_help(); both validate immediately and return the command so the
      calls can be chained.
    - Once registered on a Repl it is treated as immutable; replacing it means
      registering a new Command under the same name.
    """
    __displayable__ = ("name", "parameters", "help_summary")

    def __init__(self, name, callback, /, *, help=Unset):
        if not builtins.callable(callback):
            raise TypeError("command 'callback' must be callable")
        self._name = _sanitize_name(name)
        self._callback = callback
        self._parameters = []
        self._help_summary = Unset if help is Unset else _sanitize_help(help)

    @property
    def name(self):
        return self._name

    @property
    def callback(self):
        return self._callback

    @property
    def parameters(self):
        return tuple(self._parameters)

    @property
    def help_summary(self):
        return coalesce(self._help_summary)

    @property
    def usage(self):
        """Usage line: the name, then ' name' per required and ' [name]' per optional parameter."""
        return self._name + "".join(
            f" {parameter.name}" if parameter.required else f" [{parameter.name}]"
            for parameter in self._parameters
        )

    def with_parameter(self, parameter, /):
        """
        Append a parameter contract.

        Raises
        - TypeError: parameter is not a Parameter.
        - IllegalRequiredError: parameter is required but an optional one was already added.
        - ValueError: a parameter with the same name was already added.
        """
        if not isinstance(parameter, Parameter):
            raise TypeError("with_parameter() argument must be a parameter")
        if parameter.required and any(not added.required for added in self._parameters):
            raise IllegalRequiredError(parameter.name)
        if any(added.name == parameter.name for added in self._parameters):
            raise ValueError(f"command {self._name!r} already has a parameter named {parameter.name!r}")
        self._parameters.append(copy.copy(parameter))
        return self

    def with_help(self, help, /):
        self._help_summary = _sanitize_help(help)
        return self

    def __call__(self, args, context, /):
        return self._callback(args, context)

    def __eq__(self, other):
        if not isinstance(other, Command):
            return NotImplemented
        return (
            self._name == other._name and
            self._parameters == other._parameters and
            self._help_summary == other._help_summary
        )

    __hash__ = None

    def __rich_repr__(self):
        for name in type(self).__displayable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return f"command({', '.join('%s=%r' % item for item in self.__rich_repr__())})"


def command(source=Unset, /, *parameters, help=Unset):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Bare decorator: @command, the name is the function's __name__.
    - Named decorator: @command("add", Parameter("first", required=True), ...)

    The help summary defaults to the first line of the callback's docstring.
    """
    if builtins.callable(source) and not isinstance(source, str):
        if parameters:
            raise TypeError("@command must be called with a name when parameters are given")
        return command(Unset, help=help)(source)

    if source is not Unset and not isinstance(source, str):
        raise TypeError("@command() first argument must be a string")

    @rename("command")
    def wrapper(callback, /):
        if not builtins.callable(callback):
            raise TypeError("@command() must be applied to a callable")
        summary = help
        if summary is Unset and (doc := inspect.getdoc(callback)):
            summary = doc.splitlines()[0]
        result = Command(coalesce(source, getattr(callback, "__name__", "")), callback, help=summary)
        for parameter in parameters:
            result.with_parameter(parameter)
        return result

    return wrapper


__all__ = (
    "Command",
    "command",
)
