"""
Argument binding: resolve a command's parameters against positional tokens.

Resolution, for parameters p[0..n) and tokens t[0..m):
1. m > n fails with TooManyArgumentsError(command, n); nothing is bound.
2. For each index i:
   - i < m: bind p[i].name to Value(t[i]), converted when p[i] declares a type;
   - p[i] is required: fail with MissingRequiredArgumentError(command, p[i].name).
     Required parameters never follow optional ones, so this is always the first
     unmet requirement;
   - p[i] has a default: bind the default (converted the same way);
   - otherwise p[i] is absent from the result.

The result is a fresh dict on every call. Absent keys mean "no value supplied".
"""
from .faults import ArgumentConversionError, ConversionError, TooManyArgumentsError, MissingRequiredArgumentError
from .values import Value


def _resolve(command, parameter, text):
    value = Value(text)
    if parameter.type is None:
        return value
    try:
        return value.convert(parameter.type)
    except ConversionError as error:
        raise ArgumentConversionError(command.name, parameter.name, error.__cause__ or error) from error


def bind(command, args, /):
    """Return the name -> value map for one invocation of command with args."""
    parameters = command.parameters
    if len(args) > len(parameters):
        raise TooManyArgumentsError(command.name, len(parameters))

    bound = {}
    for index, parameter in enumerate(parameters):
        if index < len(args):
            bound[parameter.name] = _resolve(command, parameter, args[index])
        elif parameter.required:
            raise MissingRequiredArgumentError(command.name, parameter.name)
        elif parameter.default is not None:
            bound[parameter.name] = _resolve(command, parameter, parameter.default)
    return bound


__all__ = (
    "bind",
)
