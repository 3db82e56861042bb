"""
Replkit parameter specifications.

A Parameter is the contract of one named, ordered positional argument:
- name: unique within its command, non-empty, no whitespace.
- required: whether a token must be supplied.
- default: text bound when the token is omitted (optional parameters only).
- type: optional converter applied by the binder (e.g. int). It is called with
  the token text; ValueError or TypeError from it is reported as an
  ArgumentConversionError naming the command and parameter. Any other
  exception (KeyError from a dict lookup, say) is not a conversion failure
  and propagates out of the repl, so converters should raise ValueError.

A parameter can never be both required and defaulted. The check runs at every
builder step (constructor, set_required, set_default), and a rejected step
leaves the parameter unchanged.

Quick example:
    >>> Parameter("first", required=True)
    parameter(name='first', required=True, default=None, type=None)
    >>> Parameter("second").set_default("20")
    parameter(name='second', required=False, default='20', type=None)
"""
import builtins
import re

from .faults import IllegalDefaultError, IllegalRequiredError
from .utils import Unset, coalesce


def _sanitize_name(name, /):
    if not isinstance(name, str):
        raise TypeError("parameter 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError("parameter 'name' cannot be empty")
    elif re.search(r"\s", name):
        raise ValueError("parameter 'name' cannot contain whitespace")
    return name


class Parameter:
    """Declared contract for one positional argument of a command."""
    __displayable__ = ("name", "required", "default", "type")

    def __init__(self, name, /, *, required=False, default=Unset, type=Unset):
        self._name = _sanitize_name(name)
        self._required = False
        self._default = Unset
        self._type = Unset
        if type is not Unset and not builtins.callable(type):
            raise TypeError("parameter 'type' must be callable")
        self._type = type
        if default is not Unset:
            self.set_default(default)
        self.set_required(required)

    @property
    def name(self):
        return self._name

    @property
    def required(self):
        return self._required

    @property
    def default(self):
        return coalesce(self._default)

    @property
    def type(self):
        """Converter for the token text; it signals bad input with ValueError or TypeError."""
        return coalesce(self._type)

    def set_required(self, required=True, /):
        """Mark the parameter as required (or optional); fails when a default is set."""
        if not isinstance(required, bool):
            raise TypeError("parameter 'required' must be a boolean")
        if required and self._default is not Unset:
            raise IllegalRequiredError(self._name)
        self._required = required
        return self

    def set_default(self, default, /):
        """Set the text bound when no token is supplied; fails on required parameters."""
        if not isinstance(default, str):
            raise TypeError("parameter 'default' must be a string")
        if self._required:
            raise IllegalDefaultError(self._name)
        self._default = default
        return self

    def __eq__(self, other):
        if not isinstance(other, Parameter):
            return NotImplemented
        return (
            self._name == other._name and
            self._required == other._required and
            self._default == other._default and
            self._type == other._type
        )

    def __hash__(self):
        return hash((self._name, self._required, self._default))

    def __rich_repr__(self):
        for name in type(self).__displayable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return f"parameter({', '.join('%s=%r' % item for item in self.__rich_repr__())})"


__all__ = (
    "Parameter",
)
