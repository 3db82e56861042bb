"""
Argument values.

A Value wraps the raw text of one argument token. It never converts eagerly:
callbacks ask for the type they need and get either the converted object or a
ConversionError (never a silent default). Numeric conversions are strict:
"1_000", " 3 " and non-ASCII digits are not numbers.

    >>> Value("2").to_int() + Value("3").convert(int)
    5
    >>> Value("true").to_bool()
    True
"""
import builtins

from .faults import ConversionError


def _parse_bool(text):
    # strict, case-sensitive: anything else is a conversion error
    match text:
        case "true":
            return True
        case "false":
            return False
    raise ValueError(f"invalid boolean literal {text!r}")


def _strict(parse):
    # plain ASCII literal only: no surrounding whitespace, no digit separators
    def parser(text):
        if not text.isascii() or "_" in text or text != text.strip():
            raise ValueError(f"invalid {parse.__name__} literal {text!r}")
        return parse(text)
    return parser


_PARSERS = {bool: _parse_bool, int: _strict(int), float: _strict(float)}


class Value:
    """Immutable text payload of a bound argument."""
    __slots__ = ("_text",)

    def __init__(self, text, /):
        if isinstance(text, Value):
            text = text.text
        if not isinstance(text, str):
            raise TypeError("value text must be a string")
        object.__setattr__(self, "_text", text)

    @property
    def text(self):
        return self._text

    def convert(self, target=str, /):
        """
        Convert the text with the given target type or converter.

        bool accepts exactly "true" or "false". int and float accept plain
        ASCII literals only: surrounding whitespace, "_" separators and
        non-ASCII digits are rejected. Any other callable is invoked with the
        text; ValueError/TypeError raised by it become ConversionError, and
        anything else it raises propagates unchanged.
        """
        if not builtins.callable(target):
            raise TypeError("convert() argument must be a type or a callable")
        converter = _PARSERS.get(target, target) if isinstance(target, type) else target
        try:
            return converter(self._text)
        except (ValueError, TypeError) as error:
            raise ConversionError(self._text, getattr(target, "__name__", repr(target))) from error

    def to_int(self):
        return self.convert(int)

    def to_float(self):
        return self.convert(float)

    def to_bool(self):
        return self.convert(bool)

    def to_str(self):
        return self._text

    def __setattr__(self, name, value, /):
        raise AttributeError("value is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("value is immutable")

    def __str__(self):
        return self._text

    def __repr__(self):
        return f"Value({self._text!r})"

    def __eq__(self, other):
        if isinstance(other, Value):
            return self._text == other._text
        if isinstance(other, str):
            return self._text == other
        return NotImplemented

    def __hash__(self):
        return hash(self._text)

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


__all__ = (
    "Value",
)
