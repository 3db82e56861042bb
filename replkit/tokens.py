"""
Line tokenizer.

Rules
- Tokens are separated by runs of whitespace.
- A run enclosed in double quotes belongs to one token, quotes stripped:
  'foo "hello world" bar' -> ['foo', 'hello world', 'bar'].
- Quoted and unquoted text that touch form a single token: 'a"b c"' -> ['ab c'].
- '""' is an empty token; an unterminated quote runs to the end of the line.
- There is no escape character: a backslash is ordinary text and an embedded
  double quote always opens or closes a quoted run.
- Blank lines yield no tokens.
"""


def tokenize(line, /):
    """Split a raw input line into its ordered tokens."""
    if not isinstance(line, str):
        raise TypeError("tokenize() argument must be a string")

    tokens = []
    current = []
    pending = quoted = False

    for char in line:
        if char == '"':
            quoted = not quoted
            pending = True
        elif char.isspace() and not quoted:
            if pending:
                tokens.append("".join(current))
                current.clear()
                pending = False
        else:
            current.append(char)
            pending = True

    if pending:
        tokens.append("".join(current))
    return tokens


def split(line, /):
    """
    Split a line into (command name, argument tokens).

    Returns (None, []) when the line holds no tokens.
    """
    match tokenize(line):
        case []:
            return None, []
        case [name, *args]:
            return name, args


__all__ = (
    "tokenize",
    "split",
)
