from collections import deque

from replkit import *


class Context:
    def __init__(self):
        self.names = deque()


repl = (
    Repl(Context())
    .with_name("MyApp")
    .with_version("v0.1.0")
    .with_description("My very cool app")
)


@repl.command("add", Parameter("first", required=True), Parameter("second", required=True))
def add(args, context):
    """Add two numbers together"""
    return str(args["first"].to_int() + args["second"].to_int())


@repl.command("append", Parameter("name", required=True))
def append(args, context):
    """Append name to end of list"""
    context.names.append(str(args["name"]))
    return ", ".join(context.names)


@repl.command("prepend", Parameter("name", required=True))
def prepend(args, context):
    """Prepend name to front of list"""
    context.names.appendleft(str(args["name"]))
    return ", ".join(context.names)


@repl.command("hello", Parameter("who", default="world"))
def hello(args, context):
    """Greetings!"""
    return f"Hello, {args['who']}"


if __name__ == '__main__':
    repl.run()
