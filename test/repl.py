"""
Repl behavioral tests (dispatch, error routing, help, configuration).

Scope
- End-to-end sessions driven by ScriptedReader with consoles recording into
  memory: output of callbacks, error handler routing, the reserved help
  command, transient read errors, and termination paths.
- Builder configuration: prompts, completion, custom viewers and handlers.

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console
from rich.text import Text

from replkit import (
    Repl,
    State,
    Command,
    Parameter,
    ScriptedReader,
    HelpViewer,
    CommandError,
    UnknownCommandError,
    MissingRequiredArgumentError,
    TooManyArgumentsError,
    default_error_handler,
)


def _console():
    return Console(file=io.StringIO(), color_system=None, width=200)


class Context:
    def __init__(self):
        self.names = []


def add(args, context):
    return str(args["first"].to_int() + args["second"].to_int())


def append(args, context):
    context.names.append(str(args["name"]))
    return ", ".join(context.names)


class QuotaError(CommandError):
    __fields__ = ("message", "quota")
    template = "Error: {message} (quota {quota})"


class HttpError(CommandError):

    def __init__(self, status):
        super().__init__(f"HTTP {status}")
        self.status = status

    def __str__(self):
        return f"Error: HTTP {self.status}"


class SessionTestCase(TestCase):

    def session(self, *lines, context=None):
        self.reader = ScriptedReader(lines)
        self.handled = []
        self.repl = (
            Repl(context)
            .with_name("MyApp")
            .with_version("v0.1.0")
            .with_description("My very cool app")
            .with_console(_console(), _console())
            .with_reader(self.reader)
            .with_error_handler(lambda error, repl: self.handled.append(error))
            .add_command(
                Command("add", add)
                .with_parameter(Parameter("first", required=True))
                .with_parameter(Parameter("second", required=True))
                .with_help("Add two numbers together")
            )
            .add_command(
                Command("append", append)
                .with_parameter(Parameter("name", required=True))
                .with_help("Append name to end of list")
            )
        )
        return self.repl

    @property
    def output(self):
        return self.repl.console.file.getvalue().splitlines()

    @property
    def errors(self):
        return self.repl.errors.file.getvalue()


class TestDispatch(SessionTestCase):

    def testWelcomeAndResult(self):
        self.session("add 2 3").run()
        self.assertEqual(self.output, ["Welcome to MyApp v0.1.0", "5"])
        self.assertEqual(self.handled, [])

    def testMissingRequiredArgumentIsRouted(self):
        repl = self.session("foo onlyone")
        repl.add_command(
            Command("foo", lambda args, context: None)
            .with_parameter(Parameter("bar", required=True))
            .with_parameter(Parameter("baz", required=True))
        )
        repl.run()
        self.assertEqual(self.handled, [MissingRequiredArgumentError("foo", "baz")])

    def testUnknownCommandIsRouted(self):
        self.session("xyz").run()
        self.assertEqual(self.handled, [UnknownCommandError("xyz")])
        self.assertEqual(self.output, ["Welcome to MyApp v0.1.0"])

    def testTooManyArgumentsIsRouted(self):
        self.session("add 1 2 3").run()
        self.assertEqual(self.handled, [TooManyArgumentsError("add", 2)])

    def testQuotedArgumentBindsIntact(self):
        received = []
        repl = self.session('foo "hello world" bar')
        repl.add_command(
            Command("foo", lambda args, context: received.append(dict(args)))
            .with_parameter(Parameter("text", required=True))
            .with_parameter(Parameter("tail"))
        )
        repl.run()
        self.assertEqual(received, [{"text": "hello world", "tail": "bar"}])

    def testDefaultIsBound(self):
        received = []
        repl = self.session("foo 1")
        repl.add_command(
            Command("foo", lambda args, context: received.append(dict(args)))
            .with_parameter(Parameter("bar", required=True))
            .with_parameter(Parameter("baz", default="20"))
        )
        repl.run()
        self.assertEqual(received, [{"bar": "1", "baz": "20"}])

    def testBlankLinesAreIgnored(self):
        self.session("", "   ", "add 1 1").run()
        self.assertEqual(self.output, ["Welcome to MyApp v0.1.0", "2"])
        self.assertEqual(self.handled, [])
        self.assertEqual(self.reader.history, ("add 1 1",))

    def testNoneResultPrintsNothing(self):
        repl = self.session("quiet")
        repl.add_command(Command("quiet", lambda args, context: None))
        repl.run()
        self.assertEqual(self.output, ["Welcome to MyApp v0.1.0"])

    def testRenderableResultIsPrinted(self):
        repl = self.session("fancy")
        repl.add_command(Command("fancy", lambda args, context: Text("shiny", "bold")))
        repl.run()
        self.assertEqual(self.output[-1], "shiny")

    def testContextIsSharedAcrossCallbacks(self):
        context = Context()
        self.session("append a", "append b", context=context).run()
        self.assertEqual(context.names, ["a", "b"])
        self.assertEqual(self.output[-1], "a, b")
        self.assertIs(self.repl.context, context)

    def testCallbackErrorsAreRouted(self):
        def fail(args, context):
            raise QuotaError("over quota", 3)

        repl = self.session("fail", "add 1 1")
        repl.add_command(Command("fail", fail))
        repl.run()
        self.assertEqual(self.handled, [QuotaError("over quota", 3)])
        self.assertEqual(self.output[-1], "2")

    def testConversionErrorsInCallbacksAreRouted(self):
        self.session("add one 2").run()
        self.assertEqual(len(self.handled), 1)
        self.assertIsInstance(self.handled[0], CommandError)

    def testLaterRegistrationWins(self):
        repl = self.session("add 1 1")
        repl.add_command(
            Command("add", lambda args, context: "replaced")
            .with_parameter(Parameter("first"))
            .with_parameter(Parameter("second"))
        )
        repl.run()
        self.assertEqual(self.output[-1], "replaced")

    def testStateWhileProcessing(self):
        states = []
        repl = self.session("state")
        repl.add_command(Command("state", lambda args, context: states.append(repl.state)))
        self.assertIs(repl.state, State.WAITING)
        repl.run()
        self.assertEqual(states, [State.PROCESSING])
        self.assertIs(repl.state, State.TERMINATED)

    def testProcessLineRaisesDispatchErrors(self):
        repl = self.session()
        with self.assertRaises(UnknownCommandError):
            repl.process_line("xyz")
        repl.process_line("add 2 2")
        self.assertEqual(self.output, ["4"])


class TestErrorHandling(SessionTestCase):

    def testDefaultHandlerReportsAndContinues(self):
        repl = self.session("xyz", "add 1 2")
        repl.with_error_handler(default_error_handler)
        repl.run()
        self.assertIn("Error: Unknown command 'xyz'", self.errors)
        self.assertIn("MyApp", self.errors)
        self.assertEqual(self.output[-1], "3")

    def testDefaultHandlerRendersErrorsWithExtraState(self):
        def unavailable(args, context):
            raise HttpError(503)

        repl = self.session("fetch", "add 1 2")
        repl.add_command(Command("fetch", unavailable))
        repl.with_error_handler(default_error_handler)
        repl.run()
        self.assertIn("Error: HTTP 503", self.errors)
        self.assertEqual(self.output[-1], "3")
        self.assertIs(repl.state, State.TERMINATED)

    def testHandlerErrorEndsTheSession(self):
        def handler(error, repl):
            raise error

        repl = self.session("xyz", "add 1 2").with_error_handler(handler)
        with self.assertRaises(UnknownCommandError):
            repl.run()
        self.assertIs(repl.state, State.TERMINATED)
        self.assertEqual(self.output, ["Welcome to MyApp v0.1.0"])

    def testHandlerReceivesTheRepl(self):
        seen = []
        repl = self.session("xyz").with_error_handler(lambda error, repl: seen.append((error, repl.state)))
        repl.run()
        self.assertEqual(seen, [(UnknownCommandError("xyz"), State.PROCESSING)])

    def testTransientReadErrorIsReportedNotRouted(self):
        self.session(OSError("boom"), "add 1 2").run()
        self.assertIn("Error reading line: boom", self.errors)
        self.assertEqual(self.handled, [])
        self.assertEqual(self.output[-1], "3")

    def testUnexpectedExceptionsPropagate(self):
        def broken(args, context):
            raise RuntimeError("bug")

        repl = self.session("broken")
        repl.add_command(Command("broken", broken))
        with self.assertRaises(RuntimeError):
            repl.run()


class TestHelp(SessionTestCase):

    def testGeneralHelp(self):
        self.session("help").run()
        self.assertEqual(self.output, [
            "Welcome to MyApp v0.1.0",
            "MyApp v0.1.0: My very cool app",
            "------------------------------",
            "add - Add two numbers together",
            "append - Append name to end of list",
        ])

    def testCommandHelp(self):
        self.session("help add").run()
        self.assertEqual(self.output[1:], ["add: Add two numbers together", "Usage:", "    add first second"])

    def testHelpMissDoesNotInvokeHandler(self):
        self.session("help frobnicate").run()
        self.assertIn("No help for frobnicate found", self.errors)
        self.assertEqual(self.handled, [])

    def testHelpCannotBeShadowed(self):
        called = []
        repl = self.session("help")
        with self.assertLogs("replkit.repl", "WARNING"):
            repl.add_command(Command("help", lambda args, context: called.append(True)))
        repl.run()
        self.assertEqual(called, [])
        self.assertIn("MyApp v0.1.0: My very cool app", self.output)

    def testHelpIndexIsFixedForTheSession(self):
        repl = self.session("late", "help", "extra")

        def late(args, context):
            repl.add_command(Command("extra", lambda args, context: "ran", help="Added mid-session"))

        repl.add_command(Command("late", late))
        repl.run()
        self.assertNotIn("extra - Added mid-session", self.output)
        self.assertIn("late", self.output)
        self.assertEqual(self.output[-1], "ran")
        self.assertEqual(self.handled, [])

    def testCustomHelpViewer(self):
        calls = []

        class Viewer(HelpViewer):
            def help(self, command, context, /):
                calls.append((command, [entry.command for entry in context.entries]))

        self.session("help", "help add extra").with_help_viewer(Viewer()).run()
        self.assertEqual(calls, [(None, ["add", "append"]), ("add", ["add", "append"])])


class TestConfiguration(SessionTestCase):

    def testDefaultPromptFollowsName(self):
        repl = self.session("add 1 1")
        self.assertEqual(repl.prompt, "MyApp> ")
        repl.with_name("Other")
        self.assertEqual(repl.prompt, "Other> ")
        repl.run()
        self.assertEqual(self.reader.prompts, ["Other> ", "Other> "])

    def testCustomPrompt(self):
        repl = self.session().with_prompt("CustomPrompt -> ")
        repl.with_name("Other")
        self.assertEqual(repl.prompt, "CustomPrompt -> ")
        self.assertEqual(repl.styled_prompt.plain, "CustomPrompt -> ")

    def testCallablePrompt(self):
        counter = iter(range(10))
        repl = self.session().with_prompt(lambda: f"[{next(counter)}]> ")
        self.assertEqual(repl.prompt, "[0]> ")
        self.assertEqual(repl.prompt, "[1]> ")

    def testStyledPrompt(self):
        repl = self.session()
        self.assertEqual(repl.styled_prompt.plain, "MyApp> ")
        self.assertEqual(str(repl.styled_prompt.style), "bold green")
        repl.with_styled_prompt("[red]Custom -> [/red]")
        self.assertEqual(repl.styled_prompt.plain, "Custom -> ")
        repl.with_colorful(False)
        self.assertEqual(repl.styled_prompt.plain, "MyApp> ")
        self.assertEqual(str(repl.styled_prompt.style), "")

    def testCompletion(self):
        self.session().run()
        self.assertEqual(self.reader.complete("pp"), ["append"])
        self.assertEqual(self.reader.complete("a"), ["add", "append"])

    def testCompletionCanBeDisabled(self):
        self.session().with_completion(False).run()
        self.assertEqual(self.reader.complete("a"), [])

    def testBuilderValidation(self):
        repl = self.session()
        with self.assertRaises(ValueError):
            repl.with_name(" ")
        with self.assertRaises(TypeError):
            repl.with_version(1)
        with self.assertRaises(TypeError):
            repl.with_help_viewer(object())
        with self.assertRaises(TypeError):
            repl.with_error_handler("handler")
        with self.assertRaises(TypeError):
            repl.with_reader(object())
        with self.assertRaises(TypeError):
            repl.add_command("add")
        with self.assertRaises(TypeError):
            repl.with_completion("yes")

    def testCommandDecorator(self):
        repl = self.session("double 4", "ping")

        @repl.command("double", Parameter("n", required=True, type=int))
        def double(args, context):
            """Double a number"""
            return str(args["n"] * 2)

        @repl.command
        def ping(args, context):
            return "pong"

        self.assertIsInstance(double, Command)
        self.assertEqual(repl.commands["double"].help_summary, "Double a number")
        repl.run()
        self.assertEqual(self.output[1:], ["8", "pong"])

    def testCommandsViewIsACopy(self):
        repl = self.session()
        repl.commands.clear()
        self.assertIn("add", repl.commands)


if __name__ == "__main__":
    unittest.main()
