"""
Nested command resolution tests (CommandGroup, safe_dispatch, dispatch).

Scope
- Validate explicit and default command selection.
- Validate group versus subcommand help.
- Validate unknown-command failures and strict dispatch.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (command, CommandGroup, safe_dispatch, dispatch).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from schemacli import (
    Cardinal,
    CommandExit,
    CommandGroup,
    Flag,
    HelpExit,
    HelpRequested,
    MissingValueError,
    Option,
    Rest,
    Success,
    UnknownCommandError,
    ValidationFailure,
    command,
    dispatch,
    safe_dispatch,
)


@command
def search(
        query=Cardinal(0, descr="search query"),
        /,
        limit=Option(float, short="l", default=5, descr="number of results"),
        *,
        verbose=Flag(short="v", descr="verbose output"),
):
    """Search with custom parameters"""


@command
def run(
        script=Cardinal(0, descr="script to run"),
        /,
        args=Rest(descr="arguments passed to the script"),
        *,
        dry_run=Flag(descr="print instead of running"),
):
    """Run a script"""


WITH_DEFAULT = CommandGroup({"search": search, "run": run}, default="search")
WITHOUT_DEFAULT = CommandGroup({"search": search, "run": run})


class TestDispatch(TestCase):
    """Subcommand selection."""

    def testExplicitCommand(self):
        self.assertEqual(
            safe_dispatch(WITHOUT_DEFAULT, ["run", "script.js", "a", "b"]),
            Success({"script": "script.js", "args": ["a", "b"], "dry_run": False}, "run"),
        )

    def testDefaultCommandMatchesExplicitForm(self):
        implicit = safe_dispatch(WITH_DEFAULT, ["keyword", "-l", "5"])
        explicit = safe_dispatch(WITH_DEFAULT, ["search", "keyword", "-l", "5"])
        self.assertEqual(implicit, explicit)
        self.assertEqual(implicit, Success({"query": "keyword", "limit": 5, "verbose": False}, "search"))

    def testDefaultCommandReceivesLeadingOptions(self):
        outcome = safe_dispatch(WITH_DEFAULT, ["-v", "keyword"])
        self.assertEqual(outcome.command, "search")
        self.assertIs(outcome.data["verbose"], True)

    def testSubcommandFailureCarriesSubcommandHelp(self):
        outcome = safe_dispatch(WITHOUT_DEFAULT, ["search"])
        self.assertIsInstance(outcome, ValidationFailure)
        self.assertIsInstance(outcome.error.exceptions[0], MissingValueError)
        self.assertEqual(outcome.help_text, search.help())

    def testGroupParseMethod(self):
        self.assertEqual(WITH_DEFAULT.parse(["run", "x"]).command, "run")
        self.assertEqual(WITH_DEFAULT.safe_parse(["run", "x"]), safe_dispatch(WITH_DEFAULT, ["run", "x"]))


class TestGroupHelp(TestCase):
    """Help resolution at group and subcommand level."""

    def testEmptyArgvShowsGroupHelp(self):
        self.assertEqual(safe_dispatch(WITH_DEFAULT, []), HelpRequested(WITH_DEFAULT.help()))

    def testLeadingHelpShowsGroupHelp(self):
        for argv in (["--help"], ["-h", "search"]):
            with self.subTest(argv=argv):
                self.assertEqual(safe_dispatch(WITH_DEFAULT, argv), HelpRequested(WITH_DEFAULT.help()))

    def testHelpAfterCommandShowsCommandHelp(self):
        self.assertEqual(safe_dispatch(WITH_DEFAULT, ["run", "--help"]), HelpRequested(run.help(), "run"))

    def testHelpWithDefaultCommandShowsDefaultHelp(self):
        self.assertEqual(safe_dispatch(WITH_DEFAULT, ["keyword", "-h"]), HelpRequested(search.help(), "search"))

    def testHelpWithoutCommandShowsGroupHelp(self):
        self.assertEqual(safe_dispatch(WITHOUT_DEFAULT, ["keyword", "-h"]), HelpRequested(WITHOUT_DEFAULT.help()))


class TestUnknownCommand(TestCase):
    """Unknown commands without a default."""

    def testUnknownCommandFails(self):
        outcome = safe_dispatch(WITHOUT_DEFAULT, ["deploy"])
        self.assertIsInstance(outcome, ValidationFailure)
        fault, = outcome.error.exceptions
        self.assertIsInstance(fault, UnknownCommandError)
        self.assertEqual(outcome.help_text, WITHOUT_DEFAULT.help())
        self.assertEqual(outcome.exit_code, 1)

    def testUnknownCommandSuggestsCloseMatch(self):
        fault, = safe_dispatch(WITHOUT_DEFAULT, ["serch"]).error.exceptions
        self.assertEqual(fault.options["suggestions"], ("search",))
        self.assertEqual(fault.hint, "did you mean 'search'?")

    def testDispatchIsIdempotent(self):
        for argv in (["deploy"], ["search", "x"], []):
            with self.subTest(argv=argv):
                self.assertEqual(safe_dispatch(WITHOUT_DEFAULT, argv), safe_dispatch(WITHOUT_DEFAULT, argv))


class TestStrictDispatch(TestCase):
    """dispatch() raises instead of returning failures."""

    def testDispatchReturnsSuccess(self):
        self.assertEqual(dispatch(WITH_DEFAULT, ["keyword"]).data["query"], "keyword")

    def testDispatchRaisesHelpExit(self):
        with self.assertRaises(HelpExit) as context:
            dispatch(WITH_DEFAULT, [])
        self.assertEqual(context.exception.help_text, WITH_DEFAULT.help())
        self.assertIsNone(context.exception.command)

    def testDispatchHelpExitNamesTheSubcommand(self):
        for argv, name in ((["run", "--help"], "run"), (["keyword", "-h"], "search")):
            with self.subTest(argv=argv), self.assertRaises(HelpExit) as context:
                dispatch(WITH_DEFAULT, argv)
            self.assertEqual(context.exception.command, name)
            self.assertEqual(context.exception.help_text, WITH_DEFAULT.commands[name].help())

    def testDispatchRaisesCommandExit(self):
        with self.assertRaises(CommandExit) as context:
            dispatch(WITHOUT_DEFAULT, ["deploy"])
        self.assertEqual(str(context.exception), "unknown command 'deploy'")


if __name__ == "__main__":
    unittest.main()
