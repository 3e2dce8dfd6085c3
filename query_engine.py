"""
Command router: turns a command line into a bound query and prints the result.

    raw line -> Command -> catalog lookup -> positional arguments
             -> prompted values -> bound query -> executor -> table / pager

route() never raises. Every failure becomes a message on the console and an
Outcome the REPL can act on.
"""

import enum
import logging
import re
from dataclasses import dataclass

import paginator
import presenter
from config import DEFAULT_SEASON
from errors import InputClosedError, QueryError, StoreConnectionError, ValidationError
from query_catalog import CATALOG, CHOICE, INTEGER


logger = logging.getLogger(__name__)

QUIT_VERBS = ("q", "quit")
HELP_VERBS = ("h", "help")

_INTEGER_TOKEN = r"(\d+)"
_WORD_TOKEN = r"(\S+)"
_REST = r"(.+)"


class Outcome(enum.Enum):
    NOOP = "noop"
    HELP = "help"
    QUIT = "quit"
    UNKNOWN = "unknown"
    INVALID = "invalid"
    CANCELLED = "cancelled"
    RENDERED = "rendered"
    PAGED = "paged"
    EMPTY = "empty"
    FAILED = "failed"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class Command:
    verb: str
    argument: str = ""

    @classmethod
    def parse(cls, line: str) -> "Command":
        """Split on the first whitespace run. The verb is case-folded, the argument kept as typed."""
        parts = line.strip().split(None, 1)
        if not parts:
            return cls("")
        verb = parts[0].lower()
        argument = parts[1].strip() if len(parts) > 1 else ""
        return cls(verb, argument)


def parse_arguments(descriptor, argument: str) -> dict:
    """Values for the descriptor's positional arguments.

    One argument takes the whole string (names may contain spaces). Several
    arguments must match strictly: integer or word tokens separated by
    whitespace, with the last one taking the remainder, e.g. "<int> <text>".
    """
    specs = descriptor.arguments
    values = {}
    if not specs:
        return values

    if len(specs) == 1:
        spec = specs[0]
        if not argument:
            if spec.required:
                raise ValidationError(spec.missing or f"Missing {spec.name}.")
            values[spec.name] = spec.default
            return values
        try:
            values[spec.name] = spec.parse(argument)
        except ValidationError:
            if not spec.lenient:
                raise
            values[spec.name] = spec.default
            raise LenientFallback(spec.invalid, values) from None
        return values

    tokens = [_INTEGER_TOKEN if spec.kind == INTEGER else _WORD_TOKEN for spec in specs[:-1]]
    tokens.append(_INTEGER_TOKEN if specs[-1].kind == INTEGER else _REST)
    match = re.fullmatch(r"\s+".join(tokens), argument)
    if not match:
        raise ValidationError("Invalid format.")
    for spec, raw in zip(specs, match.groups()):
        values[spec.name] = spec.parse(raw)
    return values


class LenientFallback(ValidationError):
    """An optional argument was unreadable and its default was used instead."""

    def __init__(self, message: str, values: dict):
        super().__init__(message)
        self.values = values


class CommandRouter:
    """Routes command lines to catalog queries over one executor."""

    def __init__(self, executor, console, catalog=CATALOG, default_season: int = DEFAULT_SEASON):
        self.executor = executor
        self.console = console
        self.catalog = catalog
        self.default_season = default_season

    def route(self, raw_line: str) -> Outcome:
        """Handle one command line. Never raises."""
        command = Command.parse(raw_line)
        if not command.verb:
            return Outcome.NOOP
        if command.verb in QUIT_VERBS:
            return Outcome.QUIT
        if command.verb in HELP_VERBS:
            self.console.say(presenter.render_help(self.catalog.commands()))
            return Outcome.HELP

        descriptor = self.catalog.lookup(command.verb)
        if descriptor is None:
            self.console.say("-> Command not recognized. Type 'h' for help.")
            return Outcome.UNKNOWN

        self.console.say(f"-> Executing command: {raw_line.strip()}")
        try:
            return self._run(descriptor, command.argument)
        except ValidationError as e:
            self.console.error(f"Error: {e} {descriptor.usage_line}")
            return Outcome.INVALID
        except InputClosedError:
            self.console.error("Input closed. Command cancelled.")
            return Outcome.CANCELLED
        except QueryError as e:
            self.console.error(f"SQL Execution Error: {e}")
            return Outcome.FAILED
        except StoreConnectionError as e:
            self.console.error(str(e))
            return Outcome.DISCONNECTED
        except Exception as e:
            logger.exception("Unexpected error while processing %r", raw_line)
            self.console.error(f"An unexpected error occurred while processing command: {e}")
            return Outcome.FAILED

    def _run(self, descriptor, argument: str) -> Outcome:
        if descriptor.paged:
            return self._run_paged(descriptor)

        # Step 1: positional arguments (aborts before any prompt or query)
        try:
            values = parse_arguments(descriptor, argument)
        except LenientFallback as fallback:
            self.console.warn(f"Warning: {fallback}")
            values = fallback.values

        # Step 2: prompted values
        for spec in descriptor.prompts:
            values[spec.name] = self._prompt(descriptor, spec, values)
            if spec.kind == CHOICE:
                values[f"{spec.name}_label"] = spec.label_for(values[spec.name])

        # Step 3: bind and execute
        template = descriptor.template_for(values)
        result = self.executor.execute(template, descriptor.bind(values))

        if result.rows:
            self.console.say(presenter.render_result(result))
            return Outcome.RENDERED
        self._report_empty(descriptor, values)
        return Outcome.EMPTY

    def _run_paged(self, descriptor) -> Outcome:
        self.console.say(f"-> Fetching all {descriptor.noun} data for pagination...")
        result = self.executor.execute(descriptor.template, [])
        paginator.browse(self.console, result.columns, result.rows, descriptor.page_size, descriptor.noun)
        return Outcome.PAGED if result.rows else Outcome.EMPTY

    def _prompt(self, descriptor, spec, values: dict):
        """Run the prompting protocol for one parameter."""
        prompt = spec.prompt.format(**values)
        if spec.kind == CHOICE:
            return self.console.ask_choice(prompt, spec.choices)
        if spec.kind == INTEGER:
            default = spec.default
            if spec.name == "season" and default is None:
                default = descriptor.default_season or self.default_season
            return self.console.ask_int(prompt, default, minimum=spec.minimum, maximum=spec.maximum)
        while True:
            try:
                return spec.parse(self.console.ask(f"{prompt}: "))
            except ValidationError as e:
                self.console.error(str(e))

    def _report_empty(self, descriptor, values: dict):
        """Zero rows: say so, telling an unknown identifier apart from missing data when possible."""
        check = descriptor.lookup
        if check is None:
            self.console.say(presenter.NO_RESULTS)
            return

        found = self.executor.execute(check.template, [values[name] for name in check.binds])
        if not found.rows:
            self.console.error("Error: " + check.missing.format(**values))
            return
        self.console.say(f"{check.found_label}: {presenter.format_value(found.rows[0][0])}")
        self.console.warn("Warning: " + check.empty.format(**values))
