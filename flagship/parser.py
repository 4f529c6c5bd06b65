"""
Flagship parser: resolve commands and flags from an argument vector.

What this module provides
- ParseState: accumulated result of a parse (the selected command and the
  resolved flags, in encounter order).
- ArgParser: state machine owning a command registry, a flag registry, the raw
  token vector and a scan cursor. It interleaves command recognition with flag
  scanning, value consumption and callback dispatch.

Phases
    start → command phase → flag phase* → done
with an absorbing help state reachable from any point: "--help" or "-h" as the
first token, or as the current token at the start of a flag step, prints the
usage text and exits with status 0. Checking the current token on every flag
step is intentional: help still works after some flags were already resolved.

Tokens
- Index 0 of the vector is the program name and is never scanned.
- Commands are matched verbatim against names and aliases.
- Flags are matched as "--name" (against names) or "-alias" (against aliases).
- A value-bearing flag consumes exactly one following token.

Faults
- Every fault goes through ArgParser.trigger(), which merges the runtime
  options (shell/fancy/colorful) into the fault. Outside shell mode faults are
  raised as exceptions; in shell mode they are printed to standard error and the
  process exits with status 1.

Quick start
    from flagship import ArgParser, ValueKind

    parser = ArgParser("tool", ["tool", "build", "--count", "3"])
    parser.register_command("build", "b")
    parser.register_flag("count", "c", ValueKind.INTEGER, "number")
    parser.set_description("count", "How many times to build")

    state = parser.parse_args()
    state.command.name        # "build"
    state.find("count").value # 3
"""
import copy
import difflib
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .faults import *
from .options import Option, OptionKind, ValueKind
from .registry import OptionRegistry
from .utils import *

HELP_TOKENS = ("--help", "-h")


class ParseState:
    """
    Result of a parse: one optional command and the ordered resolved flags.

    Entries are resolved copies of the registered options, so each carries its
    own value. The state is owned by its parser and grows as parsing proceeds.
    """

    __slots__ = ("_command", "_flags")

    command = mirror("command")
    flags = mirror("flags")

    def __init__(self):
        self._command = None
        self._flags = []

    def __rich_repr__(self):
        yield "command", self._command
        yield "flags", self._flags

    def __repr__(self):
        return "parse-state(command=%r, flags=%r)" % (self._command, self._flags)

    def find(self, name, /):
        """
        Return the last resolved flag whose name or alias equals name, or None.
        """
        for option in reversed(self._flags):
            if option.matches(name):
                return option
        return None


class ArgParser:
    """
    Command and flag parser over a raw argument vector.

    Lifecycle
    - Built once per invocation from an application name and the full argument
      vector (program name included).
    - Commands and flags are registered, then resolved step by step through
      parse_command()/parse_flags(), or all at once through parse_args().

    Runtime options
    - shell: print faults and exit instead of raising them.
    - fancy: wrap usage text and faults in a rich panel.
    - colorful: style usage text and faults (palette overridable through a
      __styles__ mapping in __main__).
    """

    name = mirror("name")
    tokens = mirror("tokens")
    index = mirror("index")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    command_found = mirror("command_found")

    def __init__(self, name, argv=Unset, /, *, shell=False, fancy=False, colorful=False):
        if not isinstance(name, str):
            raise TypeError("parser name must be a string")
        elif not (name := name.strip()):
            raise ValueError("parser name cannot be empty")

        argv = coalesce(argv, sys.argv)
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("parser argv must be an iterable of strings")
        tokens = tuple(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parser argv must be an iterable of strings")

        self._name = name
        self._tokens = tokens
        # Index 0 is the program name; an empty vector leaves nothing to scan.
        self._index = min(1, len(tokens))
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

        self._commands = OptionRegistry()
        self._flags = OptionRegistry()
        self._command_found = False
        self._result = ParseState()

    def __repr__(self):
        return "arg-parser(name=%r, tokens=%r, index=%r)" % (self._name, self._tokens, self._index)

    @property
    def commands(self):
        return tuple(self._commands)

    @property
    def flags(self):
        return tuple(self._flags)

    @property
    def has_commands(self):
        return bool(self._commands)

    @property
    def result(self):
        return self._result

    def get_result(self):
        return self._result

    def can_parse(self):
        """
        True while the scan cursor has not reached the end of the token vector.
        """
        return self._index < len(self._tokens)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options merged in.
        """
        trigger(fault, **options, parser=self, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    # ── Registration ────────────────────────────────────────────────────────────

    def _register(self, registry, option):
        try:
            return registry.register(option)
        except ParserException as fault:
            self.trigger(fault)

    def register_command(self, name, short=Unset, /):
        """
        Register a command; commands never take a value.
        """
        return self._register(self._commands, Option(OptionKind.COMMAND, name, short))

    def register_flag(self, name, short=Unset, /, value_kind=ValueKind.NONE, label=Unset):
        """
        Register a flag, optionally declaring the kind of value that follows it.
        """
        return self._register(self._flags, Option(OptionKind.FLAG, name, short, value_kind, label))

    def _attach(self, name, **overrides):
        # Commands are searched first, then flags, by name only.
        for registry in (self._commands, self._flags):
            if (option := registry.get(name)) is not None:
                return registry.replace(option, **overrides)

        field, = overrides
        names = [option.name for option in (*self._commands, *self._flags)]
        suggestions = difflib.get_close_matches(str(name), names, 5)
        try:
            hint = "did you mean %r? register %r before attaching a %s" % (suggestions[0], name, field)
        except IndexError:
            hint = "register %r as a command or a flag before attaching a %s" % (name, field)
        self.trigger(UnknownOptionError(
            "no command or flag named %r exists" % (name,),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint=hint,
            input=name,
            suggestions=suggestions,
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        ))

    def set_description(self, name, descr, /):
        """
        Attach a usage description to the command or flag called name.
        """
        return self._attach(name, descr=descr)

    def set_callback(self, name, callback, /):
        """
        Attach a zero-argument callback to the command or flag called name.

        The callback runs synchronously, once per resolution of that option.
        """
        if not callable(callback):
            raise TypeError("set_callback() second argument must be callable")
        return self._attach(name, callback=callback)

    # ── Parsing ─────────────────────────────────────────────────────────────────

    def _route(self):
        return "%s --help" % self._name

    def _guard(self):
        if len(self._tokens) < 2:
            self.trigger(NoArgumentsError(
                "no arguments given",
                title="no arguments",
                code=FaultCode.NO_ARGUMENTS,
                hint="run '%s' to see what can be passed" % self._route(),
                docs=getdoc(FaultCode.NO_ARGUMENTS),
            ))

    def _help(self):
        self.print_usage()
        sys.exit(0)

    def _dispatch(self, option):
        if option.callback is not None:
            option.callback()

    def parse_args(self):
        """
        Resolve the whole token vector.

        behavior
        - no arguments beyond the program name: emit NoArgumentsWarning and return None.
        - "--help"/"-h" as the first token: print usage and exit with status 0.
        - otherwise resolve a command (when commands are registered, without
          resetting the found state between blocks), then flags until the vector
          is exhausted.

        returns
        - ParseState: the parser's result.
        """
        if len(self._tokens) < 2:
            self.trigger(NoArgumentsWarning(
                "no arguments given",
                title="no arguments",
                code=FaultCode.NO_ARGUMENTS_GIVEN,
                hint="run '%s' to see what can be passed" % self._route(),
                docs=getdoc(FaultCode.NO_ARGUMENTS_GIVEN),
            ))
            return None

        if self._tokens[1] in HELP_TOKENS:
            self._help()

        while self.can_parse():
            if self.has_commands:
                self.parse_command(reset_command_found=False)
            while self.can_parse():
                self.parse_flags()

        return self._result

    def parse_command(self, reset_command_found=True):
        """
        Resolve the current token as a command.

        behavior
        - help token at the cursor: return None without consuming (the next flag
          step prints the usage).
        - match: DuplicateCommandError if a command was already found in this
          phase; otherwise record a copy, advance by one, run the callback and
          return the copy.
        - no match: UnknownCommandError if no command was found yet, else None.
        - exhausted vector: None if a command was found, else CommandRequiredError.

        parameters
        - reset_command_found: bool
          clear the found state before matching (default). parse_args passes
          False so one block cannot select two commands.
        """
        self._guard()

        if self.can_parse() and self._tokens[self._index] in HELP_TOKENS:
            return None

        if reset_command_found:
            self._command_found = False

        if not self.can_parse():
            if self._command_found:
                return None
            self.trigger(CommandRequiredError(
                "a command is required at %s position" % ordinal(self._index),
                title="command required",
                code=FaultCode.COMMAND_REQUIRED,
                hint="run '%s' to see available commands" % self._route(),
                index=self._index,
                docs=getdoc(FaultCode.COMMAND_REQUIRED),
            ))

        token = self._tokens[self._index]
        option = self._commands.find(token)

        if option is None:
            if self._command_found:
                return None
            suggestions = difflib.get_close_matches(token, self._commands.names(), 5)
            try:
                hint = "did you mean %r? you can also run '%s' to see available commands" % (
                    suggestions[0], self._route()
                )
            except IndexError:
                hint = "run '%s' to see available commands" % self._route()
            self.trigger(UnknownCommandError(
                "unknown command %r at %s position" % (token, ordinal(self._index)),
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                hint=hint,
                input=token,
                index=self._index,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_COMMAND),
            ))

        if self._command_found:
            self.trigger(DuplicateCommandError(
                "command %r at %s position comes after command %r" % (
                    token, ordinal(self._index), self._result.command.name
                ),
                title="duplicate command",
                code=FaultCode.DUPLICATE_COMMAND,
                hint="pass a single command per invocation",
                input=token,
                index=self._index,
                docs=getdoc(FaultCode.DUPLICATE_COMMAND),
            ))

        resolved = copy.replace(option, value=None)
        self._result._command = resolved
        self._command_found = True
        self._index += 1
        self._dispatch(resolved)
        return resolved

    def parse_flags(self):
        """
        Resolve the flag at the cursor (and its value, when it takes one).

        behavior
        - help token first or at the cursor: print usage and exit with status 0.
        - commands registered but none found: CommandRequiredError.
        - exhausted vector: None.
        - "--name" is matched against flag names, "-alias" against aliases;
          anything else (or no match) is an UnknownFlagError.
        - value-bearing flag: MissingValueError when it is the last token,
          otherwise the next token is parsed (InvalidNumberError /
          NumericRangeError for bad integers) and consumed.
        - the resolved copy is appended to the result, its callback runs, and
          the copy is returned.
        """
        self._guard()

        if self._tokens[1] in HELP_TOKENS or (self.can_parse() and self._tokens[self._index] in HELP_TOKENS):
            self._help()

        if self.has_commands and not self._command_found:
            self.trigger(CommandRequiredError(
                "a command is required before %s position" % ordinal(self._index),
                title="command required",
                code=FaultCode.COMMAND_REQUIRED,
                hint="did you input a command? run '%s' to see available commands" % self._route(),
                index=self._index,
                docs=getdoc(FaultCode.COMMAND_REQUIRED),
            ))

        if not self.can_parse():
            return None

        token = self._tokens[self._index]
        if token.startswith("--"):
            option = self._flags.get(token[2:])
        elif token.startswith("-"):
            option = self._flags.alias(token[1:])
        else:
            option = None

        if option is None:
            names = ["--" + option.name for option in self._flags]
            names += ["-" + option.short for option in self._flags if option.short]
            suggestions = difflib.get_close_matches(token, names, 5)
            try:
                hint = "did you mean %r? you can also run '%s' to see all options" % (
                    suggestions[0], self._route()
                )
            except IndexError:
                hint = "try '%s' to see all available options" % self._route()
            self.trigger(UnknownFlagError(
                "unknown flag %r at %s position" % (token, ordinal(self._index)),
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                hint=hint,
                input=token,
                index=self._index,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_FLAG),
            ))

        if option.value_kind is ValueKind.NONE:
            resolved = copy.replace(option, value=None)
            self._index += 1
        else:
            if self._index + 1 >= len(self._tokens):
                self.trigger(MissingValueError(
                    "flag %r at %s position expects a value" % (token, ordinal(self._index)),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="pass it after a space (for example: %s <%s>)" % (
                        token, coalesce(option.label, option.value_kind.value)
                    ),
                    input=token,
                    index=self._index,
                    option=option,
                    docs=getdoc(FaultCode.MISSING_VALUE),
                ))
            try:
                resolved = option.parse_value(self._tokens[self._index + 1])
            except ParserException as fault:
                self.trigger(fault, input=token, index=self._index + 1)
            self._index += 2

        self._result._flags.append(resolved)
        self._dispatch(resolved)
        return resolved

    # ── Usage ───────────────────────────────────────────────────────────────────

    def render_usage(self):
        """
        Build the usage text as a rich renderable.

        Layout
            Usage: <name> [COMMAND] [OPTIONS] ...

            Commands:
              <command usage lines>

            Options:
              <flag usage lines>

        The "[COMMAND]" clause and the "Commands:" section only appear when
        commands are registered; likewise for "[OPTIONS] ..." and "Options:".

        Palette keys
        - usage-label, program-name, usage-section, group-label
        - command-name, flag-name, alias, label, description
        - panel-title
        Define a mapping named __styles__ in __main__ to override any entry.
        """
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
            "group-label": "bold #FFFFFF",  # Pure white headers

            "command-name": "bold #36C5F0",  # Sky-blue commands
            "flag-name": "bold #22C55E",  # GREEN for flags
            "alias": "#9CA3AF",  # Muted gray aliases
            "label": "bold #FFD600",  # AMBER for values
            "description": "#9CA3AF",  # Muted gray

            "panel-title": "bold #FF4D94",  # Magenta branding
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        usage = Text()
        usage.append("Usage", styler("usage-label")).append(": ")
        usage.append(self._name, styler("program-name"))
        if self._commands:
            usage.append(" [COMMAND]", styler("usage-section"))
        if self._flags:
            usage.append(" [OPTIONS] ...", styler("usage-section"))

        for title, registry in (("Commands", self._commands), ("Options", self._flags)):
            if not registry:
                continue
            usage.append("\n\n").append(title, styler("group-label")).append(":")
            for option in registry:
                usage.append("\n").append_text(option.render_usage(styler))

        if self._fancy:
            return Panel(
                usage,
                title=Text.assemble("[", " ", f"{self._name} HELP".upper(), " ", "]", style=styler("panel-title")),
                title_align="left",
            )
        return usage

    def print_usage(self):
        """
        Print the usage text to standard output, never wrapping long lines.
        """
        Console().print(self.render_usage(), soft_wrap=True)


__all__ = (
    "ParseState",
    "ArgParser",
    "HELP_TOKENS",
)
