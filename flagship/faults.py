"""
Flagship faults: codes, exception and warning types, and how they surface.

Every problem the parser reports is a fault object carrying a lowercase,
position-first message ("unknown flag '--x' at third position") and a
read-only mapping of options:

- title: short label shown in the report header.
- code: a FaultCode, shown in the header and usable for lookups.
- hint: one actionable sentence.
- context such as input, index, option or suggestions.
- runtime options merged in by ArgParser.trigger(): parser, shell, fancy and
  colorful.

Surfacing
- trigger(fault, **options) merges options into a copy of the fault and calls
  its __trigger__().
- Errors are raised outside shell mode. In shell mode they are printed to
  standard error and the process exits with status 1.
- Warnings go through the warnings module outside shell mode and are printed
  in shell mode. They never end the process.

Host hooks (all optional, read from __main__)
- __codes__: FaultCode -> label shown instead of the number.
- __docs__: FaultCode -> documentation string, returned by getdoc().
- __styles__: palette overrides.
- __prog__: program name shown in report headers.
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    Stable numeric identifiers for every fault.

    11100-11104 input and command routing, 11112-11127 flags and values,
    11151-11153 registration, 12xxx warnings.
    """
    NO_ARGUMENTS                = 11100
    UNKNOWN_COMMAND             = 11101
    DUPLICATE_COMMAND           = 11103
    COMMAND_REQUIRED            = 11104

    UNKNOWN_FLAG                = 11112
    MISSING_VALUE               = 11117
    INVALID_NUMBER              = 11126
    NUMERIC_RANGE               = 11127

    UNKNOWN_OPTION              = 11151
    DUPLICATE_OPTION            = 11152
    REGISTRY_FULL               = 11153

    NO_ARGUMENTS_GIVEN          = 12100

    def normalize(self):
        """
        Label for this code: the host's __codes__ entry, or the number as text.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_PALETTES = {
    "error": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    },
    "warning": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    },
}


class _Fault:
    """
    Behavior shared by ParserException and ParserWarning.
    """

    __severity__ = "error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **(dict(self.options) | overrides))

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        styles = defaultdict(str, _PALETTES[self.__severity__] | getattr(main, "__styles__", {}))

        def text(fragment, style):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), styles[style] if colorful else "")

        parser = self.options.get("parser")
        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", getattr(parser, "name", "flagship")), "prog-name"),
            " — ",
            text(self.options["code"].normalize(), "code"),
            " | ",
            text(self.options["title"].title(), "title"),
            " ]",
        )
        message = text(self.message, "message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options.get("hint"), "hint"))

        if self.options.get("fancy", False):
            return Panel(Group(message, hint), title=header, title_align="left")
        return Group(header, message, hint)


class ParserException(_Fault, Exception):
    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)


class NoArgumentsError(ParserException): ...
class UnknownCommandError(ParserException): ...
class DuplicateCommandError(ParserException): ...
class CommandRequiredError(ParserException): ...
class UnknownFlagError(ParserException): ...
class MissingValueError(ParserException): ...
class InvalidNumberError(ParserException): ...
class NumericRangeError(ParserException): ...
class UnknownOptionError(ParserException): ...
class DuplicateOptionError(ParserException): ...
class RegistryFullError(ParserException): ...


class ParserWarning(_Fault, Warning):
    __severity__ = "warning"

    def __trigger__(self):
        if self.options.get("shell", False):
            console.print(self)
        else:
            warnings.warn(self, stacklevel=len(inspect.stack()))


class NoArgumentsWarning(ParserWarning): ...


def trigger(fault, /, **options):
    """
    Surface fault after merging options into a copy of it.

    fault must implement __trigger__ and __replace__ (ParserException and
    ParserWarning do). Raises TypeError otherwise.
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "__replace__", None)):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    Return the host's documentation for code (from __main__.__docs__), or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "ParserException",
    "NoArgumentsError",
    "UnknownCommandError",
    "DuplicateCommandError",
    "CommandRequiredError",
    "UnknownFlagError",
    "MissingValueError",
    "InvalidNumberError",
    "NumericRangeError",
    "UnknownOptionError",
    "DuplicateOptionError",
    "RegistryFullError",
    "ParserWarning",
    "NoArgumentsWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
