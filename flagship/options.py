r"""
Flagship options: the command and flag records.

Overview
- OptionKind: what an option is registered as (COMMAND or FLAG). Commands and
  flags live in separate registries, so names are namespaced per kind.
- ValueKind: what, if anything, follows a flag on the command line
  (NONE, TEXT or INTEGER).
- Option: value/description record for one command or flag. It renders its own
  usage line and parses its own trailing value token into a typed value.

Introspection & representation
- OptionType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields declared in __introspectable__ via read-only properties.

Resolution
- A registered option is a template: its value is Unset.
- Resolving it produces a copy via copy.replace(option, value=...), so the
  parse result holds independent snapshots and the registry never changes.

Integer values
- parse_value() follows strtol(..., 0) semantics: optional ASCII whitespace and sign,
  then "0x"/"0X" hexadecimal, a leading "0" for octal, or decimal. The longest
  valid prefix is consumed and the rest of the token is ignored.
- Values must fit a signed 64-bit integer.

Quick example:
    >>> from flagship.options import Option, OptionKind, ValueKind
    >>> count = Option(OptionKind.FLAG, "count", "c", ValueKind.INTEGER, "number")
    >>> count.render_usage().plain
    '  --count, -c <number>'
    >>> count.parse_value("0x10").value
    16
"""
import copy
import functools
import operator
import re
from enum import Enum

from rich.text import Text

from .faults import FaultCode, InvalidNumberError, NumericRangeError, getdoc
from .utils import *

# Range of a signed 64-bit integer (C long on LP64 platforms).
INTEGER_MIN = -2 ** 63
INTEGER_MAX = 2 ** 63 - 1

# Column under which descriptions are aligned in usage text.
DESCRIPTION_COLUMN = 24

_INTEGER = re.compile(r"[ \t\n\v\f\r]*(?P<sign>[+-]?)(?P<digits>0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


class OptionKind(Enum):
    COMMAND = "command"
    FLAG = "flag"


class ValueKind(Enum):
    NONE = "none"
    TEXT = "text"
    INTEGER = "integer"


class OptionType(type):
    """
    Metaclass that turns option records into introspectable objects.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_{name}" backing field.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Derive __typename__ from the class name for use in messages.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_identity(cls, metadata, /):
    """
    Internal: validate the kind, name and alias of an option.

    Rules
    - kind must be an OptionKind.
    - name is required, non-empty after trimming, free of whitespace, and must
      not carry a dash prefix (prefixes are stripped from tokens before lookup).
    - short follows the same rules when provided; Unset becomes None.
    """
    if not isinstance(metadata["kind"], OptionKind):
        raise TypeError(f"{cls.__typename__} 'kind' must be an option-kind")

    for field in ("name", "short"):
        if field == "short" and metadata[field] is Unset:
            continue
        if not isinstance(value := metadata[field], str):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
        elif not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
        elif re.search(r"\s", value):
            raise ValueError(f"{cls.__typename__} '{field}' cannot contain whitespace")
        elif value.startswith("-"):
            raise ValueError(f"{cls.__typename__} '{field}' must be given without dashes")
        metadata[field] = value

    metadata["short"] = coalesce(metadata["short"])


def _sanitize_value(cls, metadata, /):
    """
    Internal: validate value-related metadata.

    Rules
    - value_kind must be a ValueKind; commands only accept ValueKind.NONE.
    - label must be Unset or a non-empty string; commands cannot have one.
    - value is Unset for registered options; a resolved value must match
      value_kind (None, str or int).
    """
    command = metadata["kind"] is OptionKind.COMMAND

    if not isinstance(kind := metadata["value_kind"], ValueKind):
        raise TypeError(f"{cls.__typename__} 'value_kind' must be a value-kind")
    if command and kind is not ValueKind.NONE:
        raise TypeError(f"command {cls.__typename__} cannot take a value")

    if not isinstance(label := metadata["label"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'label' must be a string")
    elif isinstance(label, str) and not (label := label.strip()):
        raise ValueError(f"{cls.__typename__} 'label' cannot be empty")
    if command and label:
        raise TypeError(f"command {cls.__typename__} cannot have a 'label'")
    metadata["label"] = coalesce(label)

    if (value := metadata["value"]) is not Unset:
        match kind:
            case ValueKind.NONE:
                valid = value is None
            case ValueKind.TEXT:
                valid = isinstance(value, str)
            case ValueKind.INTEGER:
                valid = isinstance(value, int) and not isinstance(value, bool)
        if not valid:
            raise TypeError(f"{cls.__typename__} 'value' does not match value kind {kind.value!r}")


def _sanitize_extras(cls, metadata, /):
    """
    Internal: validate description and callback.

    - descr must be Unset, a non-empty string, or a rich Text; Unset becomes None.
    - callback must be Unset or a callable; Unset becomes None.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if (callback := metadata["callback"]) is not Unset and not callable(callback):
        raise TypeError(f"{cls.__typename__} 'callback' must be callable")
    metadata["callback"] = coalesce(callback)


class Option(metaclass=OptionType):
    """
    Registrable command or flag.

    Highlights
    - kind: OptionKind.COMMAND or OptionKind.FLAG.
    - name/short: long identifier and optional alias, matched against tokens
      (commands verbatim, flags after stripping "--" or "-").
    - value_kind/label: what follows a flag and how it is shown in usage text.
    - descr: usage text (None when absent).
    - value: Unset until the option is resolved; then None, a str or an int.
    - callback: zero-argument callable run once per resolution (None when absent).

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
      Descriptions and callbacks are attached by ArgParser through
      set_description()/set_callback().
    """

    __introspectable__ = (
        "kind",
        "name",
        "short",
        "value_kind",
        "label",
        "descr",
        "value",
        "callback",
    )

    def __init__(
            self,
            kind,
            name,
            short=Unset,
            /,
            value_kind=ValueKind.NONE,
            label=Unset,
            descr=Unset,
            callback=Unset,
            *,
            value=Unset
    ):
        metadata = {
            "kind": kind,
            "name": name,
            "short": short,
            "value_kind": value_kind,
            "label": label,
            "descr": descr,
            "callback": callback,
            "value": value,
        }
        _sanitize_identity(type(self), metadata)
        _sanitize_value(type(self), metadata)
        _sanitize_extras(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        # Absent fields are stored as None but constructed from Unset.
        fields = {
            name: Unset if name in ("short", "label", "descr", "callback") and object is None else object
            for name, object in ((name, getattr(self, "_" + name)) for name in type(self).__introspectable__)
        } | overrides
        return type(self)(fields.pop("kind"), fields.pop("name"), fields.pop("short"), **fields)

    @property
    def resolved(self):
        """
        True when this object is a resolved copy (its value is not Unset).
        """
        return self._value is not Unset

    def matches(self, token, /):
        """
        Return True when token equals the name or the alias of this option.
        """
        return token == self._name or (self._short is not None and token == self._short)

    def render_usage(self, styler=Unset):
        """
        Render the usage line(s) for this option.

        Layout
        - "  " indent, "--" prefix for flags, then the name.
        - ", -short" for flags (", short" for commands) when an alias exists.
        - " <label>" when a label exists.
        - the description on the next line, aligned under DESCRIPTION_COLUMN.

        Parameters
        - styler: Unset | Callable[[str], str]
          Maps a palette key ("command-name", "flag-name", "alias", "label",
          "description") to a rich style. Unset renders plain text.

        Returns
        - rich.text.Text
        """
        styler = coalesce(styler, lambda style: "")
        command = self._kind is OptionKind.COMMAND
        style = styler("command-name" if command else "flag-name")

        line = Text("  ")
        line.append(("" if command else "--") + self._name, style)
        if self._short is not None:
            line.append(", ")
            line.append(("" if command else "-") + self._short, styler("alias"))
        if self._label is not None:
            line.append(" ")
            line.append("<" + self._label + ">", styler("label"))
        if self._descr:
            line.append("\n" + " " * DESCRIPTION_COLUMN)
            if isinstance(self._descr, Text):
                line.append_text(self._descr)
            else:
                line.append(self._descr, styler("description"))
        return line

    def parse_value(self, token, /):
        """
        Parse the token that follows this option and return a resolved copy.

        behavior
        - INTEGER: strtol-compatible parsing with automatic base detection.
          • no digits consumed → InvalidNumberError
          • outside the signed 64-bit range → NumericRangeError ("overflow"
            for positive values, "underflow" for negative ones)
        - TEXT: the token is kept verbatim.
        - NONE: the resolved value is None (the token is ignored).

        The receiver is never mutated.
        """
        if not isinstance(token, str):
            raise TypeError("parse_value() argument must be a string")

        match self._value_kind:
            case ValueKind.NONE:
                return copy.replace(self, value=None)
            case ValueKind.TEXT:
                return copy.replace(self, value=token)

        if not (match := _INTEGER.match(token)):
            raise InvalidNumberError(
                "flag %r expected a number, but got %r" % (self._name, token),
                title="invalid number",
                code=FaultCode.INVALID_NUMBER,
                hint="pass a decimal, octal (0755) or hexadecimal (0x1F) integer",
                token=token,
                option=self,
                docs=getdoc(FaultCode.INVALID_NUMBER),
            )

        digits = match["digits"]
        if digits[:2] in ("0x", "0X"):
            number = int(digits[2:], 16)
        elif digits.startswith("0"):
            number = int(digits, 8)
        else:
            number = int(digits, 10)
        if match["sign"] == "-":
            number = -number

        if not INTEGER_MIN <= number <= INTEGER_MAX:
            direction = "underflow" if number < 0 else "overflow"
            raise NumericRangeError(
                "%s error for flag %r" % (direction, self._name),
                title="number out of range",
                code=FaultCode.NUMERIC_RANGE,
                hint="pass a number between %d and %d" % (INTEGER_MIN, INTEGER_MAX),
                token=token,
                option=self,
                direction=direction,
                docs=getdoc(FaultCode.NUMERIC_RANGE),
            )

        return copy.replace(self, value=number)


__all__ = (
    "OptionKind",
    "ValueKind",
    "Option",
    "INTEGER_MIN",
    "INTEGER_MAX",
    "DESCRIPTION_COLUMN",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del OptionType
