"""
Flagship option registry.

OptionRegistry is a bounded, append-only, order-preserving collection of
Option records. One registry holds commands, another holds flags, so names and
aliases only need to be unique within a kind.

Traversal
- Every read pass (find, get, iteration) walks its own iterator from the
  start, so passes never share a cursor and may safely interleave.
- Lookups are linear scans; registries are small and bounded by capacity.

Capacity
- The default capacity (127) matches the size of a single-character alias
  space. Registering past capacity raises RegistryFullError instead of growing.
"""
from .faults import FaultCode, DuplicateOptionError, RegistryFullError, getdoc
from .options import Option
from .utils import *

DEFAULT_CAPACITY = 127


class OptionRegistry:
    """
    Bounded, ordered collection of options of a single kind.

    Parameters
    - capacity: int
      Maximum number of entries (>= 1). Defaults to DEFAULT_CAPACITY.
    """

    __slots__ = ("_capacity", "_options")

    capacity = mirror("capacity")

    def __init__(self, capacity=DEFAULT_CAPACITY, /):
        if not isinstance(capacity, int) or isinstance(capacity, bool):
            raise TypeError("registry capacity must be an integer")
        if capacity < 1:
            raise ValueError("registry capacity must be a positive integer")
        self._capacity = capacity
        self._options = []

    def __len__(self):
        return len(self._options)

    def __bool__(self):
        return bool(self._options)

    def __iter__(self):
        return iter(tuple(self._options))

    def __repr__(self):
        return f"option-registry({", ".join(option.name for option in self._options)})"

    @property
    def full(self):
        return len(self._options) >= self._capacity

    def register(self, option, /):
        """
        Append an option, keeping registration order.

        Raises
        - TypeError: when option is not an Option.
        - RegistryFullError: when the registry is at capacity.
        - DuplicateOptionError: when the name or the alias is already taken by
          another entry (as a name or as an alias).
        """
        if not isinstance(option, Option):
            raise TypeError("register() argument must be an option")

        kind = option.kind.value
        if self.full:
            raise RegistryFullError(
                "cannot register %s %r: no more than %d %ss can be registered" % (
                    kind, option.name, self._capacity, kind
                ),
                title="too many %ss" % kind,
                code=FaultCode.REGISTRY_FULL,
                hint="reduce the number of registered %ss" % kind,
                option=option,
                docs=getdoc(FaultCode.REGISTRY_FULL),
            )

        for identifier in filter(None, (option.name, option.short)):
            if (other := self.find(identifier)) is not None:
                raise DuplicateOptionError(
                    "%s %r is already registered by %s %r" % (kind, identifier, kind, other.name),
                    title="duplicate %s" % kind,
                    code=FaultCode.DUPLICATE_OPTION,
                    hint="pick a different name or alias for %r" % option.name,
                    option=option,
                    other=other,
                    docs=getdoc(FaultCode.DUPLICATE_OPTION),
                )

        self._options.append(option)
        return option

    def find(self, token, /):
        """
        Return the first option whose name or alias equals token, or None.
        """
        for option in self:
            if option.matches(token):
                return option
        return None

    def get(self, name, /):
        """
        Return the first option whose name (not alias) equals name, or None.
        """
        for option in self:
            if option.name == name:
                return option
        return None

    def alias(self, short, /):
        """
        Return the first option whose alias (not name) equals short, or None.
        """
        for option in self:
            if option.short is not None and option.short == short:
                return option
        return None

    def replace(self, option, /, **overrides):
        """
        Swap a registered option for a copy carrying overrides, keeping its slot.

        Used to attach descriptions and callbacks after registration.
        """
        index = self._options.index(option)
        self._options[index] = updated = option.__replace__(**overrides)
        return updated

    def names(self):
        """
        Return every name and alias, in registration order (used for suggestions).
        """
        return [identifier for option in self for identifier in (option.name, option.short) if identifier]


__all__ = (
    "OptionRegistry",
    "DEFAULT_CAPACITY",
)
