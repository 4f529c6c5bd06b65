"""
Internal helpers shared by the options, registry and parser modules.

- Unset: "not provided" marker, distinct from None (None is a real value for
  an absent alias, label or description once an option is built).
- coalesce(): turn Unset into a default, leaving every other value alone.
- rename(): give generated functions a readable __name__/__qualname__.
- mirror(): read-only property over a "_name" backing field.
- ordinal(): "first", "second", ..., "11th", "22nd" for position messages.
"""
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance. It is falsy, copies to itself and can be
    combined with types in isinstance() unions (str | Unset).
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        try:
            return UnsetType | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __repr__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return default when object is Unset, otherwise object (even if falsy).
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator setting both __name__ and __qualname__ of a function to name.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must be applied to a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _detach(object):
    # Containers come back as fresh lists/dicts/sets; everything else as is.
    if isinstance(object, Mapping):
        return {key: _detach(value) for key, value in object.items()}
    if isinstance(object, Set):
        return {_detach(value) for value in object}
    if isinstance(object, Sequence) and not isinstance(object, str):
        return [_detach(value) for value in object]
    return object


def mirror(name, /):
    """
    Build a read-only property returning self._<name>.

    Container values are copied on every read, so callers can never mutate the
    owner's state through the property.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


_WORDS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def ordinal(number, /):
    if 1 <= number <= len(_WORDS):
        return _WORDS[number - 1]
    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "UnsetType",
    "Unset",
)
