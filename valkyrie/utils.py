"""
Small shared helpers for the flag, command and resolver layers.

- Unset: the "argument omitted" marker for keyword defaults, kept apart from
  None so that an explicit None can still be told from no value at all.
- coalesce(value, default): Unset → default; anything else passes through.
- rename(...): give generated callables a readable __name__/__qualname__.
- mirror(name): read-only property over self._<name>; containers come back
  frozen (tuple, MappingProxyType, frozenset).
- IntrospectiveType: metaclass behind Flag, FlagValue, Context and Command.
- ordinal(n): "first", "second", ..., "11th" for position-first messages.
"""
import builtins
import functools
import operator
import re
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker. Only one instance ever exists; it is falsy,
    prints as "Unset" and cannot be subclassed.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    `default` when `object` is Unset, else `object` unchanged (None, 0 and ""
    included).
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) sets both __name__ and __qualname__ and returns the
    callable; rename(name) returns a decorator doing the same.
    """
    match parameters:
        case (target, str(name)):
            if not builtins.callable(target):
                raise TypeError("rename() first argument must be callable")
            try:
                target.__name__ = target.__qualname__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() cannot rename %r" % (target,)) from None
            return target
        case (_, _):
            raise TypeError("rename() second argument must be a string")
        case (str(name),):
            def decorator(target):
                return rename(target, name)
            return rename(decorator, "rename")
        case (_,):
            raise TypeError("@rename() argument must be a string")
    raise TypeError("rename() takes 1 or 2 arguments (%d given)" % len(parameters))


def _freeze(object):
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    return object


def mirror(name, /):
    """
    Property returning a frozen view of self._<name>; it has no setter.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name

    def getter(self):
        return _freeze(getattr(self, attribute))

    return property(rename(getter, name))


class IntrospectiveType(type):
    """
    Metaclass for the package's descriptor classes.

    For a class declaring __introspectable__ = ("name", ...):
    - each listed name becomes a mirror() property,
    - __typename__ is the dashed, lower-case class name ("FlagValue" → "flag-value"),
      used as the subject of construction errors,
    - __rich_repr__ yields the fields listed in __displayable__ (defaulting to
      __introspectable__), and __repr__ is derived from it unless the class
      writes its own.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        fields = namespace.get("__introspectable__", ())
        self = super().__new__(cls, name, bases, {
            **namespace,
            "__typename__": re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower(),
            **{field: mirror(field) for field in fields},
        })

        def __rich_repr__(self):
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)

        def __repr__(self):
            pairs = map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())
            return "%s(%s)" % (type(self).__typename__, ", ".join(pairs))

        self.__rich_repr__ = rename(__rich_repr__, "__rich_repr__")
        if "__repr__" not in namespace:
            self.__repr__ = rename(__repr__, "__repr__")
        return self


_ORDINALS = (
    "first", "second", "third", "fourth", "fifth",
    "sixth", "seventh", "eighth", "ninth", "tenth",
)


def ordinal(number, /):
    """
    1 → "first" … 10 → "tenth"; beyond that 11th, 21st, 22nd, 112th, ...
    """
    if 1 <= number <= len(_ORDINALS):
        return _ORDINALS[number - 1]
    if number % 100 in (11, 12, 13):
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "UnsetType",
    "IntrospectiveType",

    # Constants
    "Unset",
)
