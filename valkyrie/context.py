"""
Per-run resolution context.

A Context is created fresh for every resolution level, filled by the resolver
(defaults first, then explicit flags and positional arguments), handed to the
hook executor and the handler, and discarded once dispatch completes. It is
never shared across runs or threads.

Reading values
- context.args                 → positional arguments, in order
- context.get_bool("verbose")  → typed read; the kind's zero value when the name is
  unknown or the flag carries another kind
- context.get("port")          → raw payload (None when unknown)
- context.is_set("config")     → whether the flag was given explicitly
"""
from .flags import FlagKind, FlagValue
from .utils import *


class Context(metaclass=IntrospectiveType):
    """
    Positional arguments and typed flag values for one resolved command.

    Properties
    - command: the Command the caller ultimately runs.
    - args: tuple of positional arguments.
    - values: read-only mapping flag name → FlagValue (defaults included).
    - provided: frozenset of flag names explicitly given on the command line.
    """

    __introspectable__ = (
        "command",
        "args",
        "values",
        "provided",
    )

    def __init__(self, command, /):
        self._command = command
        self._args = []
        self._values = {}
        self._provided = set()

    def _seed(self, flag):
        self._values[flag.name] = flag.initial

    def _assign(self, flag, value):
        if not isinstance(value, FlagValue) or value.kind is not flag.kind:
            raise TypeError("%s %r only accepts %s values" % (type(self).__typename__, flag.name, flag.kind.value))
        self._values[flag.name] = value
        self._provided.add(flag.name)

    def _append(self, argument):
        self._args.append(argument)

    def __contains__(self, name, /):
        return name in self._values

    def is_set(self, name, /):
        """
        Whether the flag was explicitly provided (a seeded default does not count).
        """
        return name in self._provided

    def get(self, name, default=None, /):
        try:
            return self._values[name].payload
        except KeyError:
            return default

    def _read(self, name, kind):
        try:
            value = self._values[name]
        except KeyError:
            return kind.zero
        return value._read(kind)

    def get_bool(self, name, /):
        return self._read(name, FlagKind.BOOL)

    def get_string(self, name, /):
        return self._read(name, FlagKind.STRING)

    def get_int(self, name, /):
        return self._read(name, FlagKind.INT)

    def get_float(self, name, /):
        return self._read(name, FlagKind.FLOAT)


__all__ = (
    "Context",
)
