r"""
Valkyrie flag model: kinds, tagged values and flag descriptors.

Overview
- FlagKind: the four primitive payload kinds (BOOL, STRING, INT, FLOAT), their
  zero values and literal parsers.
- FlagValue: a tagged value holding exactly one payload of its kind. The tag is
  fixed at construction and enforced at write time; kind-specific accessors
  (as_bool/as_string/as_int/as_float) return the accessor's zero value on a tag
  mismatch instead of failing.
- Flag: immutable descriptor of one named flag (name, short alias, kind,
  description, required-ness, default).

Metadata (sanitized on construction)
- name: shell-style identifier matching r"[^\W\d_](-?[^\W_]+)*"
  (letters first, dash-separated segments, no underscores; unicode allowed).
- short: Unset | single alphanumeric character.
- kind: FlagKind.
- descr: Unset | non-empty str (trimmed).
- default: Unset | payload of the flag's kind; Unset means the kind's zero value.
- required: bool; a required flag cannot declare a default.

Reserved names
- "help"/"h" and "version"/"V" are intercepted by the framework before any flag
  lookup happens, so flags cannot claim them.

Quick example:
    >>> port = Flag("port", "p", kind=FlagKind.INT, default=8080, descr="port to listen on")
    >>> port.parse("3000")
    flag-value(kind=<FlagKind.INT: 'int'>, payload=3000)
    >>> port.parse("3000").as_string
    ''
"""
import enum
import re

from .utils import *


_RESERVED_NAMES = frozenset({"help", "version"})
_RESERVED_SHORTS = frozenset({"h", "V"})

_TRUTHY = frozenset({"true", "1"})
_FALSY = frozenset({"false", "0"})


class FlagKind(enum.Enum):
    """
    Primitive payload kinds a flag can carry.

    Each kind knows its zero value, its metavar in help output, how to validate
    a Python payload and how to parse a command-line literal.
    """
    BOOL = "bool"
    STRING = "string"
    INT = "int"
    FLOAT = "float"

    @property
    def zero(self):
        """
        The kind's zero value (used for omitted defaults and mismatched reads).
        """
        return {
            FlagKind.BOOL: False,
            FlagKind.STRING: "",
            FlagKind.INT: 0,
            FlagKind.FLOAT: 0.0,
        }[self]

    @property
    def metavar(self):
        return "<%s>" % self.value

    def accepts(self, payload, /):
        """
        Whether a Python object is a valid payload for this kind.

        bool is rejected for INT/FLOAT even though it subclasses int.
        """
        match self:
            case FlagKind.BOOL:
                return isinstance(payload, bool)
            case FlagKind.STRING:
                return isinstance(payload, str)
            case FlagKind.INT:
                return isinstance(payload, int) and not isinstance(payload, bool)
            case FlagKind.FLOAT:
                return isinstance(payload, int | float) and not isinstance(payload, bool)

    def parse(self, literal, /):
        """
        Parse a command-line literal into a payload of this kind.

        Raises
        - ValueError on an invalid boolean literal or an int/float parse failure.
        """
        if not isinstance(literal, str):
            raise TypeError("parse() argument must be a string")
        match self:
            case FlagKind.BOOL:
                if literal in _TRUTHY:
                    return True
                if literal in _FALSY:
                    return False
                raise ValueError("invalid boolean literal %r" % literal)
            case FlagKind.STRING:
                return literal
            case FlagKind.INT:
                return int(literal)
            case FlagKind.FLOAT:
                return float(literal)


class FlagValue(metaclass=IntrospectiveType):
    """
    Tagged value over {bool, str, int, float}.

    The tag (kind) is fixed when the value is built and the payload must match
    it. Reading through an accessor for another kind yields that kind's zero
    value; this keeps handlers simple (no try/except around every read).
    """
    __slots__ = ("_kind", "_payload")

    __introspectable__ = (
        "kind",
        "payload",
    )

    def __init__(self, kind, payload=Unset, /):
        if not isinstance(kind, FlagKind):
            raise TypeError("flag-value 'kind' must be a flag kind")
        payload = coalesce(payload, kind.zero)
        if not kind.accepts(payload):
            raise TypeError("flag-value payload %r does not match kind %r" % (payload, kind.value))
        if kind is FlagKind.FLOAT:
            payload = float(payload)
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_payload", payload)

    def __setattr__(self, name, value, /):
        raise AttributeError("flag-value is read-only")

    def __eq__(self, other, /):
        if not isinstance(other, FlagValue):
            return NotImplemented
        return self.kind is other.kind and self.payload == other.payload

    def __hash__(self):
        return hash((self.kind, self.payload))

    def _read(self, kind):
        return self.payload if self.kind is kind else kind.zero

    @property
    def as_bool(self):
        return self._read(FlagKind.BOOL)

    @property
    def as_string(self):
        return self._read(FlagKind.STRING)

    @property
    def as_int(self):
        return self._read(FlagKind.INT)

    @property
    def as_float(self):
        return self._read(FlagKind.FLOAT)


def _sanitize_flag_metadata(cls, metadata, /):
    """
    Internal: validate and normalize flag metadata in place.

    Responsibilities
    - name: required shell-style identifier, not reserved.
    - short: Unset or exactly one alphanumeric character, not reserved.
    - kind: a FlagKind.
    - descr: Unset or a non-empty string after trimming (Unset becomes None).
    - default: Unset (→ kind zero value) or a payload accepted by the kind.
    - required: a required flag cannot declare a default.

    Raises
    - TypeError on wrong types or a required flag with a default.
    - ValueError on malformed or reserved names.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid shell-style flag name (unicodes are allowed)")
    elif name in _RESERVED_NAMES:
        raise ValueError(f"{cls.__typename__} 'name' {name!r} is reserved")
    metadata["name"] = name

    if not isinstance(short := metadata["short"], str | UnsetType):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and not re.fullmatch(r"[^\W_]", short):
        raise ValueError(f"{cls.__typename__} 'short' must be a single alphanumeric character")
    elif short in _RESERVED_SHORTS:
        raise ValueError(f"{cls.__typename__} 'short' {short!r} is reserved")
    metadata["short"] = coalesce(short)

    if not isinstance(kind := metadata["kind"], FlagKind):
        raise TypeError(f"{cls.__typename__} 'kind' must be a flag kind")

    if not isinstance(descr := metadata["descr"], str | UnsetType):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    # A required flag is satisfied only by explicit input, so a default would be dead weight.
    if metadata["required"] and metadata["default"] is not Unset:
        raise TypeError(f"required {cls.__typename__} cannot have a 'default'")

    # FlagValue enforces the payload/kind match and widens int to float.
    try:
        metadata["default"] = FlagValue(kind, metadata["default"]).payload
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'default' must be a {kind.value}") from None


class Flag(metaclass=IntrospectiveType):
    """
    Immutable descriptor of one named flag.

    A Flag only describes: it is attached to a Command (as an own or persistent
    flag) and the resolver uses it to look up, parse and seed values.

    Properties
    - name, short, kind, descr, default, required: read-only mirrors of the
      sanitized metadata.
    """
    __slots__ = ("_name", "_short", "_kind", "_descr", "_default", "_required")

    __introspectable__ = (
        "name",
        "short",
        "kind",
        "descr",
        "default",
        "required",
    )

    def __init__(
            self,
            name,
            short=Unset,
            /,
            kind=FlagKind.STRING,
            descr=Unset,
            default=Unset,
            required=False,
    ):
        """
        Construct a Flag with the provided metadata.

        Parameters
        - name: str
          Long name, used as `--name` and as the key in a Context.
        - short: Unset | str
          One-character alias, used as `-x`.
        - kind: FlagKind
          Payload kind; fixed for the flag's lifetime.
        - descr: Unset | str
          Short description for help.
        - default: Unset | payload
          Value seeded when the flag is not given; Unset means the kind's zero value.
        - required: bool
          When True, resolution fails unless the flag is explicitly provided.
        """
        metadata = {
            "name": name,
            "short": short,
            "kind": kind,
            "descr": descr,
            "default": default,
            "required": bool(required),
        }
        _sanitize_flag_metadata(type(self), metadata)

        # Mirror sanitized metadata into private slots; read-only properties expose them.
        for field, value in metadata.items():
            object.__setattr__(self, "_" + field, value)

    def __setattr__(self, name, value, /):
        raise AttributeError("flag is read-only")

    @property
    def initial(self):
        """
        The FlagValue seeded into a Context before any token is scanned.
        """
        return FlagValue(self.kind, self.default)

    @property
    def switches(self):
        """
        Command-line spellings of this flag, short first (e.g. ('-p', '--port')).
        """
        if self.short:
            return "-" + self.short, "--" + self.name
        return "--" + self.name,

    def parse(self, literal, /):
        """
        Parse a command-line literal into a FlagValue of this flag's kind.

        Raises
        - ValueError when the literal is not valid for the kind.
        """
        return FlagValue(self.kind, self.kind.parse(literal))


__all__ = (
    "FlagKind",
    "FlagValue",
    "Flag",
)
