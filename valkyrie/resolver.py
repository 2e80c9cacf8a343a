r"""
Argument resolution: raw tokens → (resolved command, Context).

Algorithm (one level)
- seed: every flag in the command's scope gets its default in a fresh Context.
- scan: tokens are read left to right with at most one token of lookahead:
  1. '-h' / '--help'     → stop; help is requested for the *current* command.
  2. '--name[=value]'    → long flag (split once on '=').
  3. '-x[=value|value]'  → short flag; trailing characters are a glued value.
  4. bare token          → a direct child's name or alias recurses into that
                           child with the remaining tokens (everything parsed at
                           this level is discarded); otherwise it is positional.
- validate: once a level finishes without recursing, every required flag in
  scope must have been explicitly provided.

Values
- boolean flags: no value → True; '=true'/'=1' → True; '=false'/'=0' → False.
  Boolean flags never consume the next token.
- other kinds: '=value' or a glued value when present, otherwise the next token
  (whatever it looks like) is consumed as the value.

Failures abort the whole resolution; there is no partial success. Every fault
carries the 1-based position of the offending token in the original vector.
"""
import difflib
from collections import namedtuple

from .context import Context
from .faults import *
from .flags import FlagKind
from .utils import ordinal


Resolution = namedtuple("Resolution", ("command", "context", "help"))
Resolution.__doc__ = """
Outcome of a successful resolve(): the command to run, its Context, and whether
help was requested for it instead of a dispatch.
"""


HELP_TOKENS = frozenset({"-h", "--help"})


def resolve(command, tokens, /):
    """
    Resolve `tokens` against the tree rooted at `command`.

    Parameters
    - command: Command where resolution starts (usually the root).
    - tokens: Iterable[str], the raw argument vector without the program name.

    Returns
    - Resolution(command, context, help).

    Raises
    - TypeError when a token is not a string.
    - UnknownFlagError, MissingValueError, MalformedValueError,
      MissingRequiredFlagError on structural failures.
    """
    tokens = list(tokens)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("resolve() tokens must be strings")
    return _resolve(command, tokens, 1)


def _resolve(command, tokens, offset):
    scope = command.scope()
    context = Context(command)
    for flag in scope.names.values():
        context._seed(flag)

    position = 0
    while position < len(tokens):
        token = tokens[position]
        index = offset + position
        position += 1

        if token in HELP_TOKENS:
            return Resolution(command, context, True)

        if token.startswith("--"):
            name, separator, value = token[2:].partition("=")
            flag = _lookup(command, scope, scope.names, name, "--" + name, index)
            inline = value if separator else None
        elif token.startswith("-") and len(token) > 1:
            name, rest = token[1], token[2:]
            flag = _lookup(command, scope, scope.shorts, name, "-" + name, index)
            if not rest:
                inline = None
            elif rest.startswith("="):
                inline = rest[1:]
            else:
                inline = rest  # glued: '-p3000'
        else:
            if child := command.find(token):
                return _resolve(child, tokens[position:], offset + position)
            context._append(token)
            continue

        if inline is None and flag.kind is not FlagKind.BOOL:
            try:
                inline = tokens[position]
            except IndexError:
                raise MissingValueError(
                    "flag %r at %s position expects a value of type %s" % (token, ordinal(index), flag.kind.value),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    input=token,
                    index=index,
                    flag=flag,
                    hint="pass a value inline or after a space (for example: --%s=<%s>)" % (flag.name, flag.kind.value),
                ) from None
            position += 1

        context._assign(flag, _convert(flag, inline, token, index))

    missing = [flag for flag in scope.names.values() if flag.required and not context.is_set(flag.name)]
    if missing:
        listing = ", ".join("--" + flag.name for flag in missing)
        raise MissingRequiredFlagError(
            "%s %s for %r" % (
                "required flag" if len(missing) == 1 else "required flags",
                "%s is missing" % listing if len(missing) == 1 else "%s are missing" % listing,
                command.route,
            ),
            title="missing required flag",
            code=FaultCode.MISSING_REQUIRED_FLAG,
            missing=tuple(missing),
            hint="add %s; run '%s --help' to see the expected usage" % (listing, command.route),
        )

    return Resolution(command, context, False)


def _lookup(command, scope, table, name, input, index):
    """
    find a flag by long or short name, or fail with near-match suggestions.
    """
    try:
        return table[name]
    except KeyError:
        pass

    spellings = [*("--" + flag for flag in scope.names), *("-" + short for short in scope.shorts)]
    suggestions = difflib.get_close_matches(input, spellings, 5)
    try:
        hint = "did you mean %r? you can also run '%s --help' to see all flags" % (suggestions[0], command.route)
    except IndexError:
        hint = "run '%s --help' to see all available flags" % command.route
    raise UnknownFlagError(
        "unknown flag %r at %s position" % (input, ordinal(index)),
        title="unknown flag",
        code=FaultCode.UNKNOWN_FLAG,
        input=input,
        index=index,
        suggestions=suggestions,
        hint=hint,
    )


def _convert(flag, literal, token, index):
    """
    literal → FlagValue; booleans without a literal are True.
    """
    if literal is None:
        return flag.parse("true")
    try:
        return flag.parse(literal)
    except ValueError:
        match flag.kind:
            case FlagKind.BOOL:
                hint = "use one of true, 1, false or 0 (for example: --%s=false)" % flag.name
            case FlagKind.INT:
                hint = "pass a whole number (for example: --%s=42)" % flag.name
            case _:
                hint = "pass a number (for example: --%s=0.5)" % flag.name
        raise MalformedValueError(
            "invalid %s value %r for flag %r at %s position" % (flag.kind.value, literal, token, ordinal(index)),
            title="malformed value",
            code=FaultCode.MALFORMED_VALUE,
            input=token,
            index=index,
            flag=flag,
            value=literal,
            hint=hint,
        ) from None


__all__ = (
    "Resolution",
    "resolve",
)
