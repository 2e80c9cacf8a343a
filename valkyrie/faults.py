"""
Valkyrie faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing errors.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- CommandException: base type that carries message + options and knows how to
  render itself as one descriptive line (or a panel in fancy mode).
- trigger(): central entry point to surface a fault (raise outside the shell,
  render to stderr inside it).

UX goals
- Position-first messages: flag errors include the ordinal position of the
  offending token (“at third position”).
- Short titles, one-sentence bodies, a single clear hint.

Integration
- The resolver and hook executor raise faults with their options attached.
- The application shell catches them and calls trigger(fault, shell=True, ...).
- Hosts may relabel codes via a __codes__ mapping, restyle via __styles__ and
  rename the program via __prog__, all read from __main__.
"""
import os.path
import sys
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
    Stable numeric identifiers of every fault the resolver, executor and shell raise.

    ranges
    - flags (1111x/1112x)
      • UNKNOWN_FLAG, MISSING_VALUE, MALFORMED_VALUE, MISSING_REQUIRED_FLAG
    - dispatch (1113x)
      • DELEGATED_ERROR, HOOK_FAILED
    - configuration (1115x)
      • MISSING_HANDLER
    """
    # --- flag errors (111xx) ---
    UNKNOWN_FLAG                = 11112
    MISSING_VALUE               = 11117
    MALFORMED_VALUE             = 11124
    MISSING_REQUIRED_FLAG       = 11125

    # --- dispatch errors (111xx) ---
    DELEGATED_ERROR             = 11131
    HOOK_FAILED                 = 11132

    # --- configuration errors (111xx) ---
    MISSING_HANDLER             = 11151

    def normalize(self):
        """
        label shown in fault headers: __main__.__codes__[self] when the host
        defines one, else the number itself.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(tool):
    """
    program label for fault headers: __main__.__prog__, then the root name, then argv[0].
    """
    main = __import__("__main__")
    if prog := getattr(main, "__prog__", None):
        return prog
    if tool is not None and tool.root.name:
        return tool.root.name
    return os.path.basename(sys.argv[0])


class CommandException(Exception):
    """
    Base of every user-facing fault.

    Parameters
    - message: one-sentence, lowercased description of what went wrong.
    - **options: rendering/context options; recognized keys are
      title, code, hint, index, input, tool, shell, colorful, fancy.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # [ prog — code | Title ]
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # message → hint
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(_program(self.options.get("tool")), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else self.code

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))) if self.hint else Text("")

        if fancy:
            return Panel(Group(message, hint) if self.hint else message, title=header, title_align="left")

        # one descriptive line per failure
        return Text.assemble(header, " ", message, hint, no_wrap=False)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        return replica


class UnknownFlagError(CommandException): ...
class MissingValueError(CommandException): ...
class MalformedValueError(CommandException): ...
class MissingRequiredFlagError(CommandException): ...
class MissingHandlerError(CommandException): ...
class HookFailedError(CommandException): ...
class DelegatedCommandError(CommandException): ...


def trigger(fault, /, **options):
    """
    re-issue `fault` with extra options merged in, then raise or print it.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich stderr console; otherwise the
      fault is raised.

    typical options
    - tool, shell, fancy, colorful, title, code, hint and any other context the
      reporter may want to show (e.g., input/index).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "CommandException",
    "UnknownFlagError",
    "MissingValueError",
    "MalformedValueError",
    "MissingRequiredFlagError",
    "MissingHandlerError",
    "HookFailedError",
    "DelegatedCommandError",
    "FaultCode",
    "trigger",
)
