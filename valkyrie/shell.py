"""
Application shell: argument vector in, exit code out.

Flow
- normalize the prompt into tokens (argv, a shell-like string, or an iterable).
- -V/--version anywhere → print the root's version, exit 0.
- resolve → help requested? print help for the resolved command, exit 0.
- execute hooks and handler → Outcome.HELP prints help; any fault is rendered
  on stderr and maps to exit code 1.
"""
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console

from .faults import *
from .helper import render_help, render_version
from .hooks import Outcome, execute
from .resolver import resolve
from .utils import Unset

VERSION_TOKENS = frozenset({"-V", "--version"})


def _tokenize(prompt):
    """
    Normalize a prompt into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string, split with shlex.split.
    - Iterable[str]: used as is (each element must be a string).
    """
    if prompt is Unset:
        return sys.argv[1:]
    elif isinstance(prompt, str):
        return shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("run() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("run() argument must be a string or an iterable of strings")


def run(root, args=Unset, /):
    """
    Run the command tree rooted at `root` against an argument vector.

    Parameters
    - root: Command, the tree's root.
    - args: Unset | str | Iterable[str]; see _tokenize().

    Returns
    - 0 on success, shown help or shown version; 1 on any fault.

    Raises
    - TypeError when `args` is neither a string nor an iterable of strings.
    """
    tokens = _tokenize(args)
    console = Console()

    if VERSION_TOKENS.intersection(tokens):
        console.print(render_version(root))
        return 0

    try:
        command, context, help = resolve(root, tokens)
        if help or execute(context) is Outcome.HELP:
            console.print(render_help(command))
        return 0
    except CommandException as exception:
        trigger(exception, tool=root, shell=True, colorful=root.colorful, fancy=root.fancy)
        return 1


def invoke(root, args=Unset, /):
    """
    run() and exit the interpreter with its exit code.
    """
    sys.exit(run(root, args))


__all__ = (
    "run",
    "invoke",
)
