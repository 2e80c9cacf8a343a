"""
Valkyrie command layer: build and compose command trees.

What this module provides
- Command: one node of the command tree, holding
  • its own flags and its persistent flags (inherited by every descendant),
  • case-sensitive aliases,
  • an optional handler and optional lifecycle hooks
    (pre_run/post_run for this node, persistent_pre_run/persistent_post_run
    inherited by descendants),
  • its ordered children and a non-owning back-reference to its parent.
- command(...): create a Command or a decorator that produces one.

Core ideas
- The tree is built once, before any resolution, and is only read afterwards;
  one tree can serve many runs.
- Parents own their children; the parent pointer is used only for upward
  traversal (persistent flags, persistent hooks, routes).
- Every handler and hook is a callable receiving the run's Context. Returning
  False fails the run; any other return value means success.

Quick start
    from valkyrie import Command, command, run

    root = Command(name="mycli", descr="demo tool", version="1.0.0")
    root.bool_flag("verbose", "v", descr="chatty output", persistent=True)

    # the handler's docstring, when present, becomes the description
    @root.command(aliases=("srv",), descr="start the server")
    def serve(context):
        print("listening on", context.get_int("port"))

    serve.int_flag("port", "p", default=8080)

    if __name__ == "__main__":
        raise SystemExit(run(root))

Flag shadowing
- scope() merges the persistent chain (root first) with the command's own
  flags. Own flags shadow persistent flags of the same name, and a nearer
  ancestor shadows a farther one. Shorts follow the same rule independently:
  an own or nearer short takes the letter from an inherited flag, which stays
  reachable by its long name. Within a single command, names and shorts must
  be unique across flags and persistent flags.
"""
import itertools
import os.path
import sys
from collections import namedtuple
from types import MappingProxyType

from .flags import Flag, FlagKind
from .utils import *


_HOOKS = (
    "handler",
    "pre_run",
    "post_run",
    "persistent_pre_run",
    "persistent_post_run",
)


Scope = namedtuple("Scope", ("names", "shorts"))
Scope.__doc__ = """
Flags usable at one command: `names` maps long names and `shorts` maps short
aliases to the Flag that wins after shadowing.
"""


def _validate_name(cls, name, /, *, what="name"):
    """
    Command names and aliases: non-empty, no whitespace, never flag-like.
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {what} must be a string")
    elif not name or name != name.strip() or any(char.isspace() for char in name):
        raise ValueError(f"{cls.__typename__} {what} cannot be empty or contain whitespace")
    elif name.startswith("-"):
        raise ValueError(f"{cls.__typename__} {what} {name!r} cannot start with '-'")
    return name


def _claim(parent, child, names):
    """
    Ensure `names` are not taken by any sibling of `child` under `parent`.
    """
    for sibling in getattr(parent, "_children", ()):
        if sibling is child:
            continue
        if taken := set(names) & {sibling.name, *sibling.aliases}:
            typeof = "subcommand" if parent.parent else "command"
            raise ValueError(f"{type(child).__typename__} {typeof} name {sorted(taken)[0]!r} is already in use")


class Command(metaclass=IntrospectiveType):
    """
    One node of a command tree.

    Responsibilities
    - Introspection: exposes metadata (name, descr, usage, aliases, flags, ...)
      as read-only properties.
    - Composition: parent/child hierarchies model subcommands; add_subcommand()
      keeps children[i].parent is self.
    - Scoping: collect_persistent_flags() and scope() compute the flags usable at
      this node.
    - Registration: handler and hooks are registered once each, decorator-style.

    Notes
    - Containers are exposed as tuples / read-only mappings.
    - colorful/fancy runtime options are inherited from the parent when unset.
    """

    __introspectable__ = (
        "name",
        "descr",
        "usage",
        "aliases",
        "flags",
        "persistent_flags",
        "children",
        "parent",
        "hooks",
        "version",
    )

    # Parent is left out so nested representations stay finite.
    __displayable__ = (
        "name",
        "descr",
        "aliases",
        "flags",
        "persistent_flags",
        "children",
        "version",
    )

    def __init__(
            self,
            handler=Unset,
            /,
            parent=Unset,
            name=Unset,
            descr=Unset,
            usage=Unset,
            aliases=(),
            version=Unset,
            *,
            colorful=Unset,
            fancy=Unset,
    ):
        """
        Construct a Command, optionally wrapping a handler and attaching to a parent.

        Parameters
        - handler: Callable | Unset
          Callable receiving the Context. When given, the name defaults to its
          __name__ (underscores become dashes) and descr to its docstring.
        - parent: Command | Unset
          Parent to attach to. Without a parent this is a root; a root may keep
          the empty name (a synthetic root).
        - name, descr, usage: str | Unset
        - aliases: Iterable[str]
          Alternate, case-sensitive names.
        - version: str | Unset
          Shown by `-V/--version` when this command is the root.
        - colorful, fancy: bool | Unset
          Rendering options; inherited from the parent when Unset.

        Raises
        - TypeError/ValueError on invalid metadata, a non-callable handler, or
          name conflicts upon attachment.
        """
        if not isinstance(parent, Command | UnsetType):
            raise TypeError(f"{type(self).__typename__} 'parent' must be a command")
        if handler is not Unset and not callable(handler):
            raise TypeError(f"{type(self).__typename__} handler must be callable")

        if name is Unset and handler is not Unset:
            name = getattr(handler, "__name__", Unset)
            if isinstance(name, str):
                name = name.strip("_").replace("_", "-")
        if name is Unset:
            if parent is not Unset:
                raise TypeError(f"{type(self).__typename__} must specify a name")
            name = ""
        if name != "" or parent is not Unset:
            _validate_name(type(self), name)

        if descr is Unset and handler is not Unset:
            # a blank docstring means no description
            descr = (getattr(handler, "__doc__", None) or "").strip() or Unset
        for field, value in (("descr", descr), ("usage", usage), ("version", version)):
            if not isinstance(value, str | UnsetType):
                raise TypeError(f"{type(self).__typename__} {field!r} must be a string")
        if isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{type(self).__typename__} 'descr' cannot be empty")

        self._name = name
        self._descr = coalesce(descr)
        self._usage = coalesce(usage)
        self._version = coalesce(version)
        self._aliases = []
        self._flags = []
        self._persistent_flags = []
        self._children = []
        self._parent = None
        self._hooks = dict.fromkeys(_HOOKS)
        self._colorful = colorful
        self._fancy = fancy

        for alias in aliases:
            self.add_alias(alias)
        if handler is not Unset:
            self.handler(handler)
        if parent is not Unset:
            parent.add_subcommand(self)

    @property
    def root(self):
        """
        Return the topmost command in the current command hierarchy.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the full ancestry from root to this command as a tuple.
        """
        path = [command := self]
        while command.parent:
            path.append(command := command.parent)
        return tuple(reversed(path))

    @property
    def route(self):
        """
        User-facing invocation route, e.g. 'mycli remote add'.

        A synthetic (unnamed) root is shown as the running program's basename.
        """
        return " ".join(step.name or os.path.basename(sys.argv[0]) for step in self.path)

    @property
    def colorful(self):
        return bool(coalesce(self._colorful, self.parent.colorful if self.parent else False))

    @property
    def fancy(self):
        return bool(coalesce(self._fancy, self.parent.fancy if self.parent else False))

    def _check_flag(self, flag):
        if not isinstance(flag, Flag):
            raise TypeError(f"{type(self).__typename__} flags must be flag instances")
        for other in itertools.chain(self._flags, self._persistent_flags):
            if other.name == flag.name:
                raise ValueError(f"{type(self).__typename__} {self.route!r} already has a flag named {flag.name!r}")
            if flag.short and other.short == flag.short:
                raise ValueError(f"{type(self).__typename__} {self.route!r} already has a flag with short {flag.short!r}")

    def add_flag(self, flag, /):
        """
        Append a flag usable on this command only. Returns the flag.
        """
        self._check_flag(flag)
        self._flags.append(flag)
        return flag

    def add_persistent_flag(self, flag, /):
        """
        Append a flag usable on this command and every descendant. Returns the flag.
        """
        self._check_flag(flag)
        self._persistent_flags.append(flag)
        return flag

    def _typed_flag(self, kind, name, short, descr, default, required, persistent):
        flag = Flag(name, short, kind=kind, descr=descr, default=default, required=required)
        return (self.add_persistent_flag if persistent else self.add_flag)(flag)

    def bool_flag(self, name, short=Unset, /, descr=Unset, default=Unset, required=False, *, persistent=False):
        return self._typed_flag(FlagKind.BOOL, name, short, descr, default, required, persistent)

    def string_flag(self, name, short=Unset, /, descr=Unset, default=Unset, required=False, *, persistent=False):
        return self._typed_flag(FlagKind.STRING, name, short, descr, default, required, persistent)

    def int_flag(self, name, short=Unset, /, descr=Unset, default=Unset, required=False, *, persistent=False):
        return self._typed_flag(FlagKind.INT, name, short, descr, default, required, persistent)

    def float_flag(self, name, short=Unset, /, descr=Unset, default=Unset, required=False, *, persistent=False):
        return self._typed_flag(FlagKind.FLOAT, name, short, descr, default, required, persistent)

    def add_alias(self, alias, /):
        """
        Append a case-sensitive alternate name. Returns the alias.
        """
        _validate_name(type(self), alias, what="alias")
        if alias == self.name or alias in self._aliases:
            raise ValueError(f"{type(self).__typename__} alias {alias!r} is already in use")
        _claim(self.parent, self, (alias,))
        self._aliases.append(alias)
        return alias

    def add_subcommand(self, child, /):
        """
        Attach `child` under this command and point its parent here. Returns the child.

        Raises
        - TypeError when child is not a Command.
        - ValueError when child is already attached, would create a cycle, or
          its name/aliases clash with a sibling.
        """
        if not isinstance(child, Command):
            raise TypeError(f"{type(self).__typename__} subcommands must be commands")
        if child.parent is not None:
            raise ValueError(f"{type(self).__typename__} {child.route!r} is already attached to a parent")
        if child in self.path:
            raise ValueError(f"{type(self).__typename__} {child.name!r} cannot be attached to itself or its descendants")
        _validate_name(type(self), child.name)
        _claim(self, child, (child.name, *child.aliases))
        self._children.append(child)
        child._parent = self
        return child

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Create or attach a subcommand under this command.

        Thin wrapper around command(...) that injects parent=self:
        - Callback mode: self.command(callback, ...) -> Command
        - Decorator mode: @self.command(...)
        """
        return command(source, self, *args, **kwargs)

    def _register(self, hook, callback):
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} {hook} must be callable")
        if self._hooks[hook] is not None:
            raise TypeError(f"{type(self).__typename__} {hook} cannot be overridden")
        self._hooks[hook] = callback
        return callback

    def handler(self, handler, /):
        """
        Register the handler (decorator-friendly). Can be set only once.
        """
        return self._register("handler", handler)

    def pre_run(self, hook, /):
        return self._register("pre_run", hook)

    def post_run(self, hook, /):
        return self._register("post_run", hook)

    def persistent_pre_run(self, hook, /):
        """
        Register a pre-hook that also runs (outer first) before any descendant's handler.
        """
        return self._register("persistent_pre_run", hook)

    def persistent_post_run(self, hook, /):
        """
        Register a post-hook that also runs (inner first) after any descendant's handler.
        """
        return self._register("persistent_post_run", hook)

    def collect_persistent_flags(self):
        """
        Persistent flags of every node from the root down to this command, root's first.
        """
        return tuple(itertools.chain.from_iterable(step._persistent_flags for step in self.path))

    def scope(self):
        """
        Flags usable at this command after shadowing (see module docs).

        The chain runs root first, own flags last; a later entry overwrites an
        earlier one, for long names and shorts alike.
        """
        chain = (*self.collect_persistent_flags(), *self._flags)
        names = {}
        for flag in chain:
            names[flag.name] = flag
        shorts = {}
        for flag in chain:
            if flag.short and names[flag.name] is flag:
                shorts[flag.short] = flag
        return Scope(MappingProxyType(names), MappingProxyType(shorts))

    def find(self, token, /):
        """
        The direct child whose name or one of whose aliases equals `token`, or None.
        """
        for child in self._children:
            if token == child.name or token in child._aliases:
                return child
        return None


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct callback:
        cmd = command(func, parent, name="x")
    - Decorator:
        @command(name="x", version="1.0.0")
        def func(context): ...

    Parameters
    - source: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Command is created.
    - *args, **kwargs: forwarded to Command (parent, name, descr, ...).
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Command",
    "Scope",
    "command",
)
