"""
Help and version renderers.

Both functions are pure: they build a rich renderable from a command and leave
printing to the caller (the application shell).

Palette keys (override any of them with a __styles__ mapping in __main__)
- usage-label, program-name, usage-section, description-section
- children-title, children-table, children, alias, children-description
- group-label, flag-name, metavar, flag-description, required, default
- program-version, panel-title

When the command is not colorful, styling is suppressed; fancy wraps the output
in a panel.
"""
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .flags import FlagKind


def _palette():
    return defaultdict(str, {
        # usage line and description
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "usage-section": "bold #36C5F0",
        "description-section": "italic #A3A3A3",

        # subcommands
        "children-title": "bold #FFFFFF",
        "children-table": "#4B5563",
        "children": "bold #36C5F0",
        "alias": "#36C5F0 dim",
        "children-description": "#9CA3AF",

        # flag sections; kinds in amber, required markers in red
        "group-label": "bold #FFFFFF",
        "flag-name": "bold #22C55E",
        "metavar": "bold #FFD600",
        "flag-description": "#9CA3AF",
        "required": "bold #EF4444",
        "default": "#737373",

        "program-version": "bold #00E6FF",
        "panel-title": "bold #FF4D94",
    } | getattr(__import__('__main__'), "__styles__", {}))


def _stylers(command):
    styles = _palette()

    def styler(style):
        return styles[style] if command.colorful else ""

    def text(fragment, style=""):
        if not command.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def _flag_rows(flags, styler, text, shorts=None):
    """
    one (names, description) row per flag: '-p, --port <int>' / 'port to listen on (default: 8080)'.
    a short owned by another flag in `shorts` is left out.
    """
    for flag in flags:
        switches = flag.switches
        if shorts is not None and flag.short and shorts.get(flag.short) is not flag:
            switches = switches[1:]
        names = Text(", ").join(text(switch, styler("flag-name")) for switch in switches)
        if len(switches) == 1:
            names = Text("    ") + names
        if flag.kind is not FlagKind.BOOL:
            names.append(" ").append(text(flag.kind.metavar, styler("metavar")))

        descr = text(flag.descr or "", styler("flag-description"))
        if flag.required:
            descr.append(" ").append(text("(required)", styler("required")))
        elif flag.default != flag.kind.zero:
            descr.append(" ").append(text("(default: %r)" % flag.default, styler("default")))
        yield names, descr


def render_help(command, /):
    """
    Build the help renderable for `command`.

    Sections
    - usage: explicit `usage` or synthesized '<route> [flags] [<command>]'
    - description
    - commands / subcommands table (name, aliases, description)
    - flags: the command's own flags plus -h/--help (and -V/--version at the root)
    - global flags: the persistent chain visible from this command
    """
    styler, text = _stylers(command)
    renders = []

    usage = Text()
    usage.append(text("usage", styler("usage-label"))).append(":")
    usage.append(" ")
    if command.usage:
        usage.append(text(command.usage, styler("usage-section")))
    else:
        usage.append(text(command.route, styler("program-name")))
        usage.append(" ").append(text("[flags]", styler("usage-section")))
        if command.children:
            usage.append(" ").append(text("<command>", styler("usage-section")))
    renders.append(usage)

    if command.descr:
        renders.append(Text("\n").append(text(command.descr, styler("description-section"))))

    if command.children:
        typeof = "subcommands" if command.parent else "commands"
        table = Table(
            "name", "help",
            title=text(typeof, styler("children-title")),
            box=ROUNDED,
            style=styler("children-table"),
            header_style=styler("children-title"),
        )
        for child in command.children:
            name = text(child.name, styler("children"))
            if child.aliases:
                name.append(" ").append(text("(%s)" % ", ".join(child.aliases), styler("alias")))
            if child.descr:
                help = text(child.descr, styler("children-description"))
            else:
                help = Text.assemble(
                    text("no description", styler("children-description")),
                    " — ",
                    text(f"run '{child.route} --help' for details", styler("children-description")),
                )
            table.add_row(name, help)
        renders.append(Text(""))
        renders.append(table)

    # Own flags (persistent ones of this very command are listed as global).
    own = list(_flag_rows(command.flags, styler, text))
    own.append((Text(", ").join((text("-h", styler("flag-name")), text("--help", styler("flag-name")))),
                text("show this help message and exit", styler("flag-description"))))
    if command.parent is None and command.version:
        own.append((Text(", ").join((text("-V", styler("flag-name")), text("--version", styler("flag-name")))),
                    text("show the version and exit", styler("flag-description"))))

    scope = command.scope()
    persistent = [flag for flag in command.collect_persistent_flags() if scope.names[flag.name] is flag]
    for label, rows in (("flags", own), ("global flags", list(_flag_rows(persistent, styler, text, scope.shorts)))):
        if not rows:
            continue
        grid = Table.grid(padding=(0, 3))
        grid.add_column(no_wrap=True)
        grid.add_column()
        for names, descr in rows:
            grid.add_row(Text("  ") + names, descr)
        renders.append(Text("\n").append(text(label, styler("group-label"))).append(":"))
        renders.append(grid)

    renderable = Group(*renders)

    if command.fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", f"{command.route} HELP".upper(), " ", "]", style=styler("panel-title")),
            title_align="left",
        )

    return renderable


def render_version(command, /):
    """
    Build the version renderable: '<name> <version>' of the command's root.
    """
    root = command.root
    styler, text = _stylers(root)
    renderable = Text(" ").join((
        text(root.route, styler("program-name")),
        text(root.version or "unknown", styler("program-version")),
    ))
    if root.fancy:
        return Panel(
            renderable,
            title=Text.assemble("[", " ", f"{root.route} VERSION".upper(), " ", "]", style=styler("panel-title")),
            title_align="left",
        )
    return renderable


__all__ = (
    "render_help",
    "render_version",
)
