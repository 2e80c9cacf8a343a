from rich.console import Console

from valkyrie import *

console = Console()

root = Command(name="mycli", descr="a small demonstration tool", version="1.0.0", colorful=True)
root.bool_flag("verbose", "v", descr="print what is going on", persistent=True)


@root.command(aliases=("srv",))
def serve(context):
    """start the development server"""
    if context.get_bool("verbose"):
        console.print("binding to %s:%d" % (context.get_string("host"), context.get_int("port")))
    console.print("serving on port %d" % context.get_int("port"))


serve.int_flag("port", "p", descr="port to listen on", default=8080)
serve.string_flag("host", descr="interface to bind", default="127.0.0.1")

# a group: no handler, so invoking it alone shows its help
remote = Command(parent=root, name="remote", descr="manage remotes", aliases=("rm",))
remote.float_flag("timeout", "t", descr="network timeout in seconds", default=2.5, persistent=True)


@remote.persistent_pre_run
def connect(context):
    if context.get_bool("verbose"):
        console.print("connecting (timeout %.1fs)" % context.get_float("timeout"))


@remote.persistent_post_run
def disconnect(context):
    if context.get_bool("verbose"):
        console.print("disconnected")


@remote.command
def add(context):
    """register a new remote"""
    if len(context.args) != 2:
        console.print("expected <name> <url>")
        return False
    console.print("added %s → %s" % tuple(context.args))


@remote.command(name="list", aliases=("ls",))
def list_remotes(context):
    """list registered remotes"""
    console.print("origin")


if __name__ == '__main__':
    invoke(root)
