"""
Hook execution around dispatch.

Order for a resolved command C with path root → … → C:

    persistent_pre_run   root, …, C      (outer first)
    pre_run              C
    handler              C
    post_run             C
    persistent_post_run  C, …, root      (inner first)

Every stage is optional. A stage fails when its callable returns False or
raises; the failure skips every later stage and surfaces as a fault.
"""
import enum

from .faults import *


class Stage(enum.Enum):
    """
    Dispatch stages, in execution order. Values are the hook names on Command.
    """
    PERSISTENT_PRE = "persistent_pre_run"
    PRE = "pre_run"
    HANDLER = "handler"
    POST = "post_run"
    PERSISTENT_POST = "persistent_post_run"


class Outcome(enum.Enum):
    """
    DISPATCHED: the handler ran successfully.
    HELP: nothing ran; the command is a group without handler and help should be shown.
    """
    DISPATCHED = "dispatched"
    HELP = "help"


def schedule(command, /):
    """
    Yield (stage, owner, callback) for every defined hook of `command`, in order.
    """
    path = command.path
    for step in path:
        if callback := step.hooks[Stage.PERSISTENT_PRE.value]:
            yield Stage.PERSISTENT_PRE, step, callback
    for stage in (Stage.PRE, Stage.HANDLER, Stage.POST):
        if callback := command.hooks[stage.value]:
            yield stage, command, callback
    for step in reversed(path):
        if callback := step.hooks[Stage.PERSISTENT_POST.value]:
            yield Stage.PERSISTENT_POST, step, callback


def execute(context, /):
    """
    Run the hooks and handler of context.command.

    Returns
    - Outcome.DISPATCHED after every stage succeeded.
    - Outcome.HELP when the command has no handler but has children.

    Raises
    - MissingHandlerError when the command has neither handler nor children.
    - HookFailedError when a stage returns False.
    - DelegatedCommandError when a stage raises (chained to the original error).
    """
    command = context.command

    if command.hooks[Stage.HANDLER.value] is None:
        if command.children:
            return Outcome.HELP
        raise MissingHandlerError(
            "command %r has no handler" % command.route,
            title="missing handler",
            code=FaultCode.MISSING_HANDLER,
            hint="register one with @command.handler or pass it when building the command",
        )

    for stage, owner, callback in schedule(command):
        _call(stage, owner, callback, context)
    return Outcome.DISPATCHED


def _call(stage, owner, callback, context):
    what = "handler" if stage is Stage.HANDLER else "%s hook" % stage.value
    try:
        result = callback(context)
    except CommandException:
        raise
    except Exception as exception:
        raise DelegatedCommandError(
            "%s of %r raised %s: %s" % (what, owner.route, type(exception).__name__, exception),
            title="delegated error",
            code=FaultCode.DELEGATED_ERROR,
            stage=stage,
            exception=exception,
            hint="the original exception is attached as this fault's cause",
        ) from exception

    if result is False:
        raise HookFailedError(
            "%s of %r reported failure" % (what, owner.route),
            title="handler failed" if stage is Stage.HANDLER else "hook failed",
            code=FaultCode.HOOK_FAILED,
            stage=stage,
            hint="the %s returned False; later stages were skipped" % what,
        )


__all__ = (
    "Stage",
    "Outcome",
    "schedule",
    "execute",
)
