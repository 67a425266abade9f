"""
main -- Runs a command as a process would and returns its exit code

Exit codes:
- 0: success, or help was requested
- 2: flags or arguments could not be parsed
- a child's own code: a plugin exited non-zero (RcPassthroughError)
- 1: any other failure
"""

from typing import List

from ..errors import CommandError, HelpRequested, RcPassthroughError, SilentError
from .command import Command, Context
from .flags import FlagSet


def main(command: Command, ctx: Context, args: List[str]) -> int:
    """Declare flags, parse args, init and run command; map errors to exit codes."""
    f = FlagSet(command.info().name)
    command.set_flags(f)

    try:
        f.parse(command.allow_interspersed_flags(), args)
        command.init(f.args())
    except HelpRequested:
        ctx.stdout.write(command.info().help(f))
        return 0
    except CommandError as err:
        ctx.stderr.write(f"error: {err}\n")
        return 2

    try:
        command.run(ctx)
    except RcPassthroughError as err:
        return err.code
    except SilentError:
        return 1
    except CommandError as err:
        ctx.stderr.write(f"error: {err}\n")
        return 1
    return 0
