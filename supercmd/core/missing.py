"""
MissingCommand -- Deferred handling of an unknown subcommand name

When a SuperCommand has a missing callback, an unknown name does not fail
during init. The SuperCommand selects a MissingCommand instead, and the
callback is only invoked when that command runs.
"""

from typing import Callable, List

from ..errors import UnrecognizedCommand
from .command import CommandBase, Context, Info

# callback(ctx, subcommand, args); raises UnrecognizedCommand if it cannot
# handle subcommand either.
MissingCallback = Callable[[Context, str, List[str]], None]


class MissingCommand(CommandBase):
    """The selected action when a named subcommand is not registered."""

    def __init__(self, callback: MissingCallback, super_name: str, name: str, args: List[str]):
        self.callback = callback
        self.super_name = super_name
        self.name = name
        self.args = list(args)

    def info(self) -> Info:
        return Info(name=self.name, purpose=f"run '{self.name}' through the missing command handler")

    def init(self, args: List[str]) -> None:
        # The arguments are captured at construction and passed through untouched.
        pass

    def run(self, ctx: Context) -> None:
        try:
            self.callback(ctx, self.name, self.args)
        except UnrecognizedCommand:
            raise UnrecognizedCommand(f"{self.super_name} {self.name}") from None
