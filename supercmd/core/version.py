"""VersionCommand -- Prints the version a SuperCommand was configured with."""

from .command import CommandBase, Context, Info


class VersionCommand(CommandBase):

    def __init__(self, version: str):
        self.version = version

    def info(self) -> Info:
        return Info(name="version", purpose="print the current version")

    def run(self, ctx: Context) -> None:
        ctx.stdout.write(self.version + "\n")
