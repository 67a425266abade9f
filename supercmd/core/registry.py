"""
Registry -- Alias-aware, insertion-ordered store of actions

An Action is what a super-command performs for a given subcommand name.
The Registry maps names to actions and keeps:
- order: every registered name, aliases included, in insertion order
- actions: canonical name -> Action
- aliases: alias -> canonical name (one level only, never alias -> alias)

Registration either fully succeeds or leaves the registry untouched.
The registry is built once at startup and only read afterwards.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..errors import RegistryError
from .command import Command, Context, Info


class DeprecationCheck:
    """Decides whether a command is deprecated or obsolete."""

    def deprecated(self) -> Tuple[bool, str]:
        """Return (is_deprecated, replacement_name)."""
        return False, ""

    def obsolete(self) -> bool:
        """Obsolete commands are not registered at all."""
        return False


@dataclass
class Action:
    """A named wrapper around a command."""
    name: str
    command: Optional[Command]
    # Name of the action this one aliases (empty unless an alias view)
    aliased_name: str = ""
    aliases: List[str] = field(default_factory=list)
    # Non-empty means deprecated in favour of this name
    replacement: str = ""

    def validate(self) -> None:
        if not self.name:
            raise RegistryError("action missing name")
        if self.command is None:
            raise RegistryError("action missing command")

    def summary(self) -> str:
        """Short description of the action."""
        if self.aliased_name:
            return f"alias for '{self.aliased_name}'"
        return self.command.info().purpose

    def new_alias(self, alias: str) -> "Action":
        """An alias view sharing this action's command."""
        return dataclasses.replace(self, name=alias, aliased_name=self.name, aliases=[])

    def info(self) -> Info:
        return self.command.info()

    def init(self, args: List[str]) -> None:
        self.command.init(args)

    def pre_run(self, ctx: Context) -> None:
        if self.replacement:
            ctx.infof('WARNING: "%s" is deprecated, please use "%s"', self.name, self.replacement)

    def run(self, ctx: Context) -> None:
        self.command.run(ctx)


def new_action_from_command(command: Command) -> Action:
    info = command.info()
    return Action(name=info.name, command=command, aliases=list(info.aliases))


class Registry:
    """Insertion-order-preserving mapping of names to actions."""

    def __init__(self, *initial: Action):
        self._order: List[str] = []
        self._actions: Dict[str, Action] = {}
        self._aliases: Dict[str, str] = {}
        self._default_name = ""
        for action in initial:
            self.add_with_aliases(action)

    @classmethod
    def with_default(cls, default: Action) -> "Registry":
        """Create a registry holding default, which lookup() returns for an empty path."""
        registry = cls(default)
        registry._default_name = default.name
        return registry

    def names(self) -> List[str]:
        """All registered names, aliases included, in insertion order."""
        return list(self._order)

    def lookup(self, *path: str) -> Optional[Action]:
        """
        Find the action at path.

        With no path the default action is returned. Otherwise each element
        is resolved in turn, descending into the registry of every
        super-command on the way. All elements must resolve; a missing name
        or a leaf command followed by more names gives None.
        """
        if not path:
            return self._lookup(self._default_name)

        registry = self
        action = None
        for index, name in enumerate(path):
            action = registry._lookup(name)
            if action is None:
                return None
            if index == len(path) - 1:
                break
            if not action.command.is_super_command():
                return None
            registry = action.command.subcmds
        return action

    def _lookup(self, name: str) -> Optional[Action]:
        if not name:
            return None
        action = self._actions.get(name)
        if action is not None:
            return action
        aliased = self._aliases.get(name)
        if aliased is not None and aliased in self._actions:
            return self._actions[aliased].new_alias(name)
        return None

    def add(self, action: Action) -> None:
        """Add action under its own name; fails if the name is taken."""
        action.validate()
        if self.lookup(action.name) is not None:
            raise RegistryError(f'command "{action.name}" already registered')
        self._actions[action.name] = action
        self._order.append(action.name)

    def add_with_aliases(self, action: Action) -> None:
        """
        Add action and every alias it declares, atomically.

        If any alias collides, the canonical name and the aliases added so
        far are removed again before the error propagates.
        """
        self.add(action)

        added = []
        for alias in action.aliases:
            try:
                self.add_alias(action.name, alias)
            except RegistryError:
                self._remove(action.name)
                for name in added:
                    self._remove(name)
                raise
            added.append(alias)

    def add_alias(self, name: str, alias: str) -> None:
        """Make the canonical action name also available as alias."""
        if name not in self._actions:
            raise RegistryError(f'action "{name}" not found')
        if self.lookup(alias) is not None:
            raise RegistryError(f'action "{alias}" already added')
        self._aliases[alias] = name
        self._order.append(alias)

    def _remove(self, name: str) -> Optional[Action]:
        # Does not cascade to the aliases of a canonical name.
        if name in self._actions:
            action = self._actions.pop(name)
        elif name in self._aliases:
            action = None
            del self._aliases[name]
        else:
            return None
        self._order.remove(name)
        return action
