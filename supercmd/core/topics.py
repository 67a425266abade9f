"""
Topics -- Help topics looked up by name or alias

A simpler sibling of the command Registry, used only for prose lookup by
the help command. Aliases are searchable but not listed.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..errors import RegistryError


@dataclass
class Topic:
    name: str
    short: str
    long: Callable[[], str]
    aliases: List[str] = field(default_factory=list)


def echo(text: str) -> Callable[[], str]:
    return lambda: text


class Topics:
    """Insertion-ordered help topics with one level of aliasing."""

    def __init__(self, *initial: Topic):
        self._order: List[str] = []
        self._topics: Dict[str, Topic] = {}
        self._aliases: Dict[str, str] = {}
        for topic in initial:
            self.add_with_aliases(topic)

    def names(self) -> List[str]:
        return list(self._order)

    def names_without_aliases(self) -> List[str]:
        return [name for name in self._order if name not in self._aliases]

    def lookup(self, name: str) -> Optional[Topic]:
        topic = self._topics.get(name)
        if topic is not None:
            return topic
        aliased = self._aliases.get(name)
        if aliased is not None:
            return self._topics.get(aliased)
        return None

    def add(self, topic: Topic) -> None:
        if self.lookup(topic.name) is not None:
            raise RegistryError(f"help topic already added: {topic.name}")
        self._topics[topic.name] = topic
        self._order.append(topic.name)

    def add_with_aliases(self, topic: Topic) -> None:
        self.add(topic)

        added = []
        for alias in topic.aliases:
            try:
                self.add_alias(topic.name, alias)
            except RegistryError:
                self._remove(topic.name)
                for name in added:
                    self._remove(name)
                raise
            added.append(alias)

    def add_alias(self, name: str, alias: str) -> None:
        if name not in self._topics:
            raise RegistryError(f'topic "{name}" not found')
        if self.lookup(alias) is not None:
            raise RegistryError(f'topic "{alias}" already added')
        self._aliases[alias] = name
        self._order.append(alias)

    def _remove(self, name: str) -> None:
        if name in self._topics:
            del self._topics[name]
        elif name in self._aliases:
            del self._aliases[name]
        else:
            return
        self._order.remove(name)
