"""Static command registry: name -> descriptor, shared by every terminal."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from termfolio.kernel.types import CommandDescriptor, CommandSummary


def normalize_command_name(name: str) -> str:
    return str(name or "").strip().lower()


class CommandRegistry:
    """Read-only lookup table; extending it means adding descriptors."""

    def __init__(self, descriptors: Iterable[CommandDescriptor]) -> None:
        entries: Dict[str, CommandDescriptor] = {}
        for descriptor in descriptors:
            key = normalize_command_name(descriptor.name)
            if not key:
                raise ValueError("command name must not be empty")
            if key in entries:
                raise ValueError("duplicate command name: {0}".format(descriptor.name))
            entries[key] = descriptor
        self._entries = entries
        self._order: Tuple[str, ...] = tuple(entries.keys())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_command_name(name) in self._entries

    def __len__(self) -> int:
        return len(self._order)

    def lookup(self, name: str) -> Optional[CommandDescriptor]:
        return self._entries.get(normalize_command_name(name))

    def names(self) -> List[str]:
        return [self._entries[key].name for key in self._order]

    def list_commands(self) -> List[CommandSummary]:
        return [
            CommandSummary(name=self._entries[key].name, description=self._entries[key].description)
            for key in self._order
        ]

    def complete(self, prefix: str) -> List[str]:
        """Registry names whose lowercase form starts with the lowercase prefix."""

        lowered = str(prefix or "").lower()
        return [name for name in self.names() if name.lower().startswith(lowered)]
