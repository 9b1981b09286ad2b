"""Dataclasses describing key chords, commands, and bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, Optional

from richtext_engine.document.tags import Tag

if TYPE_CHECKING:  # pragma: no cover - typing only
    from richtext_engine.session import EditingSession

_MODIFIER_ALIASES = {"control": "ctrl", "ctl": "ctrl", "meta": "alt", "option": "alt"}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = []
    for modifier in modifiers:
        cleaned = modifier.strip().lower()
        if cleaned:
            values.append(_MODIFIER_ALIASES.get(cleaned, cleaned))
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(frozen=True, slots=True)
class KeyChord:
    """A key plus the modifiers held with it, e.g. ``ctrl+b``."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", self.key.lower())
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join((*self.modifiers, self.key))
        return self.key

    @classmethod
    def parse(cls, token: str) -> "KeyChord":
        parts = [part for part in token.strip().split("+") if part.strip()]
        if not parts:
            raise ValueError("key chord cannot be empty")
        return cls(parts[-1].strip(), tuple(parts[:-1]))


@dataclass(frozen=True, slots=True)
class Command:
    """Named editing action run against a session."""

    id: str
    handler: Callable[["EditingSession"], object]
    description: str = ""
    tag: Optional[Tag] = None
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Command id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, session: "EditingSession") -> object:
        return self.handler(session)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key chord with a command."""

    id: str
    chord: KeyChord
    command_id: str
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.command_id:
            raise ValueError("binding command_id cannot be empty")
        if isinstance(self.chord, str):
            object.__setattr__(self, "chord", KeyChord.parse(self.chord))

    @property
    def key_signature(self) -> str:
        return self.chord.token


__all__ = ["KeyChord", "Command", "Binding"]
