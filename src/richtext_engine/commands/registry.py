"""Command registry responsible for storing commands and key bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, Optional

from richtext_engine.document.tags import BlockTag, InlineMarkTag, Tag, parse_tag
from richtext_engine.runtime.telemetry import span

from .models import Binding, Command, KeyChord

if TYPE_CHECKING:  # pragma: no cover - typing only
    from richtext_engine.session import EditingSession


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    command_count: int
    binding_count: int
    tags: tuple[str, ...]


class CommandConflictError(RuntimeError):
    """Raised when a new binding reuses a chord that is already taken."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


class CommandRegistry:
    """Owns commands, their key bindings, and the tag index used by toolbars."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._commands: Dict[str, Command] = {}
        self._bindings: Dict[str, Binding] = {}
        self._by_chord: Dict[str, str] = {}
        self._by_tag: Dict[Tag, str] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_command(self, command_id: str) -> Command:
        try:
            return self._commands[command_id]
        except KeyError as exc:
            raise KeyError(f"Command '{command_id}' is not registered") from exc

    def register_command(self, command: Command, *, replace: bool = False) -> Command:
        with span(
            "commands::register_command",
            logger_name=self._logger_name,
            component="commands",
            metadata={"command_id": command.id},
        ):
            if not replace and command.id in self._commands:
                raise ValueError(f"Command '{command.id}' already registered")
            self._commands[command.id] = command
            if command.tag is not None:
                self._by_tag[command.tag] = command.id
            self._revision += 1
            return command

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "commands::register_binding",
            logger_name=self._logger_name,
            component="commands",
            metadata={"binding_id": binding.id, "chord": binding.key_signature},
        ) as handle:
            if binding.command_id not in self._commands:
                handle.add_metadata("missing_command", binding.command_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown command '{binding.command_id}'"
                )

            conflicts = self.detect_conflicts(binding)
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise CommandConflictError(binding, conflicts)

            if replace:
                for conflict in conflicts:
                    self._drop(conflict)
                existing = self._bindings.get(binding.id)
                if existing:
                    self._drop(existing)
            elif binding.id in self._bindings:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            self._bindings[binding.id] = binding
            self._by_chord[binding.key_signature] = binding.id
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is None:
            return None
        self._drop(binding)
        self._revision += 1
        return binding

    def detect_conflicts(self, binding: Binding) -> list[Binding]:
        match_id = self._by_chord.get(binding.key_signature)
        if match_id is None or match_id == binding.id:
            return []
        return [self._bindings[match_id]]

    def resolve(self, chord: KeyChord | str) -> Optional[Command]:
        """Return the command bound to ``chord``, if any."""

        if isinstance(chord, str):
            chord = KeyChord.parse(chord)
        binding_id = self._by_chord.get(chord.token)
        if binding_id is None:
            return None
        return self._commands[self._bindings[binding_id].command_id]

    def command_for_tag(self, tag: Tag | str) -> Optional[Command]:
        """Look a command up by tag, or by tag name such as ``"strong"``."""

        if isinstance(tag, str) and not isinstance(tag, (BlockTag, InlineMarkTag)):
            try:
                tag = parse_tag(tag)
            except ValueError:
                return None
        command_id = self._by_tag.get(tag)
        return self._commands.get(command_id) if command_id else None

    def execute(self, command_id: str, session: "EditingSession") -> object:
        command = self.get_command(command_id)
        with span(
            "commands::execute",
            logger_name=self._logger_name,
            metadata={"command_id": command.id},
        ):
            return command(session)

    def iter_bindings(self) -> Iterator[Binding]:
        yield from self._bindings.values()

    def stats(self) -> RegistryStats:
        return RegistryStats(
            command_count=len(self._commands),
            binding_count=len(self._bindings),
            tags=tuple(sorted(tag.value for tag in self._by_tag)),
        )

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        if self._by_chord.get(binding.key_signature) == binding.id:
            self._by_chord.pop(binding.key_signature, None)


__all__ = [
    "CommandRegistry",
    "CommandConflictError",
    "RegistryStats",
]
