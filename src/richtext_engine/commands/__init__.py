"""Command registry and default key bindings."""

from .models import Binding, Command, KeyChord
from .registry import CommandConflictError, CommandRegistry, RegistryStats
from .defaults import load_default_commands

__all__ = [
    "Binding",
    "Command",
    "KeyChord",
    "CommandRegistry",
    "CommandConflictError",
    "RegistryStats",
    "load_default_commands",
]
