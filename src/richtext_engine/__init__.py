"""Selection-scoped rich-text formatting engine."""

__all__ = [
    "adapters",
    "commands",
    "config",
    "document",
    "presentation",
    "runtime",
    "session",
    "transforms",
]

__version__ = "0.1.0"
