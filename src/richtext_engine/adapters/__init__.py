"""Host adapters for the formatting engine."""
