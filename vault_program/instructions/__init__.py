"""Handlers for each vault instruction."""
from .close import process_close
from .open import process_open
from .split import process_split

__all__ = [
    "process_open",
    "process_split",
    "process_close",
]
