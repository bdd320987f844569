"""Expose dashboard card render functions."""

from .card_map import card_map
from .card_search import card_search

__all__ = [
    "card_map",
    "card_search",
]
