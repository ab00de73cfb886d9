"""Stateful editor features.

reverse_search
    :class:`ReverseSearchManager`: Ctrl+R reverse-i-search state machine.
"""

from .reverse_search import ReverseSearchManager

__all__ = ["ReverseSearchManager"]
