"""cwd-history: prompt history shared across the sessions of a directory."""

from .aggregator import HistoryAggregator
from .editor import HistoryEditor
from .extension import CwdHistoryExtension
from .features.reverse_search import ReverseSearchManager
from .history import PromptEntry, build_history_list, histories_match
from .refresh import HistoryRefreshController

__version__ = "0.1.0"

__all__ = [
    "CwdHistoryExtension",
    "HistoryAggregator",
    "HistoryEditor",
    "HistoryRefreshController",
    "PromptEntry",
    "ReverseSearchManager",
    "build_history_list",
    "histories_match",
]
