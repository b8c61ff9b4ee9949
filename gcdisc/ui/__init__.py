"""User interface components using Textual framework."""

from .app import DiscBrowserApp
from .screens import (
    BaseScreen,
    EntriesScreen,
    SummaryScreen,
    get_screen_by_name,
)

__all__ = [
    "BaseScreen",
    "DiscBrowserApp",
    "EntriesScreen",
    "SummaryScreen",
    "get_screen_by_name",
]
