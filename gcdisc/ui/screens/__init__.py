"""Screen components for the TUI application."""

from .base import BaseScreen
from .entries import EntriesScreen
from .summary import SummaryScreen

# Screen registry for navigation
_SCREEN_REGISTRY: dict[str, type[BaseScreen]] = {
    "summary": SummaryScreen,
    "entries": EntriesScreen,
}


def get_screen_by_name(name: str) -> BaseScreen | None:
    """Get a screen instance by its registered name.

    Args:
        name: The registered name of the screen

    Returns:
        A new instance of the screen, or None if not found
    """
    screen_class = _SCREEN_REGISTRY.get(name)
    if screen_class:
        return screen_class()
    return None


__all__ = [
    "BaseScreen",
    "EntriesScreen",
    "SummaryScreen",
    "get_screen_by_name",
]
