"""Main Textual application for browsing a disc image."""

from typing import ClassVar, override

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Footer, Header

import structlog

from gcdisc.services.disc_image import DiscImage


log = structlog.stdlib.get_logger()


class DiscBrowserApp(App[None]):
    """Root TUI application.

    Holds the opened ``DiscImage`` that every screen reads from, and keeps
    a navigation stack of registered screen names.
    """

    CSS: ClassVar[str] = """
    Screen {
        background: $surface;
    }

    .title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("q", "quit", "Quit", show=True, priority=True),
        Binding("escape", "go_back", "Back", show=True),
        Binding("?", "show_help", "Help", show=True),
    ]

    _disc_image: DiscImage
    _navigation_stack: list[str]

    def __init__(self, disc_image: DiscImage) -> None:
        """Initialize the application.

        Args:
            disc_image: An opened image; the caller remains responsible for closing it
        """
        super().__init__()
        self._disc_image = disc_image
        self._navigation_stack = []
        self.title = "GameCube Disc Inspector"  # type: ignore[assignment]
        self.sub_title = disc_image.header.game_id  # type: ignore[assignment]

        log.info("DiscBrowserApp initialized", game_id=disc_image.header.game_id)

    @property
    def disc_image(self) -> DiscImage:
        return self._disc_image

    @property
    def navigation_stack(self) -> list[str]:
        """Get the current navigation stack."""
        return self._navigation_stack.copy()

    @override
    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    async def on_mount(self) -> None:
        """Show the disc summary first."""
        await self.push_screen_with_tracking("summary")

    async def push_screen_with_tracking(self, screen_name: str) -> None:
        """Push a screen and track it in the navigation stack.

        Args:
            screen_name: Name of the screen to push
        """
        from gcdisc.ui.screens import get_screen_by_name

        screen = get_screen_by_name(screen_name)
        if screen:
            self._navigation_stack.append(screen_name)
            await self.push_screen(screen)
            log.info("Screen pushed", screen=screen_name, stack_depth=len(self._navigation_stack))
        else:
            log.warning("Unknown screen requested", screen=screen_name)

    async def action_go_back(self) -> None:
        """Navigate back to the previous screen."""
        if len(self._navigation_stack) > 1:
            current = self._navigation_stack.pop()
            log.info("Navigating back", from_screen=current, stack_depth=len(self._navigation_stack))
            _ = self.pop_screen()
        else:
            log.debug("Already at root screen, cannot go back")

    async def action_show_help(self) -> None:
        self.notify("Press 'e' for entries, 'escape' to go back, 'q' to quit")
