"""Base screen class with common functionality for all screens."""

from typing import TYPE_CHECKING, ClassVar

from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Static

import structlog

from gcdisc.services.errors import (
    ErrorSeverity,
    UserFriendlyError,
    get_error_service,
    handle_error,
)

if TYPE_CHECKING:
    from gcdisc.services.disc_image import DiscImage
    from gcdisc.ui.app import DiscBrowserApp

log = structlog.stdlib.get_logger()


class BaseScreen(Screen[None]):
    """Base screen providing back navigation, app access and error display.

    Subclasses override ``compose()`` and set ``SCREEN_TITLE`` and
    ``SCREEN_NAME``.
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
    ]

    SCREEN_TITLE: ClassVar[str] = "Screen"
    SCREEN_NAME: ClassVar[str] = "base"

    def __init__(self, name: str | None = None) -> None:
        super().__init__(name=name or self.SCREEN_NAME)

    @property
    def browser_app(self) -> "DiscBrowserApp":
        """Get the parent DiscBrowserApp instance.

        Raises:
            RuntimeError: If the screen is not attached to a DiscBrowserApp
        """
        from gcdisc.ui.app import DiscBrowserApp

        if isinstance(self.app, DiscBrowserApp):
            return self.app
        raise RuntimeError("Screen is not attached to a DiscBrowserApp")

    @property
    def disc_image(self) -> "DiscImage":
        return self.browser_app.disc_image

    async def on_mount(self) -> None:
        log.info("Screen mounted", screen=self.SCREEN_NAME, title=self.SCREEN_TITLE)

    async def action_go_back(self) -> None:
        await self.browser_app.action_go_back()

    def create_title_widget(self, title: str | None = None) -> Static:
        """Create a styled title widget for the screen."""
        return Static(title or self.SCREEN_TITLE, classes="title")

    def notify_error(self, message: str) -> None:
        self.notify(message, severity="error")
        log.error("User notification", message=message, screen=self.SCREEN_NAME)

    def notify_warning(self, message: str) -> None:
        self.notify(message, severity="warning")
        log.warning("User notification", message=message, screen=self.SCREEN_NAME)

    def handle_exception(
        self,
        error: Exception,
        operation: str,
        context: dict[str, str | int | float | bool] | None = None,
    ) -> UserFriendlyError:
        """Convert an exception to a user-friendly error and show it.

        Args:
            error: The exception that occurred
            operation: Description of the operation that failed
            context: Additional context information

        Returns:
            UserFriendlyError with message and suggested actions
        """
        user_error = handle_error(
            error=error,
            operation=operation,
            component=self.SCREEN_NAME,
            context=context,
        )

        message = get_error_service().create_user_message(user_error, include_suggestions=False)
        if user_error.severity == ErrorSeverity.WARNING:
            self.notify_warning(message)
        else:
            self.notify_error(message)

        return user_error
