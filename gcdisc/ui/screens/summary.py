"""Summary screen: header, region and banner text of the open image."""

from typing import Any, ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Static

import structlog

from gcdisc.services.report import disc_summary, format_file_size

from .base import BaseScreen

log = structlog.stdlib.get_logger()


def summary_rows(summary: dict[str, Any]) -> list[tuple[str, str]]:
    """Flatten a disc summary into (label, value) rows for display."""
    banner = summary["banner"]
    return [
        ("Game ID", summary["game_id"]),
        ("Game name", summary["game_name"]),
        ("Region", summary["region"]),
        ("Disc / version", f"{summary['disk_id']} / {summary['version']}"),
        ("Audio streaming", "yes" if summary["audio_streaming"] else "no"),
        ("DOL offset", f"{summary['dol_offset']:#010x}"),
        ("FST offset", f"{summary['fst_offset']:#010x}"),
        ("FST size", format_file_size(summary["fst_size"])),
        ("Banner", f"BNR{banner['version']}"),
        ("Title", banner["full_game_title"] or banner["game_name"]),
        ("Developer", banner["full_developer_name"] or banner["developer"]),
        ("Description", banner["description"]),
    ]


class SummaryScreen(BaseScreen):
    """Root screen showing what the header and banner say about the disc."""

    SCREEN_TITLE: ClassVar[str] = "Disc Summary"
    SCREEN_NAME: ClassVar[str] = "summary"

    CSS: ClassVar[str] = """
    SummaryScreen {
        align: center middle;
    }

    #summary-container {
        width: 90%;
        height: auto;
        padding: 1 2;
        border: solid $primary;
        background: $surface;
    }

    .summary-row {
        height: auto;
    }

    .summary-label {
        color: $text-muted;
        width: 18;
    }

    .summary-value {
        color: $text;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("e", "show_entries", "Entries", show=True),
        Binding("escape", "go_back", "Quit", show=True),
    ]

    @override
    def compose(self) -> ComposeResult:
        image = self.disc_image
        summary = disc_summary(image.header, image.region, image.banner)
        with Container(id="summary-container"):
            yield self.create_title_widget(summary["game_name"] or self.SCREEN_TITLE)
            with Vertical():
                for label, value in summary_rows(summary):
                    with Horizontal(classes="summary-row"):
                        yield Static(f"{label}:", classes="summary-label")
                        yield Static(value, classes="summary-value", markup=False)

    async def action_show_entries(self) -> None:
        await self.browser_app.push_screen_with_tracking("entries")

    @override
    async def action_go_back(self) -> None:
        """Back from the root screen quits."""
        log.info("Quit requested from summary")
        self.browser_app.exit()
