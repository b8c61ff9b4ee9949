"""Entries screen for browsing and filtering the disc's FST."""

from collections.abc import Iterable
from typing import ClassVar, override

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.widgets import DataTable, Input, Select, Static

import structlog

from gcdisc.models import EntryKind, FilesystemEntry, FilesystemTree
from gcdisc.services.report import get_entry_display_info

from .base import BaseScreen

log = structlog.stdlib.get_logger()

KIND_FILTERS: tuple[str, ...] = ("All", "Files", "Directories")


def filter_entries(
    entries: Iterable[FilesystemEntry],
    search_query: str,
    kind_filter: str | None = None,
) -> list[FilesystemEntry]:
    """Filter entries by name substring (case-insensitive) and kind.

    On-disk order is preserved.

    Args:
        entries: Entries to filter
        search_query: Substring to look for in entry names
        kind_filter: "All", "Files" or "Directories"

    Returns:
        Matching entries, in their original order
    """
    result = list(entries)

    if search_query:
        query_lower = search_query.lower().strip()
        result = [e for e in result if query_lower in e.name.lower()]

    if kind_filter == "Files":
        result = [e for e in result if e.kind is EntryKind.FILE]
    elif kind_filter == "Directories":
        result = [e for e in result if e.kind is EntryKind.DIRECTORY]

    return result


class EntriesScreen(BaseScreen):
    """Table of every FST entry with live filtering and a detail pane."""

    SCREEN_TITLE: ClassVar[str] = "Filesystem Entries"
    SCREEN_NAME: ClassVar[str] = "entries"

    CSS: ClassVar[str] = """
    #entries-container {
        width: 100%;
        height: 100%;
        padding: 1 2;
    }

    #search-row {
        height: 3;
    }

    #search-input {
        width: 2fr;
    }

    #kind-select {
        width: 1fr;
        margin-left: 1;
    }

    #stats-row {
        height: auto;
    }

    .search-stat {
        color: $text-muted;
        margin-right: 2;
    }

    #table-section {
        height: 1fr;
        border: solid $primary-darken-2;
    }

    #details-section {
        height: auto;
        padding: 0 1;
        border: solid $secondary;
        display: none;
    }

    #details-section.has-selection {
        display: block;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "go_back", "Back", show=True),
        Binding("f", "focus_search", "Search", show=True),
        Binding("r", "refresh_entries", "Reload", show=True),
    ]

    _tree: FilesystemTree
    _filtered: list[FilesystemEntry]

    def __init__(self) -> None:
        super().__init__()
        self._tree = FilesystemTree()
        self._filtered = []

    @override
    def compose(self) -> ComposeResult:
        with Container(id="entries-container"):
            yield self.create_title_widget()
            with Horizontal(id="search-row"):
                yield Input(placeholder="Filter by name...", id="search-input")
                yield Select(
                    [(kind, kind) for kind in KIND_FILTERS],
                    value="All",
                    id="kind-select",
                    allow_blank=False,
                )
            with Horizontal(id="stats-row"):
                yield Static("Total: 0", id="stat-total", classes="search-stat")
                yield Static("Showing: 0", id="stat-showing", classes="search-stat")
            with ScrollableContainer(id="table-section"):
                yield DataTable(id="entries-table")
            with Vertical(id="details-section"):
                yield Static("", id="entry-details", markup=False)

    @override
    async def on_mount(self) -> None:
        await super().on_mount()
        table = self.query_one("#entries-table", DataTable)
        table.add_columns("#", "Name", "Kind", "Offset / Parent", "Size / Next")
        table.cursor_type = "row"
        self._load_entries()

    def _load_entries(self) -> None:
        """Re-read the FST from the image."""
        try:
            self._tree = self.disc_image.list_entries()
        except Exception as e:
            self.handle_exception(e, "list_entries")
            self._tree = FilesystemTree()
        self._apply_filters()
        log.info("Entries loaded", total=len(self._tree))

    def _apply_filters(self) -> None:
        query = self.query_one("#search-input", Input).value
        kind = self.query_one("#kind-select", Select).value
        self._filtered = filter_entries(self._tree, query, str(kind) if kind else "All")
        self._refresh_table()

    def _refresh_table(self) -> None:
        table = self.query_one("#entries-table", DataTable)
        table.clear()
        for entry in self._filtered:
            info = get_entry_display_info(entry)
            if entry.is_file:
                cols = (info["offset"], info["size"])
            else:
                cols = (info["parent"], info["next"])
            table.add_row(info["index"], info["name"], info["kind"], *cols, key=info["index"])

        self.query_one("#stat-total", Static).update(f"Total: {len(self._tree)}")
        self.query_one("#stat-showing", Static).update(f"Showing: {len(self._filtered)}")

    def _show_entry_details(self, entry: FilesystemEntry) -> None:
        info = get_entry_display_info(entry)
        lines = [f"{key}: {value}" for key, value in info.items()]
        self.query_one("#entry-details", Static).update("\n".join(lines))
        _ = self.query_one("#details-section", Vertical).add_class("has-selection")

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search-input":
            self._apply_filters()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "kind-select":
            self._apply_filters()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key and event.row_key.value is not None:
            index = int(event.row_key.value)
            if 0 <= index < len(self._tree):
                self._show_entry_details(self._tree[index])

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_refresh_entries(self) -> None:
        self._load_entries()
