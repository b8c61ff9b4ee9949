"""Display helpers shared by the CLI and the TUI."""

from typing import Any

from ..models import Banner, DiscHeader, FileEntry, FilesystemEntry, Region


def display_text(value: str) -> str:
    """Trim the NUL padding of a fixed-width text field for display.

    Decoded fields keep their padding; this is only for presentation.
    """
    return value.split("\x00", 1)[0].strip()


def format_file_size(size: int | None) -> str:
    """Format file size for display."""
    if size is None:
        return "Unknown"
    if size >= 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024 * 1024):.1f} GB"
    elif size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    elif size >= 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size} B"


def disc_summary(header: DiscHeader, region: Region, banner: Banner) -> dict[str, Any]:
    """Collect the header, region and banner fields worth showing."""
    return {
        "game_id": header.game_id,
        "game_name": display_text(header.game_name),
        "region": region.value,
        "disk_id": header.disk_id,
        "version": header.version,
        "audio_streaming": header.audio_streaming,
        "stream_buf_sz": header.stream_buf_sz,
        "dol_offset": header.dol_ofst,
        "fst_offset": header.fst_ofst,
        "fst_size": header.fst_sz,
        "max_fst_size": header.max_fst_sz,
        "banner": {
            "version": banner.version,
            "game_name": display_text(banner.game_name),
            "developer": display_text(banner.developer),
            "full_game_title": display_text(banner.full_game_title),
            "full_developer_name": display_text(banner.full_developer_name),
            "description": display_text(banner.description),
        },
    }


def get_entry_display_info(entry: FilesystemEntry) -> dict[str, str]:
    """Get display strings for one FST entry.

    File entries show their data offset and size; directories show their
    parent and next record indices.
    """
    info = {
        "index": str(entry.index),
        "name": entry.name if entry.name else "/",
        "kind": entry.kind.value,
    }
    data = entry.data
    if isinstance(data, FileEntry):
        info["offset"] = f"{data.file_offset:#010x}"
        info["size"] = format_file_size(data.file_length)
        info["length"] = str(data.file_length)
    else:
        info["parent"] = str(data.parent_offset)
        info["next"] = str(data.next_offset)
    return info


def format_entry_line(entry: FilesystemEntry) -> str:
    """One-line listing format: ``index - name - offsets``."""
    data = entry.data
    if isinstance(data, FileEntry):
        detail = f"File Offset: {data.file_offset}, File Length: {data.file_length}"
    else:
        detail = f"Parent Offset: {data.parent_offset}, Next Offset: {data.next_offset}"
    return f"{entry.index:03} - {entry.name} - {detail}"
