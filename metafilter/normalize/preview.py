from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from pathlib import Path

from mutagen import File as MutagenFile
from mutagen import MutagenError

from .metadata import MetadataFilter

logger = logging.getLogger(__name__)

AUDIO_SUFFIXES = {".mp3", ".flac", ".ogg", ".opus", ".m4a", ".mp4"}
# metadata field -> easy tag key
TAG_KEYS = {
    "track": "title",
    "artist": "artist",
    "album": "album",
    "albumartist": "albumartist",
}


@dataclass(slots=True)
class FilterPreviewRecord:
    path: str
    current: dict[str, str | None] = field(default_factory=dict)
    proposed: dict[str, str | None] = field(default_factory=dict)
    changed_fields: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def would_change(self) -> bool:
        return bool(self.changed_fields)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["would_change"] = self.would_change
        return data


def _first_value(tags: object, key: str) -> str | None:
    # Easy tags hold lists; blank values count as missing.
    if tags is None:
        return None
    value = tags.get(key)
    if isinstance(value, list):
        value = value[0] if value else None
    return str(value) if value else None


def read_tags(path: Path) -> dict[str, str | None]:
    audio = MutagenFile(path, easy=True)
    tags = getattr(audio, "tags", None) if audio is not None else None
    return {name: _first_value(tags, key) for name, key in TAG_KEYS.items()}


def iter_audio_files(root: Path) -> list[Path]:
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in AUDIO_SUFFIXES)


def preview_tags(path: Path, current: dict[str, str | None], metadata_filter: MetadataFilter) -> FilterPreviewRecord:
    proposed: dict[str, str | None] = {}
    changed: list[str] = []
    for name, value in current.items():
        filtered = metadata_filter.filter_field(name, value)
        proposed[name] = filtered
        if filtered != value:
            changed.append(name)
    return FilterPreviewRecord(path=str(path), current=current, proposed=proposed, changed_fields=changed)


def build_filter_preview(
    root: Path,
    metadata_filter: MetadataFilter,
    *,
    on_progress: Callable[[int, int, Path], None] | None = None,
) -> list[FilterPreviewRecord]:
    records: list[FilterPreviewRecord] = []
    files = iter_audio_files(root)
    total = len(files)

    for idx, path in enumerate(files, start=1):
        try:
            current = read_tags(path)
        except (MutagenError, OSError) as exc:
            logger.warning("Could not read tags from %s: %s", path, exc)
            records.append(FilterPreviewRecord(path=str(path), error=str(exc)))
        else:
            records.append(preview_tags(path, current, metadata_filter))
        if on_progress is not None:
            on_progress(idx, total, path)

    return records
