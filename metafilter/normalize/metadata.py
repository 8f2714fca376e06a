from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from metafilter.core.filters import apply_rules
from metafilter.core.rules import RuleSet

from .catalogs import compose

FIELDS = ("track", "artist", "album", "albumartist")


@dataclass(frozen=True, slots=True)
class MetadataFilter:
    """Rule sets keyed by metadata field."""

    rules: Mapping[str, RuleSet] = field(default_factory=dict)
    max_passes: int | None = None

    def can_filter_field(self, name: str) -> bool:
        return bool(self.rules.get(name))

    def filter_field(self, name: str, text: str | None) -> str | None:
        if not text:
            return text
        rules = self.rules.get(name)
        if not rules:
            return text
        return apply_rules(text, rules, max_passes=self.max_passes)

    def extend(self, other: MetadataFilter) -> MetadataFilter:
        merged = dict(self.rules)
        for name, rules in other.rules.items():
            merged[name] = merged.get(name, ()) + rules
        max_passes = self.max_passes if other.max_passes is None else other.max_passes
        return MetadataFilter(rules=merged, max_passes=max_passes)


def build_filter(
    field_catalogs: Mapping[str, list[str] | tuple[str, ...]],
    *,
    extra: dict[str, RuleSet] | None = None,
    max_passes: int | None = None,
) -> MetadataFilter:
    unknown = sorted(set(field_catalogs) - set(FIELDS))
    if unknown:
        raise ValueError(f"Unknown metadata field(s): {', '.join(unknown)}. Allowed: {', '.join(FIELDS)}")
    rules = {name: compose(*catalogs, extra=extra) for name, catalogs in field_catalogs.items()}
    return MetadataFilter(rules=rules, max_passes=max_passes)


def youtube_filter() -> MetadataFilter:
    return build_filter(
        {
            "track": ["youtube", "trim-symbols", "trim-whitespace"],
            "artist": ["trim-whitespace"],
            "album": ["trim-whitespace"],
            "albumartist": ["trim-whitespace"],
        }
    )


def spotify_filter() -> MetadataFilter:
    return build_filter(
        {
            "track": ["remastered", "trim-whitespace"],
            "artist": ["trim-whitespace"],
            "album": ["remastered", "trim-whitespace"],
            "albumartist": ["trim-whitespace"],
        }
    )


def amazon_filter() -> MetadataFilter:
    return build_filter(
        {
            "track": ["clean-explicit", "version", "trim-whitespace"],
            "artist": ["trim-whitespace"],
            "album": ["clean-explicit", "version", "trim-whitespace"],
            "albumartist": ["trim-whitespace"],
        }
    )


def tidal_filter() -> MetadataFilter:
    return build_filter(
        {
            "track": ["remastered", "version", "trim-whitespace"],
            "artist": ["trim-whitespace"],
            "album": ["remastered", "version", "trim-whitespace"],
            "albumartist": ["trim-whitespace"],
        }
    )


PRESETS: dict[str, Callable[[], MetadataFilter]] = {
    "youtube": youtube_filter,
    "spotify": spotify_filter,
    "amazon": amazon_filter,
    "tidal": tidal_filter,
}


def get_preset(name: str) -> MetadataFilter:
    key = name.strip().lower()
    if key not in PRESETS:
        raise ValueError(f"Unknown preset: {name}. Allowed: {', '.join(PRESETS)}")
    return PRESETS[key]()
