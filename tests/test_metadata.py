"""Tests for per-field metadata filters."""

from __future__ import annotations

import pytest

from metafilter.normalize.catalogs import UnknownCatalog, feature_filter_rules
from metafilter.normalize.metadata import (
    PRESETS,
    MetadataFilter,
    build_filter,
    get_preset,
    spotify_filter,
    youtube_filter,
)


class TestMetadataFilter:
    """Tests for MetadataFilter."""

    def test_youtube_track(self):
        """Test the youtube preset cleans track titles."""
        assert youtube_filter().filter_field("track", "Artist - Track (Official Video)") == "Artist - Track"

    def test_youtube_artist_only_trimmed(self):
        """Test the youtube preset only trims artists."""
        assert youtube_filter().filter_field("artist", "  Artist (Official Video) ") == "Artist (Official Video)"

    def test_empty_values_pass_through(self):
        """Test None and empty strings are returned as-is."""
        metadata_filter = youtube_filter()
        assert metadata_filter.filter_field("track", None) is None
        assert metadata_filter.filter_field("track", "") == ""

    def test_field_without_rules(self):
        """Test fields with no rules are left alone."""
        metadata_filter = MetadataFilter(rules={"track": feature_filter_rules()})
        assert metadata_filter.filter_field("album", "  Album  ") == "  Album  "
        assert metadata_filter.can_filter_field("track")
        assert not metadata_filter.can_filter_field("album")

    def test_extend_appends_rules(self):
        """Test extend runs the other filter's rules after this one's."""
        extended = spotify_filter().extend(MetadataFilter(rules={"track": feature_filter_rules()}))
        assert extended.filter_field("track", "Song (Feat. X) - Remastered") == "Song"
        assert spotify_filter().filter_field("track", "Song (Feat. X) - Remastered") == "Song (Feat. X)"

    def test_extend_keeps_max_passes(self):
        """Test the bound of the extending filter wins when set."""
        base = MetadataFilter(max_passes=5)
        assert base.extend(MetadataFilter()).max_passes == 5
        assert base.extend(MetadataFilter(max_passes=2)).max_passes == 2


class TestBuildFilter:
    """Tests for build_filter and presets."""

    def test_unknown_field(self):
        """Test unknown metadata fields are rejected."""
        with pytest.raises(ValueError):
            build_filter({"genre": ["trim-whitespace"]})

    def test_unknown_catalog(self):
        """Test unknown catalog names are rejected."""
        with pytest.raises(UnknownCatalog):
            build_filter({"track": ["missing"]})

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_presets_build(self, name):
        """Test every preset builds and trims artists."""
        assert get_preset(name).filter_field("artist", " Artist ") == "Artist"

    def test_unknown_preset(self):
        """Test unknown preset names are rejected."""
        with pytest.raises(ValueError):
            get_preset("napster")

    def test_amazon_preset(self):
        """Test the amazon preset removes explicit and version tags."""
        assert get_preset("amazon").filter_field("track", "Track [Explicit]") == "Track"
        assert get_preset("amazon").filter_field("album", "Album (Deluxe Edition)") == "Album"

    def test_tidal_preset(self):
        """Test the tidal preset removes remaster tags."""
        assert get_preset("tidal").filter_field("track", "Hey Jude - Remastered 2015") == "Hey Jude"
