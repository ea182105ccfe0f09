"""Unit tests for artist folder name parsing.

Tests the regex patterns and parsing functions for extracting display names
and embedded user ids from artist folder names.
"""

import pytest

from artshelf.domain.value_objects.folder_parsing import (
    UNKNOWN_ARTIST,
    clean_artist_name,
    is_hidden_name,
    parse_artist_folder,
)


class TestParseArtistFolder:
    """Tests for parse_artist_folder function."""

    def test_parse_dash_id(self) -> None:
        """Test parsing 'Name-123' format."""
        result = parse_artist_folder("Alice-42")
        assert result.name == "Alice"
        assert result.user_id == "42"
        assert result.raw_name == "Alice-42"

    def test_parse_underscore_id_with_spaces_in_name(self) -> None:
        """Test that delimiter runs in the name become single spaces."""
        result = parse_artist_folder("Some_Artist-123456")
        assert result.name == "Some Artist"
        assert result.user_id == "123456"

    def test_parse_paren_id(self) -> None:
        """Test parsing 'Name (123)' format."""
        result = parse_artist_folder("Bob (7)")
        assert result.name == "Bob"
        assert result.user_id == "7"

    @pytest.mark.parametrize("folder", ["user_99", "user-99", "user99", "USER_99"])
    def test_parse_bare_user_id(self, folder: str) -> None:
        """Test parsing bare 'user_123' folders."""
        result = parse_artist_folder(folder)
        assert result.name == "User 99"
        assert result.username == "user_99"
        assert result.user_id == "99"

    def test_parse_plain_name(self) -> None:
        """Test that names without ids are kept as-is."""
        result = parse_artist_folder("Carol")
        assert result.name == "Carol"
        assert result.user_id is None
        assert result.username is None

    def test_parse_empty_name(self) -> None:
        """Test that empty names fall back to the unknown artist."""
        assert parse_artist_folder("").name == UNKNOWN_ARTIST
        assert parse_artist_folder("   ").name == UNKNOWN_ARTIST

    def test_raw_name_is_untouched(self) -> None:
        """Raw name must stay byte-identical (it is the identity key)."""
        assert parse_artist_folder("  Dave_-_1 ").raw_name == "  Dave_-_1 "


class TestHelpers:
    """Tests for the small helper functions."""

    def test_clean_artist_name_collapses_noise(self) -> None:
        assert clean_artist_name("a__b--c   d") == "a b c d"

    def test_is_hidden_name(self) -> None:
        assert is_hidden_name(".DS_Store")
        assert is_hidden_name(".thumbs")
        assert not is_hidden_name("Alice")
