"""Regex patterns and parsers for artist folder names.

Hey future me - artist folders come straight from download tools, so the name often carries
the artist's site user id. We extract it so the UI can show a clean name and link back.

The key patterns:
1. DASH/UNDERSCORE ID: "Name-123456" or "Name_123456"
2. PAREN ID: "Name (123456)"
3. BARE USER ID: "user_123456", "user-123456", "user123456"
4. Anything else: the folder name IS the artist name

The directory name itself (raw, untouched) stays the artist's identity key - parsing only
feeds display fields, so two folders that parse to the same name are still two artists.

Usage:
    from artshelf.domain.value_objects.folder_parsing import parse_artist_folder

    parsed = parse_artist_folder("Some_Artist-123456")
    parsed.name     # "Some Artist"
    parsed.user_id  # "123456"
"""

import re
from dataclasses import dataclass

# =============================================================================
# REGEX PATTERNS
# =============================================================================

# "Name-123" / "Name_123" → name="Name", user_id="123"
ARTIST_DASH_ID_PATTERN = re.compile(r"^(?P<name>.+?)[-_](?P<user_id>\d+)$")

# "Name (123)" → name="Name", user_id="123"
ARTIST_PAREN_ID_PATTERN = re.compile(r"^(?P<name>.+?)\s*\((?P<user_id>\d+)\)$")

# "user_123" / "user-123" / "user123" → user_id="123"
USER_ID_PATTERN = re.compile(r"^user[_-]?(?P<user_id>\d+)$", re.IGNORECASE)

# Runs of delimiters and whitespace collapse to a single space in display names
_NAME_NOISE_PATTERN = re.compile(r"[_-]+")
_WHITESPACE_PATTERN = re.compile(r"\s+")

UNKNOWN_ARTIST = "Unknown Artist"


# =============================================================================
# PARSED RESULT DATACLASSES
# =============================================================================


@dataclass(frozen=True)
class ParsedArtistFolder:
    """Result of parsing an artist folder name."""

    name: str
    """Display name with delimiters cleaned up."""

    username: str | None = None
    """Username when the folder embeds a user id."""

    user_id: str | None = None
    """Numeric user id embedded in the folder name."""

    raw_name: str = ""
    """Original folder name (this is the identity key)."""


# =============================================================================
# PARSING FUNCTIONS
# =============================================================================


def clean_artist_name(name: str) -> str:
    """Replace delimiter runs with spaces and collapse whitespace."""
    cleaned = _NAME_NOISE_PATTERN.sub(" ", name.strip())
    return _WHITESPACE_PATTERN.sub(" ", cleaned).strip()


def parse_artist_folder(folder_name: str) -> ParsedArtistFolder:
    """Parse an artist folder name into display metadata.

    Args:
        folder_name: The artist folder name (not full path).

    Returns:
        ParsedArtistFolder with extracted metadata.

    Examples:
        >>> parse_artist_folder("Alice-42").user_id
        '42'
        >>> parse_artist_folder("Bob (7)").name
        'Bob'
        >>> parse_artist_folder("user_99").name
        'User 99'
    """
    raw = folder_name
    stripped = folder_name.strip()
    if not stripped:
        return ParsedArtistFolder(name=UNKNOWN_ARTIST, raw_name=raw)

    # user_123 must be checked before the dash pattern or "user" becomes the name
    match = USER_ID_PATTERN.match(stripped)
    if match:
        user_id = match.group("user_id")
        return ParsedArtistFolder(
            name=f"User {user_id}",
            username=f"user_{user_id}",
            user_id=user_id,
            raw_name=raw,
        )

    for pattern in (ARTIST_DASH_ID_PATTERN, ARTIST_PAREN_ID_PATTERN):
        match = pattern.match(stripped)
        if match:
            name = clean_artist_name(match.group("name")) or UNKNOWN_ARTIST
            return ParsedArtistFolder(
                name=name,
                username=name,
                user_id=match.group("user_id"),
                raw_name=raw,
            )

    return ParsedArtistFolder(
        name=clean_artist_name(stripped) or UNKNOWN_ARTIST,
        raw_name=raw,
    )


def is_hidden_name(name: str) -> bool:
    """Dotfiles and dot-directories (".DS_Store", ".thumbs") are never library content."""
    return name.startswith(".")
