"""Parser for ``{artworkId}-meta.txt`` sidecar files.

Hey future me - download tools drop one of these next to the image files of an artwork.
The format is blocks separated by blank lines, first line of a block is the KEY, the rest
is the value (may span lines):

    ID
    12345

    Title
    Sunset

    Tags
    #landscape #sky sunset

We only care about a handful of keys; unknown keys are kept in ``fields`` and otherwise
ignored. Parsing NEVER raises - a broken sidecar just yields fewer tags.
"""

import re
from dataclasses import dataclass, field
from pathlib import PurePath

SIDECAR_PATTERN = re.compile(r"^(?P<artwork_id>\d+)-meta\.txt$", re.IGNORECASE)


@dataclass
class SidecarMetadata:
    """Metadata parsed from one sidecar file."""

    artwork_id: str | None = None
    title: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    fields: dict[str, str] = field(default_factory=dict)


def sidecar_artwork_id(file_name: str) -> str | None:
    """Return the artwork id if ``file_name`` is a sidecar, else None."""
    match = SIDECAR_PATTERN.match(file_name)
    return match.group("artwork_id") if match else None


def is_sidecar_file(file_name: str) -> bool:
    return sidecar_artwork_id(file_name) is not None


def parse_tags(raw: str) -> list[str]:
    """Split a tag line on whitespace, drop leading ``#`` and duplicates (order kept)."""
    tags: list[str] = []
    for token in raw.split():
        tag = token[1:] if token.startswith("#") else token
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def parse_sidecar_text(content: str) -> SidecarMetadata:
    """Parse sidecar file content into SidecarMetadata."""
    fields: dict[str, str] = {}
    current_key = ""
    value_lines: list[str] = []

    def _flush() -> None:
        if current_key:
            fields[current_key.upper()] = "\n".join(value_lines).strip()

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line:
            _flush()
            current_key = ""
            value_lines = []
        elif not current_key:
            current_key = line
        else:
            value_lines.append(line)
    _flush()

    return SidecarMetadata(
        artwork_id=fields.get("ID") or None,
        title=fields.get("TITLE") or None,
        description=fields.get("DESCRIPTION") or None,
        tags=parse_tags(fields.get("TAGS", "")),
        fields=fields,
    )


def belongs_to_artwork(file_name: str, artwork_id: str) -> bool:
    """Check whether a media file belongs to the sidecar's artwork.

    Matches ``{id}.ext`` and ``{id}_<anything>.ext`` (e.g. ``{id}_p0.jpg``).
    """
    stem = PurePath(file_name).stem
    return stem == artwork_id or stem.startswith(f"{artwork_id}_")
