"""Front-matter helpers for ticket outlines.

An outline may contain one or more ``---``-delimited blocks of ``key: value``
lines. Unlike a YAML header these blocks are read line by line while the
outline is scanned, so this module works on single lines rather than on a
whole document. It also provides the inverse, used when an outline is
reconstructed from parsed tickets.
"""

from __future__ import annotations

FRONTMATTER_DELIMITER = "---"
FRONTMATTER_KEYS = ("epic", "story", "team")


def is_frontmatter_delimiter(line: str) -> bool:
    return line.strip() == FRONTMATTER_DELIMITER


def unquote(value: str) -> str:
    """Trim *value* and drop one pair of matching surrounding quotes.

    Examples:
        - ``'  Payments  '`` -> ``'Payments'``
        - ``'"Q3 launch"'`` -> ``'Q3 launch'``
        - ``"'it's'"`` -> ``"it's"``
    """
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_frontmatter_field(line: str) -> tuple[str, str] | None:
    """Parse a ``key: value`` front-matter line.

    Keys are lowercased so that ``Epic:`` and ``epic:`` are the same field.
    Only the first colon separates key from value, so values may contain
    colons (URLs, timestamps).

    Args:
        line: A raw line from inside a front-matter block.

    Returns:
        ``(key, value)``, or ``None`` when the line is not a recognised field.
    """
    if ":" not in line:
        return None
    key, value = line.split(":", 1)
    key = key.strip().lower()
    if key not in FRONTMATTER_KEYS:
        return None
    return key, unquote(value)


def split_list(inner: str) -> list[str]:
    """Split a comma-separated list body, dropping blanks and quotes."""
    items = []
    for item in inner.split(","):
        item = unquote(item)
        if item:
            items.append(item)
    return items


def serialize_frontmatter(fields: dict[str, str | None]) -> str:
    """Render a front-matter block for the given fields.

    ``None`` values are skipped; keys are emitted in :data:`FRONTMATTER_KEYS`
    order.
    """
    lines = [FRONTMATTER_DELIMITER]
    for key in FRONTMATTER_KEYS:
        value = fields.get(key)
        if value is not None:
            lines.append(f"{key}: {value}")
    lines.append(FRONTMATTER_DELIMITER)
    return "\n".join(lines)
