"""Configuration system for bulkticket.

Loads the matrix assignee map and output preferences from ``.bt/config.json``.
All fields are optional; a missing or empty file gives the defaults.

Example ``.bt/config.json``:
    {
      "assignees": {"ios": "amy", "android": "raj"},
      "output": {"format": "json", "indent": 2}
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from bulkticket.state import config_path

OUTPUT_FORMATS = ("table", "json", "outline")

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class OutputConfig:
    """How ``bt parse`` prints results."""

    format: str = "table"  # table, json, outline
    indent: int = 2


@dataclass
class BulkTicketConfig:
    """Top-level configuration, loaded from .bt/config.json."""

    # Matrix entry -> assignee for generated sub-tickets
    assignees: dict[str, str] = field(default_factory=dict)
    output: OutputConfig = field(default_factory=OutputConfig)


def default_config() -> BulkTicketConfig:
    """Return the built-in default configuration."""
    return BulkTicketConfig(assignees={}, output=OutputConfig())


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

VALID_OUTPUT_KEYS = {"format", "indent"}
VALID_TOP_KEYS = {"assignees", "output"}


def check_unknown_keys(data: dict, valid: set[str], context: str) -> None:
    """Raise ValueError if data contains keys not in valid set."""
    unknown = set(data) - valid
    if unknown:
        raise ValueError(f"Unknown keys in {context}: {', '.join(sorted(unknown))}")


def validate_assignees(data: dict) -> dict[str, str]:
    """Validate the matrix entry -> assignee map."""
    for label, assignee in data.items():
        if not isinstance(assignee, str):
            raise ValueError(f"assignees.{label} must be a string, got {type(assignee).__name__}")
    return dict(data)


def validate_output(data: dict) -> OutputConfig:
    """Validate and construct an OutputConfig from a raw dict."""
    check_unknown_keys(data, VALID_OUTPUT_KEYS, "output")

    output_format = data.get("format", "table")
    if not isinstance(output_format, str):
        raise ValueError(f"output.format must be a string, got {type(output_format).__name__}")
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, got '{output_format}'")

    indent = data.get("indent", 2)
    if not isinstance(indent, int) or isinstance(indent, bool):
        raise ValueError(f"output.indent must be an integer, got {type(indent).__name__}")
    if indent < 0:
        raise ValueError(f"output.indent must be >= 0, got {indent}")

    return OutputConfig(format=output_format, indent=indent)


def validate_config(data: dict) -> BulkTicketConfig:
    """Validate a raw dict and construct a BulkTicketConfig.

    Raises:
        ValueError: On unknown keys or type errors.
    """
    check_unknown_keys(data, VALID_TOP_KEYS, "config")

    assignees_data = data.get("assignees", {})
    if not isinstance(assignees_data, dict):
        raise ValueError(f"assignees must be an object, got {type(assignees_data).__name__}")
    assignees = validate_assignees(assignees_data)

    output_data = data.get("output", {})
    if not isinstance(output_data, dict):
        raise ValueError(f"output must be an object, got {type(output_data).__name__}")
    output = validate_output(output_data)

    return BulkTicketConfig(assignees=assignees, output=output)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_config(base: Path) -> BulkTicketConfig:
    """Load configuration from .bt/config.json, falling back to defaults.

    Raises:
        ValueError: If the file exists but contains invalid JSON or fails
            validation.
    """
    path = config_path(base)
    if not path.exists():
        return default_config()

    text = path.read_text(encoding="utf-8").strip()
    if not text or text == "{}":
        return default_config()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Config must be a JSON object, got {type(data).__name__}")

    return validate_config(data)
