"""JSON output formatter."""

import json
from typing import Any

from infoavi.models import AviReport


def format_json(report: AviReport, indent: int = 2) -> str:
    """Format a report as JSON string.

    Args:
        report: AviReport object
        indent: JSON indentation level

    Returns:
        JSON formatted string
    """
    return report.model_dump_json(indent=indent)


def format_json_list(reports: list[AviReport], indent: int = 2) -> str:
    """Format multiple reports as JSON array.

    Args:
        reports: List of AviReport objects
        indent: JSON indentation level

    Returns:
        JSON array formatted string
    """
    data = [r.model_dump(mode="json") for r in reports]
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def to_dict(report: AviReport) -> dict[str, Any]:
    """Convert a report to dictionary."""
    return report.model_dump(mode="json")
