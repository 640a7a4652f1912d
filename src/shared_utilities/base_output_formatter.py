"""
Base output formatter for report files.

Subclasses turn a report payload into csv, json or table text; the base class
owns format dispatch and writing the result without clobbering earlier runs.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .filename_generator import ensure_output_directory, generate_unique_path


class OutputFormat:
    """Supported report formats."""

    TABLE = "table"
    JSON = "json"
    CSV = "csv"

    ALL = (CSV, JSON, TABLE)


class BaseOutputFormatter(ABC):
    """
    Abstract base class for report formatters.

    ``_format_csv`` and ``_format_table`` must be implemented; JSON output
    has a default that dumps the payload as-is.
    """

    def __init__(self):
        self._format_handlers = {
            OutputFormat.CSV: self._format_csv,
            OutputFormat.JSON: self._format_json,
            OutputFormat.TABLE: self._format_table,
        }

    def format(
        self, data: dict[str, Any], format_type: str = OutputFormat.TABLE, **kwargs
    ) -> str:
        """
        Render a report payload.

        Args:
            data: Report payload
            format_type: One of OutputFormat.ALL
            **kwargs: Passed through to the format handler

        Returns:
            Rendered report text

        Raises:
            ValueError: For an unknown format
        """
        try:
            handler = self._format_handlers[format_type]
        except KeyError:
            raise ValueError(f"Unsupported format type: {format_type}") from None

        return handler(data, **kwargs)

    def save(
        self,
        data: dict[str, Any],
        output_path: str | Path,
        format_type: str = OutputFormat.CSV,
        overwrite: bool = False,
        **kwargs,
    ) -> Path:
        """
        Render a report and write it to disk.

        The parent directory is created when missing. Unless ``overwrite`` is
        set, an existing file is left alone and a numbered sibling is written
        instead.

        Returns:
            The path actually written
        """
        content = self.format(data, format_type, **kwargs)

        target = ensure_output_directory(output_path)
        if overwrite:
            # newline="" keeps csv's \r\n row terminators untouched
            with open(target, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            return target

        while True:
            candidate = generate_unique_path(target)
            try:
                f = open(candidate, "x", encoding="utf-8", newline="")
            except FileExistsError:
                # Created by another writer since the name was picked
                continue
            with f:
                f.write(content)
            return candidate

    @abstractmethod
    def _format_csv(self, data: dict[str, Any], **kwargs) -> str:
        """Render the payload as CSV."""

    @abstractmethod
    def _format_table(self, data: dict[str, Any], **kwargs) -> str:
        """Render the payload as a fixed-width text table."""

    def _format_json(self, data: Any, **kwargs) -> str:
        """Render the payload as indented JSON, keeping key order."""
        return json.dumps(
            data,
            indent=kwargs.get("indent", 2),
            sort_keys=kwargs.get("sort_keys", False),
            ensure_ascii=False,
            default=str,
        )


class TableFormatter:
    """Plain-text tables for terminal-friendly reports."""

    _ALIGN = {"left": "<", "center": "^", "right": ">"}

    @staticmethod
    def create_table(
        headers: list[str],
        rows: list[list[str]],
        alignment: str = "left",
    ) -> str:
        """
        Lay out rows under a header line and a dashed rule.

        Columns are as wide as their widest cell. Trailing padding is stripped
        from every line.

        Args:
            headers: Column headers
            rows: Table rows, one cell per header
            alignment: left, center or right

        Returns:
            The table as a single string, without a trailing newline
        """
        column_widths = [
            max([len(header)] + [len(str(row[i])) for row in rows])
            for i, header in enumerate(headers)
        ]
        align = TableFormatter._ALIGN.get(alignment, "<")

        def render(cells) -> str:
            return " | ".join(
                f"{str(cell):{align}{width}}"
                for cell, width in zip(cells, column_widths, strict=False)
            )

        header_line = render(headers)
        lines = [header_line.rstrip(), "-" * len(header_line)]
        lines.extend(render(row).rstrip() for row in rows)
        return "\n".join(lines)
