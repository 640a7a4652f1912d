"""
Output formatting for release check reports.
"""

import csv
from collections.abc import Iterable
from io import StringIO
from pathlib import Path
from typing import Any

from ..shared_utilities import (
    BaseOutputFormatter,
    OutputFormat,
    TableFormatter,
    get_logger,
)
from .data_models import REPORT_COLUMNS, ReleaseRecord

logger = get_logger(__name__)


class ReleaseReportFormatter(BaseOutputFormatter):
    """Formats ReleaseRecords with the fixed report column schema."""

    columns = list(REPORT_COLUMNS)

    def build_report_data(self, records: Iterable[ReleaseRecord]) -> dict[str, Any]:
        """Convert records into the structure consumed by the format handlers."""
        rows = [record.to_row() for record in records]
        return {"columns": self.columns, "records": rows}

    def _format_csv(self, data: dict[str, Any], **kwargs) -> str:
        """Format records as CSV with a header row."""
        output = StringIO()
        writer = csv.DictWriter(output, fieldnames=data["columns"])
        writer.writeheader()
        writer.writerows(data["records"])
        return output.getvalue()

    def _format_json(self, data: dict[str, Any], **kwargs) -> str:
        """Format records as a JSON array of objects."""
        return super()._format_json(data["records"], **kwargs) + "\n"

    def _format_table(self, data: dict[str, Any], **kwargs) -> str:
        """Format records as an aligned text table."""
        rows = [
            [record[column] for column in data["columns"]]
            for record in data["records"]
        ]
        return TableFormatter.create_table(data["columns"], rows) + "\n"

    def format_records(
        self, records: Iterable[ReleaseRecord], format_type: str = OutputFormat.CSV
    ) -> str:
        """Format records directly, without writing a file."""
        return self.format(self.build_report_data(records), format_type)

    def write_report(
        self,
        records: Iterable[ReleaseRecord],
        output_path: str | Path,
        format_type: str = OutputFormat.CSV,
    ) -> Path:
        """
        Write the report without overwriting an existing file.

        Args:
            records: Records in input order
            output_path: Desired report path
            format_type: csv, json or table

        Returns:
            The path actually written, suffixed ``_1``, ``_2``... if needed
        """
        data = self.build_report_data(records)
        final_path = self.save(data, output_path, format_type)
        if final_path != Path(output_path):
            logger.info(
                "{requested} exists, writing to {path} instead",
                requested=str(output_path),
                path=str(final_path),
            )
        logger.info(
            "Wrote {count} record(s) to {path}",
            count=len(data["records"]),
            path=str(final_path),
        )
        return final_path
