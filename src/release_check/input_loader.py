"""
Input CSV loading.
"""

import csv
from pathlib import Path

from ..shared_utilities import get_logger, trace_function
from .data_models import PackageRequest
from .errors import InputFileError

LIBRARY_COLUMN = "lib"
VERSION_COLUMN = "cur_ver"
REQUIRED_COLUMNS = (LIBRARY_COLUMN, VERSION_COLUMN)

logger = get_logger(__name__)


@trace_function("load_package_requests")
def load_package_requests(file_path: str | Path) -> list[PackageRequest]:
    """
    Read (library, current version) pairs from a CSV file.

    The file needs a header row containing at least ``lib`` and ``cur_ver``;
    other columns are ignored. Every data row yields one request, even when
    a cell is empty, so the report keeps one line per input row.

    Args:
        file_path: Path to the input CSV

    Returns:
        Requests in file order

    Raises:
        InputFileError: If the file cannot be read or lacks required columns
    """
    path = Path(file_path)
    if not path.is_file():
        raise InputFileError(f"Input file not found: {path}")

    try:
        # utf-8-sig strips a byte-order mark left by spreadsheet exports
        with open(path, encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            fieldnames = [name.strip() for name in reader.fieldnames or []]
            missing = [col for col in REQUIRED_COLUMNS if col not in fieldnames]
            if missing:
                raise InputFileError(
                    f"Input file {path} is missing required column(s): "
                    f"{', '.join(missing)}"
                )
            reader.fieldnames = fieldnames

            requests = [
                PackageRequest(
                    library=(row.get(LIBRARY_COLUMN) or "").strip(),
                    current_version=(row.get(VERSION_COLUMN) or "").strip(),
                )
                for row in reader
            ]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise InputFileError(f"Could not read input file {path}: {e}") from e

    logger.info(
        "Loaded {count} package(s) from {path}", count=len(requests), path=str(path)
    )
    return requests
