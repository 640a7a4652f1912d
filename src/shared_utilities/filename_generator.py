"""
Shared filename utilities for consistent, non-destructive output paths
"""

from pathlib import Path

#: File extension used for each output format.
FORMAT_EXTENSIONS = {
    "csv": "csv",
    "json": "json",
    "table": "txt",
}


def ensure_output_directory(file_path: str | Path) -> Path:
    """
    Ensure the directory for the output file exists.

    Args:
        file_path: Path to the output file

    Returns:
        Path object for the file
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def generate_unique_path(file_path: str | Path) -> Path:
    """
    Return a path that does not exist yet, appending numbers if needed.

    ``report.csv`` becomes ``report_1.csv``, then ``report_2.csv`` and so on
    until an unused name is found in the same directory.

    Args:
        file_path: Desired output path

    Returns:
        The desired path if free, otherwise the first free numbered variant
    """
    path = Path(file_path)
    if not path.exists():
        return path

    counter = 1
    while True:
        numbered = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        if not numbered.exists():
            return numbered
        counter += 1


def apply_format_extension(file_path: str | Path, output_format: str) -> Path:
    """
    Swap the extension of a path for the one matching an output format.

    Args:
        file_path: Path whose suffix should be replaced
        output_format: One of the keys of FORMAT_EXTENSIONS

    Returns:
        Path with the format's extension
    """
    extension = FORMAT_EXTENSIONS.get(output_format)
    if extension is None:
        raise ValueError(f"Unsupported format: {output_format}")
    return Path(file_path).with_suffix(f".{extension}")
