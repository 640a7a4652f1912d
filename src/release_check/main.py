"""
Main CLI entry point for package release checks.
"""

import sys
import time

import click
from dotenv import load_dotenv

from ..shared_utilities import configure_logging, get_logger, get_logging_manager
from ..shared_utilities.cli_base import ClickCommand
from ..shared_utilities.filename_generator import apply_format_extension
from .config import (
    DEFAULT_INPUT_PATH,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_REQUEST_DELAY,
    DEFAULT_TIMEOUT,
    ENV_PREFIX,
    ReleaseCheckConfig,
)
from .errors import InputFileError
from .input_loader import load_package_requests
from .output_formatter import ReleaseReportFormatter
from .resolver import RegistryResolver

# Load environment variables from .env file
load_dotenv()


@click.command()
@click.option(
    "-i",
    "--input",
    "input_file",
    type=click.Path(dir_okay=False),
    default=DEFAULT_INPUT_PATH,
    envvar=f"{ENV_PREFIX}_INPUT",
    help="Input CSV with 'lib' and 'cur_ver' columns",
    show_default=True,
)
@ClickCommand.add_common_options(env_prefix=ENV_PREFIX)
@ClickCommand.add_request_options(
    env_prefix=ENV_PREFIX,
    default_timeout=DEFAULT_TIMEOUT,
    default_request_delay=DEFAULT_REQUEST_DELAY,
)
def main(
    input_file: str,
    output_file: str | None,
    output_format: str,
    quiet: bool,
    verbose: bool,
    workers: int,
    timeout: float,
    request_delay: float,
) -> None:
    """
    Report release dates and deprecation status for a list of packages.

    Each package is looked up on npm, then Packagist, then PyPI; the first
    registry that knows the requested version answers. Packages no registry
    knows are reported with ERROR markers.

    Examples:

        # Read input.csv and write output/npm_release_dates.csv
        release-check

        # Custom paths, four concurrent lookups
        release-check -i deps.csv -o reports/deps.csv --workers 4

        # JSON report, no progress bar
        release-check --format json -q
    """
    configure_logging(level="DEBUG" if verbose else None, force=True)
    logger = get_logger(__name__)
    logging_manager = get_logging_manager()

    output_path = output_file or apply_format_extension(
        DEFAULT_OUTPUT_PATH, output_format
    )

    try:
        config = ReleaseCheckConfig(
            timeout=timeout, request_delay=request_delay, workers=workers
        )
        try:
            package_requests = load_package_requests(input_file)
        except InputFileError as e:
            click.echo(f"Error: {e}", err=True)
            raise click.Abort() from e

        if not package_requests:
            logger.warning("Input file {path} has no package rows", path=input_file)

        resolver = RegistryResolver(config=config)
        started = time.time()
        logging_manager.log_operation_start(
            "release_check", packages=len(package_requests), workers=workers
        )

        if quiet or not package_requests:
            records = resolver.resolve_all(package_requests)
        else:
            with click.progressbar(
                length=len(package_requests),
                label="Checking packages",
                file=click.get_text_stream("stderr"),
                show_pos=True,
                item_show_func=lambda item: item,
            ) as bar:
                records = resolver.resolve_all(
                    package_requests,
                    progress_callback=lambda done, total, request: bar.update(
                        1, current_item=request.library
                    ),
                )

        logging_manager.log_operation_complete(
            "release_check", time.time() - started, packages=len(records)
        )

        formatter = ReleaseReportFormatter()
        try:
            final_path = formatter.write_report(records, output_path, output_format)
        except OSError as e:
            click.echo(f"Error: could not write report to {output_path}: {e}", err=True)
            raise click.Abort() from e

        click.echo(f"Output written to {final_path}")
        click.echo(resolver.summarize(records).describe())

    except click.Abort:
        raise
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        sys.exit(130)
    except Exception as e:
        logger.error("Unexpected error: {error}", error=str(e))
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e


if __name__ == "__main__":
    main()
