"""
Shared CLI utilities for consistent command-line interfaces across tools.

Provides decorators that attach common Click option sets so option names,
defaults and help texts stay consistent.
"""

import click

from .base_output_formatter import OutputFormat


class ClickCommand:
    """
    Base class for creating consistent Click commands.

    Provides helper methods to add common option sets to Click commands.
    """

    @staticmethod
    def add_common_options(
        exclude: list[str] | None = None,
        default_format: str = OutputFormat.CSV,
        env_prefix: str | None = None,
    ):
        """Decorator that adds common options to a Click command."""
        exclude = exclude or []

        def envvar(name: str) -> str | None:
            return f"{env_prefix}_{name}" if env_prefix else None

        def decorator(func):
            # Add options in reverse order since decorators are applied bottom-up
            if "verbose" not in exclude:
                func = click.option(
                    "-v", "--verbose", is_flag=True, help="Enable verbose logging"
                )(func)

            if "quiet" not in exclude:
                func = click.option(
                    "-q", "--quiet", is_flag=True, help="Suppress progress output"
                )(func)

            if "format" not in exclude:
                func = click.option(
                    "-f",
                    "--format",
                    "output_format",
                    type=click.Choice(list(OutputFormat.ALL)),
                    default=default_format,
                    envvar=envvar("FORMAT"),
                    help="Output format",
                    show_default=True,
                )(func)

            if "output" not in exclude:
                func = click.option(
                    "-o",
                    "--output",
                    "output_file",
                    type=click.Path(dir_okay=False),
                    envvar=envvar("OUTPUT"),
                    help="Output file path (a numeric suffix is added if it exists)",
                )(func)

            return func

        return decorator

    @staticmethod
    def add_request_options(
        exclude: list[str] | None = None,
        env_prefix: str | None = None,
        default_timeout: float = 30.0,
        default_request_delay: float = 0.0,
    ):
        """Decorator that adds HTTP request and throttling options."""
        exclude = exclude or []

        def envvar(name: str) -> str | None:
            return f"{env_prefix}_{name}" if env_prefix else None

        def decorator(func):
            if "workers" not in exclude:
                func = click.option(
                    "--workers",
                    type=click.IntRange(min=1),
                    default=1,
                    envvar=envvar("WORKERS"),
                    help="Number of packages looked up concurrently",
                    show_default=True,
                )(func)

            if "timeout" not in exclude:
                func = click.option(
                    "--timeout",
                    type=click.FloatRange(min=0, min_open=True),
                    default=default_timeout,
                    envvar=envvar("TIMEOUT"),
                    help="Timeout for each registry request (seconds)",
                    show_default=True,
                )(func)

            if "request_delay" not in exclude:
                func = click.option(
                    "--request-delay",
                    type=click.FloatRange(min=0),
                    default=default_request_delay,
                    envvar=envvar("REQUEST_DELAY"),
                    help="Delay between individual requests (seconds)",
                    show_default=True,
                )(func)

            return func

        return decorator
