"""Common CLI utilities, decorators, and helpers."""

from __future__ import annotations

import sys
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import click

from zapdos.core.client import ZapdosClient
from zapdos.core.config import ENV_API_KEY, ENV_PROFILE, Config, Profile, get_api_key
from zapdos.core.exceptions import ConfigurationError, ProfileNotFoundError, ZapdosError
from zapdos.core.logging import setup_logging
from zapdos.core.output import OutputFormat, print_error
from zapdos.services.storage import StorageService

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Context Object
# =============================================================================


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[Config] = None
        self.client: Optional[ZapdosClient] = None
        self.profile_name: Optional[str] = None
        self.output_format: OutputFormat = OutputFormat.TABLE
        self.quiet: bool = False
        self.verbose: bool = False

    def get_profile(self) -> Profile:
        """Load config if needed and return the selected profile.

        Raises:
            ConfigurationError: If the profile is unknown.
        """
        if self.config is None:
            self.config = Config.load()

        try:
            return self.config.get_profile(self.profile_name)
        except ProfileNotFoundError:
            raise ConfigurationError(
                f"Profile '{self.profile_name or self.config.default_profile}' not found. "
                "Run 'zapdos config init' to create one."
            )

    def get_client(self) -> ZapdosClient:
        """Get or create a client for the selected profile.

        Raises:
            ConfigurationError: If the profile is unknown or no API key is set.
        """
        if self.client is not None:
            return self.client

        profile = self.get_profile()
        api_key = get_api_key()
        if not api_key:
            raise ConfigurationError(f"Missing API key. Set {ENV_API_KEY}.", field=ENV_API_KEY)

        self.client = ZapdosClient(
            base_url=profile.url,
            api_key=api_key,
            timeout=profile.timeout,
            verify_ssl=profile.verify_ssl,
        )
        return self.client

    def get_storage(self) -> StorageService:
        """Storage service bound to the profile's client and upload method."""
        client = self.get_client()
        return StorageService(client, upload_method=self.get_profile().upload_method)


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Global Options
# =============================================================================


def global_options(f: F) -> F:
    """Add global options to a command."""

    @click.option(
        "--profile",
        "-p",
        envvar=ENV_PROFILE,
        help="Config profile to use",
    )
    @click.option(
        "--output",
        "-o",
        "output_format",
        type=click.Choice(["json", "table"]),
        default="table",
        help="Output format",
    )
    @click.option(
        "--quiet",
        "-q",
        is_flag=True,
        help="Minimal output (IDs only)",
    )
    @click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Enable verbose output",
    )
    @pass_context
    @wraps(f)
    def wrapper(
        ctx: Context,
        profile: Optional[str],
        output_format: str,
        quiet: bool,
        verbose: bool,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Populate context from global options and invoke the command."""
        ctx.profile_name = profile
        ctx.output_format = OutputFormat.from_string(output_format)
        ctx.quiet = quiet
        ctx.verbose = verbose

        setup_logging(quiet=quiet, verbose=verbose)
        ctx.config = Config.load()

        return f(ctx, *args, **kwargs)

    return wrapper  # type: ignore


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Handle common errors and convert to CLI exits."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Capture errors and exit with consistent messaging."""
        try:
            return f(*args, **kwargs)
        except ZapdosError as e:
            print_error(str(e))
            sys.exit(ExitCode.GENERAL_ERROR)
        except click.ClickException:
            raise
        except Exception as e:
            print_error(f"Unexpected error: {e}")
            sys.exit(ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
