"""Config commands for zapdos."""

from __future__ import annotations

import click

from zapdos.core.config import CONFIG_FILE, DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Config
from zapdos.core.exceptions import ZapdosError
from zapdos.core.output import OutputFormat, print_error, print_key_value, print_output, print_success
from zapdos.core.validation import validate_server_url, validate_timeout, validate_upload_method


@click.group()
def config() -> None:
    """Manage zapdos configuration."""
    pass


@config.command("init")
@click.option("--url", default=DEFAULT_BASE_URL, show_default=True, help="API base URL")
@click.option("--profile", default="default", help="Profile name")
@click.option("--timeout", type=int, default=DEFAULT_TIMEOUT, help="Request timeout in seconds")
@click.option(
    "--upload-method",
    type=click.Choice(["PUT", "POST"], case_sensitive=False),
    default="PUT",
    help="HTTP verb for signed-URL uploads",
)
@click.option("--no-verify-ssl", is_flag=True, help="Disable SSL verification")
@click.option("--force", is_flag=True, help="Overwrite an existing profile")
def config_init(
    url: str,
    profile: str,
    timeout: int,
    upload_method: str,
    no_verify_ssl: bool,
    force: bool,
) -> None:
    """Create configuration file with a new profile.

    The API key is not stored; export ZAPDOS_API_KEY instead.

    Example:
        zapdos config init --url https://api.zapdoslabs.com
    """
    try:
        url = validate_server_url(url)
        timeout = validate_timeout(timeout)
        upload_method = validate_upload_method(upload_method)
    except ZapdosError as e:
        print_error(str(e))
        raise SystemExit(1)

    if CONFIG_FILE.exists():
        cfg = Config.load()
        if cfg.has_profile(profile) and not force:
            print_error(f"Profile '{profile}' already exists. Use --force to overwrite.")
            raise SystemExit(1)
    else:
        cfg = Config()

    cfg.add_profile(
        name=profile,
        url=url,
        verify_ssl=not no_verify_ssl,
        timeout=timeout,
        upload_method=upload_method,
    )

    # First profile becomes the default
    if len(cfg.profiles) == 1:
        cfg.default_profile = profile

    cfg.save()

    print_success(f"Configuration saved to {CONFIG_FILE}")
    print_key_value({"profile": profile, "url": url, "upload_method": upload_method})


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table")
def config_show(output: str) -> None:
    """Show current configuration."""
    try:
        cfg = Config.load()
    except ZapdosError as e:
        print_error(str(e))
        raise SystemExit(1)

    if not cfg.profiles:
        print_error("No configuration found. Run 'zapdos config init' first.")
        raise SystemExit(1)

    data = {
        "config_file": str(CONFIG_FILE),
        "default_profile": cfg.default_profile,
        "output_format": cfg.output_format,
        "profiles": list(cfg.profiles.keys()),
    }

    if output == "json":
        data["profile_details"] = {name: p.to_dict() for name, p in cfg.profiles.items()}
        print_output(data, format=OutputFormat.JSON)
        return

    print_key_value(data, title="Configuration")
    click.echo()
    for name, profile in cfg.profiles.items():
        marker = " (default)" if name == cfg.default_profile else ""
        click.echo(f"Profile: {name}{marker}")
        print_key_value(
            {
                "url": profile.url,
                "verify_ssl": profile.verify_ssl,
                "timeout": f"{profile.timeout}s",
                "upload_method": profile.upload_method,
            }
        )
        click.echo()


@config.command("use-context")
@click.argument("profile")
def config_use_context(profile: str) -> None:
    """Switch the active profile.

    Example:
        zapdos config use-context staging
    """
    try:
        cfg = Config.load()
    except ZapdosError as e:
        print_error(str(e))
        raise SystemExit(1)

    if not cfg.has_profile(profile):
        print_error(f"Profile '{profile}' not found.")
        click.echo(f"Available profiles: {', '.join(cfg.profiles.keys())}")
        raise SystemExit(1)

    cfg.set_default_profile(profile)
    cfg.save()

    print_success(f"Switched to profile '{profile}'")
