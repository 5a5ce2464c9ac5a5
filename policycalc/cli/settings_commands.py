"""Settings CLI commands for Policy Calc.

Manages settings.json - reference year and directory, output format, profile path.
"""

import click

from policycalc.sdk import (
    KNOWN_SETTINGS,
    get_available_years,
    get_reference_dir,
    get_settings_path,
    load_settings,
    set_setting,
    unset_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    \b
    Available settings:
    - reference_year: reference table year to load by default
    - reference_dir: directory with custom reference YAML files
    - output_format: table or json
    - profile: path to profile.yaml (if not in the config directory)
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    years = get_available_years()
    click.echo()
    click.echo("Effective values:")
    click.echo(f"  reference_dir: {get_reference_dir()}")
    click.echo(f"  reference_year: {current.get('reference_year') or (years[0] if years else 'none available')}")
    click.echo(f"  output_format: {current.get('output_format', 'table')}")


@settings.command("set")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
@click.argument("value")
def settings_set(key, value):
    """Set a setting value.

    \b
    Examples:
        policy-calc settings set output_format json
        policy-calc settings set reference_year 2024
        policy-calc settings set reference_dir ~/policy-tables
    """
    try:
        path = set_setting(key, value)
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"Set {key}: {value}")
    click.echo(f"Saved to: {path}")


@settings.command("unset")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
def settings_unset(key):
    """Remove a setting, reverting to its default."""
    if unset_setting(key):
        click.echo(f"Cleared {key}.")
    else:
        click.echo(f"{key} was not set.")
