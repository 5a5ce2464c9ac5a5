"""Profile CLI commands for Policy Calc.

Manages the saved household profile (profile.yaml) reused by
'policy-calc calculate --profile'.
"""

import click
import yaml

from policycalc.sdk import (
    ProfileNotFoundError,
    clear_profile,
    get_profile_path,
    load_profile,
    load_settings,
    save_profile,
)

from .options import build_form_data, form_options, pop_form_fields


@click.group()
def profile():
    """Manage the saved household profile (profile.yaml)."""
    pass


@profile.command("show")
def profile_show():
    """Show the saved profile and its location."""
    profile_path = get_profile_path(require_exists=False)
    location_label = "custom" if load_settings().get("profile") else "central (default)"

    click.echo(f"Profile: {profile_path}")
    click.echo(f"Location: {location_label}")

    if not profile_path.exists():
        click.echo()
        click.echo("Profile does not exist yet. Create with:")
        click.echo("  policy-calc profile save --state CA --income-range 45k-95k")
        click.echo("  policy-calc wizard --save-profile")
        return

    try:
        data = load_profile(require_exists=True)
    except ProfileNotFoundError as e:
        raise click.ClickException(str(e))
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {profile_path}: {e}")

    click.echo()
    click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip() or "(empty)")


@profile.command("save")
@form_options
@click.option("--replace", is_flag=True, help="Replace the saved profile instead of updating it")
def profile_save(replace, **kwargs):
    """Save household answers to the profile.

    Only the options given are written; other saved answers are kept
    unless --replace is used.

    \b
    Examples:
        policy-calc profile save --state TX --family-status married-joint --children 2
        policy-calc profile save --replace --income-range 95k-200k
    """
    option_fields = pop_form_fields(kwargs)
    if not option_fields:
        raise click.UsageError("Provide at least one form option (see --help).")

    existing = None if replace else load_profile(require_exists=False)
    form_data = build_form_data(existing, option_fields)
    path = save_profile(form_data.to_json_dict())

    click.echo(f"Saved profile: {path}")


@profile.command("clear")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
def profile_clear(force):
    """Delete the saved profile."""
    path = get_profile_path(require_exists=False)
    if not path.exists():
        click.echo("No saved profile.")
        return

    if not force:
        click.confirm(f"Delete {path}?", abort=True)

    clear_profile()
    click.echo(f"Deleted {path}")
