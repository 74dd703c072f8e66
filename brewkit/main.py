"""
brewkit — CLI entrypoint.

Usage:
    python -m brewkit.main --help
    brewkit install dts-legacy
    brewkit info dts-legacy
    brewkit check path/to/formula.yml
"""

from __future__ import annotations

import json
import os
import sys

import click

from brewkit import __version__
from brewkit.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="brewkit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """brewkit — install pre-built binaries from formula manifests."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


def _print_caveats(text: str) -> None:
    click.secho("==> Caveats", fg="cyan", bold=True)
    click.echo(text)


@cli.command()
@click.argument("formula")
@click.option(
    "--bin-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Install directory (default: $BREWKIT_BIN_DIR or ~/.local/bin).",
)
@click.option("--arch", default=None, help="Install for this architecture instead of the host's.")
@click.option("--os", "host_os", default=None, help="Treat the host as this OS (macos, linux).")
@click.option("--timeout", type=float, default=None, help="Download timeout in seconds.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    formula: str,
    bin_dir: str | None,
    arch: str | None,
    host_os: str | None,
    timeout: float | None,
    as_json: bool,
) -> None:
    """Download, verify, and install FORMULA (a name or a manifest path)."""
    from brewkit.core.use_cases.install import run_install

    quiet = ctx.obj.get("quiet", False)
    if not as_json and not quiet:
        click.secho(f"==> Installing {formula}", fg="cyan", bold=True)

    result = run_install(
        formula,
        bin_dir=bin_dir,
        fetch_timeout=timeout,
        arch=arch,
        host_os=host_os,
        emit=None if as_json else _print_caveats,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not quiet:
        click.secho(
            f"✅ Installed {result.name} {result.version} ({result.architecture}) "
            f"→ {result.destination}",
            fg="green",
        )


@cli.command()
@click.argument("formula")
@click.option("--arch", default=None, help="Show the variant for this architecture.")
@click.option("--os", "host_os", default=None, help="Treat the host as this OS.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def info(formula: str, arch: str | None, host_os: str | None, as_json: bool) -> None:
    """Show a formula and the download this host would use."""
    from brewkit.core.use_cases.info import get_info

    result = get_info(formula, arch=arch, host_os=host_os)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    m = result.manifest
    assert m is not None  # guaranteed after error check above

    click.secho(f"\n📦 {m.name}: {m.version}", fg="cyan", bold=True)
    if m.desc:
        click.echo(f"   {m.desc}")
    if m.homepage:
        click.echo(f"   {m.homepage}")
    if m.depends_on.os:
        click.echo(f"   Requires: {m.depends_on.os}")
    click.echo(f"   Installs as: {m.install_name}")
    click.echo()

    click.secho("   Variants:", fg="white", bold=True)
    for arch_tag in m.supported_architectures():
        marker = " ← this host" if arch_tag == result.host_architecture else ""
        click.echo(f"     • {arch_tag}{marker}")

    click.echo()
    if result.selected_url:
        click.echo(f"   Download: {result.selected_url}")
    else:
        click.secho(f"   ⚠️  {result.unavailable_reason}", fg="yellow")

    if m.caveats:
        click.echo()
        _print_caveats(m.caveats.rstrip("\n"))
    click.echo()


@cli.command()
@click.argument("formula")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def check(formula: str, as_json: bool) -> None:
    """Validate a formula manifest without installing it."""
    from brewkit.core.use_cases.info import check_formula

    result = check_formula(formula)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.manifest is not None  # guaranteed when valid
        click.secho("✅ Formula is valid", fg="green", bold=True)
        click.echo(f"   {result.manifest.name} {result.manifest.version}")
        click.echo(f"   Architectures: {', '.join(result.manifest.supported_architectures())}")
    else:
        click.secho("❌ Formula errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(1)


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_cmd(as_json: bool) -> None:
    """List formulas on the search path."""
    from brewkit.core.config.settings import ConfigError
    from brewkit.core.use_cases.info import get_formula_list

    try:
        formulas = get_formula_list()
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(formulas, indent=2))
        return

    if not formulas:
        click.secho("No formulas found.", fg="yellow")
        return

    for f in formulas:
        click.echo(f"   • {f['name']}  → {f['path']}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
