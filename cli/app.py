"""
cli/app.py - Main CLI entry point

Click based CLI for querying the AWS ip-ranges document.

Command structure:
    awsipranges --version                         # show version
    awsipranges ranges                            # every published prefix
    awsipranges ranges -f region=us-east-1        # filtered prefixes
    awsipranges ranges -f ip=3.5.12.4 --format json
    awsipranges contains 52.94.76.1               # exit 0 if inside an AWS range
    awsipranges cache status                      # cache file state (no fetch)
    awsipranges cache refresh                     # force a new download

Global options override the AWSIPRANGES_* environment variables:
    --cachefile PATH      cache file location
    --expiration DURATION cache expiration ("720h"; "" = never expire)
    -v, --verbose         debug logging

Usage:
    $ awsipranges ranges -f region=us-east-1 -f service=DYNAMODB,S3
    $ python -m cli.app contains 3.5.12.4
"""

import functools
import json
import sys
from pathlib import Path

# Project root on sys.path (for `python -m cli.app` from a checkout)
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import click  # noqa: E402
from click import Context  # noqa: E402
from rich.markup import escape  # noqa: E402

from cli.ui.console import (  # noqa: E402
    console,
    print_error,
    print_info,
    print_prefix_table,
    print_success,
    print_warning,
    setup_logging,
)
from core.config import Settings, get_settings, get_version  # noqa: E402
from core.data.ip_ranges import (  # noqa: E402
    IPRanges,
    configure,
    contains,
    fetch_ip_ranges,
    get_cache_status,
    read_ranges,
    refresh_ip_ranges,
)
from core.exceptions import ConfigError, FilterError, IPRangesError  # noqa: E402

VERSION = get_version()


def _parse_filter_option(value: str) -> dict[str, object]:
    """Parse ``TYPE=VALUE[,VALUE...]`` into a raw filter mapping"""
    filter_type, sep, raw_values = value.partition("=")
    if not sep or not filter_type.strip():
        raise click.BadParameter(f"expected TYPE=VALUE[,VALUE...], got {value!r}", param_hint="'-f' / '--filter'")

    values = [v.strip() for v in raw_values.split(",") if v.strip()]
    return {"type": filter_type.strip(), "values": values}


def _get_settings(ctx: Context) -> Settings:
    settings: Settings = ctx.obj["settings"]
    return settings


def _load_ranges(ctx: Context) -> IPRanges:
    """Load the document or exit with an error"""
    try:
        return configure(_get_settings(ctx))
    except IPRangesError as e:
        print_error(str(e))
        raise SystemExit(1) from e


@click.group()
@click.version_option(VERSION, prog_name="awsipranges")
@click.option("--cachefile", default=None, help="Location to cache the ip-ranges.json file")
@click.option("--expiration", default=None, help='Cache expiration, e.g. "720h" ("" = never expire)')
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx: Context, cachefile: str | None, expiration: str | None, verbose: bool) -> None:
    """awsipranges - AWS IP ranges cache and query tool"""
    setup_logging(verbose)

    try:
        settings = get_settings().with_overrides(cachefile=cachefile, expiration=expiration)
    except ConfigError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command("ranges")
@click.option(
    "-f",
    "--filter",
    "filters",
    multiple=True,
    metavar="TYPE=VALUE[,VALUE...]",
    help="Filter (address|ip, region, network-border-group, service); repeat to combine",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def ranges_command(ctx: Context, filters: tuple[str, ...], output_format: str) -> None:
    """List ip prefixes matching the filters

    \b
    Values of one filter are OR-ed, different filters are AND-ed.
    Matching is case-insensitive.

    \b
    Examples:
        awsipranges ranges -f ip=3.5.12.4
        awsipranges ranges -f region=us-east-1 -f service=DYNAMODB
        awsipranges ranges -f network-border-group=us-east-1,us-west-2 --format json
    """
    raw_filters = [_parse_filter_option(f) for f in filters]
    ranges = _load_ranges(ctx)

    result = read_ranges(ranges, raw_filters)
    if result.error:
        print_error(result.error)
        raise SystemExit(1)

    if output_format == "json":
        click.echo(json.dumps(result.ip_prefixes or [], indent=2))
        return

    if not result.ip_prefixes:
        print_warning("No matching ip prefixes")
        return

    print_prefix_table(result.ip_prefixes, title=f"AWS IP Ranges ({ranges.create_date})")
    console.print(f"[dim]{len(result.ip_prefixes)} prefixes[/dim]")


@cli.command("contains")
@click.argument("ip")
@click.pass_context
def contains_command(ctx: Context, ip: str) -> None:
    """Check whether an IP address is in an AWS range

    Exits with 0 when the address is inside a published range, 1 otherwise.
    """
    ranges = _load_ranges(ctx)

    try:
        found = contains(ranges, ip)
    except FilterError as e:
        raise click.BadParameter(str(e), param_hint="'IP'") from e

    if found:
        print_success(f"{ip} is in an AWS range")
        return

    print_info(f"{ip} is not in any AWS range")
    raise SystemExit(1)


@cli.group("cache")
def cache_group() -> None:
    """Cache file management"""


@cache_group.command("status")
@click.pass_context
def cache_status_command(ctx: Context) -> None:
    """Show the cache file state (never downloads)"""
    settings = _get_settings(ctx)
    status = get_cache_status(settings.cachefile, settings.expiration)

    console.print(f"Cache file: [cyan]{escape(status.path)}[/cyan]")
    if not status.cached:
        print_warning("No usable cache file")
        return

    console.print(f"createDate: {escape(status.create_date)}")
    console.print(f"Prefixes:   {status.count}")
    console.print(f"Expiration: {settings.expiration or 'never'}")

    if status.error:
        print_error(status.error)
        raise SystemExit(1)

    if status.age_hours is not None:
        console.print(f"Age:        {status.age_hours:.1f}h")
    if status.fresh:
        print_success("Cache is fresh")
    else:
        print_warning("Cache is expired")


@cache_group.command("refresh")
@click.pass_context
def cache_refresh_command(ctx: Context) -> None:
    """Download the document and rewrite the cache file"""
    settings = _get_settings(ctx)
    fetch_fn = functools.partial(fetch_ip_ranges, url=settings.url, timeout=settings.timeout)

    try:
        ranges = refresh_ip_ranges(settings.cachefile, fetch_fn)
    except IPRangesError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    print_success(f"Loaded {len(ranges)} prefixes (createDate {ranges.create_date})")


if __name__ == "__main__":
    cli()
