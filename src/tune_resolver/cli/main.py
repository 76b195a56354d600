"""
Command-line interface for tune_resolver.
"""
import logging
from pathlib import Path

import click

from ..core import normalizer
from ..core.config import Config
from ..core.exceptions import TuneResolverError
from ..integrations import CredentialStore, build_resolver


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose, debug):
    """Resolve video/track titles to catalog tracks."""
    ctx.ensure_object(dict)

    try:
        config = Config.from_dotenv()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)
        return

    level = logging.DEBUG if debug else (logging.INFO if verbose else logging.WARNING)
    logging.getLogger().setLevel(level)

    ctx.obj["config"] = config


@cli.command()
@click.argument("title")
def parse(title):
    """Parse an 'Artist - Song' title without searching anywhere."""
    query = normalizer.normalize(title)

    click.echo(f"Cleaned title: {query.raw_title}")
    track_info = query.track_info
    if track_info is None:
        click.echo("No artist/song separator found")
        return

    click.echo(f"Artist: {track_info.artist}")
    click.echo(f"Song:   {track_info.song}")
    click.echo(f"Search: {track_info}")


def _destinations(config, destination):
    return list(destination) if destination else config.destinations


def _report(match):
    if match is None:
        click.echo("No confident match found")
        return
    click.echo(f"Match: {match.track_info}")
    click.echo(f"  Provider:   {match.provider_name}")
    click.echo(f"  URI:        {match.uri}")
    click.echo(f"  Confidence: {match.confidence:.2f}")


@cli.command()
@click.argument("title")
@click.option("--description", "-d", default=None, help="Free-text description")
@click.option(
    "--destination",
    "-D",
    multiple=True,
    help="Destination provider to search (repeatable, default from config)",
)
@click.option(
    "--smart/--no-smart",
    default=None,
    help="Allow AI enrichment when no provider is confident",
)
@click.pass_context
def match(ctx, title, description, destination, smart):
    """Find TITLE on the destination catalog(s)."""
    config = ctx.obj["config"]
    use_smart = config.use_smart_matching if smart is None else smart

    try:
        resolver = build_resolver(config)
        credentials = CredentialStore(config)
        result = resolver.resolve_text(
            title,
            description,
            _destinations(config, destination),
            credentials.get,
            use_smart_matching=use_smart,
            token_refresher=credentials.refresh,
        )
        _report(result)
    except TuneResolverError as e:
        click.echo(f"Match failed: {e}", err=True)
        ctx.exit(1)


@cli.command()
@click.argument("url")
@click.option(
    "--destination",
    "-D",
    multiple=True,
    help="Destination provider to search (repeatable, default from config)",
)
@click.option(
    "--smart/--no-smart",
    default=None,
    help="Allow AI enrichment when no provider is confident",
)
@click.option("--add-to", default=None, help="Playlist ID to add the match to")
@click.pass_context
def resolve(ctx, url, destination, smart, add_to):
    """Extract the track behind URL and find it on the destination catalog(s)."""
    config = ctx.obj["config"]
    use_smart = config.use_smart_matching if smart is None else smart

    try:
        resolver = build_resolver(config)
        credentials = CredentialStore(config)

        metadata = resolver.extract(url)
        if metadata is None:
            click.echo("Could not extract track data from URL", err=True)
            ctx.exit(1)
            return
        click.echo(f"Source title: {metadata.title}")

        result = resolver.resolve_text(
            metadata.title,
            metadata.description,
            _destinations(config, destination),
            credentials.get,
            use_smart_matching=use_smart,
            token_refresher=credentials.refresh,
        )
        _report(result)

        if result and add_to:
            added = resolver.add_match(
                result, add_to, credentials.get, token_refresher=credentials.refresh
            )
            if added.success:
                click.echo(f"Added to {add_to}")
            else:
                click.echo(f"Failed to add track: {added.error}", err=True)
                ctx.exit(1)
    except TuneResolverError as e:
        click.echo(f"Resolve failed: {e}", err=True)
        ctx.exit(1)


@cli.command()
@click.pass_context
def config_info(ctx):
    """Display configuration information."""
    config = ctx.obj["config"]

    def flag(value):
        return "Set" if value else "Not set"

    click.echo("Configuration:")
    click.echo(f"  Destinations: {', '.join(config.destinations)}")
    click.echo(f"  YouTube API key: {flag(config.youtube_api_key)}")
    click.echo(f"  Spotify access token: {flag(config.spotify_access_token)}")
    click.echo(f"  Spotify refresh token: {flag(config.spotify_refresh_token)}")
    click.echo(f"  OpenAI API key: {flag(config.openai_api_key)}")
    click.echo(f"  Smart matching: {'on' if config.use_smart_matching else 'off'}")
    click.echo(
        f"  Thresholds: accept {config.acceptance_threshold}, "
        f"enrichment {config.enrichment_threshold}"
    )
    click.echo(f"  Tokens directory: {config.tokens_dir}")

    env_file = Path(".env")
    if env_file.exists():
        click.echo("  Environment file: Found (.env)")
    else:
        click.echo("  Environment file: Not found (.env)")


if __name__ == "__main__":
    cli()
