"""CLI entry point for scraping Precure episode data."""

import asyncio
import sys
from collections import Counter
from pathlib import Path

import click

from .constants.paths import OUTPUT_CSV_PATH
from .constants.series import LINEUP_BASE_URL, SERIES, series_base_url


@click.group()
def cli():
    """Precure episodes - lineup site scraping CLI."""
    pass


@cli.command("scrape")
@click.option(
    "--output", "-o",
    default=str(OUTPUT_CSV_PATH),
    type=click.Path(dir_okay=False),
    help=f"CSV file to write (default: {OUTPUT_CSV_PATH})"
)
@click.option(
    "--year", "-y",
    "years",
    multiple=True,
    type=int,
    help="Only scrape the series of this year (can specify multiple)"
)
def scrape(output: str, years: tuple[int, ...]):
    """Scrape episode data for every series and write it to CSV.

    Fetches episode numbers, subtitles, broadcast dates and staff credits
    one page at a time. Pages that cannot be parsed are reported and skipped.

    Examples:

        precure-episodes scrape

        precure-episodes scrape -y 2023 -y 2024 -o sky_wonderful.csv
    """
    from .scrapers.episodes import scrape_to_csv

    unknown = [year for year in years if year not in SERIES]
    if unknown:
        raise click.BadParameter(
            f"No series for year(s): {', '.join(map(str, unknown))}",
            param_hint="--year",
        )

    series = {year: slug for year, slug in SERIES.items() if not years or year in years}

    scraped_count = 0

    def on_episode_scraped(episode):
        nonlocal scraped_count
        scraped_count += 1
        click.echo(f"[{scraped_count}] {episode.year} #{episode.episode_number}: {episode.subtitle}", err=True)

    click.echo(f"Scraping {len(series)} series...", err=True)

    episodes = asyncio.run(scrape_to_csv(
        path=Path(output),
        series=series,
        on_episode_scraped=on_episode_scraped,
    ))

    click.echo(f"\nWrote {len(episodes)} episodes to {output}", err=True)


@cli.command("series")
def list_series():
    """List the series catalog with its episode listing URLs."""
    for year, slug in SERIES.items():
        click.echo(f"{year}\t{slug}\t{series_base_url(slug, LINEUP_BASE_URL)}")


@cli.command("summary")
@click.option(
    "--input", "-i",
    "input_path",
    default=str(OUTPUT_CSV_PATH),
    type=click.Path(dir_okay=False),
    help=f"CSV file to read (default: {OUTPUT_CSV_PATH})"
)
def summary(input_path: str):
    """Show the number of scraped episodes per series year."""
    from .utils.export import load_episodes_csv

    if not Path(input_path).exists():
        click.echo(f"Error: {input_path} not found. Run 'precure-episodes scrape' first.", err=True)
        sys.exit(1)

    episodes = load_episodes_csv(Path(input_path))
    counts = Counter(episode.year for episode in episodes)

    for year, slug in SERIES.items():
        if year in counts:
            click.echo(f"{year}\t{slug}\t{counts[year]}")

    click.echo(f"\n{len(episodes)} episodes", err=True)
