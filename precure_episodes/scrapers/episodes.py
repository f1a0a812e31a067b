"""Episode scraper for the Toei Animation lineup site."""

import asyncio
from html import escape
from pathlib import Path
from typing import Callable, Optional

import aiohttp
from lxml import etree, html as lxml_html

from ..constants.paths import OUTPUT_CSV_PATH
from ..constants.series import BROADCAST_TIME, LINEUP_BASE_URL, SERIES, series_base_url
from ..models.episode import EpisodeModel, PageResult
from ..utils.export import save_episodes_csv
from ..utils.normalization import extract_text_between, longest_digit_run, normalize_subtitle
from .errors import (
    FieldMissingError,
    LabelNotFoundError,
    PageFetchError,
    ScrapeError,
    StructureNotFoundError,
)


STORY_CAPTION_XPATH = "//div[@id='story_caption']"
TITLE_XPATH = ".//h1[@class='story_caption_title']"
EPISODE_ID_XPATH = ".//span[@class='episode_id']"
DATE_SPAN_XPATH = "following-sibling::p/span"

SCRIPT_LABEL = "脚本："
STORYBOARD_LABEL = "絵コンテ："
DIRECTION_LABEL = "演出："
ANIMATION_LABEL = "作画："
ART_LABEL = "美術："
TAG_OPEN = "<"

FETCH_FAILED_MESSAGE = "データを取得できませんでした"


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _inner_html(element: etree._Element) -> str:
    """Serialize the markup inside an element, excluding its own tags."""
    parts = [escape(element.text or "", quote=False)]
    for child in element:
        # tostring() includes the child's tail text
        parts.append(etree.tostring(child, encoding="unicode", method="html"))
    return "".join(parts)


def _text_after(element: etree._Element) -> Optional[str]:
    """Text of the node immediately following an element, None if there is none."""
    # Whitespace-only tail text is still the following node
    if element.tail:
        return element.tail
    following = element.getnext()
    if following is not None:
        return following.text_content()
    return None


def _text_before(element: etree._Element) -> str:
    """Text of the node immediately preceding an element."""
    previous = element.getprevious()
    if previous is None:
        parent = element.getparent()
        return (parent.text or "") if parent is not None else ""
    if previous.tail and previous.tail.strip():
        return previous.tail
    return previous.text_content()


def extract_staff(markup: str, label: str, url: str = "", allow_empty: bool = False) -> str:
    """Extract a staff credit: the text after label up to the next tag."""
    value = extract_text_between(markup, label, TAG_OPEN, allow_empty=allow_empty)
    if value is None:
        raise LabelNotFoundError(label, url)
    return value


def parse_episode_html(html: str, url: str = "") -> EpisodeModel:
    """
    Parse an episode page into an EpisodeModel.

    The returned episode has year 0; the caller assigns the catalog year.

    Args:
        html: Raw HTML content
        url: Page URL, used in error messages

    Returns:
        Parsed EpisodeModel

    Raises:
        StructureNotFoundError: The caption block or title heading is missing
        FieldMissingError: The episode number, subtitle, date or a required label is missing
    """
    try:
        document = lxml_html.fromstring(html)
    except (etree.ParserError, ValueError) as e:
        # ValueError: str input carrying an XML encoding declaration
        raise StructureNotFoundError(STORY_CAPTION_XPATH, url) from e

    captions = document.xpath(STORY_CAPTION_XPATH)
    if not captions:
        raise StructureNotFoundError(STORY_CAPTION_XPATH, url)
    caption = captions[0]

    titles = caption.xpath(TITLE_XPATH)
    if not titles:
        raise StructureNotFoundError(TITLE_XPATH, url)
    title = titles[0]

    # Episode number
    episode_ids = title.xpath(EPISODE_ID_XPATH)
    if not episode_ids:
        raise FieldMissingError("episode_number", url)
    episode_id_span = episode_ids[0]
    episode_number = longest_digit_run(episode_id_span.text_content().strip())
    if episode_number is None:
        raise FieldMissingError("episode_number", url)

    subtitle_text = _text_after(episode_id_span)
    if subtitle_text is None:
        raise FieldMissingError("subtitle", url)
    subtitle = normalize_subtitle(subtitle_text)

    # Broadcast date sits in the text just before the first <span> of a following <p>
    date_spans = title.xpath(DATE_SPAN_XPATH)
    if not date_spans:
        raise FieldMissingError("broadcast_datetime", url)
    broadcast_date = _text_before(date_spans[0]).strip()

    markup = _inner_html(caption)
    storyboard = extract_staff(markup, STORYBOARD_LABEL, url, allow_empty=True)
    # Later HealinGood pages repeat the label inside the value
    storyboard = storyboard.replace(STORYBOARD_LABEL, "").strip()

    return EpisodeModel(
        episode_number=episode_number,
        subtitle=subtitle,
        broadcast_datetime=f"{broadcast_date} {BROADCAST_TIME}",
        script=extract_staff(markup, SCRIPT_LABEL, url),
        storyboard=storyboard,
        direction=extract_staff(markup, DIRECTION_LABEL, url),
        animation_direction=extract_staff(markup, ANIMATION_LABEL, url),
        art=extract_staff(markup, ART_LABEL, url),
    )


async def get_max_pages(session: aiohttp.ClientSession, base_url: str) -> int:
    """
    Count the episode pages of a series by probing until the first failure.

    Args:
        session: aiohttp session
        base_url: Series episode prefix ending in "/"

    Returns:
        Number of the last page that responded successfully (0 if none)
    """
    page = 1
    while True:
        async with session.get(f"{base_url}{page}/") as response:
            if not _is_success(response.status):
                return page - 1
        page += 1


async def fetch_page(session: aiohttp.ClientSession, url: str) -> str:
    """Fetch a page body, raising PageFetchError on transport or decoding failure."""
    try:
        async with session.get(url) as response:
            if not _is_success(response.status):
                raise PageFetchError(url, status=response.status)
            return await response.text()
    except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
        raise PageFetchError(url, cause=e) from e


async def scrape_page(session: aiohttp.ClientSession, url: str) -> PageResult:
    """Fetch and parse one episode page into a PageResult."""
    try:
        html = await fetch_page(session, url)
        episode = parse_episode_html(html, url)
    except ScrapeError as e:
        return PageResult.failure(url, e.message)
    return PageResult.success(url, episode)


async def scrape_series(
    session: aiohttp.ClientSession,
    year: int,
    base_url: str,
    on_episode_scraped: Optional[Callable[[EpisodeModel], None]] = None,
) -> list[EpisodeModel]:
    """
    Scrape every episode page of one series sequentially.

    Failed pages are reported on the console and skipped.

    Args:
        session: aiohttp session
        year: Catalog year assigned to each episode
        base_url: Series episode prefix ending in "/"
        on_episode_scraped: Callback when an episode is scraped

    Returns:
        List of scraped EpisodeModels in page order
    """
    episodes: list[EpisodeModel] = []
    max_pages = await get_max_pages(session, base_url)

    for page in range(1, max_pages + 1):
        result = await scrape_page(session, f"{base_url}{page}/")
        if not result.ok:
            print(f"{FETCH_FAILED_MESSAGE} {result.url}: {result.error}")
            continue

        episode = result.episode.model_copy(update={"year": year})
        episodes.append(episode)

        if on_episode_scraped:
            on_episode_scraped(episode)

    return episodes


async def scrape_all_series(
    series: Optional[dict[int, str]] = None,
    base_url: str = LINEUP_BASE_URL,
    on_episode_scraped: Optional[Callable[[EpisodeModel], None]] = None,
) -> list[EpisodeModel]:
    """
    Scrape all episodes of every series in catalog order.

    Args:
        series: Year -> slug catalog (default: all series)
        base_url: Lineup site root
        on_episode_scraped: Callback when an episode is scraped

    Returns:
        List of all scraped EpisodeModels
    """
    if series is None:
        series = SERIES

    episodes: list[EpisodeModel] = []

    async with aiohttp.ClientSession() as session:
        for year, slug in series.items():
            episodes.extend(
                await scrape_series(
                    session,
                    year,
                    series_base_url(slug, base_url),
                    on_episode_scraped=on_episode_scraped,
                )
            )

    return episodes


async def scrape_to_csv(
    path: Path = OUTPUT_CSV_PATH,
    series: Optional[dict[int, str]] = None,
    base_url: str = LINEUP_BASE_URL,
    on_episode_scraped: Optional[Callable[[EpisodeModel], None]] = None,
) -> list[EpisodeModel]:
    """Scrape all series and write the episodes to a CSV file."""
    episodes = await scrape_all_series(
        series=series,
        base_url=base_url,
        on_episode_scraped=on_episode_scraped,
    )
    save_episodes_csv(episodes, path)
    return episodes
