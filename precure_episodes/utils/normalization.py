"""Normalization utilities for scraped text."""

import re
from typing import Optional


FULLWIDTH_BRACKETS = ("【", "】")
CORNER_BRACKET_OPEN = "「"
CORNER_BRACKET_CLOSE = "」"


def longest_digit_run(text: str) -> Optional[str]:
    """Return the longest run of ASCII digits in text, or None if there is none."""
    runs = re.findall(r"[0-9]+", text)
    if not runs:
        return None
    # max() keeps the first of equally long runs
    return max(runs, key=len)


def normalize_subtitle(subtitle: str) -> str:
    """Strip bracket punctuation from an episode title.

    All 【 and 】 are removed. A single 「」 pair is then removed when it wraps
    the whole title (HUGっと!プリキュア lists its titles that way).
    """
    subtitle = subtitle.strip()
    for bracket in FULLWIDTH_BRACKETS:
        subtitle = subtitle.replace(bracket, "")

    if (
        len(subtitle) >= 2
        and subtitle.startswith(CORNER_BRACKET_OPEN)
        and subtitle.endswith(CORNER_BRACKET_CLOSE)
    ):
        subtitle = subtitle[1:-1]

    return subtitle


def extract_text_between(
    markup: str,
    start_text: str,
    end_text: str,
    allow_empty: bool = False,
) -> Optional[str]:
    """
    Extract the text between the first start_text and the next end_text.

    Args:
        markup: Raw markup to search
        start_text: Label preceding the value
        end_text: Terminator following the value
        allow_empty: Return "" instead of None when either marker is missing

    Returns:
        Trimmed text between the markers, "" or None if not found
    """
    start_index = markup.find(start_text)
    if start_index == -1:
        return "" if allow_empty else None
    start_index += len(start_text)

    end_index = markup.find(end_text, start_index)
    if end_index == -1:
        return "" if allow_empty else None

    return markup[start_index:end_index].strip()
