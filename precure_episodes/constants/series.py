"""Series catalog and lineup site constants."""


LINEUP_BASE_URL = "https://lineup.toei-anim.co.jp/ja/tv"

# Every episode page lacks a time of day; all series aired at 8:30.
BROADCAST_TIME = "08:30"

# Catalog year -> lineup slug, ascending by year
SERIES: dict[int, str] = {
    2004: "precure",
    2005: "precure_MH",
    2006: "precure_SS",
    2007: "yes_precure5",
    2008: "precure5_gogo",
    2009: "fresh_precure",
    2010: "hc_precure",
    2011: "suite_precure",
    2012: "smile_precure",
    2013: "dd_precure",
    2014: "happinesscharge_precure",
    2015: "princess_precure",
    2016: "mahotsukai_precure",
    2017: "precure_alamode",
    2018: "hugtto_precure",
    2019: "startwinkle_precure",
    2020: "healingood_precure",
    2021: "tropical-rouge_precure",
    2022: "delicious-party_precure",
    2023: "hirogaru-sky_precure",
    2024: "wonderful_precure",
}


def series_base_url(slug: str, base_url: str = LINEUP_BASE_URL) -> str:
    """Episode listing prefix for a series, e.g. ``.../ja/tv/precure/episode/``."""
    return f"{base_url}/{slug}/episode/"
