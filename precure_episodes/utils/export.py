"""CSV export of scraped episodes."""

import csv
from pathlib import Path
from typing import Iterable

from ..constants.paths import OUTPUT_CSV_PATH
from ..models.episode import EpisodeModel


CSV_FIELDNAMES = list(EpisodeModel.model_fields)


def save_episodes_csv(episodes: Iterable[EpisodeModel], path: Path = OUTPUT_CSV_PATH) -> Path:
    """Write all episodes to a CSV file, replacing any existing file."""
    path = Path(path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDNAMES)
        writer.writeheader()
        for episode in episodes:
            writer.writerow(episode.model_dump())
    return path


def load_episodes_csv(path: Path = OUTPUT_CSV_PATH) -> list[EpisodeModel]:
    """Load episodes from a CSV file written by save_episodes_csv."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return [EpisodeModel(**row) for row in csv.DictReader(f)]
