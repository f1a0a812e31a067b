"""File and directory path constants."""

from pathlib import Path

# Data files
OUTPUT_CSV_FILENAME = "precure_episodes.csv"
OUTPUT_CSV_PATH = Path(OUTPUT_CSV_FILENAME)
