"""Track records and the CSV loader that produces them.

A record is one row of the streaming dataset after parsing: identity strings,
the release date and derived age, every numeric metric (0 when absent) and the
explicit flag. Engines read fields through ``get_field`` so plain dicts with the
same keys work too.
"""

import logging
from dataclasses import dataclass, fields
from datetime import date
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from streamstats.pipeline import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    """One track, immutable after load."""

    track: str
    artist: str
    album: str
    isrc: str
    release_date: date
    age: float
    explicit_track: bool = False
    all_time_rank: float = 0.0
    track_score: float = 0.0
    spotify_streams: float = 0.0
    spotify_playlist_count: float = 0.0
    spotify_playlist_reach: float = 0.0
    spotify_popularity: float = 0.0
    youtube_views: float = 0.0
    youtube_likes: float = 0.0
    tiktok_posts: float = 0.0
    tiktok_likes: float = 0.0
    tiktok_views: float = 0.0
    youtube_playlist_reach: float = 0.0
    apple_music_playlist_count: float = 0.0
    airplay_spins: float = 0.0
    siriusxm_spins: float = 0.0
    deezer_playlist_count: float = 0.0
    deezer_playlist_reach: float = 0.0
    amazon_playlist_count: float = 0.0
    pandora_streams: float = 0.0
    pandora_track_stations: float = 0.0
    soundcloud_streams: float = 0.0
    shazam_counts: float = 0.0
    tidal_popularity: float = 0.0

    @property
    def release_year(self) -> int:
        return self.release_date.year

    @property
    def release_month(self) -> int:
        """Zero-based month index (January = 0)."""
        return self.release_date.month - 1


RECORD_FIELDS = [f.name for f in fields(Record)]

Records = Union[Sequence[Any], pd.DataFrame]


def get_field(record: Any, field: str) -> Any:
    """Read a field from a Record, a mapping or any attribute holder."""
    if isinstance(record, dict):
        return record[field]
    return getattr(record, field)


def field_values(records: Records, field: str) -> np.ndarray:
    """Return one field across all records as a float array."""
    if isinstance(records, pd.DataFrame):
        return records[field].to_numpy(dtype=float)
    return np.array([get_field(r, field) for r in records], dtype=float)


def iter_records(records: Records) -> Iterable[Any]:
    """Iterate records, turning DataFrame rows into dicts."""
    if isinstance(records, pd.DataFrame):
        return records.to_dict("records")
    return records


def to_number(value: Any) -> float:
    """Parse a thousands-separated number; missing or blank becomes 0."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float, np.integer, np.floating)):
        return 0.0 if pd.isna(value) else float(value)

    text = str(value).replace(",", "").strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        logger.warning(f"Unparseable numeric value {value!r}, using 0")
        return 0.0


def _read_raw_csv(path: Path) -> pd.DataFrame:
    try:
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    except UnicodeDecodeError:
        # The published dataset is not UTF-8
        logger.info(f"{path} is not UTF-8, retrying as latin-1")
        return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="latin-1")


def load_dataframe(csv_path: Union[str, Path], now: Optional[pd.Timestamp] = None) -> pd.DataFrame:
    """Load the streaming CSV into a DataFrame with one column per record field.

    Args:
        csv_path: Path to the dataset CSV
        now: Reference time for ``age`` (defaults to the current time)

    Returns:
        DataFrame with the columns of ``Record``; rows with an unparseable
        release date are dropped
    """
    path = Path(csv_path)
    if not path.exists():
        logger.error(f"Dataset not found: {csv_path}")
        raise FileNotFoundError(f"Dataset not found: {csv_path}")

    raw = _read_raw_csv(path)
    if config.RELEASE_DATE_COLUMN not in raw.columns:
        raise ValueError(f"Column '{config.RELEASE_DATE_COLUMN}' missing from {csv_path}")

    df = pd.DataFrame(index=raw.index)

    for column, field in config.IDENTITY_COLUMNS.items():
        df[field] = raw[column].str.strip() if column in raw.columns else ""

    df["release_date"] = pd.to_datetime(raw[config.RELEASE_DATE_COLUMN], errors="coerce", format="mixed")

    if config.EXPLICIT_COLUMN in raw.columns:
        df["explicit_track"] = raw[config.EXPLICIT_COLUMN].str.strip() == "1"
    else:
        df["explicit_track"] = False

    for column, field in config.METRIC_COLUMNS.items():
        df[field] = raw[column].map(to_number) if column in raw.columns else 0.0

    invalid = df["release_date"].isna()
    if invalid.any():
        logger.warning(f"Dropping {int(invalid.sum())} rows with an unparseable release date")
        df = df[~invalid].copy()

    now = pd.Timestamp.now() if now is None else pd.Timestamp(now)
    seconds_per_year = config.DAYS_PER_YEAR * 24 * 60 * 60
    df["age"] = (now - df["release_date"]).dt.total_seconds() / seconds_per_year

    df = df.reset_index(drop=True)
    logger.info(f"Loaded {len(df)} tracks from {csv_path}")
    return df[RECORD_FIELDS]


def frame_to_records(df: pd.DataFrame) -> List[Record]:
    """Convert a loaded DataFrame into immutable records."""
    records = []
    for row in df.to_dict("records"):
        row["release_date"] = pd.Timestamp(row["release_date"]).date()
        row["explicit_track"] = bool(row["explicit_track"])
        records.append(Record(**row))
    return records


def load_records(csv_path: Union[str, Path], now: Optional[pd.Timestamp] = None) -> List[Record]:
    """Load the streaming CSV as a list of ``Record``."""
    return frame_to_records(load_dataframe(csv_path, now=now))
