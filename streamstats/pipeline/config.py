#!/usr/bin/env python3
"""Centralized configuration for the streaming statistics pipeline.

This module provides a single source of truth for all configuration settings
used across the CLI (run_stats.py) and the statistics engines.
"""

import os
from typing import Dict, List, Tuple

# =============================================================================
# DATASET COLUMNS
# =============================================================================

# CSV column title -> record field name for the "Most Streamed Spotify Songs 2024" dataset
IDENTITY_COLUMNS: Dict[str, str] = {
    "Track": "track",
    "Artist": "artist",
    "Album Name": "album",
    "ISRC": "isrc",
}

RELEASE_DATE_COLUMN = "Release Date"
EXPLICIT_COLUMN = "Explicit Track"

# Every metric is parsed from a thousands-separated string and defaults to 0
METRIC_COLUMNS: Dict[str, str] = {
    "All Time Rank": "all_time_rank",
    "Track Score": "track_score",
    "Spotify Streams": "spotify_streams",
    "Spotify Playlist Count": "spotify_playlist_count",
    "Spotify Playlist Reach": "spotify_playlist_reach",
    "Spotify Popularity": "spotify_popularity",
    "YouTube Views": "youtube_views",
    "YouTube Likes": "youtube_likes",
    "TikTok Posts": "tiktok_posts",
    "TikTok Likes": "tiktok_likes",
    "TikTok Views": "tiktok_views",
    "YouTube Playlist Reach": "youtube_playlist_reach",
    "Apple Music Playlist Count": "apple_music_playlist_count",
    "AirPlay Spins": "airplay_spins",
    "SiriusXM Spins": "siriusxm_spins",
    "Deezer Playlist Count": "deezer_playlist_count",
    "Deezer Playlist Reach": "deezer_playlist_reach",
    "Amazon Playlist Count": "amazon_playlist_count",
    "Pandora Streams": "pandora_streams",
    "Pandora Track Stations": "pandora_track_stations",
    "Soundcloud Streams": "soundcloud_streams",
    "Shazam Counts": "shazam_counts",
    "TIDAL Popularity": "tidal_popularity",
}

METRIC_FIELDS: List[str] = list(METRIC_COLUMNS.values())

DAYS_PER_YEAR = 365.0


# =============================================================================
# STATISTICS
# =============================================================================

# Tukey fence multiplier for box plot whiskers
TUKEY_FACTOR = 1.5

# Horizontal spread used when scattering box plot outliers
OUTLIER_JITTER_WIDTH = 0.6


# =============================================================================
# CHART DEFAULTS
# =============================================================================

# Correlation matrix fields (multi-platform section)
DEFAULT_CORRELATION_FIELDS: List[str] = [
    "spotify_streams",
    "youtube_views",
    "tiktok_views",
    "shazam_counts",
    "spotify_playlist_reach",
    "airplay_spins",
]

# Shazam correlation heatmap
SHAZAM_CORRELATION_FIELDS: List[str] = [
    "shazam_counts",
    "spotify_streams",
    "youtube_views",
    "tiktok_views",
    "airplay_spins",
]

# Parallel coordinates axes (cross-platform performance)
DEFAULT_PARALLEL_FIELDS: List[str] = [
    "spotify_playlist_reach",
    "spotify_streams",
    "spotify_popularity",
]

# Box plot metrics compared between explicit and non-explicit tracks
EXPLICIT_BOX_METRICS: List[str] = [
    "spotify_streams",
    "youtube_views",
    "tiktok_views",
    "shazam_counts",
]

# Scatter plots: (x field, y field, fit in log-log space)
SCATTER_FITS: Dict[str, Tuple[str, str, bool]] = {
    "age_vs_streams": ("age", "spotify_streams", False),
    "age_vs_popularity": ("age", "spotify_popularity", False),
    "tiktok_posts_vs_views": ("tiktok_posts", "tiktok_views", True),
    "tiktok_views_vs_streams": ("tiktok_views", "spotify_streams", True),
}

# Sunburst platforms: label -> record field
SUNBURST_PLATFORMS: Dict[str, str] = {
    "Spotify": "spotify_streams",
    "YouTube": "youtube_views",
    "TikTok": "tiktok_views",
}

TOP_ARTISTS_PLATFORM = 10
TOP_ARTISTS_PER_YEAR = 5
TOP_TRACKS_PER_ARTIST = 3
TOP_ENGAGEMENT_ARTISTS = 15
STRONGEST_PAIRS = 3

SEASONAL_METRIC = "spotify_popularity"

MONTH_NAMES: List[str] = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Five equal-width buckets over the observed popularity extent
POPULARITY_LEVELS: List[str] = ["very low", "low", "medium", "high", "very high"]


# =============================================================================
# PATHS
# =============================================================================

DEFAULT_DATA_PATH = "data/Most_Streamed_Spotify_Songs_2024.csv"
DEFAULT_OUTPUT_DIR = "outputs"
DASHBOARD_DATA_FILE = "dashboard_data.json"


def get_data_path() -> str:
    """CSV path, overridable with STREAMSTATS_DATA_PATH."""
    return os.getenv("STREAMSTATS_DATA_PATH", DEFAULT_DATA_PATH)


def get_output_dir() -> str:
    """Output directory, overridable with STREAMSTATS_OUTPUT_DIR."""
    return os.getenv("STREAMSTATS_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)
