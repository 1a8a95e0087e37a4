"""
Shared fixtures for streamstats tests.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure the project root is importable without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from streamstats.pipeline.records import Record


def make_record(**overrides):
    """Record with neutral defaults, overridden per test."""
    values = {
        "track": "Track",
        "artist": "Artist",
        "album": "Album",
        "isrc": "USXXX0000000",
        "release_date": date(2023, 1, 15),
        "age": 1.0,
    }
    values.update(overrides)
    return Record(**values)


@pytest.fixture
def sample_records():
    """Small catalogue spanning two years and three artists."""
    return [
        make_record(track="A1", artist="Alpha", release_date=date(2022, 3, 1), age=2.0,
                    spotify_streams=900, youtube_views=300, youtube_likes=30,
                    tiktok_views=100, tiktok_likes=10, tiktok_posts=5,
                    shazam_counts=50, spotify_popularity=80, explicit_track=True),
        make_record(track="A2", artist="Alpha", release_date=date(2022, 3, 20), age=1.9,
                    spotify_streams=500, youtube_views=200, youtube_likes=0,
                    tiktok_views=0, tiktok_likes=0, tiktok_posts=0,
                    shazam_counts=30, spotify_popularity=70),
        make_record(track="A3", artist="Alpha", release_date=date(2023, 7, 4), age=1.0,
                    spotify_streams=100, youtube_views=50, youtube_likes=5,
                    tiktok_views=40, tiktok_likes=4, tiktok_posts=2,
                    shazam_counts=10, spotify_popularity=40),
        make_record(track="A4", artist="Alpha", release_date=date(2022, 12, 24), age=1.5,
                    spotify_streams=50, youtube_views=10, youtube_likes=1,
                    tiktok_views=20, tiktok_likes=2, tiktok_posts=1,
                    shazam_counts=5, spotify_popularity=20),
        make_record(track="B1", artist="Beta", release_date=date(2022, 6, 1), age=1.7,
                    spotify_streams=700, youtube_views=900, youtube_likes=90,
                    tiktok_views=800, tiktok_likes=40, tiktok_posts=20,
                    shazam_counts=60, spotify_popularity=90, explicit_track=True),
        make_record(track="B2", artist="Beta", release_date=date(2023, 1, 10), age=1.2,
                    spotify_streams=300, youtube_views=100, youtube_likes=10,
                    tiktok_views=200, tiktok_likes=20, tiktok_posts=8,
                    shazam_counts=20, spotify_popularity=55),
        make_record(track="C1", artist="Gamma", release_date=date(2023, 7, 30), age=0.9,
                    spotify_streams=400, youtube_views=400, youtube_likes=20,
                    tiktok_views=600, tiktok_likes=60, tiktok_posts=12,
                    shazam_counts=40, spotify_popularity=65),
    ]


@pytest.fixture
def sample_csv(tmp_path):
    """CSV in the published dataset's layout, with blanks and separators."""
    content = (
        "Track,Album Name,Artist,Release Date,ISRC,All Time Rank,Track Score,"
        "Spotify Streams,Spotify Popularity,YouTube Views,YouTube Likes,"
        "TikTok Posts,TikTok Views,Shazam Counts,TIDAL Popularity,Explicit Track\n"
        'Song One,Album One,Artist A,4/26/2024,QM24S2402528,1,725.4,'
        '"390,470,936",92,"84,274,754","1,713,126",,"5,332,281,936","2,669,262",,0\n'
        'Song Two,Album Two,Artist B,1/15/2023,USUG12400910,2,545.9,'
        '"323,703,884",92,"116,347,040","643,888","5,767,700",,"1,118,279",,1\n'
        'Bad Date,Album Three,Artist C,not a date,USAT22409172,3,538.4,'
        '"601,309,283",92,,,,,,,0\n'
    )
    path = tmp_path / "songs.csv"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def record_factory():
    return make_record
