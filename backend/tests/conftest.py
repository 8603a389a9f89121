"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from pathlib import Path

# Add src to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Set test environment variables
os.environ["CATALOG_URL"] = "https://example.test/movies.json"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["LOG_FORMAT"] = "text"  # Better for test output


import pytest

from catalog.cache_store import CatalogCacheStore
from models import Catalog
from utils.logger import configure_logging

configure_logging()


def make_movie(title, release_year="2025", **overrides):
    """Raw movie entry as found in movies.json."""
    movie = {
        "title": title,
        "release_year": release_year,
        "duree": "2h 10min",
        "rating": "7.0",
        "genres": "Drame, Comédie",
        "realisateur": "Jane Doe",
        "synopsis": f"Synopsis of {title}",
        "affiche": f"https://img.example.test/{title}.jpg",
        "wantToSee": 100,
        "url": f"https://letterboxd.com/search/{title}/",
        "seances": {
            "UGC Part-Dieu": [{"time": "20:30", "lang": "VF"}],
        },
    }
    movie.update(overrides)
    return movie


@pytest.fixture
def sample_payload():
    """Three-day catalog: Avatar is programmed on two days, the last day is empty."""
    return {
        "generated_at": "2025-11-14T06:00:00Z",
        "days": [
            {
                "date": "2025-11-14",
                "movies": [
                    make_movie(
                        "Avatar : de Feu et de Cendres",
                        duree="3h 17min",
                        rating="7.4",
                        genres="Science Fiction, Aventure, Action, Fantastique",
                        realisateur="James Cameron",
                        wantToSee=9322,
                        seances={
                            "Pathé Bellecour": [
                                {"time": "20:35", "lang": "VO", "format": "3D"}
                            ],
                            "UGC Part-Dieu": [
                                {"time": "11:00", "lang": "VO"},
                                {
                                    "time": "15:15",
                                    "lang": "VF",
                                    "format": "3D",
                                    "ticketing_url": "https://tickets.example.test/1",
                                },
                            ],
                        },
                    ),
                    make_movie(
                        "Le Mépris",
                        release_year="1963",
                        duree="1h 43min",
                        rating="8.1",
                        genres="Drame, Romance",
                        realisateur="Jean-Luc Godard",
                        wantToSee=512,
                        seances={"Institut Lumière": [{"time": "18:00", "lang": "VO"}]},
                    ),
                ],
            },
            {
                "date": "2025-11-15",
                "movies": [
                    make_movie(
                        "Avatar : de Feu et de Cendres",
                        duree="3h 17min",
                        rating="7.4",
                        genres="Science Fiction, Aventure, Action, Fantastique",
                        realisateur="James Cameron",
                        wantToSee=9400,
                        seances={"Pathé Vaise": [{"time": "14:00", "lang": "VF"}]},
                    ),
                    make_movie(
                        "Zootopie 2",
                        duree="1h 48min",
                        rating="not rated",
                        genres="Animation, Famille",
                        realisateur="Jared Bush",
                        wantToSee=4200,
                        seances={"UGC Confluence": [{"time": "10:45", "lang": "VF"}]},
                    ),
                ],
            },
            {"date": "2025-11-16", "movies": []},
        ],
    }


@pytest.fixture
def sample_catalog(sample_payload):
    return Catalog.model_validate(sample_payload)


@pytest.fixture
def cache_store(tmp_path):
    return CatalogCacheStore(tmp_path / "cache" / "movies_cache.json")


class FakeFetcher:
    """Fetcher returning a fixed catalog or raising a fixed error."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_fetcher_factory():
    return FakeFetcher
