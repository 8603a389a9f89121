"""
Tests for the schedule data model.
"""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from models import (
    CATALOG_TIMEZONE,
    Catalog,
    Movie,
    Showtime,
    compute_movie_id,
    parse_duration,
    parse_rating,
)
from conftest import make_movie


class TestParseDuration:
    """Test duration parsing."""

    def test_hours_and_minutes(self):
        assert parse_duration("3h 17min") == 197
        assert parse_duration("1h 30min") == 90

    def test_only_minutes(self):
        assert parse_duration("45min") == 45

    def test_only_hours(self):
        assert parse_duration("2h") == 120

    def test_invalid(self):
        assert parse_duration(None) == 0
        assert parse_duration("") == 0
        assert parse_duration("unknown") == 0

    def test_partial(self):
        assert parse_duration("1h abc") == 60


class TestParseRating:
    def test_numeric(self):
        assert parse_rating("7.4") == 7.4

    def test_not_a_number(self):
        assert parse_rating("not rated") == 0.0
        assert parse_rating("") == 0.0
        assert parse_rating(None) == 0.0


class TestMovie:
    """Test movie derived accessors."""

    @pytest.fixture
    def movie(self):
        return Movie.model_validate(
            make_movie(
                "Avatar",
                genres="Science Fiction, Aventure,  Action",
                seances={
                    "UGC Part-Dieu": [
                        {"time": "11:00", "lang": "VO"},
                        {"time": "15:15", "lang": "VF", "format": "3D"},
                    ],
                    "Pathé Bellecour": [{"time": "20:35", "lang": "VO", "format": "3D"}],
                },
            )
        )

    def test_identity_is_title_and_year(self, movie):
        assert movie.id == "Avatar2025"
        assert compute_movie_id("Avatar", "2025") == movie.id

    def test_equality_follows_identity(self, movie):
        other = movie.model_copy(update={"rating": "1.0", "want_to_see": 0})
        assert other == movie
        assert len({movie, other}) == 1

    def test_genre_list(self, movie):
        assert movie.genre_list == ["Science Fiction", "Aventure", "Action"]

    def test_cinemas_sorted(self, movie):
        assert movie.cinemas == ["Pathé Bellecour", "UGC Part-Dieu"]

    def test_total_showtimes(self, movie):
        assert movie.total_showtimes == 3

    def test_duration_minutes(self, movie):
        assert movie.duration_minutes == 130

    def test_rerelease_boundary(self):
        today = date.today()
        five = Movie.model_validate(make_movie("Old", release_year=str(today.year - 5)))
        four = Movie.model_validate(make_movie("Recent", release_year=str(today.year - 4)))
        assert five.is_rerelease()
        assert not four.is_rerelease()

    def test_rerelease_non_numeric_year(self):
        movie = Movie.model_validate(make_movie("Mystery", release_year="n/a"))
        assert not movie.is_rerelease(date(2030, 1, 1))

    def test_missing_field_rejected(self):
        data = make_movie("Broken")
        del data["seances"]
        with pytest.raises(ValidationError):
            Movie.model_validate(data)


class TestShowtime:
    def test_starts_at_in_catalog_timezone(self):
        showtime = Showtime(time="20:35", language="VO")
        starts_at = showtime.starts_at(date(2025, 11, 14))
        assert starts_at == datetime(2025, 11, 14, 20, 35, tzinfo=CATALOG_TIMEZONE)
        assert starts_at.astimezone(timezone.utc) == datetime(
            2025, 11, 14, 19, 35, tzinfo=timezone.utc
        )

    def test_starts_at_from_aware_datetime(self):
        showtime = Showtime(time="10:00", language="VF")
        # 23:30 UTC on the 13th is already the 14th in Lyon
        reference = datetime(2025, 11, 13, 23, 30, tzinfo=timezone.utc)
        assert showtime.starts_at(reference).date() == date(2025, 11, 14)

    @pytest.mark.parametrize(
        "value", ["24:99", "20h35", "20:35:00", "ab:cd", "", "-1:30", "²0:35", "20:3⁵"]
    )
    def test_unparseable_time(self, value):
        assert Showtime(time=value, language="VF").starts_at(date(2025, 11, 14)) is None

    def test_identity_uses_standard_sentinel(self):
        assert Showtime(time="20:35", language="VO").id == "20:35-VO-standard"
        assert Showtime(time="20:35", language="VO", format="3D").id == "20:35-VO-3D"

    def test_display_text(self):
        assert Showtime(time="20:30", language="VF", format="3D").display_text == "20:30 - VF 3D"
        assert Showtime(time="20:30", language="VF").display_text == "20:30 - VF"

    def test_decodes_upstream_keys(self):
        showtime = Showtime.model_validate(
            {"time": "15:15", "lang": "VF", "format": "IMAX", "ticketing_url": "https://t"}
        )
        assert showtime.language == "VF"
        assert showtime.ticketing_url == "https://t"


class TestCatalog:
    def test_generated_at_parsed(self, sample_catalog):
        assert sample_catalog.generated_at_datetime == datetime(
            2025, 11, 14, 6, 0, tzinfo=timezone.utc
        )

    def test_generated_at_unparseable(self):
        assert Catalog(generated_at="yesterday", days=[]).generated_at_datetime is None

    def test_duplicate_dates_rejected(self, sample_payload):
        sample_payload["days"].append({"date": "2025-11-14", "movies": []})
        with pytest.raises(ValidationError):
            Catalog.model_validate(sample_payload)

    def test_day_helpers(self, sample_catalog):
        day = sample_catalog.days[0]
        now = datetime(2025, 11, 14, 12, 0, tzinfo=CATALOG_TIMEZONE)
        assert day.day == date(2025, 11, 14)
        assert day.is_today(now)
        assert sample_catalog.days[1].is_tomorrow(now)

    def test_to_json_uses_upstream_keys(self, sample_catalog):
        text = sample_catalog.to_json()
        assert '"generated_at"' in text
        assert '"seances"' in text
        assert '"realisateur"' in text
        assert '"ticketing_url":null' not in text
