"""Supabase implementation for the mad-lib reference tables."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from supabase import Client

from photo_describe.domain.trivia import (
    ArchitectureRow,
    BookRow,
    FilmRow,
    MusicRow,
    PodcastRow,
    TriviaCatalog,
    TvShowRow,
    VisualArtRow,
)
from photo_describe.services.trivia import TriviaRepository

T = TypeVar("T")


@dataclass
class SupabaseTriviaRepository(TriviaRepository):
    """Reads every reference table in full."""

    client: Client

    def load_catalog(self) -> TriviaCatalog:
        """Load all reference tables into typed rows."""
        return TriviaCatalog(
            music=self._load("trivia_music", _parse_music),
            films=self._load("trivia_films", _parse_film),
            tv_shows=self._load("trivia_tv_shows", _parse_tv_show),
            fiction=self._load("trivia_fiction", _parse_book),
            non_fiction=self._load("trivia_non_fiction", _parse_book),
            podcasts=self._load("trivia_podcasts", _parse_podcast),
            architecture=self._load("trivia_architecture", _parse_architecture),
            visual_art=self._load("trivia_visual_art", _parse_visual_art),
        )

    def _load(
        self, table: str, parse: Callable[[dict[str, object]], T]
    ) -> tuple[T, ...]:
        response = self.client.table(table).select("*").execute()
        return tuple(parse(row) for row in response.data or [])


def _parse_music(row: dict[str, object]) -> MusicRow:
    return MusicRow(
        title=str(row["title"]),
        artist=str(row.get("artist") or ""),
        year=int(row.get("year") or 0),
        runtime=str(row.get("runtime") or ""),
        wikipedia_link=str(row.get("wikipedia_link") or ""),
    )


def _parse_film(row: dict[str, object]) -> FilmRow:
    return FilmRow(
        title=str(row["title"]),
        year=int(row.get("year") or 0),
        mpaa_rating=str(row.get("mpaa_rating") or ""),
        runtime=str(row.get("runtime") or ""),
        wikipedia_link=str(row.get("wikipedia_link") or ""),
    )


def _parse_tv_show(row: dict[str, object]) -> TvShowRow:
    return TvShowRow(
        title=str(row["title"]),
        network=str(row.get("network") or ""),
        initial_year_aired=int(row.get("initial_year_aired") or 0),
        genre=str(row.get("genre") or ""),
        wikipedia_link=str(row.get("wikipedia_link") or ""),
    )


def _parse_book(row: dict[str, object]) -> BookRow:
    return BookRow(
        title=str(row["title"]),
        author=str(row.get("author") or ""),
        year_released=int(row.get("year_released") or 0),
        page_count=int(row.get("page_count") or 0),
        wikipedia_link=str(row.get("wikipedia_link") or ""),
    )


def _parse_podcast(row: dict[str, object]) -> PodcastRow:
    return PodcastRow(
        title=str(row["title"]),
        podcast_network=str(row.get("podcast_network") or ""),
        year_initially_released=int(row.get("year_initially_released") or 0),
        genre=str(row.get("genre") or ""),
        podcast_link=str(row.get("podcast_link") or ""),
    )


def _parse_architecture(row: dict[str, object]) -> ArchitectureRow:
    return ArchitectureRow(
        title=str(row["title"]),
        architect=str(row.get("architect") or ""),
        year_completed=int(row.get("year_completed") or 0),
        construction_cost=str(row.get("construction_cost") or ""),
        wikipedia_link=str(row.get("wikipedia_link") or ""),
    )


def _parse_visual_art(row: dict[str, object]) -> VisualArtRow:
    return VisualArtRow(
        title=str(row["title"]),
        artist=str(row.get("artist") or ""),
        year_completed=int(row.get("year_completed") or 0),
        genre=str(row.get("genre") or ""),
        wikipedia_link=str(row.get("wikipedia_link") or ""),
    )
