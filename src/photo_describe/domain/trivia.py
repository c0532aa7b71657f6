"""Typed reference rows used by the mad-lib narrative."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MusicRow:
    title: str
    artist: str
    year: int
    runtime: str
    wikipedia_link: str


@dataclass(frozen=True)
class FilmRow:
    title: str
    year: int
    mpaa_rating: str
    runtime: str
    wikipedia_link: str


@dataclass(frozen=True)
class TvShowRow:
    title: str
    network: str
    initial_year_aired: int
    genre: str
    wikipedia_link: str


@dataclass(frozen=True)
class BookRow:
    """Row shared by the fiction and non-fiction tables."""

    title: str
    author: str
    year_released: int
    page_count: int
    wikipedia_link: str


@dataclass(frozen=True)
class PodcastRow:
    title: str
    podcast_network: str
    year_initially_released: int
    genre: str
    podcast_link: str


@dataclass(frozen=True)
class ArchitectureRow:
    title: str
    architect: str
    year_completed: int
    construction_cost: str
    wikipedia_link: str


@dataclass(frozen=True)
class VisualArtRow:
    title: str
    artist: str
    year_completed: int
    genre: str
    wikipedia_link: str


@dataclass(frozen=True)
class TriviaCatalog:
    """All reference rows, loaded once."""

    music: tuple[MusicRow, ...] = ()
    films: tuple[FilmRow, ...] = ()
    tv_shows: tuple[TvShowRow, ...] = ()
    fiction: tuple[BookRow, ...] = ()
    non_fiction: tuple[BookRow, ...] = ()
    podcasts: tuple[PodcastRow, ...] = ()
    architecture: tuple[ArchitectureRow, ...] = ()
    visual_art: tuple[VisualArtRow, ...] = ()


@dataclass(frozen=True)
class MadLibTrivia:
    """One randomly selected row per category; None when a table is empty."""

    music: MusicRow | None
    films: FilmRow | None
    tv_shows: TvShowRow | None
    fiction: BookRow | None
    non_fiction: BookRow | None
    podcasts: PodcastRow | None
    architecture: ArchitectureRow | None
    visual_art: VisualArtRow | None
