"""Reference data for the mad-lib narrative."""

import random
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from photo_describe.domain.trivia import MadLibTrivia, TriviaCatalog

T = TypeVar("T")


class TriviaRepository(Protocol):
    """Source of the static reference tables."""

    def load_catalog(self) -> TriviaCatalog:
        """Load every reference table."""


@dataclass
class TriviaService:
    """Loads the reference tables once and serves random rows."""

    repository: TriviaRepository
    rng: random.Random = field(default_factory=random.Random)
    _catalog: TriviaCatalog | None = None

    def catalog(self) -> TriviaCatalog:
        """Return the cached catalog, loading it on first use."""
        if self._catalog is None:
            self._catalog = self.repository.load_catalog()
        return self._catalog

    def random_trivia(self) -> MadLibTrivia:
        """Return one random row per reference category."""
        catalog = self.catalog()
        return MadLibTrivia(
            music=self._pick(catalog.music),
            films=self._pick(catalog.films),
            tv_shows=self._pick(catalog.tv_shows),
            fiction=self._pick(catalog.fiction),
            non_fiction=self._pick(catalog.non_fiction),
            podcasts=self._pick(catalog.podcasts),
            architecture=self._pick(catalog.architecture),
            visual_art=self._pick(catalog.visual_art),
        )

    def _pick(self, rows: tuple[T, ...]) -> T | None:
        if not rows:
            return None
        return self.rng.choice(rows)
