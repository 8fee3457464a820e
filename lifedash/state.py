from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Optional

from . import config
from .selection import SelectionSet, make_selection

DEFAULT_CONTINENTS = frozenset(config.CONTINENT_COLORS)


@dataclass(frozen=True)
class DashboardState:
    """Everything the charts are drawn from, besides the dataset itself.

    Transitions return a new state; the Dash stores hold its serialised form.
    """
    year: int
    continents: FrozenSet[str] = field(default=DEFAULT_CONTINENTS)
    selection: SelectionSet = None

    def with_year(self, year: int) -> "DashboardState":
        return replace(self, year=int(year))

    def toggle_continent(self, name: str) -> "DashboardState":
        if name in self.continents:
            continents = self.continents - {name}
        else:
            continents = self.continents | {name}
        return replace(self, continents=frozenset(continents))

    def select(self, countries: Optional[Iterable[str]]) -> "DashboardState":
        # A new brush replaces the previous selection outright
        return replace(self, selection=make_selection(countries))

    def clear_selection(self) -> "DashboardState":
        return replace(self, selection=None)

    def to_store(self) -> dict:
        return {
            "year": self.year,
            "continents": sorted(self.continents),
            "selection": sorted(self.selection) if self.selection else None,
        }

    @classmethod
    def from_store(cls, year, continents=None, selection=None) -> "DashboardState":
        return cls(
            year=int(year),
            continents=DEFAULT_CONTINENTS if continents is None else frozenset(continents),
            selection=make_selection(selection),
        )
