# =============================================================================
# Cross-chart selection: brushes, selection sets and per-element style classes
# =============================================================================
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Union

NORMAL = "normal"
SELECTED = "selected"
DIMMED = "dimmed"

# None means "no active selection": everything is drawn normally
SelectionSet = Optional[FrozenSet[str]]


def make_selection(countries: Optional[Iterable[str]]) -> SelectionSet:
    """An empty selection is the same as no selection."""
    if countries is None:
        return None
    chosen = frozenset(c for c in countries if c)
    return chosen or None


def style_class(country: Optional[str], selection: SelectionSet) -> str:
    if not selection:
        return NORMAL
    if country and country in selection:
        return SELECTED
    return DIMMED


def style_classes(keys: Iterable[Optional[str]], selection: SelectionSet) -> List[str]:
    return [style_class(k, selection) for k in keys]


# -----------------------------
# BRUSHES
# -----------------------------
@dataclass(frozen=True)
class IntervalBrush:
    """Horizontal drag range, in axis units."""
    x0: float
    x1: float

    def __post_init__(self):
        if self.x0 > self.x1:
            lo, hi = self.x1, self.x0
            object.__setattr__(self, "x0", lo)
            object.__setattr__(self, "x1", hi)

    def contains(self, x) -> bool:
        return self.x0 <= x <= self.x1


@dataclass(frozen=True)
class RectBrush:
    x0: float
    x1: float
    y0: float
    y1: float

    def __post_init__(self):
        for a, b in (("x0", "x1"), ("y0", "y1")):
            lo, hi = sorted((getattr(self, a), getattr(self, b)))
            object.__setattr__(self, a, lo)
            object.__setattr__(self, b, hi)

    def contains(self, x, y) -> bool:
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1


@dataclass(frozen=True)
class PointsBrush:
    """Lasso or click selection reported as the picked element keys."""
    keys: FrozenSet[str]


Brush = Union[IntervalBrush, RectBrush, PointsBrush]


def _point_key(point: dict) -> Optional[str]:
    cd = point.get("customdata")
    if isinstance(cd, list):
        cd = cd[0] if cd else None
    return cd


def brush_from_selected_data(selected_data: Optional[dict], rect: bool = False) -> Optional[Brush]:
    """Translate Plotly ``selectedData`` into a brush.

    Returns None when the selection was cleared (double-click or an empty
    drag), which callers treat as "show all".
    """
    if not selected_data:
        return None
    rng = selected_data.get("range") or {}
    if "x" in rng:
        x0, x1 = rng["x"][0], rng["x"][1]
        if rect and "y" in rng:
            return RectBrush(x0, x1, rng["y"][0], rng["y"][1])
        return IntervalBrush(x0, x1)
    points = selected_data.get("points") or []
    keys = frozenset(k for k in (_point_key(p) for p in points) if k)
    return PointsBrush(keys)
