# =============================================================================
# Dataset store: one record per country-year, loaded once, read-only after
# =============================================================================
import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np
import pandas as pd
import pycountry

from . import config
from .errors import DatasetLoadError

logger = logging.getLogger(__name__)

Domain = Optional[Tuple[float, float]]


# -----------------------------
# HELPERS
# -----------------------------
def clean_numeric_column(series: pd.Series) -> pd.Series:
    s = series.astype(str).str.replace(",", "", regex=False)
    s = s.str.strip().replace({"NA": np.nan, "": np.nan, "nan": np.nan, "None": np.nan})
    return pd.to_numeric(s, errors="coerce")


def clean_text_column(series: pd.Series, default: str = "") -> pd.Series:
    s = series.fillna("").astype(str).str.strip()
    if default:
        s = s.replace("", default)
    return s


def fill_missing_codes(df: pd.DataFrame) -> pd.DataFrame:
    """Fill blank ISO3 codes from the country name when pycountry knows it exactly."""
    blank = df["code"] == ""
    if not blank.any():
        return df

    def lookup_iso(name):
        try:
            return pycountry.countries.lookup(name).alpha_3
        except LookupError:
            return ""

    names = df.loc[blank, "country"].unique()
    found = {n: lookup_iso(n) for n in names}
    df.loc[blank, "code"] = df.loc[blank, "country"].map(found)
    filled = [n for n, iso in found.items() if iso]
    if filled:
        logger.info("Filled ISO codes for %d countries from their names", len(filled))
    return df


def extent(series: pd.Series) -> Domain:
    s = series.dropna()
    if s.empty:
        return None
    return float(s.min()), float(s.max())


def prepare_records(raw: pd.DataFrame) -> pd.DataFrame:
    """Normalise a raw table into dataset records.

    Rows with a missing year, or a missing / non-positive life expectancy, are
    discarded. Rows without an energy value are kept.
    """
    df = raw.copy()
    df.columns = [str(c).strip() for c in df.columns]
    if config.ENERGY not in df.columns:
        df[config.ENERGY] = np.nan
    missing = [c for c in config.REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DatasetLoadError(f"Dataset is missing columns: {', '.join(missing)}")

    df["country"] = clean_text_column(df["country"])
    df["code"] = clean_text_column(df["code"])
    df["continent"] = clean_text_column(df["continent"], default=config.UNKNOWN_CONTINENT)
    df["year"] = clean_numeric_column(df["year"])
    df[config.LIFE] = clean_numeric_column(df[config.LIFE])
    df[config.ENERGY] = clean_numeric_column(df[config.ENERGY])

    keep = df["year"].notna() & df[config.LIFE].notna() & (df[config.LIFE] > 0)
    dropped = int((~keep).sum())
    if dropped:
        logger.warning("Dropping %d rows without a year or a positive life expectancy", dropped)
    df = df[keep].copy()
    df["year"] = df["year"].astype(int)

    df = fill_missing_codes(df)
    return df[config.REQUIRED_COLUMNS].reset_index(drop=True)


def with_cache_buster(source: str) -> str:
    sep = "&" if "?" in source else "?"
    return f"{source}{sep}t={int(time.time() * 1000)}"


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


# -----------------------------
# DATASET
# -----------------------------
@dataclass(frozen=True, eq=False)
class Dataset:
    df: pd.DataFrame
    global_life_domain: Domain = None
    global_energy_domain: Domain = None
    years: Tuple[int, ...] = field(default=())

    @classmethod
    def from_frame(cls, raw: pd.DataFrame) -> "Dataset":
        df = prepare_records(raw)
        return cls(
            df=df,
            global_life_domain=extent(df[config.LIFE]),
            global_energy_domain=extent(df[config.ENERGY]),
            years=tuple(sorted(int(y) for y in df["year"].unique())),
        )

    @classmethod
    def empty(cls) -> "Dataset":
        return cls(df=pd.DataFrame({c: pd.Series(dtype=object) for c in config.REQUIRED_COLUMNS}))

    def __len__(self):
        return len(self.df)

    @property
    def is_empty(self) -> bool:
        return self.df.empty

    @property
    def latest_year(self) -> Optional[int]:
        return self.years[-1] if self.years else None

    @property
    def year_bounds(self) -> Tuple[int, int]:
        """Slider range: never narrower than 1950-2023."""
        if not self.years:
            return config.SLIDER_MIN_YEAR, config.SLIDER_MAX_YEAR
        return min(config.SLIDER_MIN_YEAR, self.years[0]), max(config.SLIDER_MAX_YEAR, self.years[-1])

    def global_domain(self, column: str) -> Domain:
        if column == config.LIFE:
            return self.global_life_domain
        if column == config.ENERGY:
            return self.global_energy_domain
        return extent(self.df[column])


def load_dataset(source=None, cache_bust: Optional[bool] = None) -> Dataset:
    """Read the dataset CSV from a path or URL.

    Raises DatasetLoadError on a missing file, unreadable content or missing
    columns.
    """
    source = str(source or config.DATA_PATH)
    cache_bust = config.CACHE_BUST if cache_bust is None else cache_bust
    target = with_cache_buster(source) if cache_bust and is_url(source) else source

    try:
        raw = pd.read_csv(target, dtype=str, keep_default_na=False)
    except FileNotFoundError as e:
        raise DatasetLoadError(f"Dataset not found at {source}") from e
    except (OSError, ValueError) as e:
        raise DatasetLoadError(f"Could not read dataset {source}: {e}") from e

    dataset = Dataset.from_frame(raw)
    if dataset.is_empty:
        logger.error("No life expectancy data available in %s", source)
    else:
        logger.info("Loaded %s: %d rows, years %d-%d", source, len(dataset), dataset.years[0], dataset.years[-1])
    return dataset
