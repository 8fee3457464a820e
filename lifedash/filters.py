from typing import Iterable, Optional

import pandas as pd

from .dataset import Dataset


def filter_for_year(
    dataset: Dataset,
    year: int,
    continents: Iterable[str],
    required_fields: Iterable[str] = (),
    sort_by: Optional[str] = None,
) -> pd.DataFrame:
    """Rows visible for one year under the continent filter.

    One row per country: when a country appears more than once for the year,
    the last row in dataset order wins. With ``sort_by`` the result is ordered
    by that column, largest first. An empty result is not an error.
    """
    df = dataset.df
    continents = set(continents)
    required = list(required_fields)

    mask = (df["year"] == year) & df["continent"].isin(continents)
    for col in required:
        mask &= df[col].notna()
    rows = df[mask]

    rows = rows.drop_duplicates(subset="country", keep="last")
    if sort_by:
        # mergesort keeps ties in dataset order
        rows = rows.sort_values(sort_by, ascending=False, kind="mergesort")
    return rows.reset_index(drop=True)
