import numpy as np
import pandas as pd
import pytest

from lifedash.dataset import Dataset


def square(x, y):
    return {"type": "Polygon", "coordinates": [[[x, y], [x + 1, y], [x + 1, y + 1], [x, y + 1], [x, y]]]}


@pytest.fixture
def raw_rows():
    return pd.DataFrame([
        {"country": "A", "code": "FRA", "continent": "Europe", "year": 2020, "life_expectancy": 80, "energy_consumption": 50},
        {"country": "B", "code": "KEN", "continent": "Africa", "year": 2020, "life_expectancy": 60, "energy_consumption": 10},
        {"country": "C", "code": "DEU", "continent": "Asia", "year": 2020, "life_expectancy": 70, "energy_consumption": np.nan},
        {"country": "B", "code": "KEN", "continent": "Africa", "year": 2021, "life_expectancy": 61, "energy_consumption": 11},
        {"country": "C", "code": "DEU", "continent": "Asia", "year": 2021, "life_expectancy": 71, "energy_consumption": 5},
    ])


@pytest.fixture
def dataset(raw_rows):
    return Dataset.from_frame(raw_rows)


@pytest.fixture
def features():
    return [
        {"type": "Feature", "id": 250, "geometry": square(0, 0), "properties": {"name": "France"}},
        {"type": "Feature", "id": 404, "geometry": square(2, 0), "properties": {"name": "Kenya"}},
        {"type": "Feature", "id": 276, "geometry": square(4, 0), "properties": {"name": "Germany"}},
        {"type": "Feature", "id": 840, "geometry": square(6, 0), "properties": {"name": "United States"}},
    ]
