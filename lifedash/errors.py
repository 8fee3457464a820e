class LifedashError(Exception):
    """Base class for dashboard errors."""


class DatasetLoadError(LifedashError):
    """The dataset CSV could not be read or is missing required columns."""


class GeoLoadError(LifedashError):
    """The country geometry could not be downloaded or parsed."""
