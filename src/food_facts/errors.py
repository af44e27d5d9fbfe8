"""Error kinds surfaced to API callers."""


class FoodFactsError(Exception):
    """Base error carrying a stable, machine-readable kind."""

    kind = "food-facts-error"


class FetchFailedError(FoodFactsError):
    """An upstream call failed, timed out or returned a non-success status."""

    kind = "fetch-failed"


class InvalidInputError(FoodFactsError):
    """Caller input was rejected before any upstream call."""

    kind = "invalid-input"
