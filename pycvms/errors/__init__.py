class UsageError(Exception):  # noqa: D101
    pass


class MalformedFormulaError(Exception):
    """Raised when a formula cannot be split into `dependent ~ predictors`."""

    def __init__(self, message: str, formula: str, index: int | None = None):
        super().__init__(message)
        self.formula = formula
        self.index = index


__all__ = [
    "MalformedFormulaError",
    "UsageError",
]
