"""Exceptions raised by the solver package."""


class DimensionError(ValueError):
    """The grid shape is empty, ragged or outside the supported size range."""


class InputError(ValueError):
    """A cell could not be converted to a number.

    ``row`` and ``col`` are 1-based so they can be shown to the user as-is.
    """

    def __init__(self, row: int, col: int, raw: str, reason: str = "invalid input"):
        self.row = row
        self.col = col
        self.raw = raw
        self.reason = reason
        super().__init__(f"Row {row}, Col {col} {reason}: '{raw}'")

    def to_dict(self) -> dict:
        return {"row": self.row, "col": self.col, "raw": self.raw, "reason": self.reason}
