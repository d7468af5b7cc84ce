from __future__ import annotations


class SchemaError(ValueError):
    """A raw field could not be parsed to its declared type, or columns are missing."""


class NoDataError(ValueError):
    """A computation has nothing to divide by (empty input, zero weight, absent species)."""


class HaulCollisionError(ValueError):
    """One haul id maps to more than one combination of per-haul attributes."""

    def __init__(self, haul_ids: list):
        self.haul_ids = list(haul_ids)
        shown = self.haul_ids[:10]
        more = f" (+{len(self.haul_ids) - 10} more)" if len(self.haul_ids) > 10 else ""
        super().__init__(
            f"Haul ids with conflicting per-haul attributes: {shown}{more}"
        )
