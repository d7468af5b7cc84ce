from .schema import CATCH_SCHEMA, coerce_schema, validate_frame, validate_ranges

__all__ = ["CATCH_SCHEMA", "coerce_schema", "validate_frame", "validate_ranges"]
