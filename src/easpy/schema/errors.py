from __future__ import annotations


class SchemaError(ValueError):
    pass


class InvalidSchemaError(SchemaError):
    pass


class SchemaMismatchError(SchemaError):
    """The values or object shape do not agree with the declared schema.

    Carries both sides for diagnostics: schema strings for shape mismatches,
    counts for positional value-count mismatches.
    """

    def __init__(
        self,
        message: str,
        *,
        expected_schema: str | None = None,
        actual_schema: str | None = None,
        expected_count: int | None = None,
        actual_count: int | None = None,
    ) -> None:
        super().__init__(message)
        self.expected_schema = expected_schema
        self.actual_schema = actual_schema
        self.expected_count = expected_count
        self.actual_count = actual_count


class EncodingError(SchemaError):
    pass
