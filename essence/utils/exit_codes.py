"""Centralized exit codes for the Essence CLI."""

from essence.exceptions import (
    EmissionError,
    SchemaError,
    SchemaNotFoundError,
    SchemaParseError,
    UnsupportedVersionError,
)


class ExitCodes:
    """Standard exit codes for Essence CLI commands."""

    SUCCESS = 0

    UNEXPECTED_ERROR = 1

    SCHEMA_NOT_FOUND = 3
    SCHEMA_INVALID = 4
    UNSUPPORTED_VERSION = 5
    EMISSION_FAILED = 6

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - Schema compiled",
            cls.UNEXPECTED_ERROR: "Unexpected error - see log output",
            cls.SCHEMA_NOT_FOUND: "Schema YAML file not found or unreadable",
            cls.SCHEMA_INVALID: "Schema YAML could not be parsed",
            cls.UNSUPPORTED_VERSION: "Unsupported rails_version in schema YAML",
            cls.EMISSION_FAILED: "Generated HCL failed structure validation",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")

    @classmethod
    def for_exception(cls, exc: BaseException) -> int:
        """Map a compilation exception to its exit code."""
        if isinstance(exc, SchemaNotFoundError):
            return cls.SCHEMA_NOT_FOUND
        if isinstance(exc, SchemaParseError):
            return cls.SCHEMA_INVALID
        if isinstance(exc, UnsupportedVersionError):
            return cls.UNSUPPORTED_VERSION
        if isinstance(exc, EmissionError):
            return cls.EMISSION_FAILED
        if isinstance(exc, SchemaError):
            return cls.SCHEMA_INVALID
        return cls.UNEXPECTED_ERROR
