"""Custom exceptions for the schema compiler.

Contains exception classes for the failure modes that abort a compilation
run. Recoverable problems (a bad pattern rule, a malformed index entry) are
logged as warnings and never raised.
"""


class SchemaError(Exception):
    """Base class for fatal compilation errors.

    Attributes:
        message: Human-readable error description
        details: Dict with context for debugging (source path, offending value)
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SchemaNotFoundError(SchemaError):
    """Raised when the YAML source cannot be located or read."""


class SchemaParseError(SchemaError):
    """Raised when the YAML source fails to parse or has the wrong shape.

    The underlying parser message is carried verbatim in ``message``.
    """


class UnsupportedVersionError(SchemaError):
    """Raised when ``rails_version`` is not one of the supported versions."""


class EmissionError(SchemaError):
    """Raised when emitted HCL violates the block structure invariants."""
