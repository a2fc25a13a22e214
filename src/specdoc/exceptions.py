"""Exception hierarchy for specdoc.

All exceptions inherit from :class:`SpecdocError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specdoc.exit_codes`.
The top-level error handler in :func:`specdoc.app.main` catches
``SpecdocError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Missing optional fields in an API description are never errors: the
transform substitutes defaults for them. Only I/O, parse, and (in strict
mode) ``$ref`` failures surface as exceptions.

Subclass hierarchy::

    SpecdocError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- InputNotFoundError      (exit 4)
    +-- SpecParseError          (exit 7)
    |   +-- RefResolutionError  (exit 7)
    +-- RenderError             (exit 8)
    +-- ConfigError             (exit 1)
"""

from specdoc.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_RENDER_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class SpecdocError(Exception):
    """Base exception for all specdoc errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specdoc.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecdocError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class InputNotFoundError(SpecdocError):
    """Raised when an input document or template directory does not exist."""

    exit_code = EXIT_NOT_FOUND


class SpecParseError(SpecdocError):
    """Raised when an API description cannot be read or parsed as JSON/YAML."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class RefResolutionError(SpecParseError):
    """Raised when a ``$ref`` pointer cannot be resolved.

    The transform only raises this in strict mode; by default an
    unresolvable request-body reference degrades to "no body parameters".

    Args:
        message: Human-readable error description.
        ref: The offending ``$ref`` string.
    """

    def __init__(self, message: str, ref: str = ""):
        super().__init__(message)
        self.ref = ref


class RenderError(SpecdocError):
    """Raised when templates are missing, malformed, or fail during rendering."""

    exit_code = EXIT_RENDER_ERROR


class ConfigError(SpecdocError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
