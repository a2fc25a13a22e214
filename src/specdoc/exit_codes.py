"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specdoc.exceptions.SpecdocError` subclass.
Shell pipelines can inspect the exit code to tell a bad spec apart from a
broken template without parsing stderr.

Example::

    $ specdoc build missing.yaml
    $ echo $?
    4   # EXIT_NOT_FOUND -- the input file does not exist
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""An input file or template directory does not exist."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API description could not be read, parsed, or dereferenced."""

EXIT_RENDER_ERROR = 8
"""A template could not be loaded or failed while rendering."""
