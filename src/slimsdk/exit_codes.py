"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~slimsdk.exceptions.SlimsdkError` subclass.
CI jobs that regenerate the slim SDK can inspect the exit code to tell a
broken allow-list apart from a generator or build failure without parsing
stderr.

Example::

    $ slimsdk generate --clean
    $ echo $?
    7   # EXIT_SPEC_ERROR -- the allow-list matched no operations
"""

EXIT_SUCCESS = 0
"""The pipeline completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error, or an external tool (generator, build) failed."""

EXIT_INVALID_USAGE = 2
"""Invalid arguments, an unknown target, or an output directory conflict."""

EXIT_SPEC_ERROR = 7
"""The OpenAPI specification could not be loaded or the allow-list selected nothing."""

EXIT_CANCELLED = 130
"""The run was interrupted with Ctrl-C."""
