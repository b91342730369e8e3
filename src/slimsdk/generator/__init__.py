"""External generator invocation.

The generator (Kiota) is treated as a pure function from
``(spec, allow-list, GenerationConfig)`` to a source tree on disk. This
sub-package builds its command line, makes sure it is installed, runs it,
and turns a non-zero exit into :class:`~slimsdk.exceptions.GenerationFailure`.

Whether an existing tree is cleaned or merged into is decided by the
pipeline controller, never here.
"""

from slimsdk.generator.invoker import (
    build_command,
    ensure_generator,
    find_generator,
    invoke_generator,
)

__all__ = ["build_command", "ensure_generator", "find_generator", "invoke_generator"]
