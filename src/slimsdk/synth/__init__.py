"""Derived artifacts written into the generated tree after generation.

Sub-modules:

* :mod:`~slimsdk.synth.descriptor` -- The build descriptor (``.csproj`` or
  ``pyproject.toml``) declaring identity, runtime and dependency ranges.
* :mod:`~slimsdk.synth.shim` -- The compatibility shim restoring the full
  library's constructors and disposal behaviour on the root client.
* :mod:`~slimsdk.synth.render` -- The shared Jinja2 environment.
"""

from slimsdk.synth.descriptor import render_descriptor, write_descriptor
from slimsdk.synth.shim import render_shim, write_shim

__all__ = ["render_descriptor", "write_descriptor", "render_shim", "write_shim"]
