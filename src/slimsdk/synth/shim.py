"""Compatibility shim synthesis.

The generator only emits a root client constructor that takes a request
adapter. Callers of the full-surface library construct the client from an
authentication provider or from their own transport client, and expect
disposing the client to release the transport. The shim restores that
contract on the generated root type:

* a constructor taking an authentication provider and an optional base URL;
* a constructor taking a transport client, an optional authentication
  provider (anonymous when omitted) and an optional base URL;
* a client-library version read from the package's own version metadata,
  tagged with the target surface and passed to the default client factory;
* disposal of the request adapter, when the adapter is itself disposable.

Which of these are emitted is controlled by the
:class:`~slimsdk.models.CompatibilitySpec`. Like the descriptor, the shim is
regenerated unconditionally and is as disposable as the generator's output.
"""

from __future__ import annotations

from pathlib import Path

from slimsdk.config import atomic_write
from slimsdk.models import CompatibilitySpec, GenerationConfig
from slimsdk.synth.render import render
from slimsdk.targets import get_target


def render_shim(config: GenerationConfig, compat: CompatibilitySpec) -> str:
    """Return the shim source for *config* and *compat*.

    Pure: identical inputs always give byte-identical output.
    """
    target = get_target(config.language)
    return render(target.shim_template, {"config": config, "compat": compat})


def write_shim(config: GenerationConfig, compat: CompatibilitySpec) -> Path:
    """Render the shim and write it into the generated tree.

    Returns:
        Path of the written shim.
    """
    path = get_target(config.language).shim_path(config)
    atomic_write(path, render_shim(config, compat))
    return path
