"""Mummy: artifact planning and mummification for static sites.

A site is mummified in two phases:
  - planning walks the source tree into an immutable artifact graph
    (directories, their content pages, phantom index pages, posts, images,
    opaque files), without writing anything;
  - mummification walks the graph and writes every artifact into the
    target tree, optionally with a pool of workers for leaf files.
"""

__version__ = "0.1.0"
__description__ = "Artifact planning and mummification for static sites"

from mummy.core.orchestrator import Mummy

__all__ = ["Mummy", "__version__"]
