"""Opaque file mummifier: the fallback for files of unknown kind."""

from __future__ import annotations

import logging
import mimetypes
import shutil
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mummy.models.artifacts import Artifact
from mummy.mummify.base import AbstractFileMummifier

if TYPE_CHECKING:
    from mummy.core.context import MummyContext

logger = logging.getLogger(__name__)


class OpaqueFileMummifier(AbstractFileMummifier):
    """Copies the source file to the target verbatim.

    The media type comes from the platform extension table; no embedded
    metadata is read.
    """

    def media_type_for(self, context: MummyContext, path: Path) -> str | None:
        media_type, _ = mimetypes.guess_type(path.name, strict=False)
        return media_type

    def load_source_metadata(
        self, context: MummyContext, source_path: Path
    ) -> Iterable[tuple[str, Any]]:
        return ()

    def mummify_file(
        self, context: MummyContext, context_artifact: Artifact, artifact: Artifact
    ) -> None:
        logger.debug("Copying `%s` to `%s`.", artifact.source_path, artifact.target_path)
        shutil.copyfile(artifact.source_path, artifact.target_path)
