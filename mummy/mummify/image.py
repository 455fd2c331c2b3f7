"""Image mummifier: scales and recompresses large images using Pillow.

Small images are copied verbatim. Images whose source file exceeds the
configured size threshold are reprocessed: scaled down so that neither axis
exceeds the maximum length, then recompressed. Such images may additionally
produce named *aspects* (e.g. ``preview``, ``thumbnail``), each written beside
the full image as ``<stem>-<aspect><suffix>``.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from PIL import Image

from mummy.models.artifacts import (
    Artifact,
    AspectualArtifact,
    CorporealSource,
    FileArtifact,
)
from mummy.models.description import MetadataParseError, ResourceDescription
from mummy.mummify.base import AbstractFileMummifier, is_post_filename

if TYPE_CHECKING:
    from mummy.core.context import MummyContext

logger = logging.getLogger(__name__)

DEFAULT_COMPRESSION_QUALITY = 0.8
DEFAULT_SCALE_MAX_LENGTH = 2560
DEFAULT_SCALE_THRESHOLD_FILE_SIZE = 800_000

MEDIA_TYPES_BY_EXTENSION: dict[str, str] = {
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
}

# EXIF tags, IFD0 unless noted
EXIF_TAG_IMAGE_DESCRIPTION = 0x010E
EXIF_TAG_ARTIST = 0x013B
EXIF_TAG_COPYRIGHT = 0x8298
EXIF_TAG_XP_TITLE = 0x9C9B
EXIF_IFD_POINTER = 0x8769
EXIF_TAG_DATE_TIME_ORIGINAL = 0x9003  # in the Exif sub-IFD
EXIF_DATE_TIME_FORMAT = "%Y:%m:%d %H:%M:%S"


def _exif_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (bytes, tuple)):
        value = bytes(value).decode("utf-8", errors="replace")
    text = str(value).strip("\x00").strip()
    return text or None


def _xp_text(value: Any) -> str | None:
    """Decode a Windows ``XP*`` tag, stored as UTF-16LE bytes."""
    if value is None:
        return None
    text = bytes(value).decode("utf-16-le", errors="replace").strip("\x00").strip()
    return text or None


class ImageMummifier(AbstractFileMummifier):
    """Mummifier for GIF, JPEG and PNG images."""

    supported_extensions = frozenset(MEDIA_TYPES_BY_EXTENSION)

    def media_type_for(self, context: MummyContext, path: Path) -> str | None:
        return MEDIA_TYPES_BY_EXTENSION.get(path.suffix[1:].lower())

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def load_source_metadata(
        self, context: MummyContext, source_path: Path
    ) -> Iterable[tuple[str, Any]]:
        with Image.open(source_path) as image:
            exif = image.getexif()
            sub_ifd = exif.get_ifd(EXIF_IFD_POINTER)
        metadata: list[tuple[str, Any]] = []
        title = _xp_text(exif.get(EXIF_TAG_XP_TITLE))
        if title is not None:
            metadata.append(("title", title))
        for handle, tag in (
            ("description", EXIF_TAG_IMAGE_DESCRIPTION),
            ("artist", EXIF_TAG_ARTIST),
            ("copyright", EXIF_TAG_COPYRIGHT),
        ):
            text = _exif_text(exif.get(tag))
            if text is not None:
                metadata.append((handle, text))
        taken = _exif_text(sub_ifd.get(EXIF_TAG_DATE_TIME_ORIGINAL))
        if taken is not None:
            try:
                metadata.append(("createdAt", datetime.strptime(taken, EXIF_DATE_TIME_FORMAT)))
            except ValueError as exc:
                raise MetadataParseError("createdAt", taken, str(exc)) from exc
        return metadata

    def create_artifact(
        self,
        context: MummyContext,
        source_path: Path,
        target_path: Path,
        description: ResourceDescription,
    ) -> Artifact:
        if not self._is_over_threshold(context, source_path):
            return super().create_artifact(context, source_path, target_path, description)
        aspect_ids: list[str] = list(context.lookup("image.with_aspects", []))
        aspects = tuple(
            FileArtifact(
                mummifier=self,
                source=CorporealSource(path=source_path),
                target_path=target_path.with_name(
                    f"{target_path.stem}-{aspect_id}{target_path.suffix}"
                ),
                description=description.with_properties(aspect=aspect_id),
            )
            for aspect_id in aspect_ids
        )
        return AspectualArtifact(
            mummifier=self,
            source=CorporealSource(path=source_path),
            target_path=target_path,
            description=description,
            is_post=is_post_filename(source_path.name),
            aspects=aspects,
        )

    # ------------------------------------------------------------------
    # Mummification
    # ------------------------------------------------------------------

    def mummify_file(
        self, context: MummyContext, context_artifact: Artifact, artifact: Artifact
    ) -> None:
        aspect = artifact.resource_description.aspect
        if aspect is not None or self._is_over_threshold(context, artifact.source_path):
            try:
                self.process_image(context, artifact, keep_metadata=aspect is None)
            except OSError as exc:
                raise OSError(
                    f"Error processing image `{artifact.source_path}`: {exc}"
                ) from exc
        else:
            shutil.copyfile(artifact.source_path, artifact.target_path)
        if isinstance(artifact, AspectualArtifact):
            for aspect_artifact in artifact.aspects:
                self.mummify(context, context_artifact, aspect_artifact)

    def process_image(
        self, context: MummyContext, artifact: Artifact, keep_metadata: bool
    ) -> None:
        """Scale the source image into the target, recompressing it.

        Scaling and quality are looked up per aspect when the artifact is an
        aspect, falling back to the general image configuration.
        """
        max_length, quality = self._scale_settings(context, artifact.resource_description.aspect)
        with Image.open(artifact.source_path) as image:
            image_format = image.format
            exif = image.info.get("exif") if keep_metadata else None
            width, height = image.size
            if width > max_length or height > max_length:
                image.thumbnail((max_length, max_length), Image.Resampling.LANCZOS)
                logger.debug(
                    "Scaled `%s` from %dx%d to %dx%d.",
                    artifact.source_path, width, height, *image.size,
                )
            options: dict[str, Any] = {"optimize": True}
            if image_format == "JPEG":
                options["quality"] = round(quality * 100)
            if exif:
                options["exif"] = exif
            image.save(artifact.target_path, format=image_format, **options)

    def _scale_settings(self, context: MummyContext, aspect: str | None) -> tuple[int, float]:
        max_length = context.lookup("image.scale_max_length", DEFAULT_SCALE_MAX_LENGTH)
        quality = context.lookup("image.compression_quality", DEFAULT_COMPRESSION_QUALITY)
        if aspect is not None:
            max_length = context.lookup(f"image.aspects.{aspect}.scale_max_length", max_length)
            quality = context.lookup(f"image.aspects.{aspect}.compression_quality", quality)
        return int(max_length), float(quality)

    def _is_over_threshold(self, context: MummyContext, source_path: Path) -> bool:
        threshold = context.lookup(
            "image.process_threshold_file_size", DEFAULT_SCALE_THRESHOLD_FILE_SIZE
        )
        return source_path.stat().st_size > threshold
