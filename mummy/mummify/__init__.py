"""Mummifiers: polymorphic strategies that plan and materialize artifacts.

Usage::

    from mummy.mummify import DirectoryMummifier, HtmlPageMummifier

    artifact = DirectoryMummifier().plan(context, source_directory)
"""

from mummy.mummify.base import AbstractFileMummifier, Mummifier, MummifyError, PlanError
from mummy.mummify.directory import DirectoryMummifier
from mummy.mummify.image import ImageMummifier
from mummy.mummify.opaque import OpaqueFileMummifier
from mummy.mummify.page import AbstractPageMummifier, HtmlPageMummifier, MarkdownPageMummifier

__all__ = [
    "AbstractFileMummifier",
    "AbstractPageMummifier",
    "DirectoryMummifier",
    "HtmlPageMummifier",
    "ImageMummifier",
    "MarkdownPageMummifier",
    "Mummifier",
    "MummifyError",
    "OpaqueFileMummifier",
    "PlanError",
]
