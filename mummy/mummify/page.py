"""Page mummifiers: HTML and Markdown sources rendered to HTML pages.

Every page, whatever its source markup, is loaded into a BeautifulSoup
document and then goes through the same pipeline:

1. widget expansion (``<mummy-navigation>``, ``<mummy-directory>``),
2. reference relocation from the source tree to the target tree,
3. serialization with the configured line separator.

Widgets emit *source-relative* references, so the relocation pass maps them
to the target tree along with any references written by the author.
"""

from __future__ import annotations

import abc
import copy
import html
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, unquote, urlsplit, urlunsplit

import markdown
import yaml
from bs4 import BeautifulSoup, Tag

from mummy.models.artifacts import (
    Artifact,
    CorporealSource,
    FileArtifact,
    PhantomSource,
)
from mummy.models.description import ResourceDescription, to_handle
from mummy.mummify.base import AbstractFileMummifier, is_post_filename

if TYPE_CHECKING:
    from mummy.core.context import MummyContext

logger = logging.getLogger(__name__)

PAGE_MEDIA_TYPE = "text/html"
PAGE_NAME_EXTENSION = "html"

# Phantom pages use this extension on their nominal source path.
PHANTOM_SOURCE_EXTENSION = "xhtml"

NAVIGATION_WIDGET = "mummy-navigation"
DIRECTORY_WIDGET = "mummy-directory"

DEFAULT_ORDER = 0

# element -> attribute holding a reference to relocate
HTML_REFERENCE_ELEMENT_ATTRIBUTES: dict[str, str] = {
    "a": "href",
    "area": "href",
    "audio": "src",
    "embed": "src",
    "iframe": "src",
    "img": "src",
    "link": "href",
    "object": "data",
    "script": "src",
    "source": "src",
    "track": "src",
    "video": "src",
}

HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
{head}</head>
<body>
{body}
</body>
</html>
"""


def html_document(title: str, body: str, meta: Iterable[tuple[str, str]] = ()) -> str:
    """Wrap body markup in a minimal HTML page, with optional named ``<meta>`` elements."""
    head = "".join(
        f'<meta name="{html.escape(name)}" content="{html.escape(value)}">\n'
        for name, value in meta
    )
    return HTML_TEMPLATE.format(title=html.escape(title), head=head, body=body)


def _format_published_on(value: Any) -> str:
    return f"{value:%A, %B} {value.day}, {value.year}"


class AbstractPageMummifier(AbstractFileMummifier):
    """Shared planning and rendering for page sources."""

    def media_type_for(self, context: MummyContext, path: Path) -> str | None:
        return PAGE_MEDIA_TYPE

    def plan_target_filename(self, context: MummyContext, filename: str) -> str:
        stem = filename.rsplit(".", 1)[0] if "." in filename else filename
        if context.lookup("page.names_bare", False):
            return stem
        return f"{stem}.{PAGE_NAME_EXTENSION}"

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def create_artifact(
        self,
        context: MummyContext,
        source_path: Path,
        target_path: Path,
        description: ResourceDescription,
    ) -> Artifact:
        return FileArtifact(
            mummifier=self,
            source=CorporealSource(path=source_path),
            target_path=target_path,
            description=description,
            is_post=is_post_filename(source_path.name),
            navigable=True,
        )

    def plan_phantom(
        self, context: MummyContext, source_path: Path, target_path: Path, title: str
    ) -> FileArtifact:
        """Plan a page with no source file, described only by its title.

        The generated page lists the navigable children of its directory.
        """
        return FileArtifact(
            mummifier=self,
            source=PhantomSource(path=source_path),
            target_path=target_path,
            description=ResourceDescription(title=title, content_type=PAGE_MEDIA_TYPE),
        )

    def load_source_metadata(
        self, context: MummyContext, source_path: Path
    ) -> Iterable[tuple[str, Any]]:
        return self.document_metadata(self.load_source_document(context, source_path))

    @staticmethod
    def document_metadata(document: BeautifulSoup) -> list[tuple[str, Any]]:
        """The title and named ``<meta>`` values of a document, in document order."""
        metadata: list[tuple[str, Any]] = []
        title = document.find("title")
        if title is not None and title.get_text(strip=True):
            metadata.append(("title", title.get_text(strip=True)))
        for meta in document.find_all("meta"):
            name = meta.get("name") or meta.get("property")
            content = meta.get("content")
            if name and content is not None:
                metadata.append((to_handle(name), content))
        return metadata

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def load_source_document(self, context: MummyContext, source_path: Path) -> BeautifulSoup:
        """Load and parse the source file into an HTML document."""
        ...

    def load_document(self, context: MummyContext, artifact: Artifact) -> BeautifulSoup:
        if artifact.is_phantom:
            return self.generate_phantom_document(context, artifact)
        return self.load_source_document(context, artifact.source_path)

    def generate_phantom_document(
        self, context: MummyContext, artifact: Artifact
    ) -> BeautifulSoup:
        title = artifact.determine_title()
        body = (
            f"<main>\n<h1>{html.escape(title)}</h1>\n"
            f"<{NAVIGATION_WIDGET}></{NAVIGATION_WIDGET}>\n"
            f"<{DIRECTORY_WIDGET}></{DIRECTORY_WIDGET}>\n</main>"
        )
        return BeautifulSoup(html_document(title, body), "html.parser")

    # ------------------------------------------------------------------
    # Mummification
    # ------------------------------------------------------------------

    def mummify_file(
        self, context: MummyContext, context_artifact: Artifact, artifact: Artifact
    ) -> None:
        document = self.load_document(context, artifact)
        logger.debug("Loaded page document for %s.", artifact)
        self.expand_widgets(context, context_artifact, artifact, document)
        self.relocate_references(context, context_artifact, document)
        text = str(document).replace("\r\n", "\n")
        separator = context.lookup("text_output_line_separator", "\n")
        if separator != "\n":
            text = text.replace("\n", separator)
        with open(artifact.target_path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.debug("Generated page `%s`.", artifact.target_path)

    def expand_widgets(
        self,
        context: MummyContext,
        context_artifact: Artifact,
        artifact: Artifact,
        document: BeautifulSoup,
    ) -> None:
        for widget in document.find_all(NAVIGATION_WIDGET):
            widget.replace_with(self._navigation_list(context, context_artifact, document))
        for widget in document.find_all(DIRECTORY_WIDGET):
            elements = self._post_listing(context, context_artifact, document, widget)
            if elements:
                widget.replace_with(*elements)
            else:
                widget.decompose()

    def _navigation_list(
        self, context: MummyContext, context_artifact: Artifact, document: BeautifulSoup
    ) -> Tag:
        plan = context.plan
        candidates = [
            a for a in plan.child_navigation_artifacts(context_artifact)
            if not getattr(a, "is_post", False)
        ]
        candidates.sort(
            key=lambda a: (
                a.resource_description.order if a.resource_description.order is not None
                else DEFAULT_ORDER,
                a.determine_title().casefold(),
            )
        )
        ul = document.new_tag("ul")
        for candidate in candidates:
            li = document.new_tag("li")
            link = document.new_tag(
                "a", href=plan.relativize_source_reference(context_artifact, candidate)
            )
            link.string = candidate.determine_title()
            li.append(link)
            ul.append(li)
        return ul

    def _post_listing(
        self,
        context: MummyContext,
        context_artifact: Artifact,
        document: BeautifulSoup,
        widget: Tag,
    ) -> list[Tag]:
        """Post summaries, newest first, separated by ``<hr>``."""
        plan = context.plan
        posts = [
            a for a in plan.child_navigation_artifacts(context_artifact)
            if getattr(a, "is_post", False)
        ]
        posts.sort(key=lambda a: a.determine_title())
        # undated posts last
        posts.sort(
            key=lambda a: (
                a.resource_description.published_on.toordinal()
                if a.resource_description.published_on is not None else 0
            ),
            reverse=True,
        )
        more_label = widget.get("more-label", "…")
        elements: list[Tag] = []
        for post in posts:
            href = plan.relativize_source_reference(context_artifact, post)
            if elements:
                elements.append(document.new_tag("hr"))
            heading = document.new_tag("h2")
            link = document.new_tag("a", href=href)
            link.string = post.determine_title()
            heading.append(link)
            elements.append(heading)
            published_on = post.resource_description.published_on
            if published_on is not None:
                dateline = document.new_tag("h3")
                dateline.string = _format_published_on(published_on)
                elements.append(dateline)
            excerpt = self.load_excerpt(context, post)
            if excerpt is not None:
                wrapper = document.new_tag("div")
                wrapper.append(excerpt)
                elements.append(wrapper)
            more = document.new_tag("a", href=href)
            more.string = more_label
            elements.append(more)
        return elements

    def load_excerpt(self, context: MummyContext, artifact: Artifact) -> Tag | None:
        """The first paragraph of a page artifact's content, if any."""
        mummifier = artifact.mummifier
        if not isinstance(mummifier, AbstractPageMummifier) or artifact.is_phantom:
            return None
        document = mummifier.load_source_document(context, artifact.source_path)
        container = document.find("main") or document.find("body") or document
        paragraph = container.find("p")
        return copy.copy(paragraph) if paragraph is not None else None

    def relocate_references(
        self, context: MummyContext, context_artifact: Artifact, document: BeautifulSoup
    ) -> None:
        """Rewrite relative source references to point into the target tree."""
        plan = context.plan
        for element in document.find_all(list(HTML_REFERENCE_ELEMENT_ATTRIBUTES)):
            attribute = HTML_REFERENCE_ELEMENT_ATTRIBUTES[element.name]
            reference = element.get(attribute)
            if not reference:
                continue
            parts = urlsplit(reference)
            # only relative paths; "" (fragment or query only) is a self-reference
            if parts.scheme or parts.netloc or not parts.path or parts.path.startswith("/"):
                continue
            referent = plan.find_artifact_by_source_relative_reference(
                context_artifact, unquote(parts.path)
            )
            if referent is None:
                logger.warning(
                    "No target artifact found for source relative reference `%s` in %s.",
                    reference, context_artifact,
                )
                continue
            path = quote(plan.reference_in_target(context_artifact, referent), safe="/")
            relocated = urlunsplit(("", "", path, parts.query, parts.fragment))
            if relocated != reference:
                logger.debug("Relocated reference `%s` -> `%s`.", reference, relocated)
                element[attribute] = relocated


class HtmlPageMummifier(AbstractPageMummifier):
    """Mummifier for HTML and XHTML page sources."""

    supported_extensions = frozenset({"html", "htm", "xhtml"})

    def load_source_document(self, context: MummyContext, source_path: Path) -> BeautifulSoup:
        return BeautifulSoup(source_path.read_text(encoding="utf-8-sig"), "html.parser")


# Optional YAML front matter between `---` lines at the very start.
FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)

MARKDOWN_EXTENSIONS = ["tables", "def_list", "fenced_code"]


class MarkdownPageMummifier(AbstractPageMummifier):
    """Mummifier for Markdown page sources with optional YAML front matter.

    The page title is the front matter ``title``, or else the filename
    without its extension. Other front matter entries become named
    ``<meta>`` elements of the rendered page.
    """

    supported_extensions = frozenset({"md", "markdown"})

    def split_front_matter(self, text: str) -> tuple[dict[str, Any], str]:
        match = FRONT_MATTER_PATTERN.match(text)
        if match is None:
            return {}, text
        front_matter = yaml.safe_load(match.group(1)) or {}
        if not isinstance(front_matter, dict):
            raise ValueError(
                f"Front matter must be a mapping, not {type(front_matter).__name__}."
            )
        return front_matter, text[match.end():]

    def _read(self, source_path: Path) -> tuple[dict[str, Any], str]:
        return self.split_front_matter(source_path.read_text(encoding="utf-8-sig"))

    def load_source_metadata(
        self, context: MummyContext, source_path: Path
    ) -> Iterable[tuple[str, Any]]:
        front_matter, _ = self._read(source_path)
        metadata: list[tuple[str, Any]] = [(str(k), v) for k, v in front_matter.items()]
        metadata.append(("title", source_path.stem))
        return metadata

    def load_source_document(self, context: MummyContext, source_path: Path) -> BeautifulSoup:
        front_matter, body = self._read(source_path)
        title = str(front_matter.get("title") or source_path.stem)
        meta = [
            (str(name), str(value))
            for name, value in front_matter.items()
            if name != "title" and value is not None
        ]
        rendered = markdown.markdown(body, extensions=MARKDOWN_EXTENSIONS)
        return BeautifulSoup(html_document(title, rendered, meta), "html.parser")
