"""Unit tests for artifact models: subsumption and referent source paths."""

from __future__ import annotations

from pathlib import Path

from mummy.models.artifacts import (
    AspectualArtifact,
    CorporealSource,
    DirectoryArtifact,
    FileArtifact,
    PhantomSource,
)
from mummy.models.description import EMPTY_DESCRIPTION, ResourceDescription
from mummy.mummify.directory import DirectoryMummifier
from mummy.mummify.opaque import OpaqueFileMummifier

OPAQUE = OpaqueFileMummifier()
DIRECTORY = DirectoryMummifier()


def _file(source: str, target: str, **kwargs) -> FileArtifact:
    return FileArtifact(
        mummifier=OPAQUE,
        source=CorporealSource(path=Path(source)),
        target_path=Path(target),
        **kwargs,
    )


def _directory(source: str, target: str, **kwargs) -> DirectoryArtifact:
    return DirectoryArtifact(
        mummifier=DIRECTORY,
        source=CorporealSource(path=Path(source)),
        target_path=Path(target),
        **kwargs,
    )


class TestFileArtifact:

    def test_defaults(self):
        artifact = _file("/s/a.txt", "/t/a.txt")
        assert artifact.source_path == Path("/s/a.txt")
        assert not artifact.is_phantom
        assert not artifact.is_directory
        assert not artifact.navigable
        assert artifact.resource_description == EMPTY_DESCRIPTION
        assert artifact.referent_source_paths == frozenset({Path("/s/a.txt")})
        assert artifact.comprised_artifacts == ()
        assert artifact.subsumed_artifacts == ()

    def test_phantom_source(self):
        artifact = FileArtifact(
            mummifier=OPAQUE,
            source=PhantomSource(path=Path("/s/blog/index.xhtml")),
            target_path=Path("/t/blog/index.html"),
        )
        assert artifact.is_phantom
        assert artifact.source_path == Path("/s/blog/index.xhtml")
        assert "phantom" in repr(artifact)

    def test_title_falls_back_to_filename(self):
        assert _file("/s/a.txt", "/t/a.txt").determine_title() == "a.txt"
        titled = _file("/s/a.txt", "/t/a.txt", description=ResourceDescription(title="A"))
        assert titled.determine_title() == "A"


class TestAspectualArtifact:

    def test_aspects_are_derived(self):
        preview = _file(
            "/s/p.jpg", "/t/p-preview.jpg", description=ResourceDescription(aspect="preview")
        )
        artifact = AspectualArtifact(
            mummifier=OPAQUE,
            source=CorporealSource(path=Path("/s/p.jpg")),
            target_path=Path("/t/p.jpg"),
            aspects=(preview,),
        )
        assert artifact.derived_artifacts == (preview,)
        assert artifact.find_aspect("preview") == preview
        assert artifact.find_aspect("thumbnail") is None
        assert artifact.aspect is None
        assert preview.aspect == "preview"


class TestDirectoryArtifact:

    def test_subsumes_content(self):
        content = _file(
            "/s/blog/index.html", "/t/blog/index.html", description=ResourceDescription(title="Blog")
        )
        child = _file("/s/blog/a.html", "/t/blog/a.html")
        directory = _directory(
            "/s/blog", "/t/blog", content_artifact=content, child_artifacts=(child,)
        )
        assert directory.is_directory
        assert directory.navigable
        assert directory.subsumed_artifacts == (content,)
        assert directory.comprised_artifacts == (content, child)
        assert directory.resource_description == content.resource_description
        assert directory.determine_title() == "Blog"

    def test_referent_paths_include_content(self):
        content = _file("/s/blog/index.html", "/t/blog/index.html")
        directory = _directory("/s/blog", "/t/blog", content_artifact=content)
        assert directory.referent_source_paths == frozenset(
            {Path("/s/blog"), Path("/s/blog/index.html")}
        )
        assert content.referent_source_paths <= directory.referent_source_paths

    def test_without_content(self):
        child = _file("/s/drafts/a.html", "/t/drafts/a.html")
        directory = _directory("/s/_drafts", "/t/drafts", child_artifacts=(child,))
        assert directory.resource_description is EMPTY_DESCRIPTION
        assert directory.subsumed_artifacts == ()
        assert directory.comprised_artifacts == (child,)
        assert directory.referent_source_paths == frozenset({Path("/s/_drafts")})
        assert directory.determine_title() == "drafts"
