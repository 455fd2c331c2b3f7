"""Unit tests for MummyPlan: parents, principals and reference resolution."""

from __future__ import annotations

import pytest

from mummy.core.context import MummyContext
from mummy.core.plan import MummyPlan, TargetPathCollisionError
from mummy.core.planner import Planner
from mummy.models.artifacts import DirectoryArtifact


def _child(directory: DirectoryArtifact, name: str):
    return next(c for c in directory.child_artifacts if c.source_path.name == name)


@pytest.fixture
def plan(context: MummyContext, write_file) -> MummyPlan:
    """site/ with index.md, about.html, sub/{index.html,page.md}, _hidden/note.txt."""
    write_file("index.md", "# Home")
    write_file("about.html", "<title>About</title>")
    write_file("sub/index.html", "<title>Sub</title>")
    write_file("sub/page.md", "# Page")
    write_file("_hidden/note.txt", "note")
    return Planner(context).plan()


class TestStructure:

    def test_attached_to_context(self, context: MummyContext, plan: MummyPlan):
        assert context.plan is plan
        assert plan.root.source_path == context.source_directory
        assert plan.root.target_path == context.target_directory

    def test_walk_is_depth_first(self, plan: MummyPlan):
        walked = list(plan.walk())
        root = plan.root
        assert walked[0] is root
        assert walked[1] is root.content_artifact
        assert len(walked) == len(plan) == 8

    def test_parents(self, plan: MummyPlan):
        root = plan.root
        sub = _child(root, "sub")
        page = _child(sub, "page.md")
        assert plan.find_parent_artifact(root) is None
        assert plan.find_parent_artifact(root.content_artifact) is None
        assert plan.find_parent_artifact(sub) is root
        # a content artifact shares its directory's parent
        assert plan.find_parent_artifact(sub.content_artifact) is root
        assert plan.find_parent_artifact(page) is sub

    def test_principals(self, plan: MummyPlan):
        root = plan.root
        about = _child(root, "about.html")
        assert plan.principal_artifact(root.content_artifact) is root
        assert plan.principal_artifact(about) is about
        assert plan.principal_artifact(root) is root

    def test_child_navigation(self, plan: MummyPlan):
        root = plan.root
        listed = plan.child_navigation_artifacts(root.content_artifact)
        assert [a.source_path.name for a in listed] == ["about.html", "sub"]
        # a page lists its siblings
        about = _child(root, "about.html")
        assert plan.child_navigation_artifacts(about) == listed

    def test_find_by_target(self, context: MummyContext, plan: MummyPlan):
        about = _child(plan.root, "about.html")
        assert plan.find_artifact_by_target(context.target_directory / "about.html") is about
        assert plan.find_artifact_by_target(context.target_directory / "nope.html") is None


class TestReferences:

    def test_directory_claims_content_source(self, context: MummyContext, plan: MummyPlan):
        source = context.source_directory
        sub = _child(plan.root, "sub")
        assert plan.find_artifact_by_source_reference(source / "index.md") is plan.root
        assert plan.find_artifact_by_source_reference(source / "sub") is sub
        assert plan.find_artifact_by_source_reference(source / "sub" / "index.html") is sub
        assert plan.find_artifact_by_source_reference(source / "missing.md") is None

    def test_relative_references(self, plan: MummyPlan):
        root = plan.root
        sub = _child(root, "sub")
        about = _child(root, "about.html")
        page = _child(sub, "page.md")
        assert plan.find_artifact_by_source_relative_reference(root, "sub/") is sub
        assert plan.find_artifact_by_source_relative_reference(about, "sub/page.md") is page
        assert plan.find_artifact_by_source_relative_reference(page, "../about.html") is about
        assert plan.find_artifact_by_source_relative_reference(page, "./") is sub

    def test_relativize_source_reference(self, plan: MummyPlan):
        root = plan.root
        sub = _child(root, "sub")
        page = _child(sub, "page.md")
        assert plan.relativize_source_reference(root, sub) == "sub/"
        assert plan.relativize_source_reference(root, _child(root, "about.html")) == "about.html"
        assert plan.relativize_source_reference(page, root) == "../"

    def test_reference_in_target(self, plan: MummyPlan):
        root = plan.root
        sub = _child(root, "sub")
        about = _child(root, "about.html")
        page = _child(sub, "page.md")
        hidden = _child(root, "_hidden")
        assert plan.reference_in_target(root, sub) == "sub/index.html"
        assert plan.reference_in_target(about, sub) == "sub/index.html"
        assert plan.reference_in_target(page, about) == "../about.html"
        assert plan.reference_in_target(page, root) == "../index.html"
        assert plan.reference_in_target(root, hidden) == "hidden/"


class TestCollisions:

    def test_duplicate_target_is_rejected(self, context: MummyContext, write_file):
        write_file("a.html", "<title>A</title>")
        write_file("a.md", "# A")
        with pytest.raises(TargetPathCollisionError) as exc_info:
            Planner(context).plan()
        assert exc_info.value.target_path == context.target_directory / "a.html"
        assert not context.is_planned

    def test_veiled_name_colliding_with_plain_name(self, context: MummyContext, write_file):
        write_file("_x.txt", "1")
        write_file("x.txt", "2")
        with pytest.raises(TargetPathCollisionError):
            Planner(context).plan()
