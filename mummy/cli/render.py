"""Rich rendering of a mummy plan."""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape
from rich.tree import Tree

from mummy.core.plan import MummyPlan
from mummy.models.artifacts import Artifact, DirectoryArtifact


def _relative(path: Path, base: Path) -> str:
    try:
        relative = path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()
    return relative if relative != "." else "/"


def artifact_label(artifact: Artifact, source_base: Path, target_base: Path) -> str:
    source = escape(_relative(artifact.source_path, source_base))
    target = escape(_relative(artifact.target_path, target_base))
    mummifier = type(artifact.mummifier).__name__
    flags = []
    if artifact.is_phantom:
        flags.append("[magenta]phantom[/magenta]")
    if not artifact.navigable and not artifact.is_directory:
        flags.append("[dim]hidden[/dim]")
    elif not artifact.navigable:
        flags.append("[yellow]veiled[/yellow]")
    suffix = f" ({', '.join(flags)})" if flags else ""
    return f"[bold]{source}[/bold] -> [cyan]{target}[/cyan] [dim]{mummifier}[/dim]{suffix}"


def plan_tree(plan: MummyPlan) -> Tree:
    """Build a tree of the plan: directories, their content and children."""
    root = plan.root
    source_base = root.source_path
    target_base = root.target_path

    def add(node: Tree, artifact: Artifact, prefix: str = "") -> None:
        branch = node.add(prefix + artifact_label(artifact, source_base, target_base))
        for derived in artifact.derived_artifacts:
            add(branch, derived, "[dim]aspect[/dim] ")
        if isinstance(artifact, DirectoryArtifact):
            if artifact.content_artifact is not None:
                add(branch, artifact.content_artifact, "[green]content[/green] ")
            for child in artifact.child_artifacts:
                add(branch, child)

    tree = Tree(f"[bold]{escape(str(source_base))}[/bold] -> [cyan]{escape(str(target_base))}[/cyan]")
    add(tree, root)
    return tree
