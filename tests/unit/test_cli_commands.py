"""Unit tests for the CLI: command registration, plan and mummify via CliRunner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mummy.cli.app import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command from an empty directory so no project config is found."""
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    for name in ("MUMMY_WORKERS", "MUMMY_MANIFEST_PATH", "MUMMY_CONFIG_FILE"):
        monkeypatch.delenv(name, raising=False)
    return cwd


class TestCliApp:

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "plan" in result.output
        assert "mummify" in result.output

    def test_plan_help(self):
        result = runner.invoke(app, ["plan", "--help"])
        assert result.exit_code == 0

    def test_mummify_help(self):
        result = runner.invoke(app, ["mummify", "--help"])
        assert result.exit_code == 0


class TestPlanCommand:

    def test_prints_artifact_count(self, blog_site: Path, target_dir: Path):
        result = runner.invoke(app, ["plan", str(blog_site), "--target", str(target_dir)])
        assert result.exit_code == 0, result.output
        assert "artifacts planned" in result.output
        assert not target_dir.exists()

    def test_missing_source(self, tmp_path: Path):
        result = runner.invoke(app, ["plan", str(tmp_path / "nope")])
        assert result.exit_code != 0

    def test_plan_error_exits_with_one(self, site_dir: Path, write_file):
        write_file("bad.html", '<meta name="published-on" content="yesterday">')
        result = runner.invoke(app, ["plan", str(site_dir)])
        assert result.exit_code == 1
        assert "Build failed" in result.output


class TestMummifyCommand:

    def test_builds_site(self, blog_site: Path, target_dir: Path):
        result = runner.invoke(app, ["mummify", str(blog_site), "-t", str(target_dir)])
        assert result.exit_code == 0, result.output
        assert "Site mummified!" in result.output
        assert (target_dir / "blog" / "index.html").is_file()
        assert (target_dir / "blog" / "post1.html").is_file()

    def test_workers_and_manifest(self, blog_site: Path, target_dir: Path, tmp_path: Path):
        manifest = tmp_path / "manifest.json"
        result = runner.invoke(
            app,
            ["mummify", str(blog_site), "-t", str(target_dir), "-w", "2", "-m", str(manifest)],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(manifest.read_text(encoding="utf-8"))
        assert data["manifest_hash"].startswith("sha256:")
        assert {e["target"] for e in data["entries"]} >= {"blog/index.html", "blog/post2.html"}

    def test_deploy_dir(self, blog_site: Path, target_dir: Path, tmp_path: Path):
        deploy = tmp_path / "public"
        result = runner.invoke(
            app,
            ["mummify", str(blog_site), "-t", str(target_dir), "--deploy-dir", str(deploy)],
        )
        assert result.exit_code == 0, result.output
        assert (deploy / "blog" / "post2.html").is_file()

    def test_config_file(self, site_dir: Path, write_file, target_dir: Path, tmp_path: Path):
        write_file("about.md", "# About\n")
        config = tmp_path / "site.toml"
        config.write_text("[page]\nnames_bare = true\n", encoding="utf-8")
        result = runner.invoke(
            app, ["mummify", str(site_dir), "-t", str(target_dir), "-c", str(config)]
        )
        assert result.exit_code == 0, result.output
        assert (target_dir / "about").is_file()

    def test_discovers_config_in_working_directory(
        self, isolated_cwd: Path, site_dir: Path, write_file, target_dir: Path
    ):
        write_file("about.md", "# About\n")
        (isolated_cwd / "mummy.toml").write_text("[page]\nnames_bare = true\n", encoding="utf-8")
        result = runner.invoke(app, ["mummify", str(site_dir), "-t", str(target_dir)])
        assert result.exit_code == 0, result.output
        assert (target_dir / "about").is_file()

    def test_invalid_config_exits_with_one(self, site_dir: Path, tmp_path: Path):
        config = tmp_path / "bad.toml"
        config.write_text('content_base_names = [" "]\n', encoding="utf-8")
        result = runner.invoke(app, ["mummify", str(site_dir), "-c", str(config)])
        assert result.exit_code == 1
        assert "Build failed" in result.output

    def test_deploy_inside_target_exits_with_one(self, blog_site: Path, target_dir: Path):
        result = runner.invoke(
            app,
            [
                "mummify", str(blog_site), "-t", str(target_dir),
                "--deploy-dir", str(target_dir / "public"),
            ],
        )
        assert result.exit_code == 1
        assert "Build failed" in result.output
