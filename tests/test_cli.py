from datetime import date
from pathlib import Path

from click.testing import CliRunner

from quire.cli import cli
from quire.content import parse_content

CONFIG = """baseURL = 'https://example.com'
title = 'Example'
paginate = 1

[[menu.main]]
name = "Tags"
url = "/tags"
weight = 2

[[menu.main]]
name = "Posts"
url = "/posts"
weight = 1
"""


def create_project(tmp_path: Path) -> Path:
    (tmp_path / "hugo.toml").write_text(CONFIG, encoding="utf-8")
    posts = tmp_path / "content" / "posts"
    posts.mkdir(parents=True)
    (posts / "first.md").write_text(
        "---\ntitle: First\ndate: 2024-01-01\ntags: [gsoc]\n---\nHi\n", encoding="utf-8"
    )
    (posts / "second.md").write_text(
        "---\ntitle: Second\ndate: 2024-01-02\ntags: [gsoc, python]\n---\nHi\n",
        encoding="utf-8",
    )
    return tmp_path


def test_check_reports_summary(tmp_path):
    project = create_project(tmp_path)
    result = CliRunner().invoke(cli, ["check", "--root", str(project)])
    assert result.exit_code == 0
    assert "Checked 2 items, 2 tags, 2 listing pages for Example" in result.output


def test_check_warns_on_duplicate_permalinks(tmp_path):
    project = create_project(tmp_path)
    for name in ("a", "b"):
        (project / "content" / f"{name}.md").write_text(
            "---\ntitle: Dup\ndate: 2024-01-03\npermalink: /dup/\n---\n", encoding="utf-8"
        )
    result = CliRunner().invoke(cli, ["check", "--root", str(project)])
    assert result.exit_code == 0
    assert "Warning: /dup/ is claimed by a.md, b.md" in result.output


def test_check_reports_failing_file(tmp_path):
    project = create_project(tmp_path)
    (project / "content" / "posts" / "broken.md").write_text(
        "---\ntitle: Broken\n", encoding="utf-8"
    )
    result = CliRunner().invoke(cli, ["check", "--root", str(project)])
    assert result.exit_code == 1
    assert "Load failed:" in result.output
    assert "File: content/posts/broken.md" in result.output
    assert "unterminated front matter" in result.output


def test_check_reports_config_error(tmp_path):
    (tmp_path / "hugo.toml").write_text("title = 'x'\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["check", "--root", str(tmp_path)])
    assert result.exit_code == 1
    assert "File: hugo.toml" in result.output
    assert "missing required key 'baseURL'" in result.output


def test_list_pages(tmp_path):
    project = create_project(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["list", "--root", str(project), "--section", "posts"])
    assert result.exit_code == 0
    assert "/posts/ (page 1 of 2)" in result.output
    assert "2024-01-02  Second  /posts/second/" in result.output

    result = runner.invoke(cli, ["list", "--root", str(project), "--page", "2"])
    assert result.exit_code == 0
    assert "/page/2/ (page 2 of 2)" in result.output
    assert "First" in result.output

    result = runner.invoke(cli, ["list", "--root", str(project), "--page", "3"])
    assert result.exit_code != 0
    assert "out of range" in result.output

    result = runner.invoke(cli, ["list", "--root", str(project), "--section", "none"])
    assert result.exit_code == 0
    assert "No items." in result.output


def test_tags_and_menu(tmp_path):
    project = create_project(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["tags", "--root", str(project)])
    assert result.output.splitlines() == ["gsoc\t2", "python\t1"]
    result = runner.invoke(cli, ["menu", "--root", str(project)])
    assert result.output.splitlines() == ["1\tPosts\t/posts", "2\tTags\t/tags"]


def test_new_creates_parseable_file(tmp_path):
    result = CliRunner().invoke(
        cli,
        ["new", "posts/my-post", "--root", str(tmp_path), "--title", "My Post", "--tag", "GSoC"],
    )
    assert result.exit_code == 0
    target = tmp_path / "content" / "posts" / "my-post.md"
    item = parse_content(target.read_text(encoding="utf-8"))
    assert item.title == "My Post"
    assert item.date == date.today()
    assert item.tags == ("gsoc",)
    assert item.draft is False

    result = CliRunner().invoke(
        cli, ["new", "posts/my-post.md", "--root", str(tmp_path), "--title", "Again"]
    )
    assert result.exit_code != 0
    assert "already exists" in result.output


def test_new_prompts_for_title(monkeypatch, tmp_path):
    prompts = {}

    class FakePrompt:
        def __init__(self, answer):
            self.answer = answer

        def ask(self):
            return self.answer

    def fake_text(message, default="", **kwargs):
        prompts["default"] = default
        return FakePrompt("Prompted Title")

    monkeypatch.setattr("quire.cli.questionary.text", fake_text)
    result = CliRunner().invoke(cli, ["new", "til/quick-tip", "--root", str(tmp_path), "--draft"])
    assert result.exit_code == 0
    assert prompts["default"] == "Quick Tip"
    item = parse_content((tmp_path / "content" / "til" / "quick-tip.md").read_text(encoding="utf-8"))
    assert item.title == "Prompted Title"
    assert item.draft is True


def test_new_aborts_when_prompt_cancelled(monkeypatch, tmp_path):
    class Cancelled:
        def ask(self):
            return None

    monkeypatch.setattr("quire.cli.questionary.text", lambda *a, **k: Cancelled())
    result = CliRunner().invoke(cli, ["new", "posts/x", "--root", str(tmp_path)])
    assert result.exit_code != 0
    assert not (tmp_path / "content" / "posts" / "x.md").exists()


def test_version_and_main_entrypoint():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "quire" in result.output

    from quire.__main__ import main

    assert callable(main)


def test_check_reports_undecodable_file(tmp_path):
    project = create_project(tmp_path)
    (project / "content" / "posts" / "bad.md").write_bytes(b"---\ntitle: \xff\n---\n")
    result = CliRunner().invoke(cli, ["check", "--root", str(project)])
    assert result.exit_code == 1
    assert "File: content/posts/bad.md" in result.output
    assert "not valid UTF-8" in result.output


def test_list_with_drafts_marks_them(tmp_path):
    project = create_project(tmp_path)
    (project / "content" / "posts" / "draft.md").write_text(
        "---\ntitle: Draft\ndate: 2024-01-03\ndraft: true\n---\nHi\n", encoding="utf-8"
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["list", "--root", str(project)])
    assert result.exit_code == 0
    assert "Draft" not in result.output

    result = runner.invoke(cli, ["list", "--root", str(project), "--drafts"])
    assert result.exit_code == 0
    assert "/ (page 1 of 3)" in result.output
    assert "2024-01-03  Draft [draft]  /posts/draft/" in result.output


def test_new_keeps_markdown_extension(tmp_path):
    result = CliRunner().invoke(
        cli, ["new", "posts/long-form.markdown", "--root", str(tmp_path), "--title", "Long"]
    )
    assert result.exit_code == 0
    posts = tmp_path / "content" / "posts"
    assert (posts / "long-form.markdown").exists()
    assert not (posts / "long-form.markdown.md").exists()
