import json

import pytest

import aicomm as ac
from aicomm.ai.prompts import build_commit_prompt, clamp_diff
from aicomm.git.diff import truncate_diff
from aicomm.git.status import parse_porcelain


def test_lint_git_commit_subject_validation():
    ac.lint_git_commit_subject("feat: ok subject")
    ac.lint_git_commit_subject("fix(parser): handle null pointer")
    with pytest.raises(ValueError):
        ac.lint_git_commit_subject("bad subject")
    with pytest.raises(ValueError):
        ac.lint_git_commit_subject("revert: not an allowed type")
    with pytest.raises(ValueError):
        ac.lint_git_commit_subject("feat: " + "y" * 80)


def test_lint_commit_message_requires_blank_line_before_body():
    ac.lint_commit_message("feat: add login\n\n- wire up form")
    with pytest.raises(ValueError):
        ac.lint_commit_message("feat: add login\n- wire up form")
    with pytest.raises(ValueError):
        ac.lint_commit_message("   ")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("feat: add api", "feat: add api"),
        ("'fix: patch bug'", "fix: patch bug"),
        ("`docs: update readme`", "docs: update readme"),
        ("Commit message: chore: bump deps", "chore: bump deps"),
        ("```\nrefactor(core): split module\n```", "refactor(core): split module"),
        ("\n\nci: cache pip\nmore text", "ci: cache pip"),
    ],
)
def test_clean_commit_message(raw, expected):
    assert ac.clean_commit_message(raw) == expected


@pytest.mark.parametrize("raw", ["", "```\n```", "Here is your commit: add api", "feat:missing space"])
def test_clean_commit_message_rejects(raw):
    with pytest.raises(ac.GenerationError):
        ac.clean_commit_message(raw)


def test_clean_commit_message_rejects_unshortenable_scope():
    with pytest.raises(ac.GenerationError):
        ac.clean_commit_message("feat(" + "s" * 90 + "): add thing")


def test_clean_commit_message_strips_closing_quote_of_body():
    raw = '"feat: add login\n\n- wire up form"'
    assert ac.clean_commit_message(raw, multiline=True) == "feat: add login\n\n- wire up form"


def test_truncate_diff_keeps_cap_plus_marker():
    diff = "\n".join(f"line {i}" for i in range(25))
    out = truncate_diff(diff, 10)
    lines = out.split("\n")
    assert len(lines) == 11
    assert lines[:10] == [f"line {i}" for i in range(10)]
    assert lines[-1] == "[... 15 more lines truncated ...]"


def test_truncate_diff_leaves_short_diff_alone():
    diff = "a\nb\nc"
    assert truncate_diff(diff, 3) == diff


def test_clamp_diff_by_characters():
    diff = "\n".join("x" * 50 for _ in range(10))
    out = clamp_diff(diff, max_lines=100, max_chars=120)
    assert out.count("x" * 50) == 2
    assert "characters]" in out.splitlines()[-1]


@pytest.mark.parametrize("style", ["conventional", "simple", "detailed"])
def test_build_commit_prompt_mentions_rules(style):
    prompt = build_commit_prompt("+x = 1", style=style)
    assert "+x = 1" in prompt
    assert "feat, fix, chore" in prompt
    assert "72 characters" in prompt
    assert "{" not in prompt


def test_load_settings_defaults(tmp_path):
    settings = ac.load_settings(project_dir=tmp_path, home_dir=tmp_path / "nohome")
    assert settings == ac.Settings()


def test_load_settings_project_overrides_home(tmp_path):
    home = tmp_path / "userhome"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    (home / ".aicommrc").write_text(json.dumps({"model": "home/model", "temperature": 1.5, "autoStage": True}))
    (project / ".aicommrc").write_text(json.dumps({"model": "project/model", "maxDiffLines": 50}))

    settings = ac.load_settings(project_dir=project, home_dir=home)
    assert settings.model == "project/model"
    assert settings.temperature == 1.5
    assert settings.auto_stage is True
    assert settings.max_diff_lines == 50
    assert settings.commit_style == "conventional"


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2]",
        json.dumps({"maxDiffLines": 5}),
        json.dumps({"maxDiffLines": 20000}),
        json.dumps({"maxDiffLines": "100"}),
        json.dumps({"temperature": 2.5}),
        json.dumps({"temperature": True}),
        json.dumps({"commitStyle": "fancy"}),
        json.dumps({"provider": "nowhere"}),
        json.dumps({"autoStage": "yes"}),
    ],
)
def test_load_settings_rejects_bad_files(tmp_path, content):
    (tmp_path / ".aicommrc").write_text(content)
    with pytest.raises(ac.ConfigError):
        ac.load_settings(project_dir=tmp_path, home_dir=tmp_path / "nohome")


def test_load_settings_ignores_unknown_keys(tmp_path, caplog):
    (tmp_path / ".aicommrc").write_text(json.dumps({"colour": "blue", "commitStyle": "detailed"}))
    settings = ac.load_settings(project_dir=tmp_path, home_dir=tmp_path / "nohome")
    assert settings.commit_style == "detailed"
    assert "colour" in caplog.text


def test_settings_overrides_are_validated():
    settings = ac.Settings()
    assert settings.with_overrides(model=None) is settings
    assert settings.with_overrides(model="x/y").model == "x/y"
    with pytest.raises(ac.ConfigError):
        settings.with_overrides(provider="bogus")


def test_parse_porcelain_groups_paths():
    output = "\0".join([
        "## main...origin/main [ahead 2, behind 1]",
        "M  staged.py",
        " M modified.py",
        "MM both.py",
        " D gone.py",
        "D  staged_gone.py",
        "?? new.py",
        "R  renamed.py",
        "old_name.py",
        "UU conflict.py",
        "",
    ])
    status = parse_porcelain(output)
    assert status.branch == "main"
    assert status.tracking == "origin/main"
    assert (status.ahead, status.behind) == (2, 1)
    assert status.staged == ["staged.py", "both.py", "staged_gone.py", "renamed.py"]
    assert status.modified == ["modified.py", "both.py"]
    assert status.deleted == ["gone.py"]
    assert status.created == ["new.py"]
    assert status.conflicted == ["conflict.py"]
    assert status.has_changes and status.has_staged_changes and status.has_unstaged_changes


@pytest.mark.parametrize(
    "header, branch, detached",
    [
        ("## No commits yet on main", "main", False),
        ("## HEAD (no branch)", None, True),
        ("## feature/x", "feature/x", False),
    ],
)
def test_parse_porcelain_branch_headers(header, branch, detached):
    status = parse_porcelain(header + "\0")
    assert status.branch == branch
    assert status.detached is detached
    assert status.is_detached is detached
    assert not status.has_changes


def test_format_workspace_summary():
    status = ac.WorkspaceStatus(modified=["a.py"], created=["b.py", "c.py"], branch="main")
    summary = ac.format_workspace_summary(status)
    assert "Modified: 1" in summary
    assert "Created:  2" in summary
    assert "Staged:   0" in summary
    assert "main" in summary


def scripted(*answers):
    answers = list(answers)

    def _prompt(*args, **kwargs):
        return answers.pop(0)

    return _prompt


def test_ask_commit_message_accept():
    assert ac.ask_commit_message("fix: handle null pointer\n", prompt=scripted("a")) == "fix: handle null pointer"


def test_ask_commit_message_abort():
    with pytest.raises(ac.UserAbort):
        ac.ask_commit_message("fix: x", prompt=scripted("q"))


def test_ask_commit_message_edit_single_line():
    result = ac.ask_commit_message("chore: update files", prompt=scripted("e", "  feat: add parser  "))
    assert result == "feat: add parser"


def test_ask_commit_message_edit_blank_is_an_error():
    with pytest.raises(ac.EmptyMessageError):
        ac.ask_commit_message("chore: update files", prompt=scripted("e", "   "))


def test_ask_commit_message_edit_reprompts_on_invalid_subject():
    result = ac.ask_commit_message(
        "chore: update files",
        prompt=scripted("e", "updated things", "docs: describe things"),
    )
    assert result == "docs: describe things"


def test_ask_commit_message_multiline_uses_editor():
    edits = []

    def fake_edit(text, extension=None):
        edits.append(text)
        return "feat: add api\n\n- new endpoint\n"

    result = ac.ask_commit_message("feat: add x\n\n- body", prompt=scripted("e"), edit=fake_edit)
    assert edits == ["feat: add x\n\n- body"]
    assert result == "feat: add api\n\n- new endpoint"


def test_parse_porcelain_type_changes():
    status = parse_porcelain("## main\0 T link.py\0T  staged_link.py\0")
    assert status.modified == ["link.py"]
    assert status.staged == ["staged_link.py"]
    assert status.has_changes


def test_ask_commit_message_editor_comments_are_dropped():
    def fake_edit(text, extension=None):
        return (
            "# Please enter the commit message for your changes.\n"
            "feat: add api\n"
            "# Lines starting with '#' will be ignored\n"
            "\n"
            "- new endpoint\n"
        )

    result = ac.ask_commit_message("feat: add x\n\n- body", prompt=scripted("e"), edit=fake_edit)
    assert result == "feat: add api\n\n- new endpoint"
