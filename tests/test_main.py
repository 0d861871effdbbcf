"""Tests for the prreview CLI entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest

from prreview import __version__
from prreview.adapters.base import AuthenticationError, GitPlatformError
from prreview.config import AppConfig
from prreview.main import apply_overrides, main, parse_args
from prreview.models import Reference

PR_URL = "https://github.com/evmorov/prreview/pull/2"


@pytest.fixture(autouse=True)
def env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in ("GITHUB_TOKEN", "GITHUB_TOKEN_FILE", "GITHUB_API_URL", "REVIEW_PROMPT", "REVIEW_LINKED_ISSUES_LIMIT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def test_no_arguments_shows_help(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        parse_args([])
    assert exc_info.value.code == 0
    assert "usage: prreview" in capsys.readouterr().out


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        parse_args(["--version"])
    assert __version__ in capsys.readouterr().out


def test_apply_overrides() -> None:
    args = parse_args(["-u", PR_URL, "-p", "Find bugs", "-a", "-l", "2"])
    config = apply_overrides(AppConfig(), args)
    assert config.review.prompt == "Find bugs"
    assert config.review.include_content is True
    assert config.review.linked_issues_limit == 2


def test_apply_overrides_keeps_config_when_no_flags() -> None:
    config = AppConfig()
    assert apply_overrides(config, parse_args(["-u", PR_URL])) is config


def test_missing_url(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-p", "x"]) == 1
    assert "Error: Pull-request URL missing. Use -u or --url." in capsys.readouterr().err


def test_invalid_url(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "t")
    assert main(["-u", "not-a-url"]) == 1
    assert "Error: Invalid URL format. See --help for usage." in capsys.readouterr().err


def test_missing_token_aborts(capsys: pytest.CaptureFixture[str]) -> None:
    with patch("prreview.main.build_review_prompt") as build:
        assert main(["-u", PR_URL]) == 1
    build.assert_not_called()
    assert "Error: GITHUB_TOKEN is not set." in capsys.readouterr().err


def test_writes_prompt_to_stdout(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "t")
    with patch("prreview.main.build_review_prompt", return_value="<prompt />\n") as build:
        assert main(["-u", PR_URL, "-o", "a.md, b.md", "-l", "3"]) == 0

    assert capsys.readouterr().out == "<prompt />\n"
    adapter, ref, review, paths = build.call_args[0]
    assert ref == Reference(owner="evmorov", repo="prreview", number=2)
    assert review.linked_issues_limit == 3
    assert paths == ["a.md", "b.md"]
    assert adapter._session.headers["Authorization"] == "token t"


def test_writes_prompt_to_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "t")
    out = tmp_path / "prompt.xml"
    with patch("prreview.main.build_review_prompt", return_value="<prompt />\n"):
        assert main(["-u", PR_URL, "--output", str(out)]) == 0
    assert out.read_text() == "<prompt />\n"


def test_invalid_token(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "bad")
    with patch("prreview.main.build_review_prompt", side_effect=AuthenticationError("401: Bad credentials")):
        assert main(["-u", PR_URL]) == 1
    captured = capsys.readouterr()
    assert "Error: Invalid GITHUB_TOKEN." in captured.err
    assert captured.out == ""


def test_platform_error(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "t")
    with patch("prreview.main.build_review_prompt", side_effect=GitPlatformError("404: Not Found")):
        assert main(["-u", PR_URL]) == 1
    assert "Error: 404: Not Found" in capsys.readouterr().err


def test_missing_context_file(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "t")
    with patch("prreview.adapters.github.GitHubAdapter.get_pr") as get_pr:
        assert main(["-u", PR_URL, "-o", "missing.md"]) == 1
    get_pr.assert_not_called()
    captured = capsys.readouterr()
    assert "Error: Optional file missing.md not found." in captured.err
    assert captured.out == ""


def test_copies_prompt_to_clipboard(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "t")
    with patch("prreview.main.build_review_prompt", return_value="<prompt />\n"):
        with patch("pyperclip.copy") as copy:
            assert main(["-u", PR_URL, "--clipboard"]) == 0

    copy.assert_called_once_with("<prompt />\n")
    assert capsys.readouterr().out == ""


def test_clipboard_unavailable(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    import pyperclip

    monkeypatch.setenv("GITHUB_TOKEN", "t")
    with patch("prreview.main.build_review_prompt", return_value="<prompt />\n"):
        with patch("pyperclip.copy", side_effect=pyperclip.PyperclipException("no clipboard")):
            assert main(["-u", PR_URL, "-x"]) == 1
    assert "Error: Cannot copy to clipboard: no clipboard" in capsys.readouterr().err


def test_invalid_config_value(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("review:\n  linked_issues_limit: -1\n")
    assert main(["-u", PR_URL, "-c", str(config)]) == 1
    assert "Error: Invalid config" in capsys.readouterr().err


def test_malformed_yaml(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    config = tmp_path / "broken.yaml"
    config.write_text("review: [unclosed\n")
    assert main(["-u", PR_URL, "-c", str(config)]) == 1
    assert "Error: Invalid config" in capsys.readouterr().err


def test_missing_token_file(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GITHUB_TOKEN_FILE", str(tmp_path / "no-such-token"))
    assert main(["-u", PR_URL]) == 1
    assert "no-such-token" in capsys.readouterr().err


def test_logger_comes_from_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "t")
    with patch("prreview.main.build_review_prompt", return_value="<prompt />\n"):
        with patch("prreview.main.PrreviewLogging.get_logger") as get_logger:
            assert main(["-u", PR_URL]) == 0
    get_logger.assert_called_once_with("prreview")
    get_logger.return_value.info.assert_called_once_with("XML prompt generated")
