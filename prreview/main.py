"""prreview entry point.

Builds an XML review prompt for a GitHub pull request and writes it to
stdout, to a file (--output) or to the clipboard (--clipboard).
Usage: prreview -u https://github.com/owner/repo/pull/1
"""

import argparse
import sys
from pathlib import Path

import pyperclip
import yaml
from pydantic import ValidationError

from prreview import __version__
from prreview.adapters.base import AuthenticationError, GitPlatformError
from prreview.adapters.github import GitHubAdapter
from prreview.config import DEFAULT_LINKED_ISSUES_LIMIT, AppConfig, load_config
from prreview.logging import PrreviewLogging
from prreview.services.collector import build_review_prompt
from prreview.services.context_files import ContextFileError, split_paths
from prreview.services.references import InvalidReferenceError, parse_pull_request_reference


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prreview",
        description="Build an LLM review prompt (XML) from a GitHub pull request and its linked issues",
    )
    parser.add_argument("-u", "--url", help="Pull request URL (https://github.com/owner/repo/pull/1)")
    parser.add_argument("-p", "--prompt", help="Custom LLM prompt")
    parser.add_argument(
        "-a",
        "--all-content",
        action="store_true",
        default=None,
        help="Include full file contents",
    )
    parser.add_argument(
        "-l",
        "--limit",
        type=int,
        help=f"Limit number of linked issues fetched (default: {DEFAULT_LINKED_ISSUES_LIMIT})",
    )
    parser.add_argument(
        "-o",
        "--optional",
        default="",
        help="Comma-separated paths to local files (relative or absolute, e.g. docs/description.md,/etc/hosts)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the prompt to this file instead of stdout",
    )
    parser.add_argument(
        "-x",
        "--clipboard",
        action="store_true",
        help="Copy the prompt to the clipboard instead of stdout",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("prreview.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument("-v", "--version", action="version", version=__version__)
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments; no arguments at all shows help."""
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    if not argv:
        parser.print_help()
        parser.exit()
    return parser.parse_args(argv)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return config with CLI flags taking precedence over file/env values."""
    updates = {}
    if args.prompt:
        updates["prompt"] = args.prompt
    if args.all_content:
        updates["include_content"] = True
    if args.limit is not None:
        updates["linked_issues_limit"] = max(args.limit, 0)
    if not updates:
        return config
    return config.model_copy(update={"review": config.review.model_copy(update=updates)})


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse options, fetch everything, write the prompt."""
    args = parse_args(argv)
    try:
        config = apply_overrides(load_config(args.config), args)
        token = config.github_token_resolved
    except (yaml.YAMLError, ValidationError) as e:
        return _fail(f"Error: Invalid config {args.config}: {e}")
    except OSError as e:
        return _fail(f"Error: {e}")

    log_setup = PrreviewLogging(config.logging)
    log_setup.setup()
    log = log_setup.get_logger("prreview")

    if not args.url:
        return _fail("Error: Pull-request URL missing. Use -u or --url.")
    try:
        ref = parse_pull_request_reference(args.url)
    except InvalidReferenceError:
        return _fail("Error: Invalid URL format. See --help for usage.")

    if not token:
        return _fail("Error: GITHUB_TOKEN is not set.")

    adapter = GitHubAdapter(token=token, api_url=config.github.api_url, timeout=config.github.timeout)
    try:
        xml = build_review_prompt(adapter, ref, config.review, split_paths(args.optional))
    except ContextFileError as e:
        return _fail(f"Error: {e}")
    except AuthenticationError:
        return _fail("Error: Invalid GITHUB_TOKEN.")
    except GitPlatformError as e:
        log.debug("GitHub request failed", exc_info=True)
        return _fail(f"Error: {e}")

    if args.output:
        args.output.write_text(xml, encoding="utf-8")
        log.info("XML prompt written to %s", args.output)
    elif args.clipboard:
        try:
            pyperclip.copy(xml)
        except pyperclip.PyperclipException as e:
            return _fail(f"Error: Cannot copy to clipboard: {e}")
        log.info("XML prompt generated and copied to your clipboard.")
    else:
        sys.stdout.write(xml)
        log.info("XML prompt generated")
    return 0


if __name__ == "__main__":
    sys.exit(main())
