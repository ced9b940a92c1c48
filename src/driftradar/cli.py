"""Command-line interface for Drift Radar."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from driftradar import __version__
from driftradar.config import (
    BASELINE_DB_FILE,
    ProjectConfig,
    find_project_root,
    get_driftradar_dir,
    load_config,
    save_config,
    set_config_value,
)
from driftradar.exceptions import CacheError, ConfigError, ContextError, GitHubError
from driftradar.ui.console import Console, configure_logging

console = Console()


def _get_project_root(path: str | None = None) -> Path:
    """Resolve the project root; CI runs without `init` fall back to cwd."""
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root
    return find_project_root() or Path.cwd()


def _load_config(root: Path) -> ProjectConfig:
    try:
        return load_config(root)
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)


def _open_store(root: Path):
    from driftradar.baseline.store import BaselineStore

    return BaselineStore(get_driftradar_dir(root) / BASELINE_DB_FILE)


def _make_client(repo: str, config: ProjectConfig):
    from driftradar.github.client import GitHubClient

    return GitHubClient(repo, token=config.github.token, timeout=config.github.timeout)


@click.group()
@click.version_option(version=__version__, prog_name="driftradar")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """Drift Radar - structural risk signal for pull requests."""
    configure_logging(verbose)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--history-prs", type=int, default=None, help="Merged PRs in the baseline window.")
@click.option("--branch", default=None, help="Default branch the baseline is keyed by.")
def init(path: str | None, history_prs: int | None, branch: str | None):
    """Initialize Drift Radar for a repository."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    console.banner()
    console.info(f"Initializing Drift Radar for: {root}")

    config = _load_config(root)
    config.name = root.name
    config.root_path = str(root)
    if history_prs is not None:
        config.baseline.history_prs = history_prs
    if branch:
        config.baseline.default_branch = branch

    save_config(root, config)
    console.success(f"Configuration saved to {get_driftradar_dir(root)}")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option(
    "--files", "files_path", default=None, type=click.Path(exists=True, dir_okay=False),
    help="JSON list of changed files (filename/path, additions, deletions).",
)
@click.option("--base", "-b", default=None, help="Base ref to diff against (default: baseline branch).")
@click.option("--branch", default=None, help="Branch whose stored baseline to compare with.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json", "markdown"]),
    default="text",
    help="Output format.",
)
def analyze(
    path: str | None,
    files_path: str | None,
    base: str | None,
    branch: str | None,
    output_format: str,
):
    """Score local changes without talking to GitHub.

    Reads a file list from --files, or diffs the current branch against
    --base. Hotspots and the trend come from the stored baseline, if any.
    """
    from driftradar.bot import analyze_local, build_report
    from driftradar.github.diff_parser import (
        get_git_diff,
        load_changed_files,
        parse_diff,
        to_changed_files,
    )

    root = _get_project_root(path)
    config = _load_config(root)
    branch = branch or config.baseline.default_branch

    if files_path:
        try:
            files = load_changed_files(Path(files_path))
        except (ValueError, json.JSONDecodeError) as e:
            console.error(f"Cannot read file list: {e}")
            sys.exit(1)
    else:
        files = to_changed_files(parse_diff(get_git_diff(root, base or branch)))
        if not files:
            console.warning("No changes detected.")

    store = _open_store(root)
    try:
        result, baseline_data = analyze_local(files, store, branch)
    finally:
        store.close()

    report = build_report(result, baseline_data)
    if output_format == "json":
        click.echo(json.dumps(report, indent=2, default=str))
    elif output_format == "markdown":
        click.echo(report["comment"])
    else:
        if files:
            console.show_files(files, baseline_data.hotspot_set)
        console.show_result(result, report["trend"])


# =========================================================================
# Pull request bot
# =========================================================================

@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--repo", default=None, help="Repository as owner/name (default: GITHUB_REPOSITORY).")
@click.option("--pull-number", type=int, default=None, help="Pull request number (default: from event).")
@click.option("--history-prs", type=int, default=None, help="Merged PRs in the baseline window.")
@click.option("--branch", default=None, help="Branch the baseline is keyed by.")
@click.option("--comment-tag", default=None, help="Hidden marker identifying the bot comment.")
@click.option("--post/--no-post", default=True, help="Create or update the PR comment.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json", "markdown"]),
    default="markdown",
    help="Output format.",
)
def pr(
    path: str | None,
    repo: str | None,
    pull_number: int | None,
    history_prs: int | None,
    branch: str | None,
    comment_tag: str | None,
    post: bool,
    output_format: str,
):
    """Score a pull request and comment the result on it.

    Usage in CI:

        driftradar pr

    Manual runs:

        driftradar pr --repo owner/name --pull-number 42 --no-post
    """
    from driftradar.bot import run_pr_analysis
    from driftradar.github.context import resolve_context

    root = _get_project_root(path)
    config = _load_config(root)

    try:
        ctx = resolve_context(
            pull_number=pull_number,
            repository=repo,
            fallback_branch=config.baseline.default_branch,
        )
    except ContextError as e:
        console.error(str(e))
        sys.exit(1)

    client = _make_client(ctx.full_name, config)
    store = _open_store(root)
    try:
        report = run_pr_analysis(
            client,
            store,
            pull_number=ctx.pull_number,
            branch=branch or ctx.default_branch,
            history_n=history_prs or config.baseline.history_prs,
            comment_tag=comment_tag or config.github.comment_tag,
            post=post,
        )
    except GitHubError as e:
        console.warning(f"Unable to read PR files. {e}")
        return
    finally:
        store.close()

    if output_format == "json":
        click.echo(json.dumps(report, indent=2, default=str))
    elif output_format == "markdown":
        click.echo(report["comment"])
    else:
        console.markdown(report["comment"])

    if post:
        if report["posted"]:
            console.success(f"Posted risk comment to #{ctx.pull_number}")
        else:
            console.warning("Could not post comment (missing permissions or GitHub access)")


@main.command("refresh-baseline")
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--repo", default=None, help="Repository as owner/name (default: GITHUB_REPOSITORY).")
@click.option("--history-prs", type=int, default=None, help="Merged PRs in the baseline window.")
@click.option("--branch", default=None, help="Branch the baseline is keyed by.")
def refresh_baseline_cmd(
    path: str | None, repo: str | None, history_prs: int | None, branch: str | None
):
    """Recompute the baseline from recently merged PRs and store it."""
    from driftradar.bot import refresh_baseline
    from driftradar.github.context import resolve_context

    root = _get_project_root(path)
    config = _load_config(root)

    try:
        ctx = resolve_context(
            repository=repo,
            require_pull=False,
            fallback_branch=config.baseline.default_branch,
        )
    except ContextError as e:
        console.error(str(e))
        sys.exit(1)

    branch = branch or ctx.default_branch
    history_n = history_prs or config.baseline.history_prs
    client = _make_client(ctx.full_name, config)
    store = _open_store(root)
    try:
        baseline = refresh_baseline(store, client, branch, history_n)
    except GitHubError as e:
        console.error(f"Baseline refresh failed: {e}")
        sys.exit(1)
    finally:
        store.close()

    console.success(f"Baseline refreshed for {branch}")
    console.show_baseline(branch, baseline)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--branch", default=None, help="Branch to show (default: configured branch).")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
def baseline(path: str | None, branch: str | None, output_format: str):
    """Show the stored baseline for a branch."""
    root = _get_project_root(path)
    config = _load_config(root)
    branch = branch or config.baseline.default_branch

    store = _open_store(root)
    try:
        data = store.get(branch)
    except CacheError as e:
        console.error(str(e))
        sys.exit(1)
    finally:
        store.close()

    if data is None:
        console.warning(f"No baseline stored for {branch}. Run 'driftradar refresh-baseline'.")
        return

    if output_format == "json":
        click.echo(json.dumps(data.to_record(), indent=2))
    else:
        console.show_baseline(branch, data)


# =========================================================================
# Config Management
# =========================================================================

@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage Drift Radar configuration."""
    root = _get_project_root(path)
    config = _load_config(root)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: driftradar config get <key>")
            sys.exit(1)
        data = config.model_dump()
        parts = key.split(".")
        for part in parts:
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: driftradar config set <key> <value>")
            sys.exit(1)
        try:
            # Try to parse as JSON for non-string values
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            save_config(root, config)
            console.success(f"Set {key} = {parsed_value}")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        except ConfigError as e:
            console.error(str(e))
            sys.exit(1)


if __name__ == "__main__":
    main()
