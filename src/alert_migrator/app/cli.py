from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Callable, NoReturn

import typer
from dotenv import load_dotenv

from .config import AppConfig
from .container import Container
from .cli_formatter import format_repository_list, format_summaries
from ..core.domain.exceptions import GithubApiError
from ..core.domain.models import RunSummary

load_dotenv()

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _run_name(command: str, org: str, repo: str | None = None) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    parts = [command, org] + ([repo] if repo else []) + [stamp]
    return "-".join(parts)


def _resolve_config(
    *,
    run_name: str,
    source_pat: str | None,
    target_pat: str | None,
    ghes_api_url: str | None,
    target_api_url: str | None,
    no_ssl_verify: bool,
    verbose: bool,
) -> AppConfig:
    """Load config from the environment and apply command-line overrides.

    AppConfig is frozen, so overrides are applied with ``model_copy``.
    """
    config = AppConfig()

    github_updates: dict[str, object] = {}
    if source_pat:
        github_updates["source_token"] = source_pat
    if target_pat:
        github_updates["target_token"] = target_pat
    if ghes_api_url:
        github_updates["source_api_url"] = ghes_api_url
    if target_api_url:
        github_updates["target_api_url"] = target_api_url
    if no_ssl_verify:
        github_updates["no_ssl_verify"] = True

    return config.model_copy(update={
        "github": config.github.model_copy(update=github_updates),
        "runtime": config.runtime.model_copy(update={"run_name": run_name}),
        # Enable console output in CLI
        "logging": config.logging.model_copy(update={
            "console_output": True,
            "level": "DEBUG" if verbose else config.logging.level,
        }),
    })


def _start_container(config: AppConfig, *, token: str | None) -> Container:
    if not token:
        typer.echo(
            "Error: GitHub token required via --github-target-pat, GH_PAT "
            "or ALERT_MIGRATOR_GITHUB__TARGET_TOKEN",
            err=True,
        )
        raise typer.Exit(code=2)

    container = Container()
    container.config.from_pydantic(config)
    container.init_resources()
    return container


def _log_options(container: Container, config: AppConfig, **options: object) -> None:
    github = config.github
    container.logger().info(
        "migration_options",
        source_api_url=github.source_api_url,
        target_api_url=github.target_api_url,
        no_ssl_verify=github.no_ssl_verify,
        source_token="***" if github.source_token else None,
        target_token="***" if github.target_token else None,
        **options,
    )


def _emit_summaries(summaries: dict[str, RunSummary], json_output: bool) -> None:
    if json_output:
        payload = {step: summary.to_dict() for step, summary in summaries.items()}
        typer.echo(json.dumps(payload, indent=2))
    else:
        typer.echo(format_summaries(summaries))


def _abort(
    container: Container,
    error: GithubApiError,
    summaries: dict[str, RunSummary],
    json_output: bool,
) -> NoReturn:
    """Log a fatal API error, print what was collected so far and exit with 1.

    Must be called from inside the ``except`` block handling ``error``.
    """
    container.logger().exception(
        "migration_failed",
        status_code=error.status_code,
        url=error.url,
    )
    _emit_summaries(summaries, json_output)
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


def _run_steps(
    container: Container,
    steps: list[tuple[str, Callable[[], RunSummary]]],
    *,
    json_output: bool,
) -> dict[str, RunSummary]:
    """Run migration steps in order and always print what was collected.

    Raises:
        typer.Exit: code 1 when a step fails fatally
    """
    summaries: dict[str, RunSummary] = {}
    for step, run in steps:
        try:
            summaries[step] = run()
        except GithubApiError as e:
            if e.partial_summary is not None:
                summaries[step] = e.partial_summary
            _abort(container, e, summaries, json_output)

    _emit_summaries(summaries, json_output)
    return summaries


@app.command(name="migrate-code-scanning-alerts")
def migrate_code_scanning_alerts(
    github_source_org: str = typer.Option(..., "--github-source-org", help="Source organization or user"),
    source_repo: str = typer.Option(..., "--source-repo", help="Source repository name"),
    github_target_org: str = typer.Option(..., "--github-target-org", help="Target organization or user"),
    target_repo: str | None = typer.Option(None, "--target-repo", help="Target repository name (defaults to --source-repo)"),
    target_api_url: str | None = typer.Option(None, "--target-api-url", help="REST API URL of the target instance"),
    ghes_api_url: str | None = typer.Option(None, "--ghes-api-url", help="REST API URL of a GitHub Enterprise Server source, e.g. https://ghes.example.com/api/v3"),
    no_ssl_verify: bool = typer.Option(False, "--no-ssl-verify", help="Disable TLS verification towards the source instance"),
    github_source_pat: str | None = typer.Option(None, "--github-source-pat", envvar="GH_SOURCE_PAT", help="Token for the source instance (defaults to the target token)"),
    github_target_pat: str | None = typer.Option(None, "--github-target-pat", envvar="GH_PAT", help="Token for the target instance"),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would be migrated without writing to the target"),
    json_output: bool = typer.Option(False, "--json", help="Output summaries as JSON"),
):
    """Migrate code scanning analyses and alert states of the default branch.

    Analyses (SARIF reports) are replayed on the target oldest first, then the
    open/dismissed state of every alert is copied onto the matching target alert.
    """
    target_repo = target_repo or source_repo
    config = _resolve_config(
        run_name=_run_name("code-scanning", github_source_org, source_repo),
        source_pat=github_source_pat,
        target_pat=github_target_pat,
        ghes_api_url=ghes_api_url,
        target_api_url=target_api_url,
        no_ssl_verify=no_ssl_verify,
        verbose=verbose,
    )
    container = _start_container(config, token=config.github.target_token)

    try:
        _log_options(
            container,
            config,
            source=f"{github_source_org}/{source_repo}",
            target=f"{github_target_org}/{target_repo}",
            dry_run=dry_run,
        )

        try:
            branch = container.source_api().get_default_branch(github_source_org, source_repo)
        except GithubApiError as e:
            _abort(container, e, {}, json_output)

        ref = f"refs/heads/{branch}"
        if not json_output:
            typer.echo(f"Found default branch: {branch} - migrating code scanning results of this branch only.")

        repos = dict(
            source_owner=github_source_org,
            source_repo=source_repo,
            target_owner=github_target_org,
            target_repo=target_repo,
            ref=ref,
            dry_run=dry_run,
        )
        _run_steps(
            container,
            [
                ("analyses", lambda: container.migrate_analyses_uc().execute(**repos)),
                ("code_scanning_alerts", lambda: container.migrate_code_scanning_alerts_uc().execute(**repos)),
            ],
            json_output=json_output,
        )
    finally:
        # Always shutdown resources to close file handles
        container.shutdown_resources()

    if not json_output:
        typer.echo("Code scanning migration completed.")


@app.command(name="migrate-secret-alerts")
def migrate_secret_alerts(
    github_source_org: str = typer.Option(..., "--github-source-org", help="Source organization or user"),
    source_repo: str = typer.Option(..., "--source-repo", help="Source repository name"),
    github_target_org: str = typer.Option(..., "--github-target-org", help="Target organization or user"),
    target_repo: str | None = typer.Option(None, "--target-repo", help="Target repository name (defaults to --source-repo)"),
    target_api_url: str | None = typer.Option(None, "--target-api-url", help="REST API URL of the target instance"),
    ghes_api_url: str | None = typer.Option(None, "--ghes-api-url", help="REST API URL of a GitHub Enterprise Server source"),
    no_ssl_verify: bool = typer.Option(False, "--no-ssl-verify", help="Disable TLS verification towards the source instance"),
    github_source_pat: str | None = typer.Option(None, "--github-source-pat", envvar="GH_SOURCE_PAT", help="Token for the source instance (defaults to the target token)"),
    github_target_pat: str | None = typer.Option(None, "--github-target-pat", envvar="GH_PAT", help="Token for the target instance"),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would be migrated without writing to the target"),
    json_output: bool = typer.Option(False, "--json", help="Output summaries as JSON"),
):
    """Copy secret scanning alert resolutions onto the matching target alerts."""
    target_repo = target_repo or source_repo
    config = _resolve_config(
        run_name=_run_name("secret-scanning", github_source_org, source_repo),
        source_pat=github_source_pat,
        target_pat=github_target_pat,
        ghes_api_url=ghes_api_url,
        target_api_url=target_api_url,
        no_ssl_verify=no_ssl_verify,
        verbose=verbose,
    )
    container = _start_container(config, token=config.github.target_token)

    try:
        _log_options(
            container,
            config,
            source=f"{github_source_org}/{source_repo}",
            target=f"{github_target_org}/{target_repo}",
            dry_run=dry_run,
        )
        _run_steps(
            container,
            [
                (
                    "secret_scanning_alerts",
                    lambda: container.migrate_secret_alerts_uc().execute(
                        source_owner=github_source_org,
                        source_repo=source_repo,
                        target_owner=github_target_org,
                        target_repo=target_repo,
                        dry_run=dry_run,
                    ),
                ),
            ],
            json_output=json_output,
        )
    finally:
        container.shutdown_resources()

    if not json_output:
        typer.echo("Secret scanning migration completed.")


@app.command(name="list-repos")
def list_repos(
    org: str = typer.Argument(..., help="Organization on the source instance"),
    ghes_api_url: str | None = typer.Option(None, "--ghes-api-url", help="REST API URL of a GitHub Enterprise Server source"),
    no_ssl_verify: bool = typer.Option(False, "--no-ssl-verify", help="Disable TLS verification towards the source instance"),
    github_source_pat: str | None = typer.Option(None, "--github-source-pat", envvar="GH_SOURCE_PAT", help="Token for the source instance"),
    github_target_pat: str | None = typer.Option(None, "--github-target-pat", envvar="GH_PAT", help="Fallback token"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Limit number of results"),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output"),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """List repositories of a source organization."""
    config = _resolve_config(
        run_name=_run_name("list-repos", org),
        source_pat=github_source_pat,
        target_pat=github_target_pat,
        ghes_api_url=ghes_api_url,
        target_api_url=None,
        no_ssl_verify=no_ssl_verify,
        verbose=verbose,
    )
    container = _start_container(config, token=config.github.effective_source_token)

    try:
        names = container.list_repos_uc().execute(org=org, limit=limit)
    except GithubApiError as e:
        container.logger().exception("list_repos_failed", status_code=e.status_code, url=e.url)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        container.shutdown_resources()

    if json_output:
        typer.echo(json.dumps(names, indent=2))
    else:
        typer.echo(format_repository_list(org, names))


if __name__ == "__main__":
    app()
