import asyncio
import json

import click


def _parse_parameters(values: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated ``KEY=VALUE`` options into a dict."""
    params: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            msg = f"Expected KEY=VALUE, got {item!r}"
            raise click.BadParameter(msg, param_hint="--param")
        params[key] = value
    return params


def _adapter(verbosity: int = 0):
    from coderjob.adapter.coder import CoderAdapter
    from coderjob.adapter.log import setup_logging
    from coderjob.adapter.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level, verbosity)
    return CoderAdapter.from_settings(settings)


def _run(coro_factory):
    """Run ``coro_factory(adapter)`` and map adapter errors to click errors."""
    import httpx

    from coderjob.adapter.coder import WorkspaceNotFoundError
    from coderjob.adapter.credentials.base import CredentialProviderError
    from coderjob.adapter.gateway import TransportError
    from coderjob.adapter.info import MalformedTimestampError

    verbosity = click.get_current_context().find_root().params.get("verbose", 0)

    async def _main():
        async with _adapter(verbosity) as adapter:
            return await coro_factory(adapter)

    try:
        return asyncio.run(_main())
    except WorkspaceNotFoundError as exc:
        msg = f"Workspace not found: {exc}"
        raise click.ClickException(msg) from exc
    except (TransportError, CredentialProviderError, MalformedTimestampError) as exc:
        raise click.ClickException(str(exc)) from exc
    except httpx.HTTPError as exc:
        msg = f"Cannot reach Coder API: {exc}"
        raise click.ClickException(msg) from exc


@click.group()
@click.option("-v", "--verbose", count=True, help="Log more detail (-v debug, -vv also HTTP traces).")
def main(verbose: int) -> None:
    """coderjob - run Coder workspaces as batch jobs."""


@main.command()
@click.option("--org-id", required=True, help="Coder organization id.")
@click.option("--project-id", required=True, help="Backing project the credentials are scoped to.")
@click.option("--template-version-id", required=True, help="Template version to build.")
@click.option("--name", "workspace_name", required=True, help="Requested workspace name.")
@click.option("--param", "params", multiple=True, help="Extra rich parameter as KEY=VALUE (repeatable).")
def submit(
    org_id: str, project_id: str, template_version_id: str, workspace_name: str, params: tuple[str, ...]
) -> None:
    """Create a workspace and print its id."""
    from coderjob.adapter.models.job import SubmitRequest

    request = SubmitRequest(
        org_id=org_id,
        project_id=project_id,
        template_version_id=template_version_id,
        workspace_name=workspace_name,
        parameters=_parse_parameters(params),
    )
    click.echo(_run(lambda adapter: adapter.submit(request)))


@main.command()
@click.argument("job_id")
def info(job_id: str) -> None:
    """Print the job info record of a workspace as JSON."""
    result = _run(lambda adapter: adapter.info(job_id))
    click.echo(result.model_dump_json(indent=2))


@main.command()
@click.argument("job_id")
def status(job_id: str) -> None:
    """Print the canonical status of a workspace."""
    click.echo(_run(lambda adapter: adapter.status(job_id)))


@main.command()
@click.argument("job_id")
def delete(job_id: str) -> None:
    """Delete a workspace and destroy its credentials."""
    outcome = _run(lambda adapter: adapter.delete(job_id))
    click.echo(f"{job_id}: {outcome.state} after {outcome.attempts} check(s)")


@main.command(name="list")
@click.option("--owner", "owners", multiple=True, help="Only list workspaces of this owner (repeatable).")
def list_jobs(owners: tuple[str, ...]) -> None:
    """Print info records of all visible workspaces as JSON."""
    if owners:
        infos = _run(lambda adapter: adapter.info_where_owner(owners))
    else:
        infos = _run(lambda adapter: adapter.info_all())
    click.echo(json.dumps([i.model_dump(mode="json") for i in infos], indent=2))


if __name__ == "__main__":
    main()
