import typer

from lbtree.core.models import AwsSettings
from lbtree.core.runner import run_display
from lbtree.services.ecs.domains.tree.walker import EcsTreeWalker


def tree(
    ctx: typer.Context,
    cluster: str | None = typer.Option(
        None,
        "--cluster",
        "-c",
        help="Name or ARN of the cluster (interactive selection if not provided)",
    ),
    service: str | None = typer.Option(
        None,
        "--service",
        "-s",
        help="Name or ARN of the service (interactive selection if not provided)",
    ),
):
    """
    Display ECS service tree.
    """
    settings = ctx.obj or AwsSettings()

    exit_code = run_display(EcsTreeWalker, settings, cluster=cluster, service=service)

    if exit_code != 0:
        raise typer.Exit(exit_code)
