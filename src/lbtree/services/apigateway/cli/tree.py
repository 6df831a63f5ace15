import typer

from lbtree.core.models import AwsSettings
from lbtree.core.runner import run_display
from lbtree.services.apigateway.domains.tree.walker import ApiGatewayTreeWalker


def tree(
    ctx: typer.Context,
    api_id: str | None = typer.Option(
        None,
        "--api-id",
        "-i",
        help="ID of the REST API (interactive selection if not provided)",
    ),
):
    """
    Display API Gateway REST API tree.
    """
    settings = ctx.obj or AwsSettings()

    exit_code = run_display(ApiGatewayTreeWalker, settings, api_id=api_id)

    if exit_code != 0:
        raise typer.Exit(exit_code)
