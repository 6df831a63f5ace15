import typer

from lbtree.core.models import AwsSettings
from lbtree.core.runner import run_display
from lbtree.services.alb.domains.tree.walker import AlbTreeWalker


def tree(
    ctx: typer.Context,
    load_balancer_arn: str | None = typer.Option(
        None,
        "--load-balancer-arn",
        "-l",
        help="ARN of the load balancer (interactive selection if not provided)",
    ),
):
    """
    Display Application Load Balancer tree.
    """
    settings = ctx.obj or AwsSettings()

    exit_code = run_display(
        AlbTreeWalker, settings, load_balancer_arn=load_balancer_arn
    )

    if exit_code != 0:
        raise typer.Exit(exit_code)
