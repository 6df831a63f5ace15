from enum import StrEnum

import typer
from rich.console import Console
from rich.markup import escape

from lbtree.core.errors import LbtreeError
from lbtree.core.models import AwsSettings
from lbtree.core.picker import PickerItem, pick, static_producer
from lbtree.services.alb.cli import alb_tree
from lbtree.services.apigateway.cli import apigateway_tree
from lbtree.services.ecs.cli import ecs_tree

console_err = Console(stderr=True)


class ResourceType(StrEnum):
    ALB = "alb"
    API_GATEWAY = "api-gateway"
    ECS = "ecs"


RESOURCE_TYPE_ITEMS = [
    PickerItem("Application Load Balancer", ResourceType.ALB),
    PickerItem("API Gateway REST API", ResourceType.API_GATEWAY),
    PickerItem("ECS Service", ResourceType.ECS),
]

COMMANDS = {
    ResourceType.ALB: lambda ctx: alb_tree(ctx, load_balancer_arn=None),
    ResourceType.API_GATEWAY: lambda ctx: apigateway_tree(ctx, api_id=None),
    ResourceType.ECS: lambda ctx: ecs_tree(ctx, cluster=None, service=None),
}

app = typer.Typer(
    help="Display AWS resource hierarchies as trees",
    no_args_is_help=False,
)
app.command(ResourceType.ALB.value)(alb_tree)
app.command(ResourceType.API_GATEWAY.value)(apigateway_tree)
app.command(ResourceType.ECS.value)(ecs_tree)


def select_resource_type() -> ResourceType | None:
    return pick("Select resource type: ", static_producer(RESOURCE_TYPE_ITEMS))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    region: str | None = typer.Option(None, "--region", help="AWS Region to query"),
    profile: str | None = typer.Option(
        None, "--profile", help="Named AWS profile to use"
    ),
    endpoint_url: str | None = typer.Option(
        None,
        "--endpoint-url",
        envvar="LBTREE_ENDPOINT_URL",
        help="Override the AWS endpoint (e.g. a local emulator)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    ctx.obj = AwsSettings(
        region=region, profile=profile, endpoint_url=endpoint_url, verbose=verbose
    )

    if ctx.invoked_subcommand is not None:
        return

    try:
        resource_type = select_resource_type()
    except LbtreeError as e:
        console_err.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if resource_type is None:
        console_err.print("[bold yellow]No resource type selected[/bold yellow]")
        raise typer.Exit(1)

    COMMANDS[resource_type](ctx)


if __name__ == "__main__":
    app()
