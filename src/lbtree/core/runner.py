import logging
import sys
from typing import Any

import boto3
from botocore.exceptions import NoCredentialsError, NoRegionError, ProfileNotFound
from rich.console import Console
from rich.markup import escape

from lbtree.core.errors import AwsCallError, LbtreeError, NoSelectionError
from lbtree.core.models import AwsSettings, BaseTreeWalker
from lbtree.core.present import ConsoleWriter, OutputWriter

console_err = Console(stderr=True)
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool):
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # botocore is chatty at DEBUG and adds nothing at WARNING
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_session(settings: AwsSettings) -> boto3.Session:
    return boto3.Session(profile_name=settings.profile, region_name=settings.region)


def run_display(
    walker_cls: type[BaseTreeWalker],
    settings: AwsSettings,
    writer: OutputWriter | None = None,
    **walker_kwargs: Any,
) -> int:
    setup_logging(settings.verbose)
    writer = writer or ConsoleWriter()

    try:
        session = build_session(settings)
        if not session.region_name:
            raise NoRegionError()

        walker = walker_cls(session=session, settings=settings, **walker_kwargs)
        walker.display(writer)

    except NoSelectionError as e:
        console_err.print(f"[bold yellow]{escape(str(e))}[/bold yellow]")
        return 1
    except ProfileNotFound as e:
        console_err.print(
            f"[bold red]Configuration Error:[/bold red] {escape(str(e))}"
        )
        return 1
    except NoRegionError:
        console_err.print(
            "\n[bold red]Configuration Error:[/bold red] No AWS region specified."
        )
        console_err.print(
            "Please provide a region using the "
            "[green]--region"
            "[/green] flag or set the "
            "[green]AWS_DEFAULT_REGION[/green] environment variable.\n"
        )
        return 1
    except AwsCallError as e:
        if isinstance(e.cause, NoCredentialsError):
            console_err.print(
                "[bold red]Configuration Error:[/bold red] No AWS credentials found."
            )
            return 1
        console_err.print(f"[bold red]AWS Error:[/bold red] {escape(str(e))}")
        return 1
    except LbtreeError as e:
        console_err.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1

    return 0
