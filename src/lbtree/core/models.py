from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config

from lbtree.core.errors import NoSelectionError
from lbtree.core.picker import ItemStream, pick
from lbtree.core.present import OutputWriter, PresentView


@dataclass
class AwsSettings:
    """Connection options shared by every command."""

    region: str | None = None
    profile: str | None = None
    endpoint_url: str | None = None
    verbose: bool = False


class BaseAwsClient:
    """Common construction for the boto3 client wrappers."""

    service: str = ""

    def __init__(
        self, session: boto3.Session | None = None, endpoint_url: str | None = None
    ):
        self.retry_config = Config(retries={"mode": "standard", "max_attempts": 3})
        self.session = session or boto3.Session()
        self._client = self.session.client(
            self.service, config=self.retry_config, endpoint_url=endpoint_url
        )


def fan_out(*branches: Callable[[], list[PresentView]]) -> list[list[PresentView]]:
    """
    Runs independent branches of a tree concurrently.

    Results come back in argument order; the first failing branch raises.
    """
    with ThreadPoolExecutor(max_workers=len(branches) or 1) as executor:
        futures = [executor.submit(branch) for branch in branches]
        return [future.result() for future in futures]


class BaseTreeWalker(ABC):
    """Abstract base class for all resource tree walkers."""

    def __init__(
        self,
        session: boto3.Session | None = None,
        settings: AwsSettings | None = None,
    ):
        self.settings = settings or AwsSettings()
        self.session = session or boto3.Session()

    @property
    @abstractmethod
    def resource_label(self) -> str:
        pass

    @abstractmethod
    def walk(self) -> Iterator[PresentView]:
        """Yields the views of the tree in output order."""

    def choose(
        self, prompt: str, producer: Callable[[ItemStream], None], label: str
    ) -> Any:
        selected = pick(prompt, producer)
        if selected is None:
            raise NoSelectionError(f"No {label} selected")
        return selected

    def display(self, writer: OutputWriter) -> None:
        for view in self.walk():
            view.present(writer)
