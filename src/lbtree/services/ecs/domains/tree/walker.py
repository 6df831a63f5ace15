import logging
import threading
from collections.abc import Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Any

from lbtree.core.models import BaseTreeWalker
from lbtree.core.picker import ItemStream, PickerItem
from lbtree.core.present import UNKNOWN, PresentView
from lbtree.services.ecs.client import EcsClient
from lbtree.services.ecs.domains.tree.views import (
    ClusterView,
    ContainerInfo,
    ContainerView,
    ServiceView,
    TaskView,
)

logger = logging.getLogger(__name__)

TASK_DEFINITION_WORKERS = 4


def container_definitions(task_definition: dict[str, Any]) -> dict[str, ContainerInfo]:
    definitions = {}
    for container_def in task_definition.get("containerDefinitions", []):
        name = container_def.get("name", UNKNOWN)
        definitions[name] = ContainerInfo(
            name=name,
            image=container_def.get("image", UNKNOWN),
            command=container_def.get("command") or None,
        )
    return definitions


class TaskDefinitionCache:
    """
    Container definitions per task definition ARN, fetched once per run.

    Lookups return futures so that distinct definitions load concurrently.
    """

    def __init__(self, client: EcsClient, executor: ThreadPoolExecutor):
        self.client = client
        self.executor = executor
        self._futures: dict[str, Future] = {}
        self._lock = threading.Lock()

    def get(self, task_definition_arn: str) -> Future:
        with self._lock:
            future = self._futures.get(task_definition_arn)
            if future is None:
                logger.debug(f"Fetching task definition {task_definition_arn}")
                future = self.executor.submit(self._load, task_definition_arn)
                self._futures[task_definition_arn] = future
            return future

    def _load(self, task_definition_arn: str) -> dict[str, ContainerInfo]:
        return container_definitions(
            self.client.describe_task_definition(task_definition_arn)
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._futures)


class EcsTreeWalker(BaseTreeWalker):
    resource_label = "ECS service"

    def __init__(self, session=None, settings=None, cluster=None, service=None):
        super().__init__(session, settings)
        self.cluster = cluster
        self.service = service
        self.client = EcsClient(self.session, self.settings.endpoint_url)

    def stream_clusters(self, stream: ItemStream) -> None:
        for page in self.client.iter_cluster_pages():
            for cluster in page:
                item = PickerItem(
                    display=(
                        f"{cluster.get('clusterName', 'unknown')} "
                        f"({cluster.get('status', 'unknown')})"
                    ),
                    value=cluster.get("clusterArn", ""),
                )
                if not stream.send(item):
                    return

    def stream_services(self, cluster: str):
        def produce(stream: ItemStream) -> None:
            for page in self.client.iter_service_pages(cluster):
                for service in page:
                    item = PickerItem(
                        display=(
                            f"{service.get('serviceName', 'unknown')} "
                            f"({service.get('status', 'unknown')}) "
                            f"{service.get('runningCount', 0)}/"
                            f"{service.get('desiredCount', 0)}"
                        ),
                        value=service.get("serviceArn", ""),
                    )
                    if not stream.send(item):
                        return

        return produce

    def walk(self) -> Iterator[PresentView]:
        cluster_arn = self.cluster or self.choose(
            "Select cluster: ", self.stream_clusters, "cluster"
        )
        cluster = self.client.describe_cluster(cluster_arn)
        yield ClusterView(cluster)

        service_arn = self.service or self.choose(
            "Select service: ", self.stream_services(cluster_arn), "service"
        )
        service = self.client.describe_service(cluster_arn, service_arn)
        yield ServiceView(service)

        task_arns = self.client.list_tasks(
            cluster_arn, service.get("serviceName", "")
        )
        if not task_arns:
            return

        tasks = self.client.describe_tasks(cluster_arn, task_arns)

        with ThreadPoolExecutor(max_workers=TASK_DEFINITION_WORKERS) as executor:
            cache = TaskDefinitionCache(self.client, executor)
            pending = []
            for task in tasks:
                definition_arn = task.get("taskDefinitionArn")
                future = cache.get(definition_arn) if definition_arn else None
                pending.append((task, future))

            for task, definitions in pending:
                yield TaskView(task)
                if definitions is not None:
                    yield from self.container_views(task, definitions.result())

    def container_views(
        self, task: dict[str, Any], definitions: dict[str, ContainerInfo]
    ) -> Iterator[ContainerView]:
        for container in task.get("containers", []):
            name = container.get("name", UNKNOWN)
            info = definitions.get(name) or ContainerInfo(name=name)
            yield ContainerView(
                container=replace(info, last_status=container.get("lastStatus"))
            )
