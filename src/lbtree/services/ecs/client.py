from collections.abc import Iterator
from typing import Any

from lbtree.core.errors import ResourceNotFoundError, aws_call
from lbtree.core.models import BaseAwsClient

DESCRIBE_TASKS_BATCH = 100


class EcsClient(BaseAwsClient):
    """
    Wrapper for Boto3 ECS interactions.
    """

    service = "ecs"

    @aws_call("fetching clusters page")
    def iter_cluster_pages(self) -> Iterator[list[dict[str, Any]]]:
        """
        Yields described clusters one listing page at a time.
        """
        paginator = self._client.get_paginator("list_clusters")
        for page in paginator.paginate():
            cluster_arns = page.get("clusterArns", [])
            if not cluster_arns:
                continue
            response = self._client.describe_clusters(clusters=cluster_arns)
            yield response.get("clusters", [])

    @aws_call("describing cluster")
    def describe_cluster(self, cluster: str) -> dict[str, Any]:
        response = self._client.describe_clusters(clusters=[cluster])
        clusters = response.get("clusters", [])
        if not clusters:
            raise ResourceNotFoundError(f"Cluster not found: {cluster}")
        return clusters[0]

    @aws_call("fetching services page")
    def iter_service_pages(self, cluster: str) -> Iterator[list[dict[str, Any]]]:
        paginator = self._client.get_paginator("list_services")
        for page in paginator.paginate(cluster=cluster):
            service_arns = page.get("serviceArns", [])
            if not service_arns:
                continue
            response = self._client.describe_services(
                cluster=cluster, services=service_arns
            )
            yield response.get("services", [])

    @aws_call("describing service")
    def describe_service(self, cluster: str, service: str) -> dict[str, Any]:
        response = self._client.describe_services(cluster=cluster, services=[service])
        services = response.get("services", [])
        if not services:
            raise ResourceNotFoundError(f"Service not found: {service}")
        return services[0]

    @aws_call("listing tasks")
    def list_tasks(self, cluster: str, service_name: str) -> list[str]:
        paginator = self._client.get_paginator("list_tasks")
        task_arns = []
        for page in paginator.paginate(cluster=cluster, serviceName=service_name):
            task_arns.extend(page.get("taskArns", []))
        return task_arns

    @aws_call("describing tasks")
    def describe_tasks(self, cluster: str, task_arns: list[str]) -> list[dict[str, Any]]:
        tasks = []
        for start in range(0, len(task_arns), DESCRIBE_TASKS_BATCH):
            response = self._client.describe_tasks(
                cluster=cluster, tasks=task_arns[start : start + DESCRIBE_TASKS_BATCH]
            )
            tasks.extend(response.get("tasks", []))
        return tasks

    @aws_call("describing task definition")
    def describe_task_definition(self, task_definition_arn: str) -> dict[str, Any]:
        response = self._client.describe_task_definition(
            taskDefinition=task_definition_arn
        )
        return response.get("taskDefinition", {})
