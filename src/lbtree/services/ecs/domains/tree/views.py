import json
from dataclasses import dataclass

from lbtree.core.present import UNKNOWN, PresentView, fmt


def task_id(task_arn: str | None) -> str:
    if not task_arn:
        return UNKNOWN
    return task_arn.rsplit("/", 1)[-1]


@dataclass
class ContainerInfo:
    """A container definition merged with the state of its running container."""

    name: str
    image: str = UNKNOWN
    command: list[str] | None = None
    last_status: str | None = None


class ClusterView(PresentView):
    indent = 0

    def content(self) -> str:
        cluster = self.resource
        return (
            f'Cluster "{fmt(cluster.get("clusterName"))}" '
            f"status={fmt(cluster.get('status'))} "
            f"services={cluster.get('activeServicesCount', 0)} "
            f"running-tasks={cluster.get('runningTasksCount', 0)} "
            f"pending-tasks={cluster.get('pendingTasksCount', 0)}"
        )


class ServiceView(PresentView):
    indent = 2

    def content(self) -> str:
        service = self.resource
        return (
            f'Service "{fmt(service.get("serviceName"))}" '
            f"status={fmt(service.get('status'))} "
            f"desired={service.get('desiredCount', 0)} "
            f"running={service.get('runningCount', 0)} "
            f"pending={service.get('pendingCount', 0)}"
        )


class TaskView(PresentView):
    indent = 4

    def content(self) -> str:
        task = self.resource
        return (
            f"Task {task_id(task.get('taskArn'))} "
            f"status={fmt(task.get('lastStatus'))} "
            f"desired={fmt(task.get('desiredStatus'))} "
            f"launch-type={fmt(task.get('launchType'))}"
        )


@dataclass
class ContainerView(PresentView):
    container: ContainerInfo | None = None

    indent = 6

    def content(self) -> str:
        container = self.container or ContainerInfo(name=UNKNOWN)
        line = (
            f'Container "{container.name}" image={container.image} '
            f"status={fmt(container.last_status)}"
        )
        if container.command:
            line += f" command={json.dumps(container.command)}"
        return line
