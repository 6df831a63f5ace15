from collections.abc import Iterator
from typing import Any

from lbtree.core.errors import ResourceNotFoundError, aws_call
from lbtree.core.models import BaseAwsClient


def rule_sort_key(rule: dict[str, Any]) -> tuple[int, int]:
    """Numeric priorities first, the default rule last."""
    priority = str(rule.get("Priority", "default"))
    if rule.get("IsDefault") or not priority.isdigit():
        return (1, 0)
    return (0, int(priority))


class ElbV2Client(BaseAwsClient):
    """
    Wrapper for Boto3 Elastic Load Balancing v2 interactions.
    """

    service = "elbv2"

    @aws_call("fetching load balancers page")
    def iter_load_balancer_pages(self) -> Iterator[list[dict[str, Any]]]:
        """
        Yields load balancers one page at a time, as AWS returns them.
        """
        paginator = self._client.get_paginator("describe_load_balancers")
        for page in paginator.paginate():
            yield page.get("LoadBalancers", [])

    @aws_call("describing load balancer")
    def describe_load_balancer(self, arn: str) -> dict[str, Any]:
        response = self._client.describe_load_balancers(LoadBalancerArns=[arn])
        load_balancers = response.get("LoadBalancers", [])
        if not load_balancers:
            raise ResourceNotFoundError(f"Load balancer not found: {arn}")
        return load_balancers[0]

    @aws_call("describing listeners for load balancer")
    def describe_listeners(self, load_balancer_arn: str) -> list[dict[str, Any]]:
        paginator = self._client.get_paginator("describe_listeners")
        listeners = []
        for page in paginator.paginate(LoadBalancerArn=load_balancer_arn):
            listeners.extend(page.get("Listeners", []))
        return listeners

    @aws_call("describing rules for listener")
    def describe_rules(self, listener_arn: str) -> list[dict[str, Any]]:
        rules = []
        kwargs = {"ListenerArn": listener_arn}
        while True:
            response = self._client.describe_rules(**kwargs)
            rules.extend(response.get("Rules", []))
            marker = response.get("NextMarker")
            if not marker:
                break
            kwargs["Marker"] = marker
        return sorted(rules, key=rule_sort_key)

    @aws_call("describing target groups")
    def describe_target_groups(self, load_balancer_arn: str) -> list[dict[str, Any]]:
        paginator = self._client.get_paginator("describe_target_groups")
        target_groups = []
        for page in paginator.paginate(LoadBalancerArn=load_balancer_arn):
            target_groups.extend(page.get("TargetGroups", []))
        return target_groups

    @aws_call("describing targets in target group")
    def describe_target_health(self, target_group_arn: str) -> list[dict[str, Any]]:
        response = self._client.describe_target_health(
            TargetGroupArn=target_group_arn
        )
        return response.get("TargetHealthDescriptions", [])
