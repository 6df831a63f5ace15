import logging
from collections.abc import Iterator

from lbtree.core.models import BaseTreeWalker, fan_out
from lbtree.core.picker import ItemStream, PickerItem
from lbtree.core.present import PresentView
from lbtree.services.alb.client import ElbV2Client
from lbtree.services.alb.domains.tree.views import (
    ActionView,
    ListenerView,
    LoadBalancerView,
    RuleView,
    TargetGroupView,
    TargetView,
)

logger = logging.getLogger(__name__)


class AlbTreeWalker(BaseTreeWalker):
    resource_label = "load balancer"

    def __init__(self, session=None, settings=None, load_balancer_arn=None):
        super().__init__(session, settings)
        self.load_balancer_arn = load_balancer_arn
        self.client = ElbV2Client(self.session, self.settings.endpoint_url)

    def stream_load_balancers(self, stream: ItemStream) -> None:
        for page in self.client.iter_load_balancer_pages():
            for lb in page:
                item = PickerItem(
                    display=(
                        f"{lb.get('LoadBalancerName', 'unknown')} "
                        f"({lb.get('DNSName', 'unknown')})"
                    ),
                    value=lb.get("LoadBalancerArn", ""),
                )
                if not stream.send(item):
                    return

    def walk(self) -> Iterator[PresentView]:
        arn = self.load_balancer_arn or self.choose(
            "Select load balancer: ", self.stream_load_balancers, self.resource_label
        )

        yield LoadBalancerView(self.client.describe_load_balancer(arn))

        listener_views, target_group_views = fan_out(
            lambda: self.listener_branch(arn),
            lambda: self.target_group_branch(arn),
        )
        yield from listener_views
        yield from target_group_views

    def listener_branch(self, arn: str) -> list[PresentView]:
        views: list[PresentView] = []
        for listener in self.client.describe_listeners(arn):
            views.append(ListenerView(listener))

            listener_arn = listener.get("ListenerArn")
            if not listener_arn:
                continue

            for rule in self.client.describe_rules(listener_arn):
                views.append(RuleView(rule))
                views.extend(
                    ActionView(action)
                    for action in sorted(
                        rule.get("Actions", []), key=lambda a: a.get("Order", 0)
                    )
                )

        logger.debug(f"Listener branch of {arn}: {len(views)} nodes")
        return views

    def target_group_branch(self, arn: str) -> list[PresentView]:
        views: list[PresentView] = []
        for target_group in self.client.describe_target_groups(arn):
            views.append(TargetGroupView(target_group))

            target_group_arn = target_group.get("TargetGroupArn")
            if not target_group_arn:
                continue

            views.extend(
                TargetView(target)
                for target in self.client.describe_target_health(target_group_arn)
            )

        logger.debug(f"Target group branch of {arn}: {len(views)} nodes")
        return views
