import json
from typing import Any

from lbtree.core.present import PresentView, fmt

CONDITION_CONFIG_KEYS = {
    "host-header": "HostHeaderConfig",
    "path-pattern": "PathPatternConfig",
    "http-request-method": "HttpRequestMethodConfig",
    "source-ip": "SourceIpConfig",
}


def target_group_name(arn: str) -> str:
    """
    arn:aws:elasticloadbalancing:region:account:targetgroup/<name>/<id>
    """
    parts = arn.split(":")[-1].split("/")
    return parts[1] if len(parts) > 1 else arn


class LoadBalancerView(PresentView):
    indent = 0

    def content(self) -> str:
        lb = self.resource
        return (
            f'Load balancer "{fmt(lb.get("LoadBalancerName"))}" '
            f"({fmt(lb.get('DNSName'))}) "
            f"scheme={fmt(lb.get('Scheme'))} "
            f"state={fmt(lb.get('State', {}).get('Code'))}"
        )


class ListenerView(PresentView):
    indent = 2

    def content(self) -> str:
        return (
            f"Listener protocol={fmt(self.resource.get('Protocol'))} "
            f"port={fmt(self.resource.get('Port'))}"
        )


class RuleView(PresentView):
    indent = 4

    def content(self) -> str:
        rule = self.resource
        line = (
            f"Rule priority={fmt(rule.get('Priority'))} "
            f"is-default={fmt(bool(rule.get('IsDefault')))}"
        )
        conditions = [self._condition(c) for c in rule.get("Conditions", [])]
        if conditions:
            line += f" conditions={';'.join(conditions)}"
        return line

    @staticmethod
    def _condition(condition: dict[str, Any]) -> str:
        field = condition.get("Field", "unknown")

        if field == "query-string":
            pairs = condition.get("QueryStringConfig", {}).get("Values", [])
            values = [
                f"{pair['Key']}={pair.get('Value', '')}"
                if pair.get("Key")
                else pair.get("Value", "")
                for pair in pairs
            ]
            return f"{field}={','.join(values)}"

        if field == "http-header":
            config = condition.get("HttpHeaderConfig", {})
            name = fmt(config.get("HttpHeaderName"))
            return f"{field}={name}:{','.join(config.get('Values', []))}"

        values = condition.get("Values")
        if not values:
            config_key = CONDITION_CONFIG_KEYS.get(field)
            config = condition.get(config_key, {}) if config_key else {}
            values = config.get("Values", [])
        return f"{field}={','.join(str(value) for value in values)}"


class ActionView(PresentView):
    indent = 6

    def content(self) -> str:
        action_type = self.resource.get("Type", "unknown")
        formatter = {
            "forward": self._forward,
            "fixed-response": self._fixed_response,
            "redirect": self._redirect,
            "authenticate-cognito": self._authenticate_cognito,
            "authenticate-oidc": self._authenticate_oidc,
        }.get(action_type)

        if formatter is None:
            return f"Action ({action_type})"
        return f"Action ({action_type}) {formatter()}".rstrip()

    def _forward(self) -> str:
        groups = self.resource.get("ForwardConfig", {}).get("TargetGroups", [])
        if not groups and self.resource.get("TargetGroupArn"):
            groups = [{"TargetGroupArn": self.resource["TargetGroupArn"]}]

        weighted = len(groups) > 1
        names = []
        for group in groups:
            name = target_group_name(group.get("TargetGroupArn", ""))
            if weighted:
                name = f"{name}:{fmt(group.get('Weight'))}"
            names.append(name)
        return f"target-groups={','.join(names)}" if names else ""

    def _fixed_response(self) -> str:
        config = self.resource.get("FixedResponseConfig", {})
        body = config.get("MessageBody")
        message = json.dumps(body) if body is not None else "None"
        return f"msg={message} status-code={fmt(config.get('StatusCode'))}"

    def _redirect(self) -> str:
        config = self.resource.get("RedirectConfig", {})
        location = (
            f"{config.get('Protocol', '#{protocol}')}://"
            f"{config.get('Host', '#{host}')}:"
            f"{config.get('Port', '#{port}')}"
            f"{config.get('Path', '/#{path}')}"
            f"?{config.get('Query', '#{query}')}"
        )
        return f"status-code={fmt(config.get('StatusCode'))} location={location}"

    def _authenticate_cognito(self) -> str:
        config = self.resource.get("AuthenticateCognitoConfig", {})
        return f"user-pool={fmt(config.get('UserPoolArn'))}"

    def _authenticate_oidc(self) -> str:
        config = self.resource.get("AuthenticateOidcConfig", {})
        return f"issuer={fmt(config.get('Issuer'))}"


class TargetGroupView(PresentView):
    indent = 2

    def content(self) -> str:
        tg = self.resource
        return (
            f'Target group "{fmt(tg.get("TargetGroupName"), "??")}" '
            f"protocol={fmt(tg.get('Protocol'))} "
            f"port={fmt(tg.get('Port'))} "
            f"target-type={fmt(tg.get('TargetType'))}"
        )


class TargetView(PresentView):
    indent = 4

    def content(self) -> str:
        target = self.resource.get("Target", {})
        health = self.resource.get("TargetHealth", {}).get("State")
        return (
            f"Target id={fmt(target.get('Id'))} "
            f"port={fmt(target.get('Port'))} "
            f"health={fmt(health)}"
        )
