import logging
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from lbtree.core.errors import AwsCallError
from lbtree.core.models import BaseTreeWalker
from lbtree.core.picker import ItemStream, PickerItem
from lbtree.core.present import PresentView
from lbtree.services.apigateway.client import ApiGatewayClient
from lbtree.services.apigateway.domains.tree.views import (
    IntegrationView,
    MethodView,
    ResourceView,
    RestApiView,
)

logger = logging.getLogger(__name__)

INTEGRATION_WORKERS = 8


class ApiGatewayTreeWalker(BaseTreeWalker):
    resource_label = "REST API"

    def __init__(self, session=None, settings=None, api_id=None):
        super().__init__(session, settings)
        self.api_id = api_id
        self.client = ApiGatewayClient(self.session, self.settings.endpoint_url)

    def stream_rest_apis(self, stream: ItemStream) -> None:
        for page in self.client.iter_rest_api_pages():
            for api in page:
                item = PickerItem(
                    display=f"{api.get('name', 'unknown')} ({api.get('id', '')})",
                    value=api.get("id", ""),
                )
                if not stream.send(item):
                    return

    def walk(self) -> Iterator[PresentView]:
        api_id = self.api_id or self.choose(
            "Select REST API: ", self.stream_rest_apis, self.resource_label
        )

        yield RestApiView(self.client.get_rest_api(api_id))

        resources = sorted(
            self.client.get_resources(api_id), key=lambda r: r.get("path", "/")
        )
        for resource in resources:
            yield ResourceView(resource)

            methods = sorted(resource.get("resourceMethods", {}).items())
            integrations = self.fetch_integrations(
                api_id, resource, [http_method for http_method, _ in methods]
            )

            for (http_method, method), integration in zip(
                methods, integrations, strict=True
            ):
                yield MethodView({"httpMethod": http_method, **(method or {})})
                if integration is not None:
                    yield IntegrationView(integration)

    def fetch_integrations(
        self, api_id: str, resource: dict[str, Any], http_methods: list[str]
    ) -> list[dict[str, Any] | None]:
        if not http_methods:
            return []

        with ThreadPoolExecutor(
            max_workers=min(INTEGRATION_WORKERS, len(http_methods))
        ) as executor:
            return list(
                executor.map(
                    lambda http_method: self.integration_or_none(
                        api_id, resource, http_method
                    ),
                    http_methods,
                )
            )

    def integration_or_none(
        self, api_id: str, resource: dict[str, Any], http_method: str
    ) -> dict[str, Any] | None:
        """
        Some methods have no integration; that is reported, not fatal.
        """
        try:
            return self.client.get_integration(
                api_id, resource.get("id", ""), http_method
            )
        except AwsCallError as e:
            logger.warning(
                f"Could not fetch integration for "
                f"{resource.get('path', 'unknown')} {http_method}: {e.cause}"
            )
            return None
