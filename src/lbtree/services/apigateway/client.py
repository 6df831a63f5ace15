from collections.abc import Iterator
from typing import Any

from lbtree.core.errors import aws_call
from lbtree.core.models import BaseAwsClient


class ApiGatewayClient(BaseAwsClient):
    """
    Wrapper for Boto3 API Gateway (REST APIs) interactions.
    """

    service = "apigateway"

    @aws_call("fetching REST APIs")
    def iter_rest_api_pages(self) -> Iterator[list[dict[str, Any]]]:
        paginator = self._client.get_paginator("get_rest_apis")
        for page in paginator.paginate():
            yield page.get("items", [])

    @aws_call("fetching REST API")
    def get_rest_api(self, api_id: str) -> dict[str, Any]:
        return self._client.get_rest_api(restApiId=api_id)

    @aws_call("fetching resources")
    def get_resources(self, api_id: str) -> list[dict[str, Any]]:
        """
        All resources of the API, with their methods embedded.
        """
        paginator = self._client.get_paginator("get_resources")
        resources = []
        for page in paginator.paginate(restApiId=api_id, embed=["methods"]):
            resources.extend(page.get("items", []))
        return resources

    @aws_call("fetching integration")
    def get_integration(
        self, api_id: str, resource_id: str, http_method: str
    ) -> dict[str, Any]:
        return self._client.get_integration(
            restApiId=api_id, resourceId=resource_id, httpMethod=http_method
        )
