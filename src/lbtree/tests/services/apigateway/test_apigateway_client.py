import pytest
from botocore.exceptions import ClientError

from lbtree.core.errors import AwsCallError
from lbtree.services.apigateway.client import ApiGatewayClient


@pytest.fixture
def apigateway_client_wrapper(mocker):
    mocker.patch("boto3.Session")
    return ApiGatewayClient()


def test_iter_rest_api_pages(apigateway_client_wrapper, mocker):
    mock_paginator = mocker.Mock()
    mock_paginator.paginate.return_value = [
        {"items": [{"id": "a"}]},
        {"items": [{"id": "b"}]},
        {},
    ]
    apigateway_client_wrapper._client.get_paginator.return_value = mock_paginator

    pages = list(apigateway_client_wrapper.iter_rest_api_pages())

    assert pages == [[{"id": "a"}], [{"id": "b"}], []]
    apigateway_client_wrapper._client.get_paginator.assert_called_with("get_rest_apis")


def test_get_resources_embeds_methods(apigateway_client_wrapper, mocker):
    mock_paginator = mocker.Mock()
    mock_paginator.paginate.return_value = [
        {"items": [{"id": "r1", "path": "/"}]},
        {"items": [{"id": "r2", "path": "/pets"}]},
    ]
    apigateway_client_wrapper._client.get_paginator.return_value = mock_paginator

    resources = apigateway_client_wrapper.get_resources("api-1")

    assert [r["id"] for r in resources] == ["r1", "r2"]
    mock_paginator.paginate.assert_called_with(restApiId="api-1", embed=["methods"])


def test_get_rest_api_wraps_errors(apigateway_client_wrapper):
    apigateway_client_wrapper._client.get_rest_api.side_effect = ClientError(
        {"Error": {"Code": "NotFoundException"}}, "GetRestApi"
    )

    with pytest.raises(AwsCallError, match="fetching REST API") as exc_info:
        apigateway_client_wrapper.get_rest_api("missing")

    assert exc_info.value.error_code == "NotFoundException"


def test_get_integration(apigateway_client_wrapper):
    apigateway_client_wrapper._client.get_integration.return_value = {"type": "MOCK"}

    assert apigateway_client_wrapper.get_integration("api", "r1", "GET") == {
        "type": "MOCK"
    }
    apigateway_client_wrapper._client.get_integration.assert_called_with(
        restApiId="api", resourceId="r1", httpMethod="GET"
    )
