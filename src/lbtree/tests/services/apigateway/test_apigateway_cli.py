from unittest import mock

from typer.testing import CliRunner

import lbtree.services.apigateway.cli.tree as tree_module
from lbtree.main import app
from lbtree.services.apigateway.domains.tree.walker import ApiGatewayTreeWalker

runner = CliRunner()


@mock.patch.object(tree_module, "run_display")
def test_api_gateway_passes_api_id(mock_run_display):
    mock_run_display.return_value = 0

    result = runner.invoke(app, ["api-gateway", "-i", "a1b2c3"])

    assert result.exit_code == 0, result.output
    args, kwargs = mock_run_display.call_args
    assert args[0] is ApiGatewayTreeWalker
    assert kwargs == {"api_id": "a1b2c3"}


@mock.patch.object(tree_module, "run_display")
def test_endpoint_url_from_environment(mock_run_display):
    mock_run_display.return_value = 0

    result = runner.invoke(
        app,
        ["api-gateway", "--api-id", "a1b2c3"],
        env={"LBTREE_ENDPOINT_URL": "http://localhost:4566"},
    )

    assert result.exit_code == 0, result.output
    settings = mock_run_display.call_args.args[1]
    assert settings.endpoint_url == "http://localhost:4566"


@mock.patch.object(tree_module, "run_display")
def test_global_options_reach_the_command(mock_run_display):
    mock_run_display.return_value = 0

    runner.invoke(
        app,
        ["--profile", "prod", "--verbose", "--endpoint-url", "http://x", "api-gateway"],
    )

    settings = mock_run_display.call_args.args[1]
    assert settings.profile == "prod"
    assert settings.verbose is True
    assert settings.endpoint_url == "http://x"
    assert mock_run_display.call_args.kwargs == {"api_id": None}
