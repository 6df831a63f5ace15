import threading

import pytest

from lbtree.core.errors import AwsCallError, NoSelectionError
from lbtree.core.models import AwsSettings, BaseAwsClient, BaseTreeWalker, fan_out
from lbtree.core.present import BufferWriter, PresentView


class LineView(PresentView):
    indent = 2

    def content(self):
        return self.resource["text"]


class FakeWalker(BaseTreeWalker):
    resource_label = "thing"

    def walk(self):
        yield LineView({"text": "one"})
        yield LineView({"text": "two"})


def test_fan_out_keeps_argument_order():
    results = fan_out(lambda: ["a"], lambda: ["b"], lambda: ["c"])
    assert results == [["a"], ["b"], ["c"]]


def test_fan_out_runs_branches_concurrently():
    barrier = threading.Barrier(2, timeout=5)

    def branch(name):
        barrier.wait()
        return [name]

    assert fan_out(lambda: branch("x"), lambda: branch("y")) == [["x"], ["y"]]


def test_fan_out_propagates_branch_failure():
    def failing():
        raise AwsCallError("describing target groups", RuntimeError("boom"))

    with pytest.raises(AwsCallError, match="describing target groups"):
        fan_out(lambda: ["ok"], failing)


def test_display_presents_every_view(mocker):
    writer = BufferWriter()
    FakeWalker(session=mocker.Mock()).display(writer)

    assert writer.lines == ["  -> one", "  -> two"]


def test_choose_raises_when_nothing_selected(mocker):
    mocker.patch("lbtree.core.models.pick", return_value=None)
    walker = FakeWalker(session=mocker.Mock())

    with pytest.raises(NoSelectionError, match="No thing selected"):
        walker.choose("Select: ", lambda stream: None, walker.resource_label)


def test_choose_returns_selected_value(mocker):
    mock_pick = mocker.patch("lbtree.core.models.pick", return_value="arn:1")
    walker = FakeWalker(session=mocker.Mock())

    assert walker.choose("Select: ", lambda stream: None, "thing") == "arn:1"
    assert mock_pick.call_args[0][0] == "Select: "


def test_walker_defaults_settings(mocker):
    walker = FakeWalker(session=mocker.Mock())
    assert walker.settings == AwsSettings()


def test_aws_client_passes_endpoint_and_retry_config(mocker):
    session = mocker.Mock()

    class ThingClient(BaseAwsClient):
        service = "things"

    client = ThingClient(session, endpoint_url="http://localhost:4566")

    args, kwargs = session.client.call_args
    assert args == ("things",)
    assert kwargs["endpoint_url"] == "http://localhost:4566"
    assert kwargs["config"].retries["mode"] == "standard"
    assert client._client is session.client.return_value
