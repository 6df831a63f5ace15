import os
import time

import boto3
import pytest
from moto import mock_aws

from lbtree.core.picker import ItemStream, PickerItem

REGION = "us-east-1"


@pytest.fixture(scope="function")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = REGION


@pytest.fixture(scope="function")
def aws_session(aws_credentials):
    with mock_aws():
        yield boto3.Session(region_name=REGION)


class FakePicker:
    """Stands in for the terminal UI: waits for the stream, picks by index."""

    def __init__(self, index: int | None = 0, wait_for_close: bool = True):
        self.index = index
        self.wait_for_close = wait_for_close
        self.items: list[PickerItem] = []

    def run(self, stream: ItemStream) -> PickerItem | None:
        deadline = time.monotonic() + 5
        while time.monotonic() < deadline:
            items, closed = stream.drain()
            self.items.extend(items)
            if closed or (not self.wait_for_close and self.items):
                break
            time.sleep(0.01)

        if self.index is None or self.index >= len(self.items):
            return None
        return self.items[self.index]


@pytest.fixture
def fake_picker():
    return FakePicker
