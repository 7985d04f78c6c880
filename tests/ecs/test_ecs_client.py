"""Tests for ECS client construction and console links."""

from unittest.mock import MagicMock, patch

import pytest

from ecs_runtask.core.config import AGENT
from ecs_runtask.ecs.client import client_region, console_hostname, console_url, create_ecs_client


class TestConsoleLinks:
    @pytest.mark.parametrize(
        "region, host",
        [
            ("us-east-1", "console.aws.amazon.com"),
            ("eu-west-1", "console.aws.amazon.com"),
            ("cn-north-1", "console.amazonaws.cn"),
            ("cn-northwest-1", "console.amazonaws.cn"),
        ],
    )
    def test_hostname(self, region, host):
        assert console_hostname(region) == host

    def test_url(self):
        assert console_url("us-east-1", "ci") == (
            "https://console.aws.amazon.com/ecs/home?region=us-east-1#/clusters/ci/tasks"
        )

    def test_china_url(self):
        assert console_url("cn-north-1", "ci").startswith("https://console.amazonaws.cn/ecs/home?region=cn-north-1")


class TestCreateEcsClient:
    @patch("ecs_runtask.ecs.client.boto3.client")
    def test_user_agent_and_region(self, mock_client):
        client = create_ecs_client(region="eu-west-1")

        assert client is mock_client.return_value
        kwargs = mock_client.call_args.kwargs
        assert kwargs["service_name"] == "ecs"
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["config"].user_agent_extra == AGENT

    @patch("ecs_runtask.ecs.client.boto3.client")
    def test_region_from_environment(self, mock_client):
        create_ecs_client()
        assert "region_name" not in mock_client.call_args.kwargs


class TestClientRegion:
    def test_region(self):
        client = MagicMock()
        client.meta.region_name = "cn-north-1"
        assert client_region(client) == "cn-north-1"

    def test_unset_region(self):
        client = MagicMock()
        client.meta.region_name = None
        assert client_region(client) == ""
