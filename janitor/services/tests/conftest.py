"""Shared pytest fixtures for janitor/services tests."""

import pytest

from janitor.services.mailchimp.config import PipelineConfig
from janitor.services.mailchimp.models import RemoteError


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    """Config pointing at a fake Mailchimp host with small pages."""
    return PipelineConfig(
        base_url="https://us2.api.mailchimp.test",
        list_id="list-id",
        api_key="api-key-123456789",
        page_size=2,
        max_concurrency=8,
    )


@pytest.fixture
def remote_error() -> RemoteError:
    """A representative Mailchimp 400 error body."""
    return RemoteError(type="t", title="Bad", status=400, detail="x")
