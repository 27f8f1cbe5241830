"""Factory functions for creating janitor service instances."""

from typing import Optional

from .client import MailchimpGateway
from .config import PipelineConfig
from .pipeline import ListJanitor


def create_gateway(config: Optional[PipelineConfig] = None) -> MailchimpGateway:
    """Create a Mailchimp gateway.

    Loads configuration from environment variables when none is given.
    The gateway owns its HTTP client; use it as an async context manager.
    """
    return MailchimpGateway(config or PipelineConfig.from_env())


def create_janitor(gateway: MailchimpGateway) -> ListJanitor:
    """Create a janitor bound to the gateway's configuration."""
    return ListJanitor(gateway, gateway.config)
