"""Pipeline configuration, resolved once and never mutated."""

from dataclasses import dataclass
from typing import Any

from janitor.lib.config_manager import config as config_manager
from janitor.lib.defaults import get_default

DEFAULT_PAGE_SIZE: int = get_default("JANITOR_PAGE_SIZE")
DEFAULT_MAX_CONCURRENCY: int = get_default("JANITOR_MAX_CONCURRENCY")
DEFAULT_TIMEOUT: float = get_default("JANITOR_TIMEOUT")


@dataclass(frozen=True, repr=False)
class PipelineConfig:
    """Connection and tuning settings for one janitor run.

    Attributes:
        base_url: Mailchimp API root, e.g. https://us2.api.mailchimp.com
        list_id: Audience (list) to clean up
        api_key: Mailchimp API key, sent as the Basic auth password
        page_size: Members requested per listing page
        max_concurrency: Upper bound on archive requests in flight
        timeout: Per-request timeout in seconds
    """

    base_url: str
    list_id: str
    api_key: str
    page_size: int = DEFAULT_PAGE_SIZE
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        for name in ("base_url", "list_id", "api_key"):
            if not getattr(self, name):
                raise ValueError(f"{name} must not be empty")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> "PipelineConfig":
        """Build a config from the environment (.env → defaults).

        Keyword overrides that are not None win over the environment.

        Raises:
            ValueError: If a required setting is missing or out of range
        """
        values: dict[str, Any] = {
            "base_url": config_manager.get("MAILCHIMP_BASE_URL"),
            "list_id": config_manager.get("MAILCHIMP_LIST_ID"),
            "api_key": config_manager.get("MAILCHIMP_API_KEY"),
            "page_size": config_manager.get("JANITOR_PAGE_SIZE"),
            "max_concurrency": config_manager.get("JANITOR_MAX_CONCURRENCY"),
            "timeout": config_manager.get("JANITOR_TIMEOUT"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def masked_api_key(self) -> str:
        return config_manager.mask_value("MAILCHIMP_API_KEY", self.api_key)

    def __repr__(self) -> str:
        return (
            f"PipelineConfig(base_url={self.base_url!r}, list_id={self.list_id!r}, "
            f"api_key={self.masked_api_key()!r}, page_size={self.page_size}, "
            f"max_concurrency={self.max_concurrency}, timeout={self.timeout})"
        )
