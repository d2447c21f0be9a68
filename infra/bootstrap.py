"""
Infrastructure initialization and bootstrap.

Builds the AppContext every handler receives: store handle, global
secret, flow forwarder. Singleton pattern - single instance per process.
"""

from dataclasses import dataclass
from typing import Optional

from store import ConfigStore
from students import ConfigEditor, RegistrationService
from transport.whatsapp.forwarder import FlowForwarder
from transport.whatsapp.relay import WebhookRelay

from .config import InfraConfig, get_config


@dataclass
class AppContext:
    """Explicit per-request environment. No handler reads globals."""

    store: ConfigStore
    webhook_verify_token: str
    forwarder: FlowForwarder

    def registration(self) -> RegistrationService:
        return RegistrationService(self.store)

    def editor(self) -> ConfigEditor:
        return ConfigEditor(self.store, self.webhook_verify_token)

    def relay(self) -> WebhookRelay:
        return WebhookRelay(self.store, self.forwarder)


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(self, config: Optional[InfraConfig] = None):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.context = AppContext(
            store=self.config.create_store(),
            webhook_verify_token=self.config.webhook_verify_token,
            forwarder=self.config.create_forwarder(),
        )

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    async def shutdown(self) -> None:
        await self.context.store.close()

    def __repr__(self) -> str:
        return (
            f"InfraBootstrap(store={self.config.store_backend}, "
            f"flow_timeout={self.config.flow_timeout_seconds}s, "
            f"verify_token={'set' if self.config.webhook_verify_token else 'missing'})"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """Bootstrap all infrastructure backends."""
    return InfraBootstrap.get_instance(config)


def get_app_context() -> AppContext:
    """FastAPI dependency: the process-wide AppContext."""
    return InfraBootstrap.get_instance().context
