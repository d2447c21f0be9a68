"""
Infrastructure module exports.

Configuration and bootstrap for the store backend and flow forwarder.
"""

from .config import InfraConfig, get_config, StoreBackendType
from .bootstrap import AppContext, InfraBootstrap, bootstrap_infrastructure, get_app_context

__all__ = [
    "InfraConfig",
    "get_config",
    "StoreBackendType",
    "AppContext",
    "InfraBootstrap",
    "bootstrap_infrastructure",
    "get_app_context",
]
