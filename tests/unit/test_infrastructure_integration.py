"""
Test suite for infrastructure integration.

Verifies:
- Configuration system reads the environment
- Each store backend can be selected
- Bootstrap builds the AppContext once per process
"""

import pytest

from infra import InfraBootstrap, InfraConfig
from infra.bootstrap import AppContext, get_app_context
from store import InMemoryConfigStore, RedisConfigStore, SQLiteConfigStore
from students import ConfigEditor, RegistrationService
from transport.whatsapp.forwarder import DEFAULT_USER_AGENT, FlowForwarder
from transport.whatsapp.relay import WebhookRelay


@pytest.fixture
def clean_env(monkeypatch):
    for name in [
        "WEBHOOK_VERIFY_TOKEN",
        "STORE_BACKEND",
        "SQLITE_DB_PATH",
        "REDIS_URL",
        "REDIS_KEY_PREFIX",
        "FLOW_TIMEOUT_SECONDS",
        "FLOW_USER_AGENT",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_bootstrap():
    InfraBootstrap.reset()
    yield
    InfraBootstrap.reset()


class TestInfraConfig:
    """Test infrastructure configuration."""

    def test_config_from_env_defaults(self, clean_env):
        """Verify defaults are a single local node."""
        config = InfraConfig.from_env()

        assert config.webhook_verify_token == ""
        assert config.store_backend == "sqlite"
        assert config.sqlite_db_path == "./student_configs.db"
        assert config.flow_timeout_seconds == 30.0
        assert config.flow_user_agent == DEFAULT_USER_AGENT

    def test_config_reads_environment(self, clean_env):
        clean_env.setenv("WEBHOOK_VERIFY_TOKEN", "s3cret")
        clean_env.setenv("STORE_BACKEND", "REDIS")
        clean_env.setenv("REDIS_KEY_PREFIX", "students:")
        clean_env.setenv("FLOW_TIMEOUT_SECONDS", "5")

        config = InfraConfig.from_env()

        assert config.webhook_verify_token == "s3cret"
        assert config.store_backend == "redis"
        assert config.redis_key_prefix == "students:"
        assert config.flow_timeout_seconds == 5.0

    def test_config_creates_memory_store(self, clean_env):
        config = InfraConfig.from_env()
        config.store_backend = "memory"  # type: ignore

        assert isinstance(config.create_store(), InMemoryConfigStore)

    def test_config_creates_sqlite_store(self, clean_env, tmp_path):
        config = InfraConfig.from_env()
        config.sqlite_db_path = str(tmp_path / "configs.db")

        assert isinstance(config.create_store(), SQLiteConfigStore)

    def test_config_creates_redis_store(self, clean_env):
        """Client is lazy; no server needed to construct it."""
        config = InfraConfig.from_env()
        config.store_backend = "redis"  # type: ignore
        config.redis_key_prefix = "students:"

        store = config.create_store()

        assert isinstance(store, RedisConfigStore)
        assert store.key_prefix == "students:"

    def test_config_rejects_unknown_backend(self, clean_env):
        config = InfraConfig.from_env()
        config.store_backend = "mongo"  # type: ignore

        with pytest.raises(ValueError):
            config.create_store()

    def test_config_creates_forwarder(self, clean_env):
        clean_env.setenv("FLOW_TIMEOUT_SECONDS", "12.5")
        clean_env.setenv("FLOW_USER_AGENT", "custom/1")

        forwarder = InfraConfig.from_env().create_forwarder()

        assert isinstance(forwarder, FlowForwarder)
        assert forwarder.timeout == 12.5
        assert forwarder.user_agent == "custom/1"


class TestInfraBootstrap:
    """Test infrastructure bootstrap."""

    def make_config(self, clean_env):
        clean_env.setenv("STORE_BACKEND", "memory")
        clean_env.setenv("WEBHOOK_VERIFY_TOKEN", "global-secret")
        return InfraConfig.from_env()

    def test_bootstrap_builds_context(self, clean_env):
        bootstrap = InfraBootstrap.get_instance(self.make_config(clean_env))

        context = bootstrap.context
        assert isinstance(context, AppContext)
        assert isinstance(context.store, InMemoryConfigStore)
        assert context.webhook_verify_token == "global-secret"

    def test_bootstrap_singleton(self, clean_env):
        first = InfraBootstrap.get_instance(self.make_config(clean_env))
        second = InfraBootstrap.get_instance()

        assert first is second
        assert get_app_context() is first.context

    def test_reset_builds_fresh_instance(self, clean_env):
        first = InfraBootstrap.get_instance(self.make_config(clean_env))
        InfraBootstrap.reset()

        assert InfraBootstrap.get_instance(self.make_config(clean_env)) is not first

    def test_context_factories_share_the_store(self, clean_env):
        context = InfraBootstrap.get_instance(self.make_config(clean_env)).context

        registration = context.registration()
        editor = context.editor()
        relay = context.relay()

        assert isinstance(registration, RegistrationService)
        assert isinstance(editor, ConfigEditor)
        assert isinstance(relay, WebhookRelay)
        assert registration.store is editor.store is relay.store is context.store

    def test_repr_hides_secret(self, clean_env):
        bootstrap = InfraBootstrap.get_instance(self.make_config(clean_env))

        assert "global-secret" not in repr(bootstrap)
        assert "verify_token=set" in repr(bootstrap)

    @pytest.mark.asyncio
    async def test_shutdown_closes_store(self, clean_env):
        bootstrap = InfraBootstrap.get_instance(self.make_config(clean_env))

        await bootstrap.shutdown()
