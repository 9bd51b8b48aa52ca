"""
Unit tests for FacadeConfig.
"""

import pytest

from mdb_facade.config import FacadeConfig
from mdb_facade.exceptions import ConfigurationError

ENV_VARS = (
    "MONGO_URI",
    "DB_NAME",
    "MONGO_MAX_POOL_SIZE",
    "MONGO_MIN_POOL_SIZE",
    "MONGO_SERVER_SELECTION_TIMEOUT_MS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.unit
class TestFacadeConfigSources:
    def test_defaults(self, clean_env):
        config = FacadeConfig()
        assert config.mongo_uri == "mongodb://localhost:27017"
        assert config.db_name == ""
        assert config.max_pool_size == 50
        assert config.min_pool_size == 10
        assert config.server_selection_timeout_ms == 5000

    def test_environment(self, clean_env):
        clean_env.setenv("MONGO_URI", "mongodb+srv://cluster.example")
        clean_env.setenv("DB_NAME", "app")
        clean_env.setenv("MONGO_MAX_POOL_SIZE", "5")
        config = FacadeConfig()
        assert config.mongo_uri == "mongodb+srv://cluster.example"
        assert config.db_name == "app"
        assert config.max_pool_size == 5

    def test_arguments_win_over_environment(self, clean_env):
        clean_env.setenv("DB_NAME", "app")
        clean_env.setenv("MONGO_MIN_POOL_SIZE", "3")
        config = FacadeConfig(db_name="explicit", min_pool_size=0)
        assert config.db_name == "explicit"
        assert config.min_pool_size == 0

    def test_non_integer_environment_value(self, clean_env):
        clean_env.setenv("MONGO_MAX_POOL_SIZE", "many")
        with pytest.raises(ConfigurationError) as exc_info:
            FacadeConfig()
        assert exc_info.value.config_key == "MONGO_MAX_POOL_SIZE"


@pytest.mark.unit
class TestFacadeConfigValidation:
    def test_valid(self, clean_env):
        FacadeConfig().validate()

    @pytest.mark.parametrize(
        "kwargs, key",
        [
            ({"mongo_uri": "postgres://x"}, "mongo_uri"),
            ({"max_pool_size": 0}, "max_pool_size"),
            ({"min_pool_size": -1}, "min_pool_size"),
            ({"max_pool_size": 5, "min_pool_size": 6}, "min_pool_size"),
            ({"server_selection_timeout_ms": 0}, "server_selection_timeout_ms"),
        ],
    )
    def test_invalid(self, clean_env, kwargs, key):
        with pytest.raises(ConfigurationError) as exc_info:
            FacadeConfig(**kwargs).validate()
        assert exc_info.value.config_key == key

    def test_client_options(self, clean_env):
        assert FacadeConfig(max_pool_size=8, min_pool_size=1).client_options() == {
            "maxPoolSize": 8,
            "minPoolSize": 1,
            "serverSelectionTimeoutMS": 5000,
        }
