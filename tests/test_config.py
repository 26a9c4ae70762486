"""Test configuration reading from multiple sources."""

import os
from datetime import timedelta
from unittest.mock import patch

from folio.configs.config import (
    AppConfig,
    get_api_config,
    get_app_config,
    get_chat_config,
    get_llm_config,
)


class TestConfigSources:
    def test_yaml_defaults_loaded(self):
        config = AppConfig()

        assert config.api.chat_rate_limit_per_window == 30
        assert config.api.chat_rate_limit_window == timedelta(seconds=60)
        assert config.chat.max_message_length == 500
        assert config.context.fetch_timeout == timedelta(seconds=5)
        assert config.llm.max_tokens == 250

    def test_env_vars_override_yaml(self):
        env_vars = {
            "FOLIO_API__CHAT_RATE_LIMIT_PER_WINDOW": "10",
            "FOLIO_CHAT__MAX_MESSAGE_LENGTH": "200",
            "FOLIO_LLM__PROVIDER": "openai",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            config = AppConfig()

        assert config.api.chat_rate_limit_per_window == 10
        assert config.chat.max_message_length == 200
        assert config.llm.provider == "openai"

    def test_api_key_is_secret(self):
        with patch.dict(os.environ, {"FOLIO_LLM__API_KEY": "sk-live"}, clear=False):
            config = AppConfig()

        assert config.llm.api_key.get_secret_value() == "sk-live"
        assert "sk-live" not in repr(config.llm)

    def test_get_app_config_is_not_cached(self):
        first = get_app_config()
        with patch.dict(
            os.environ, {"FOLIO_API__CHAT_RATE_LIMIT_PER_WINDOW": "5"}, clear=False
        ):
            second = get_app_config()

        assert first is not second
        assert second.api.chat_rate_limit_per_window == 5

    def test_section_helpers(self):
        assert get_api_config().chat_rate_limit_per_window == 30
        assert get_chat_config().max_conversation_history == 10
        assert get_llm_config().timeout == timedelta(seconds=10)

    def test_persona_defaults(self):
        config = AppConfig()
        assert config.persona.name == "the site owner"
        assert config.persona.title == "professional full-stack developer"
