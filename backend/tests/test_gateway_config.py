"""
Tests for typed gateway configuration loading.

Tests: load_gateway_config, StripeConfig normalization
"""

import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest
from domain.enums import GatewayKind
from domain.errors import ConfigurationError
from domain.gateway_config import FakeConfig, StripeConfig, load_gateway_config


class TestLoadGatewayConfig:

    @pytest.mark.unit
    def test_stripe_config_parsed(self):
        config = load_gateway_config(
            GatewayKind.STRIPE,
            {"publishable_key": "pk_1", "secret_key": "sk_1", "webhook_secret": "wh_1"},
        )
        assert isinstance(config, StripeConfig)
        assert config.secret_key == "sk_1"
        assert config.publishable_key == "pk_1"

    @pytest.mark.unit
    def test_blank_credentials_become_missing(self):
        config = load_gateway_config(GatewayKind.STRIPE, {"secret_key": "   ", "publishable_key": ""})
        assert config.secret_key is None
        assert config.publishable_key is None

    @pytest.mark.unit
    def test_none_is_empty_config(self):
        config = load_gateway_config(GatewayKind.STRIPE, None)
        assert config.secret_key is None

    @pytest.mark.unit
    def test_unknown_keys_ignored(self):
        config = load_gateway_config(GatewayKind.FAKE, {"anything": 1})
        assert isinstance(config, FakeConfig)

    @pytest.mark.unit
    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigurationError):
            load_gateway_config(GatewayKind.STRIPE, ["sk_1"])

    @pytest.mark.unit
    def test_wrong_field_type_rejected(self):
        with pytest.raises(ConfigurationError) as exc:
            load_gateway_config(GatewayKind.STRIPE, {"secret_key": {"nested": True}})
        assert "secret_key" in exc.value.details["fields"]
