"""Tests for configuration loading and validation."""

from dataclasses import replace
from decimal import Decimal

import pytest

from fieldservice.config import AppConfig, _validate_config


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        _validate_config(AppConfig())  # should not raise

    def test_value_types(self):
        config = AppConfig()
        assert isinstance(config.default_tax_rate, Decimal)
        assert isinstance(config.strict_status_transitions, bool)
        assert isinstance(config.db_busy_timeout, int)

    @pytest.mark.parametrize("rate", ["-0.01", "1.5"])
    def test_tax_rate_out_of_range(self, rate):
        config = replace(AppConfig(), default_tax_rate=Decimal(rate))
        with pytest.raises(ValueError, match="DEFAULT_TAX_RATE"):
            _validate_config(config)

    def test_negative_busy_timeout(self):
        config = replace(AppConfig(), db_busy_timeout=-1)
        with pytest.raises(ValueError, match="DB_BUSY_TIMEOUT"):
            _validate_config(config)

    def test_empty_database_url(self):
        config = replace(AppConfig(), database_url="")
        with pytest.raises(ValueError, match="DATABASE_URL"):
            _validate_config(config)
