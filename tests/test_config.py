import logging

import pytest

from crowdsale_testkit.config import (
    DEFAULT_GAS_PRICE, DEFAULT_REJECTION_MARKERS, TestkitConfig,
    apply_env_overrides, load_config, setup_logging,
)


def test_defaults_without_file_or_env():
    cfg = load_config(environ={})
    assert cfg.debug is False
    assert cfg.gas_price == DEFAULT_GAS_PRICE == 21000000000
    assert cfg.rejection_markers == DEFAULT_REJECTION_MARKERS
    assert cfg.account_pool_size == 10


def test_debug_flag_only_for_literal_true():
    assert load_config(environ={"WT_DEBUG": "true"}).debug is True
    assert load_config(environ={"WT_DEBUG": "TRUE"}).debug is False
    assert load_config(environ={"WT_DEBUG": "1"}).debug is False


def test_gas_price_override():
    assert load_config(environ={"GAS_PRICE": "1000"}).gas_price == 1000


def test_unparsable_gas_price_keeps_default():
    assert load_config(environ={"GAS_PRICE": "cheap"}).gas_price == DEFAULT_GAS_PRICE


def test_yaml_file_then_env(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "gas_price: 5\n"
        "logging_level: DEBUG\n"
        "artifacts_dir: ~/contracts\n"
        "crowdsale_contract: MyCrowdsale\n"
        "rejection_markers: ['revert']\n"
    )
    cfg = load_config(str(path), environ={"GAS_PRICE": "7"})
    assert cfg.gas_price == 7
    assert cfg.logging_level == "DEBUG"
    assert not cfg.artifacts_dir.startswith("~")
    assert cfg.crowdsale_contract == "MyCrowdsale"
    assert cfg.rejection_markers == ("revert",)


def test_empty_yaml_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(str(path), environ={}) == TestkitConfig()


@pytest.mark.parametrize("content,message", [
    ("gas_price: -1\n", "gas_price"),
    ("account_pool_size: 3\n", "account_pool_size"),
    ("rejection_markers: []\n", "rejection_markers"),
    ("logging_level: LOUD\n", "logging_level"),
])
def test_invalid_values(tmp_path, content, message):
    path = tmp_path / "config.yaml"
    path.write_text(content)
    with pytest.raises(ValueError, match=message):
        load_config(str(path), environ={})


def test_apply_env_overrides_returns_same_object_without_overrides():
    cfg = TestkitConfig()
    assert apply_env_overrides(cfg, {}) is cfg


def test_setup_logging_debug_mode():
    setup_logging(TestkitConfig(debug=True))
    assert logging.getLogger("crowdsale_testkit").level == logging.DEBUG
    setup_logging(TestkitConfig(logging_level="WARNING"))
    assert logging.getLogger("crowdsale_testkit").level == logging.WARNING
