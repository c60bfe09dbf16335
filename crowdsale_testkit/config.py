import os
import yaml
import logging
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_GAS_PRICE = 21_000_000_000  # 21 gwei
DEFAULT_REJECTION_MARKERS = (
    "invalid opcode",
    "InvalidInstruction",
    "Revert",
    "execution reverted",
)

DEBUG_ENV_VAR = "WT_DEBUG"
GAS_PRICE_ENV_VAR = "GAS_PRICE"

PACKAGE_LOGGER = "crowdsale_testkit"


@dataclass(frozen=True)
class TestkitConfig:
    """Settings shared by the simulation driver, checks and command runner."""
    debug: bool = False
    gas_price: int = DEFAULT_GAS_PRICE  # wei per gas unit
    logging_level: str = "INFO"
    artifacts_dir: str = "build/contracts"
    crowdsale_contract: str = "QiibeeCrowdsale"
    token_contract: str = "QiibeeToken"
    account_pool_size: int = 10
    rejection_markers: Tuple[str, ...] = field(default=DEFAULT_REJECTION_MARKERS)

    # keep pytest from collecting this as a test class
    __test__ = False


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> TestkitConfig:
    """
    Build a TestkitConfig from an optional YAML file plus environment overrides.

    Environment (defaults to os.environ):
        WT_DEBUG   - only the literal "true" turns debug mode on
        GAS_PRICE  - integer gas price in wei; unparsable values keep the default
    """
    values = {}
    if path is not None:
        with open(os.path.expanduser(path)) as f:
            values = yaml.safe_load(f) or {}

    cfg = TestkitConfig(
        debug=bool(values.get("debug", False)),
        gas_price=int(values.get("gas_price", DEFAULT_GAS_PRICE)),
        logging_level=str(values.get("logging_level", "INFO")),
        artifacts_dir=os.path.expanduser(os.path.expandvars(values.get("artifacts_dir", "build/contracts"))),
        crowdsale_contract=values.get("crowdsale_contract", "QiibeeCrowdsale"),
        token_contract=values.get("token_contract", "QiibeeToken"),
        account_pool_size=int(values.get("account_pool_size", 10)),
        rejection_markers=tuple(values.get("rejection_markers", DEFAULT_REJECTION_MARKERS)),
    )

    cfg = apply_env_overrides(cfg, os.environ if environ is None else environ)
    _validate(cfg)
    return cfg


def apply_env_overrides(cfg: TestkitConfig, environ: Mapping[str, str]) -> TestkitConfig:
    overrides = {}

    if DEBUG_ENV_VAR in environ:
        overrides["debug"] = environ[DEBUG_ENV_VAR] == "true"

    raw_gas_price = environ.get(GAS_PRICE_ENV_VAR)
    if raw_gas_price is not None:
        try:
            overrides["gas_price"] = int(raw_gas_price)
        except ValueError:
            logger.warning(f"Ignoring {GAS_PRICE_ENV_VAR}={raw_gas_price!r}, using {cfg.gas_price}")

    return replace(cfg, **overrides) if overrides else cfg


def _validate(cfg: TestkitConfig) -> None:
    if cfg.gas_price < 0:
        raise ValueError(f"gas_price must be non-negative, got {cfg.gas_price}")

    # simulation participants are pool accounts 1..5
    if cfg.account_pool_size < 6:
        raise ValueError(f"account_pool_size must be at least 6, got {cfg.account_pool_size}")

    if not cfg.rejection_markers:
        raise ValueError("rejection_markers must name at least one marker")

    if getattr(logging, cfg.logging_level.upper(), None) is None:
        raise ValueError(f"Invalid logging_level '{cfg.logging_level}'")

    logger.debug(f"Validated config: gas_price={cfg.gas_price} debug={cfg.debug}")


def setup_logging(cfg: TestkitConfig) -> None:
    """Apply the configured level to the package logger; debug mode forces DEBUG."""
    level = logging.DEBUG if cfg.debug else getattr(logging, cfg.logging_level.upper(), logging.INFO)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
