"""
Configuration loading for the nft-transfer tool.

Settings come from ``config/default.json``, optionally overlaid by
``config/local.json`` next to it, and finally by ``NFT_TRANSFER_<KEY>``
environment variables.
"""
import os
import re
import json
import logging
import urllib.parse
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from .address import is_valid_address
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join("config", "default.json")
LOCAL_CONFIG_NAME = "local.json"
ENV_PREFIX = "NFT_TRANSFER_"

_GAS_PRICE = re.compile(r"^([0-9]+(?:\.[0-9]+)?)([a-zA-Z][a-zA-Z0-9/:._-]{2,127})$")


def parse_gas_price(gas_price: str) -> Tuple[Decimal, str]:
    """
    Split a gas price such as "0.1usei" into amount and denomination.

    Raises:
        ValueError: If the string is not <decimal><denom>
    """
    match = _GAS_PRICE.match(gas_price.strip())
    if not match:
        raise ValueError(f"Invalid gas price string: {gas_price!r}")
    try:
        amount = Decimal(match.group(1))
    except InvalidOperation as e:
        raise ValueError(f"Invalid gas price amount: {match.group(1)!r}") from e
    return amount, match.group(2)


class CoinDenomination(BaseModel):
    """Smallest-unit to display-unit conversion"""
    unit: str = "usei"
    symbol: str = "SEI"
    scale: int = 1_000_000

    class Config:
        frozen = True


class TransferConfig(BaseModel):
    """Runtime settings for a transfer run"""
    rpc_endpoint: str = Field(..., alias="RPC_ENDPOINT")
    chain_id: str = Field("pacific-1", alias="CHAIN_ID")
    gas_price: str = Field(..., alias="GAS_PRICE")
    default_recipient: Optional[str] = Field(None, alias="DEFAULT_RECIPIENT")
    address_prefix: str = Field("sei", alias="ADDRESS_PREFIX")
    key_file: str = Field("privatekeys.txt", alias="KEY_FILE")
    coin_unit: str = Field("usei", alias="COIN_UNIT")
    coin_symbol: str = Field("SEI", alias="COIN_SYMBOL")
    coin_scale: int = Field(1_000_000, alias="COIN_SCALE", gt=0)
    query_timeout: float = Field(30, alias="QUERY_TIMEOUT", gt=0)
    retry_count: int = Field(3, alias="RETRY_COUNT", ge=0)
    tx_timeout: float = Field(120, alias="TX_TIMEOUT", gt=0)
    poll_interval: float = Field(1, alias="POLL_INTERVAL", gt=0)
    token_page_size: int = Field(30, alias="TOKEN_PAGE_SIZE", gt=0)

    class Config:
        populate_by_name = True
        frozen = True

    # Cache of merged raw settings keyed by config file path
    _files_cache: ClassVar[Dict[str, Dict[str, Any]]] = {}

    @field_validator("rpc_endpoint")
    @classmethod
    def _check_endpoint(cls, url: str) -> str:
        parsed = urllib.parse.urlparse(url)
        # Check if it's a localhost or 127.0.0.1 address (with or without port)
        host = parsed.hostname or ''
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not (is_local and parsed.scheme == 'http'):
            raise ValueError(f"RPC_ENDPOINT must use https:// (got: {parsed.scheme}://)")
        return url.rstrip('/')

    @field_validator("gas_price")
    @classmethod
    def _check_gas_price(cls, value: str) -> str:
        parse_gas_price(value)
        return value.strip()

    @field_validator("default_recipient")
    @classmethod
    def _check_default_recipient(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value.strip() == "":
            return None
        value = value.strip()
        if not is_valid_address(value):
            raise ValueError(f"DEFAULT_RECIPIENT is not a valid address: {value}")
        return value

    @property
    def denomination(self) -> CoinDenomination:
        return CoinDenomination(unit=self.coin_unit, symbol=self.coin_symbol, scale=self.coin_scale)

    @classmethod
    def _read_json(cls, path: Path) -> Dict[str, Any]:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Unable to read config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
        return data

    @classmethod
    def load_settings(cls, path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load raw settings from the config file and its local overlay.

        Args:
            path: Config file path (defaults to NFT_TRANSFER_CONFIG or config/default.json)

        Returns:
            Merged settings dictionary (cached per path)

        Raises:
            ConfigError: If a file is missing or not valid JSON
        """
        config_path = Path(path or os.environ.get(f"{ENV_PREFIX}CONFIG", DEFAULT_CONFIG_PATH))
        cache_key = str(config_path.resolve())
        if cache_key in cls._files_cache:
            return cls._files_cache[cache_key]

        settings = cls._read_json(config_path)
        local_path = config_path.parent / LOCAL_CONFIG_NAME
        if local_path.exists() and local_path != config_path:
            logger.debug(f"Applying local config overrides from {local_path}")
            settings = {**settings, **cls._read_json(local_path)}

        cls._files_cache[cache_key] = settings
        return settings

    @classmethod
    def load(cls, path: Optional[str] = None) -> "TransferConfig":
        """
        Build the configuration from files and environment overrides.

        Raises:
            ConfigError: If loading or validation fails
        """
        settings = dict(cls.load_settings(path))
        for field in cls.model_fields.values():
            env_value = os.environ.get(f"{ENV_PREFIX}{field.alias}")
            if env_value is not None:
                settings[field.alias] = env_value

        try:
            config = cls.model_validate(settings)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        logger.debug("Loaded configuration for chain %s via %s", config.chain_id, config.rpc_endpoint)
        return config
