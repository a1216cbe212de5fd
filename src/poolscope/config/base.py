"""
Environment-backed settings shared by every poolscope config class.

Values come from the process environment, with a `.env` file in the working
directory loaded first. Class attributes are read once at import time;
construct a config with keyword overrides to change them in code.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv
from eth_utils import is_hex_address

from ..errors import PoolscopeError

load_dotenv()

logger = logging.getLogger(__name__)

ENVIRONMENTS = ("local", "dev", "staging", "production")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigError(PoolscopeError):
    """Raised for missing or malformed settings."""
    pass


@dataclass
class BaseConfig:
    """Deployment environment and logging level."""

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        if self.ENVIRONMENT not in ENVIRONMENTS:
            raise ConfigError(
                f"Invalid environment: {self.ENVIRONMENT} (expected one of {', '.join(ENVIRONMENTS)})"
            )
        logging.basicConfig(
            level=getattr(logging, self.LOG_LEVEL.upper(), logging.INFO),
            format=LOG_FORMAT,
        )

    @staticmethod
    def get_env(key: str, default: Optional[str] = None, required: bool = False) -> str:
        """
        Read a string setting.

        Raises:
            ConfigError: If `required` and the variable is unset with no default
        """
        value = os.getenv(key, default)
        if required and value is None:
            raise ConfigError(f"Required environment variable '{key}' is not set")
        return value

    @staticmethod
    def get_env_int(key: str, default: Optional[int] = None, required: bool = False) -> int:
        value = BaseConfig.get_env(key, None if default is None else str(default), required)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"Environment variable '{key}' must be an integer, got: {value}")

    @staticmethod
    def get_env_float(key: str, default: Optional[float] = None, required: bool = False) -> float:
        value = BaseConfig.get_env(key, None if default is None else str(default), required)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"Environment variable '{key}' must be a number, got: {value}")

    @staticmethod
    def get_env_address(key: str, default: str = "", required: bool = False) -> str:
        """
        Read a contract address setting.

        An unset optional address comes back as "".

        Raises:
            ConfigError: If the value is set but not a 0x-prefixed hex address,
                or is required and missing
        """
        value = (BaseConfig.get_env(key, default) or "").strip()
        if not value:
            if required:
                raise ConfigError(f"Required contract address '{key}' is not set")
            return ""
        return BaseConfig._check_address(key, value)

    @staticmethod
    def get_env_address_list(key: str, default: Sequence[str] = ()) -> List[str]:
        """
        Read a comma-separated list of contract addresses.

        Raises:
            ConfigError: If any entry is not a 0x-prefixed hex address
        """
        value = BaseConfig.get_env(key, ",".join(default))
        return [BaseConfig._check_address(key, item.strip()) for item in value.split(",") if item.strip()]

    @staticmethod
    def _check_address(key: str, value: str) -> str:
        if not value.startswith("0x") or not is_hex_address(value):
            raise ConfigError(f"Environment variable '{key}' is not a contract address: {value}")
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}
