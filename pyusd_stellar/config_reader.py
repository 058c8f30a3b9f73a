from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger
from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from stellar_sdk import Network

from pyusd_stellar.core.domain.exceptions import ConfigValidationError
from pyusd_stellar.core.domain.value_objects import Asset

KEY_LENGTH = 56


class StellarNetwork(str, Enum):
    TESTNET = 'testnet'
    MAINNET = 'mainnet'


@dataclass(frozen=True)
class NetworkConfig:
    network_passphrase: str
    horizon_url: str
    soroban_url: str


network_configs = {
    StellarNetwork.TESTNET: NetworkConfig(
        network_passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
        horizon_url='https://horizon-testnet.stellar.org',
        soroban_url='https://soroban-testnet.stellar.org',
    ),
    StellarNetwork.MAINNET: NetworkConfig(
        network_passphrase=Network.PUBLIC_NETWORK_PASSPHRASE,
        horizon_url='https://horizon.stellar.org',
        soroban_url='https://soroban-mainnet.stellar.org',
    ),
}


def _check_key(value, prefix: str):
    if not isinstance(value, str):
        return value
    if len(value) != KEY_LENGTH:
        raise ValueError(f'Must be exactly {KEY_LENGTH} characters')
    if not value.startswith(prefix):
        raise ValueError(f'Must start with {prefix}')
    return value


class Settings(BaseSettings):
    stellar_network: StellarNetwork = StellarNetwork.TESTNET
    private_key: SecretStr
    wallet_address: str
    pyusd_asset_code: str = 'PYUSD'
    pyusd_issuer: str
    pyusd_sac_contract: str

    # endpoint overrides, network defaults are used when empty
    horizon_url: Optional[str] = None
    soroban_rpc_url: Optional[str] = None
    base_fee: int = 100
    request_timeout: int = 30
    log_level: str = 'WARNING'
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    @field_validator('private_key', mode='before')
    @classmethod
    def check_private_key(cls, v):
        return _check_key(v, 'S')

    @field_validator('wallet_address', 'pyusd_issuer', mode='before')
    @classmethod
    def check_public_key(cls, v):
        return _check_key(v, 'G')

    @field_validator('pyusd_sac_contract', mode='before')
    @classmethod
    def check_contract(cls, v):
        return _check_key(v, 'C')

    @field_validator('pyusd_asset_code')
    @classmethod
    def check_asset_code(cls, v: str) -> str:
        if not 1 <= len(v) <= 12:
            raise ValueError('Must be 1-12 characters')
        return v

    @field_validator('log_level')
    @classmethod
    def check_log_level(cls, v: str) -> str:
        name = v.strip().upper()
        try:
            logger.level(name)
        except ValueError:
            raise ValueError('Must be a log level name such as DEBUG, INFO or WARNING')
        return name

    @field_validator('base_fee', 'request_timeout')
    @classmethod
    def check_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError('Must be positive')
        return v


@dataclass(frozen=True)
class Config:
    network: StellarNetwork
    network_passphrase: str
    horizon_url: str
    soroban_url: str
    private_key: SecretStr
    wallet_address: str
    asset_code: str
    asset_issuer: str
    sac_contract: str
    base_fee: int = 100
    request_timeout: int = 30
    log_level: str = 'WARNING'
    log_file: Optional[str] = None

    @property
    def asset(self) -> Asset:
        return Asset(self.asset_code, self.asset_issuer)

    def explorer_tx_url(self, tx_hash: str) -> str:
        # stellar.expert names the public network "public"
        name = 'public' if self.network == StellarNetwork.MAINNET else self.network.value
        return f'https://stellar.expert/explorer/{name}/tx/{tx_hash}'


def load_config(env_file: Optional[str] = '.env') -> Config:
    """
    Read and validate the environment (and the .env file if present).

    Raises ConfigValidationError naming every bad variable; nothing is
    contacted over the network here.
    """
    try:
        settings = Settings(_env_file=env_file)
    except ValidationError as ex:
        errors = []
        for err in ex.errors():
            field = str(err['loc'][0]) if err['loc'] else 'settings'
            msg = err['msg']
            if msg.startswith('Value error, '):
                msg = msg[len('Value error, '):]
            errors.append((field.upper(), msg))
        raise ConfigValidationError(errors) from ex

    defaults = network_configs[settings.stellar_network]
    return Config(
        network=settings.stellar_network,
        network_passphrase=defaults.network_passphrase,
        horizon_url=settings.horizon_url or defaults.horizon_url,
        soroban_url=settings.soroban_rpc_url or defaults.soroban_url,
        private_key=settings.private_key,
        wallet_address=settings.wallet_address,
        asset_code=settings.pyusd_asset_code,
        asset_issuer=settings.pyusd_issuer,
        sac_contract=settings.pyusd_sac_contract,
        base_fee=settings.base_fee,
        request_timeout=settings.request_timeout,
        log_level=settings.log_level,
        log_file=settings.log_file,
    )
