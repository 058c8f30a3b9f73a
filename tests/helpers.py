from typing import Optional
import random
import socket

from pydantic import SecretStr
from stellar_sdk import Keypair, Network, StrKey

from pyusd_stellar.config_reader import Config, StellarNetwork

SENDER_KEYPAIR = Keypair.from_raw_ed25519_seed(bytes([1] * 32))
SENDER = SENDER_KEYPAIR.public_key
ISSUER = Keypair.from_raw_ed25519_seed(bytes([2] * 32)).public_key
DESTINATION = Keypair.from_raw_ed25519_seed(bytes([3] * 32)).public_key
CONTRACT = StrKey.encode_contract(bytes(range(32)))

ENV_NAMES = [
    "STELLAR_NETWORK", "PRIVATE_KEY", "WALLET_ADDRESS", "PYUSD_ASSET_CODE", "PYUSD_ISSUER",
    "PYUSD_SAC_CONTRACT", "HORIZON_URL", "SOROBAN_RPC_URL", "BASE_FEE", "REQUEST_TIMEOUT",
    "LOG_LEVEL", "LOG_FILE",
]


def get_free_port(start_port=8000, end_port=9000, retries=10):
    """
    Finds a free port in the specified range.
    Tries random ports and attempts to bind to them.
    """
    for _ in range(retries):
        port = random.randint(start_port, end_port)
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind(('127.0.0.1', port))
            sock.close()
            return port
        except OSError:
            continue
    raise RuntimeError(f"Could not find a free port in range {start_port}-{end_port} after {retries} attempts")


def make_config(horizon_url: str = "http://127.0.0.1:1", soroban_url: str = "http://soroban.test",
                private_key: Optional[str] = None, network: StellarNetwork = StellarNetwork.TESTNET) -> Config:
    return Config(
        network=network,
        network_passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
        horizon_url=horizon_url,
        soroban_url=soroban_url,
        private_key=SecretStr(private_key or SENDER_KEYPAIR.secret),
        wallet_address=SENDER,
        asset_code="PYUSD",
        asset_issuer=ISSUER,
        sac_contract=CONTRACT,
        request_timeout=5,
    )


def pyusd_balance(amount: str, code: str = "PYUSD", issuer: str = ISSUER) -> dict:
    return {"asset_type": "credit_alphanum12", "asset_code": code, "asset_issuer": issuer,
            "balance": amount, "limit": "922337203685.4775807"}
