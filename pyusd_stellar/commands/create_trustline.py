"""
Create the PYUSD trustline for the configured wallet (no-op if it exists).

    $ create-trustline
"""
import asyncio
import sys
from typing import Optional

from loguru import logger

from pyusd_stellar.commands.common import (
    CommandParser, add_env_file_argument, bootstrap, print_asset, print_context, print_error,
)
from pyusd_stellar.core.use_cases.trustline.create_trustline import CreateTrustline
from pyusd_stellar.infrastructure.services.stellar_service import StellarService

COMMON_ISSUES = [
    "Your .env file is configured correctly",
    "Your account has XLM for transaction fees (~0.5 XLM minimum)",
    "Your account is funded on the correct network",
]


async def run(env_file: Optional[str] = ".env") -> int:
    print("🤝 Creating PYUSD trustline on Stellar...\n")
    try:
        config = bootstrap(env_file)
        print_context(config)
        print_asset(config)

        stellar = StellarService(config)
        print("🔍 Checking existing trustlines...")
        result = await CreateTrustline(stellar).execute()
    except Exception as ex:
        logger.debug(['create-trustline failed', ex])
        print_error(ex, COMMON_ISSUES)
        return 1

    if not result.created:
        print(f"✅ {config.asset_code} trustline already exists!")
        print("💡 You can now check your balance with: check-balance")
        return 0

    print("✅ Trustline created successfully!")
    print(f"📋 Transaction Hash: {result.transaction_hash}")
    print(f"🔗 Explorer: {config.explorer_tx_url(result.transaction_hash)}\n")

    print("✨ Next steps:")
    print("   1. Wait for transaction confirmation (usually ~5 seconds)")
    print(f"   2. Get testnet {config.asset_code} from a faucet (if on testnet)")
    print("   3. Check your balance: check-balance")
    return 0


def main(argv=None):
    parser = CommandParser(prog="create-trustline", description="Create the PYUSD trustline")
    add_env_file_argument(parser)
    args = parser.parse_args(argv)
    sys.exit(asyncio.run(run(args.env_file)))


if __name__ == "__main__":
    main()
