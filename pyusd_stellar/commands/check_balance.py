"""
Check the PYUSD balance of the configured wallet.

Both the classic account balance and the Stellar Asset Contract balance are
queried; a failure of one is printed and the other still runs.

    $ check-balance
    $ python -m pyusd_stellar check-balance --env-file prod.env
"""
import asyncio
import sys
from typing import Optional

from loguru import logger

from pyusd_stellar.commands.common import (
    CommandParser, add_env_file_argument, bootstrap, print_asset, print_context, print_error,
)
from pyusd_stellar.core.use_cases.wallet.get_balance import CheckBalance
from pyusd_stellar.infrastructure.services.stellar_service import StellarService


async def run(env_file: Optional[str] = ".env") -> int:
    print("🔍 Checking PYUSD balance on Stellar...\n")
    try:
        config = bootstrap(env_file)
        print_context(config)
        print_asset(config)

        stellar = StellarService(config)
        report = await CheckBalance(stellar).execute()
    except Exception as ex:
        logger.debug(['check-balance failed', ex])
        print_error(ex)
        return 1

    if not report.has_trustline:
        print(f"❌ No {config.asset_code} trustline found.")
        print("💡 Create a trustline first with: create-trustline")
        return 0

    print(f"✅ {config.asset_code} trustline found\n")

    print("📊 Method 1: Classic Stellar Account Balance")
    if report.classic_error is None:
        print(f"   Balance: {report.classic_balance} {config.asset_code}")
    else:
        print(f"   Error: {report.classic_error}")
    print()

    print("📊 Method 2: Stellar Asset Contract (SAC) Balance")
    if report.contract_error is None:
        print(f"   Balance: {report.contract_balance} {config.asset_code}")
        print(f"   Contract: {config.sac_contract}")
    else:
        print(f"   Error: {report.contract_error}")
        print("   Note: SAC method requires the contract to be deployed")

    print("\n✨ Balance check complete!")
    return 0


def main(argv=None):
    parser = CommandParser(prog="check-balance", description="Check PYUSD balance (classic and SAC)")
    add_env_file_argument(parser)
    args = parser.parse_args(argv)
    sys.exit(asyncio.run(run(args.env_file)))


if __name__ == "__main__":
    main()
