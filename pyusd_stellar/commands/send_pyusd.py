"""
Send PYUSD with a classic payment, falling back to a SAC transfer.

    $ send-pyusd GDKW...EXAMPLE 10.5000000 "Payment for services"

The sender balance is checked first; nothing is submitted if it is too low.
"""
import asyncio
import sys
from typing import Optional

from loguru import logger

from pyusd_stellar.commands.common import (
    CommandParser, add_env_file_argument, bootstrap, print_context, print_error,
)
from pyusd_stellar.core.domain.amounts import format_amount
from pyusd_stellar.core.domain.value_objects import PaymentAttempt
from pyusd_stellar.core.use_cases.payment.send_payment import CLASSIC, SendPayment, validate_payment_request
from pyusd_stellar.infrastructure.services.stellar_service import StellarService

EXAMPLE = 'send-pyusd GDKW...EXAMPLE 10.5000000 "Payment for services"'

COMMON_ISSUES = [
    "Your .env file is configured correctly",
    "You have sufficient PYUSD balance",
    "The destination address is valid",
    "You have XLM for transaction fees",
]


async def run(destination: str, amount: str, memo: Optional[str] = None,
              env_file: Optional[str] = ".env") -> int:
    print("💸 Sending PYUSD on Stellar...\n")
    try:
        validate_payment_request(destination, amount, memo)
        config = bootstrap(env_file)

        print_context(config, "From")
        print(f"To: {destination}")
        print(f"Amount: {format_amount(amount)} {config.asset_code}")
        if memo:
            print(f'Memo: "{memo}"')
        print()

        stellar = StellarService(config)

        def report(attempt: PaymentAttempt):
            if attempt.method == CLASSIC:
                print("🚀 Method 1: Classic Stellar Payment")
            else:
                print("\n🚀 Method 2: Stellar Asset Contract (SAC) Transfer")
            if attempt.success:
                print("   ✅ Transaction successful!")
                print(f"   📋 Hash: {attempt.transaction_hash}")
                print(f"   🔗 Explorer: {config.explorer_tx_url(attempt.transaction_hash)}")
                if attempt.method != CLASSIC:
                    print(f"   📄 Contract: {config.sac_contract}")
            else:
                print(f"   ❌ Error: {attempt.error}")

        def show_balance(balance: str):
            print(f"Current balance: {balance} {config.asset_code}\n")

        print("🔍 Checking sender balance...")
        use_case = SendPayment(stellar)
        await use_case.execute(destination, amount, memo, on_balance=show_balance, on_attempt=report)
    except Exception as ex:
        logger.debug(['send-pyusd failed', ex])
        print_error(ex, COMMON_ISSUES)
        return 1

    print("\n✨ Payment complete!")
    return 0


def main(argv=None):
    parser = CommandParser(prog="send-pyusd", description="Send PYUSD on Stellar", example=EXAMPLE)
    parser.add_argument("destination", help="destination account (G...)")
    parser.add_argument("amount", help="amount of PYUSD, up to 7 decimals")
    parser.add_argument("memo", nargs="?", default=None, help="optional text memo (max 28 bytes)")
    add_env_file_argument(parser)
    args = parser.parse_args(argv)
    sys.exit(asyncio.run(run(args.destination, args.amount, args.memo, args.env_file)))


if __name__ == "__main__":
    main()
