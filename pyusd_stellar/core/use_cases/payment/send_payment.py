from decimal import Decimal
from typing import Callable, Optional, Tuple

from loguru import logger

from pyusd_stellar.config_reader import KEY_LENGTH
from pyusd_stellar.core.domain.amounts import parse_amount
from pyusd_stellar.core.domain.exceptions import (
    InsufficientBalanceError, InvalidArgumentError, PaymentFailedError,
)
from pyusd_stellar.core.domain.value_objects import PaymentAttempt, PaymentResult
from pyusd_stellar.core.interfaces.services import IPyusdService

CLASSIC = "classic"
CONTRACT = "contract"

# text memo limit, in UTF-8 bytes
MEMO_MAX_BYTES = 28


def validate_payment_request(destination: Optional[str], amount: Optional[str],
                             memo: Optional[str] = None) -> Tuple[str, Decimal]:
    """Shape checks done before any configuration or network access."""
    if not destination or len(destination) != KEY_LENGTH or not destination.startswith('G'):
        raise InvalidArgumentError("Invalid destination address format")
    try:
        value = parse_amount(amount or '')
    except ValueError:
        raise InvalidArgumentError("Invalid amount")
    if value <= 0:
        raise InvalidArgumentError("Invalid amount")
    if memo and len(memo.encode("utf-8")) > MEMO_MAX_BYTES:
        raise InvalidArgumentError(f"Memo is too long (max {MEMO_MAX_BYTES} bytes)")
    return destination, value


class SendPayment:
    def __init__(self, stellar_service: IPyusdService):
        self.stellar_service = stellar_service

    async def execute(self, destination: str, amount: str, memo: Optional[str] = None,
                      on_balance: Optional[Callable[[str], None]] = None,
                      on_attempt: Optional[Callable[[PaymentAttempt], None]] = None) -> PaymentResult:
        """
        Check the sender balance, then pay with a classic operation and fall
        back to the SAC transfer once if that fails.

        `on_balance` receives the sender balance and `on_attempt` every attempt,
        so callers can report progress.
        Raises InsufficientBalanceError before submitting anything when the
        balance is too low, PaymentFailedError when both methods fail.
        """
        destination, value = validate_payment_request(destination, amount, memo)

        balance = await self.stellar_service.get_balance_classic()
        if on_balance:
            on_balance(balance)
        if Decimal(balance) < value:
            raise InsufficientBalanceError(balance, amount)

        attempts = []

        def record(attempt: PaymentAttempt):
            attempts.append(attempt)
            if on_attempt:
                on_attempt(attempt)

        try:
            tx_hash = await self.stellar_service.send_classic(destination, amount, memo)
            record(PaymentAttempt(CLASSIC, transaction_hash=tx_hash))
        except Exception as ex:
            logger.info(['classic payment failed', ex])
            record(PaymentAttempt(CLASSIC, error=ex))
            try:
                tx_hash = await self.stellar_service.send_contract(destination, amount)
                record(PaymentAttempt(CONTRACT, transaction_hash=tx_hash))
            except Exception as sac_ex:
                logger.info(['SAC payment failed', sac_ex])
                record(PaymentAttempt(CONTRACT, error=sac_ex))
                raise PaymentFailedError(attempts) from sac_ex

        return PaymentResult(destination=destination, amount=value, sender_balance=balance, attempts=attempts)
