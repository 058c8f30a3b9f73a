from loguru import logger

from pyusd_stellar.core.domain.value_objects import BalanceReport
from pyusd_stellar.core.interfaces.services import IPyusdService


class CheckBalance:
    def __init__(self, stellar_service: IPyusdService):
        self.stellar_service = stellar_service

    async def execute(self) -> BalanceReport:
        """
        Query the balance through both paths.

        Nothing is queried when the trustline is missing. A failure of one
        method is stored in the report and the other method still runs.
        """
        if not await self.stellar_service.has_trustline():
            return BalanceReport(has_trustline=False)

        classic_balance = classic_error = None
        try:
            classic_balance = await self.stellar_service.get_balance_classic()
        except Exception as ex:
            logger.info(['classic balance failed', ex])
            classic_error = ex

        contract_balance = contract_error = None
        try:
            contract_balance = await self.stellar_service.get_balance_contract()
        except Exception as ex:
            logger.info(['SAC balance failed', ex])
            contract_error = ex

        return BalanceReport(
            has_trustline=True,
            classic_balance=classic_balance,
            classic_error=classic_error,
            contract_balance=contract_balance,
            contract_error=contract_error,
        )
