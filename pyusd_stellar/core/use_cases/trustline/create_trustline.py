from pyusd_stellar.core.domain.value_objects import TrustlineResult
from pyusd_stellar.core.interfaces.services import IPyusdService


class CreateTrustline:
    def __init__(self, stellar_service: IPyusdService):
        self.stellar_service = stellar_service

    async def execute(self) -> TrustlineResult:
        # an existing trustline makes this a no-op
        if await self.stellar_service.has_trustline():
            return TrustlineResult(created=False)

        tx_hash = await self.stellar_service.create_trustline()
        return TrustlineResult(created=True, transaction_hash=tx_hash)
