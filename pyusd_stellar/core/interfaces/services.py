from abc import ABC, abstractmethod
from typing import Optional


class IPyusdService(ABC):
    @abstractmethod
    async def has_trustline(self) -> bool:
        """
        True if the wallet holds a trustline for the configured asset.
        Any lookup failure (missing account, network error) counts as False.
        """
        pass

    @abstractmethod
    async def create_trustline(self) -> str:
        """Submit a change-trust transaction; returns the transaction hash."""
        pass

    @abstractmethod
    async def get_balance_classic(self) -> str:
        """Balance from the Horizon account record, "0" when there is no entry."""
        pass

    @abstractmethod
    async def get_balance_contract(self) -> str:
        """Balance from a simulated SAC `balance` call, 7 decimals."""
        pass

    @abstractmethod
    async def send_classic(self, destination: str, amount: str, memo: Optional[str] = None) -> str:
        """Classic payment operation; returns the transaction hash."""
        pass

    @abstractmethod
    async def send_contract(self, destination: str, amount: str) -> str:
        """SAC `transfer` invocation; returns the transaction hash."""
        pass
