from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class Asset:
    code: str
    issuer: str

    def to_string(self) -> str:
        return f"{self.code}:{self.issuer}"


@dataclass(frozen=True)
class BalanceReport:
    """Outcome of one balance check; per-method errors are kept, not raised."""
    has_trustline: bool
    classic_balance: Optional[str] = None
    classic_error: Optional[Exception] = None
    contract_balance: Optional[str] = None
    contract_error: Optional[Exception] = None


@dataclass(frozen=True)
class TrustlineResult:
    created: bool
    transaction_hash: Optional[str] = None


@dataclass(frozen=True)
class PaymentAttempt:
    method: str  # "classic" or "contract"
    transaction_hash: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.transaction_hash is not None


@dataclass(frozen=True)
class PaymentResult:
    destination: str
    amount: Decimal
    sender_balance: str
    attempts: List[PaymentAttempt] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return any(a.success for a in self.attempts)

    @property
    def transaction_hash(self) -> Optional[str]:
        for attempt in self.attempts:
            if attempt.success:
                return attempt.transaction_hash
        return None

    @property
    def method(self) -> Optional[str]:
        for attempt in self.attempts:
            if attempt.success:
                return attempt.method
        return None
