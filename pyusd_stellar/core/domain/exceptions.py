from typing import List, Optional, Sequence, Tuple


class PyusdError(Exception):
    """Base error; `hint` is a short actionable suggestion shown to the user."""
    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if hint is not None:
            self.hint = hint


# pre-flight

class ConfigValidationError(PyusdError):
    """
    One or more environment variables are missing or malformed.
    `errors` lists every violation as (ENV_NAME, message).
    """
    hint = "Make sure your .env file is configured correctly."
    errors: List[Tuple[str, str]]

    def __init__(self, errors: Sequence[Tuple[str, str]]) -> None:
        self.errors = list(errors)
        lines = [f"  {name}: {msg}" for name, msg in self.errors]
        super().__init__("Environment variable validation failed:\n" + "\n".join(lines))


class InvalidCredentialError(PyusdError):
    hint = "PRIVATE_KEY must be a valid Stellar secret seed (56 characters, starts with S)."


class InvalidArgumentError(PyusdError):
    hint = "Usage: send-pyusd <destination_address> <amount> [memo]"


# queries

class AccountNotFoundError(PyusdError):
    hint = "Make sure the account is funded and exists on the selected network."


class ConnectivityError(PyusdError):
    hint = "Check your internet connection and the HORIZON_URL / SOROBAN_RPC_URL settings."


class QueryError(PyusdError):
    pass


class SimulationError(PyusdError):
    hint = "The SAC method requires the asset contract to be deployed on this network."


class ContractNotFoundError(SimulationError):
    hint = "Check PYUSD_SAC_CONTRACT in your .env file."


# submissions

class SubmissionError(PyusdError):
    hint = "Ensure your account has XLM for transaction fees (~0.5 XLM minimum)."


class SubmissionRejectedError(SubmissionError):
    """The network refused the transaction; `code` is the result code it returned."""
    code: Optional[str]

    def __init__(self, message: str, code: Optional[str] = None, hint: Optional[str] = None) -> None:
        super().__init__(message, hint)
        self.code = code


class InsufficientFeeBalanceError(SubmissionRejectedError):
    hint = "Check your XLM and PYUSD balances."


class DestinationNoTrustlineError(SubmissionRejectedError):
    hint = "The recipient must create a PYUSD trustline first."


class UnderfundedError(SubmissionRejectedError):
    hint = "Check your PYUSD balance with check-balance."


class BadSequenceError(SubmissionRejectedError):
    hint = "Please retry the command."


class InsufficientBalanceError(PyusdError):
    hint = "You need sufficient PYUSD balance; check it with check-balance."

    def __init__(self, balance: str, amount: str) -> None:
        super().__init__(f"Insufficient balance. Have {balance}, need {amount}")
        self.balance = balance
        self.amount = amount


class PaymentFailedError(PyusdError):
    """Both the classic payment and the SAC transfer failed."""
    hint = "Make sure the destination is valid and you have XLM for transaction fees."

    def __init__(self, attempts) -> None:
        super().__init__("Both payment methods failed")
        self.attempts = list(attempts)
