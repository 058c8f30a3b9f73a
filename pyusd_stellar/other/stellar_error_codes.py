# Mapping of Stellar Horizon result codes to human-readable English messages

from typing import Optional

TRANSACTION_ERROR_CODES = {
    "tx_failed": "Transaction failed (error in one of the operations)",
    "tx_bad_auth": "Too few valid signatures or wrong network",
    "tx_bad_seq": "Transaction sequence error. Please retry.",
    "tx_insufficient_balance": "Insufficient balance. Check your XLM and PYUSD balances.",
    "tx_insufficient_fee": "Fee is too low for the current network load",
    "tx_no_source_account": "Source account not found",
    "tx_bad_auth_extra": "Unused signatures attached to transaction",
    "tx_internal_error": "Internal Horizon error",
    "tx_too_late": "Transaction is too late (time bounds)",
    "tx_too_early": "Transaction is not yet valid (time bounds)",
    "tx_missing_operation": "No operations in transaction",
}

OPERATION_ERROR_CODES = {
    "op_underfunded": "Insufficient PYUSD balance for this transaction.",
    "op_no_trust": "Destination account has no PYUSD trustline. They need to create one first.",
    "op_src_no_trust": "Source account has no trustline for this asset",
    "op_src_not_authorized": "Source account not authorized",
    "op_not_authorized": "Destination not authorized",
    "op_no_destination": "Destination account not found",
    "op_no_source_account": "Source account not found",
    "op_line_full": "Trustline limit exceeded for destination",
    "op_no_issuer": "Asset issuer not found",
    "op_low_reserve": "Not enough XLM to meet the minimum reserve",
    "op_invalid_limit": "Trustline limit is below the current balance",
    "op_bad_auth": "Too few valid signatures or wrong network",
    "op_malformed": "Malformed operation",
    "op_already_exists": "Object already exists",
}


def get_failing_code(result_codes: dict) -> Optional[str]:
    """The most specific code: the first failing operation, else the transaction code."""
    op_codes = result_codes.get("operations") or []
    for op_code in op_codes:
        if op_code and op_code != "op_success":
            return op_code
    return result_codes.get("transaction")


def get_stellar_error_message(result_codes: dict) -> str:
    """
    Returns a human-readable error message for result_codes from Horizon.
    """
    code = get_failing_code(result_codes)
    if not code:
        return "Unknown Stellar error"
    if code in OPERATION_ERROR_CODES:
        return OPERATION_ERROR_CODES[code]
    if code in TRANSACTION_ERROR_CODES:
        return TRANSACTION_ERROR_CODES[code]
    if code.startswith("op_"):
        return f"Operation code: {code}"
    return f"Transaction code: {code}"
