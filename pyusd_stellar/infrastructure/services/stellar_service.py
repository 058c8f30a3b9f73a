import asyncio
from typing import Any, Dict, List, Optional

from loguru import logger
from stellar_sdk import AiohttpClient, Keypair, ServerAsync, SorobanServerAsync, TransactionBuilder, scval
from stellar_sdk import Asset as SdkAsset
from stellar_sdk import xdr as stellar_xdr
from stellar_sdk.exceptions import AccountNotFoundException, BaseHorizonError, Ed25519SecretSeedInvalidError, NotFoundError
from stellar_sdk.exceptions import ConnectionError as SdkConnectionError
from stellar_sdk.soroban_rpc import SendTransactionStatus

from pyusd_stellar.config_reader import Config
from pyusd_stellar.core.domain.amounts import from_base_units, to_base_units
from pyusd_stellar.core.domain.exceptions import (
    AccountNotFoundError, BadSequenceError, ConnectivityError, ContractNotFoundError,
    DestinationNoTrustlineError, InsufficientFeeBalanceError, InvalidCredentialError, PyusdError,
    QueryError, SimulationError, SubmissionError, SubmissionRejectedError, UnderfundedError,
)
from pyusd_stellar.core.interfaces.services import IPyusdService
from pyusd_stellar.other.stellar_error_codes import get_failing_code, get_stellar_error_message

# seconds the network has to include a transaction
TX_TIMEOUT = 30

REJECTION_ERRORS = {
    "tx_insufficient_balance": InsufficientFeeBalanceError,
    "op_no_trust": DestinationNoTrustlineError,
    "op_underfunded": UnderfundedError,
    "tx_bad_seq": BadSequenceError,
}

NETWORK_ERRORS = (SdkConnectionError, asyncio.TimeoutError)

# anything else means the RPC did not take the transaction
ACCEPTED_STATUSES = (SendTransactionStatus.PENDING, SendTransactionStatus.DUPLICATE)


class StellarService(IPyusdService):
    def __init__(self, config: Config):
        self.config = config
        try:
            self.keypair = Keypair.from_secret(config.private_key.get_secret_value())
        except (Ed25519SecretSeedInvalidError, ValueError) as ex:
            raise InvalidCredentialError(f"Invalid private key: {ex}") from ex

    @property
    def public_key(self) -> str:
        return self.keypair.public_key

    def _client(self) -> AiohttpClient:
        return AiohttpClient(request_timeout=self.config.request_timeout,
                             post_timeout=self.config.request_timeout)

    def _horizon(self) -> ServerAsync:
        return ServerAsync(horizon_url=self.config.horizon_url, client=self._client())

    def _soroban(self) -> SorobanServerAsync:
        return SorobanServerAsync(self.config.soroban_url, client=self._client())

    def _sdk_asset(self) -> SdkAsset:
        return SdkAsset(self.config.asset_code, self.config.asset_issuer)

    def _builder(self, source_account) -> TransactionBuilder:
        return TransactionBuilder(
            source_account=source_account,
            network_passphrase=self.config.network_passphrase,
            base_fee=self.config.base_fee,
        )

    def _find_balance(self, balances: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        for balance in balances:
            if (balance.get('asset_code') == self.config.asset_code
                    and balance.get('asset_issuer') == self.config.asset_issuer):
                return balance
        return None

    async def _get_balances(self) -> List[Dict[str, Any]]:
        logger.debug(f"Loading balances of {self.config.wallet_address} from {self.config.horizon_url}")
        async with self._horizon() as server:
            account = await server.accounts().account_id(self.config.wallet_address).call()
        return account.get('balances', [])

    def _horizon_rejection(self, ex: BaseHorizonError, prefix: str) -> SubmissionError:
        extras = ex.extras if isinstance(ex.extras, dict) else {}
        result_codes = extras.get('result_codes')
        if not result_codes:
            return SubmissionError(f"{prefix}: {ex.detail or ex.title or ex}")
        code = get_failing_code(result_codes)
        error_class = REJECTION_ERRORS.get(code, SubmissionRejectedError)
        message = get_stellar_error_message(result_codes)
        if error_class is SubmissionRejectedError:
            message = f"{prefix}: {message}"
        return error_class(message, code=code)

    async def _submit_classic(self, append_op, prefix: str, memo: Optional[str] = None) -> str:
        try:
            async with self._horizon() as server:
                source = await server.load_account(self.public_key)
                builder = append_op(self._builder(source))
                if memo:
                    builder.add_text_memo(memo)
                transaction = builder.set_timeout(TX_TIMEOUT).build()
                transaction.sign(self.keypair)
                logger.debug(f"Submitting {prefix!r} transaction {transaction.hash_hex()}")
                response = await server.submit_transaction(transaction)
            return response['hash']
        except NotFoundError as ex:
            raise AccountNotFoundError(
                f"{prefix}: source account {self.public_key} not found on {self.config.network.value}") from ex
        except BaseHorizonError as ex:
            raise self._horizon_rejection(ex, prefix) from ex
        except NETWORK_ERRORS as ex:
            raise ConnectivityError(
                f"Network error: Cannot connect to Horizon server at {self.config.horizon_url}") from ex
        except Exception as ex:
            raise SubmissionError(f"{prefix}: {ex}") from ex

    async def has_trustline(self) -> bool:
        try:
            balances = await self._get_balances()
        except NotFoundError:
            logger.warning(f"Account {self.config.wallet_address} not found, treating as no trustline")
            return False
        except Exception as ex:
            # any other failure is reported as "no trustline" too
            logger.warning(f"Trustline lookup failed, treating as no trustline: {ex!r}")
            return False
        return self._find_balance(balances) is not None

    async def create_trustline(self) -> str:
        return await self._submit_classic(
            lambda builder: builder.append_change_trust_op(asset=self._sdk_asset()),
            "Failed to create trustline",
        )

    async def get_balance_classic(self) -> str:
        try:
            balances = await self._get_balances()
        except NotFoundError as ex:
            raise AccountNotFoundError(
                f"Account not found. Make sure the account is funded and exists on {self.config.network.value}"
            ) from ex
        except NETWORK_ERRORS as ex:
            raise ConnectivityError(
                f"Network error: Cannot connect to Horizon server at {self.config.horizon_url}") from ex
        except Exception as ex:
            raise QueryError(f"Failed to get classic balance: {ex}") from ex

        balance = self._find_balance(balances)
        return balance['balance'] if balance else '0'

    async def get_balance_contract(self) -> str:
        try:
            async with self._soroban() as soroban:
                source = await soroban.load_account(self.public_key)
                transaction = (
                    self._builder(source)
                    .append_invoke_contract_function_op(
                        contract_id=self.config.sac_contract,
                        function_name="balance",
                        parameters=[scval.to_address(self.config.wallet_address)],
                    )
                    .set_timeout(TX_TIMEOUT)
                    .build()
                )
                logger.debug(f"Simulating SAC balance of {self.config.wallet_address}")
                response = await soroban.simulate_transaction(transaction)
        except AccountNotFoundException as ex:
            raise AccountNotFoundError(
                f"Account not found. Make sure the account is funded and exists on {self.config.network.value}"
            ) from ex
        except NETWORK_ERRORS as ex:
            raise ConnectivityError(
                f"Network error: Cannot connect to Soroban RPC server at {self.config.soroban_url}") from ex
        except Exception as ex:
            raise QueryError(f"Failed to get SAC balance: {ex}") from ex

        if response.error:
            raise self._simulation_error(response.error, "SAC simulation failed")
        if not response.results or not response.results[0].xdr:
            raise SimulationError("SAC balance call failed - no result returned")

        retval = stellar_xdr.SCVal.from_xdr(response.results[0].xdr)
        return from_base_units(scval.from_int128(retval))

    def _simulation_error(self, error: str, prefix: str) -> SimulationError:
        lowered = error.lower()
        if 'contract not found' in lowered or 'missingvalue' in lowered:
            return ContractNotFoundError(f"SAC contract not found: {self.config.sac_contract} ({error})")
        return SimulationError(f"{prefix}: {error}")

    async def send_classic(self, destination: str, amount: str, memo: Optional[str] = None) -> str:
        return await self._submit_classic(
            lambda builder: builder.append_payment_op(
                destination=destination, asset=self._sdk_asset(), amount=amount),
            "Failed to send PYUSD (classic)",
            memo=memo,
        )

    async def send_contract(self, destination: str, amount: str) -> str:
        prefix = "Failed to send PYUSD (SAC)"
        try:
            base_units = to_base_units(amount)
            async with self._soroban() as soroban:
                source = await soroban.load_account(self.public_key)
                transaction = (
                    self._builder(source)
                    .append_invoke_contract_function_op(
                        contract_id=self.config.sac_contract,
                        function_name="transfer",
                        parameters=[
                            scval.to_address(self.config.wallet_address),
                            scval.to_address(destination),
                            scval.to_int128(base_units),
                        ],
                    )
                    .set_timeout(TX_TIMEOUT)
                    .build()
                )
                simulation = await soroban.simulate_transaction(transaction)
                if simulation.error:
                    raise self._simulation_error(simulation.error, f"{prefix}: Transaction simulation failed")
                # footprint and resource fee come from the simulation
                transaction = await soroban.prepare_transaction(transaction, simulation)
                transaction.sign(self.keypair)
                logger.debug(f"Sending SAC transfer {transaction.hash_hex()}")
                response = await soroban.send_transaction(transaction)
        except PyusdError:
            raise
        except AccountNotFoundException as ex:
            raise AccountNotFoundError(
                f"{prefix}: source account {self.public_key} not found on {self.config.network.value}") from ex
        except NETWORK_ERRORS as ex:
            raise ConnectivityError(
                f"Network error: Cannot connect to Soroban RPC server at {self.config.soroban_url}") from ex
        except Exception as ex:
            raise SubmissionError(f"{prefix}: {ex}") from ex

        if response.status not in ACCEPTED_STATUSES:
            raise SubmissionRejectedError(
                f"{prefix}: transaction rejected ({response.error_result_xdr})", code=response.status.value)
        return response.hash
