from types import SimpleNamespace
from typing import Optional
from unittest.mock import AsyncMock, patch

import pytest
from aiohttp import web
from stellar_sdk import Account

from pyusd_stellar.core.interfaces.services import IPyusdService
from tests.helpers import CONTRACT, ENV_NAMES, ISSUER, SENDER, SENDER_KEYPAIR, get_free_port, make_config


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def valid_env(clean_env):
    clean_env.setenv("PRIVATE_KEY", SENDER_KEYPAIR.secret)
    clean_env.setenv("WALLET_ADDRESS", SENDER)
    clean_env.setenv("PYUSD_ISSUER", ISSUER)
    clean_env.setenv("PYUSD_SAC_CONTRACT", CONTRACT)
    return clean_env


@pytest.fixture(scope="function")
def horizon_server_config():
    port = get_free_port()
    return {"host": "127.0.0.1", "port": port, "url": f"http://127.0.0.1:{port}"}


@pytest.fixture
def config(horizon_server_config):
    return make_config(horizon_url=horizon_server_config["url"])


@pytest.fixture
def mock_service():
    service = AsyncMock(spec=IPyusdService)
    service.has_trustline.return_value = True
    service.get_balance_classic.return_value = "100.0000000"
    service.get_balance_contract.return_value = "100.0000000"
    service.send_classic.return_value = "classic_hash"
    service.send_contract.return_value = "sac_hash"
    service.create_trustline.return_value = "trust_hash"
    return service


@pytest.fixture
async def mock_horizon(horizon_server_config):
    """
    Starts a local mock Stellar Horizon server.

    Usage in tests:
        async def test_something(mock_horizon, config):
            mock_horizon.set_account(SENDER, balances=[pyusd_balance("10")])
            ...
            assert mock_horizon.get_requests("transactions")
    """
    routes = web.RouteTableDef()

    class HorizonMockState:
        def __init__(self):
            self.requests = []
            self.accounts = {}  # account_id -> account data
            self.not_found_accounts = set()  # accounts that should return 404
            self.transaction_response = {"successful": True, "hash": "abc123"}
            self.transaction_status = 200

        def set_account(self, account_id: str, balances: Optional[list] = None, sequence: str = "123456789"):
            """Configure account response."""
            self.not_found_accounts.discard(account_id)
            self.accounts[account_id] = {
                "id": account_id,
                "account_id": account_id,
                "sequence": sequence,
                "balances": [{"asset_type": "native", "balance": "100.0000000"}] + (balances or []),
                "signers": [{"key": account_id, "weight": 1, "type": "ed25519_public_key"}],
                "thresholds": {"low_threshold": 0, "med_threshold": 0, "high_threshold": 0},
                "data": {},
                "flags": {"auth_required": False, "auth_revocable": False, "auth_immutable": False},
                "paging_token": account_id
            }

        def set_not_found(self, account_id: str):
            """Force account to return 404."""
            self.not_found_accounts.add(account_id)
            self.accounts.pop(account_id, None)

        def set_transaction_response(self, successful: bool = True, hash: str = "abc123",
                                     result_codes: Optional[dict] = None):
            """Configure transaction submit response."""
            if successful:
                self.transaction_status = 200
                self.transaction_response = {"successful": True, "hash": hash, "ledger": 12345}
                return
            self.transaction_status = 400
            self.transaction_response = {
                "type": "https://stellar.org/horizon-errors/transaction_failed",
                "title": "Transaction Failed",
                "status": 400,
                "detail": "The transaction failed when submitted to the stellar network.",
                "extras": {"result_codes": result_codes or {"transaction": "tx_failed"}},
            }

        def get_requests(self, endpoint: Optional[str] = None):
            """Get received requests, optionally filtered by endpoint."""
            if endpoint:
                return [r for r in self.requests if r["endpoint"] == endpoint]
            return self.requests

    state = HorizonMockState()

    @routes.get("/accounts/{account_id}")
    async def get_account(request):
        account_id = request.match_info['account_id']
        state.requests.append({
            "endpoint": "accounts",
            "method": "GET",
            "account_id": account_id,
        })

        if account_id in state.not_found_accounts:
            return web.json_response({"status": 404, "title": "Resource Missing", "detail": "Account not found"},
                                     status=404)

        if account_id in state.accounts:
            return web.json_response(state.accounts[account_id])

        # Default: a funded account with only XLM
        state.set_account(account_id)
        return web.json_response(state.accounts.pop(account_id))

    @routes.post("/transactions")
    async def submit_transaction(request):
        data = await request.post()
        state.requests.append({
            "endpoint": "transactions",
            "method": "POST",
            "data": dict(data)
        })
        return web.json_response(state.transaction_response, status=state.transaction_status)

    @routes.get("/{path:.*}")
    async def catch_all_get(request):
        path = request.match_info['path']
        state.requests.append({"endpoint": f"UNHANDLED:{path}", "method": "GET"})
        return web.json_response({"error": f"Mock endpoint not implemented: GET /{path}"}, status=404)

    app = web.Application()
    app.add_routes(routes)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, horizon_server_config["host"], horizon_server_config["port"])
    await site.start()

    yield state

    await runner.cleanup()


@pytest.fixture
def mock_soroban():
    """
    Replaces SorobanServerAsync in the service module with an AsyncMock server.
    Simulation and send responses are configured per test.
    """
    server = AsyncMock()
    server.load_account.side_effect = lambda account_id: Account(account_id, 1)
    server.prepare_transaction.side_effect = lambda transaction, simulation: transaction
    server.simulate_transaction.return_value = SimpleNamespace(error=None, results=[])

    with patch("pyusd_stellar.infrastructure.services.stellar_service.SorobanServerAsync") as server_class:
        server_class.return_value.__aenter__.return_value = server
        server_class.return_value.__aexit__.return_value = False
        yield server
