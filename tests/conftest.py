# tests/conftest.py
"""
Pytest configuration and fixtures for Aurora Risk Lab tests.
"""

import sys
from pathlib import Path

import pytest

# Make the package importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))


def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


# ============================================================================
# Fakes for external collaborators
# ============================================================================


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code: int = 200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


class FakeSession:
    """
    Stand-in for requests.Session

    ``routes`` maps a coin id to a FakeResponse, an exception instance to
    raise, or a list of those consumed one per call.
    """

    def __init__(self, routes: dict):
        self.routes = routes
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        asset_id = url.rstrip("/").split("/")[-2]
        outcome = self.routes.get(asset_id, FakeResponse(404, {"error": "coin not found"}))
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def calls_for(self, asset_id: str) -> int:
        return sum(1 for call in self.calls if f"/coins/{asset_id}/" in call["url"])


class FakePriceProvider:
    """In-memory PriceHistoryProvider recording what was requested"""

    def __init__(self, data: dict):
        self.data = data
        self.requests = []

    async def fetch_ohlc(self, asset_id, days):
        return self.data.get(asset_id)

    async def fetch_many(self, asset_ids, days):
        self.requests.append((list(asset_ids), days))
        return {asset_id: self.data.get(asset_id) for asset_id in asset_ids}


class FakeHoldingsProvider:
    def __init__(self, holdings):
        self.holdings = holdings
        self.wallets = []

    async def get_holdings(self, wallet_address):
        self.wallets.append(wallet_address)
        return self.holdings


class FakeTransactionsProvider:
    def __init__(self, transactions):
        self.transactions = transactions
        self.wallets = []

    async def get_transactions(self, wallet_address):
        self.wallets.append(wallet_address)
        return self.transactions


class FakeQuoteProvider:
    """Records quote requests; output mints listed in ``failing`` raise"""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.requests = []

    async def get_route_quote(self, input_mint, output_mint, amount):
        self.requests.append((input_mint, output_mint, amount))
        if output_mint in self.failing:
            raise ConnectionError("quote API unavailable")
        return {"inputMint": input_mint, "outputMint": output_mint, "inAmount": amount}


def make_transactions(*categories, programs=None):
    """Classified transactions, one per category, each touching one program"""
    programs = programs or ["JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4"]
    return [
        {
            "signature": f"sig{i}",
            "category": category,
            "instructions": [{"programId": programs[i % len(programs)]}],
        }
        for i, category in enumerate(categories)
    ]


class FakeClock:
    """Manually advanced clock for cache expiry tests"""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


# ============================================================================
# Fixtures
# ============================================================================

DAY_MS = 24 * 60 * 60 * 1000
START_MS = 1704067200000  # 2024-01-01T00:00:00Z


def make_bars(closes, start_ms: int = START_MS, step_ms: int = DAY_MS):
    """Build [ts, open, high, low, close] bars from closes"""
    return [
        [start_ms + i * step_ms, close, close, close, close] if close is not None
        else [start_ms + i * step_ms, None, None, None, None]
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def wallet_address():
    """A syntactically plausible Solana address"""
    return "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


@pytest.fixture
def sample_holdings():
    return [
        {"symbol": "SOL", "valueUSD": 600.0, "balance": 4.0, "price": 150.0},
        {"symbol": "USDC", "valueUSD": 300.0, "balance": 300.0, "price": 1.0},
        {"symbol": "BONK", "valueUSD": 100.0, "mint": "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"},
    ]


@pytest.fixture
def fake_clock():
    return FakeClock(start=1000.0)


@pytest.fixture
def flat_and_doubling_provider():
    """Two assets starting at 100: one flat, one doubling over the horizon"""
    return FakePriceProvider(
        {
            "usd-coin": make_bars([100.0, 100.0, 100.0]),
            "solana": make_bars([100.0, 150.0, 200.0]),
        }
    )
