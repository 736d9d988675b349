"""Test fixtures and utilities."""

from typing import Any

import pytest

from py712.config import Config
from py712.engine import TypedDataEngine
from py712.registry import TypeRegistry
from py712.typed_data import DomainContext

VERIFYING_CONTRACT = "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC"

# keccak256(b"")
EMPTY_KECCAK = bytes.fromhex("c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470")

MAIL_TYPES: dict[str, list[dict[str, str]]] = {
    "Person": [
        {"name": "name", "type": "string"},
        {"name": "wallet", "type": "address"},
    ],
    "Mail": [
        {"name": "from", "type": "Person"},
        {"name": "to", "type": "Person"},
        {"name": "contents", "type": "string"},
    ],
}

SETTLEMENT_TYPES: dict[str, list[dict[str, str]]] = {
    "SettleData": [
        {"type": "address[]", "name": "tokens"},
        {"type": "uint256[]", "name": "clearingPrices"},
        {"type": "GPv2TradeData[]", "name": "trades"},
        {"type": "GPv2InteractionData[]", "name": "preInteractions"},
    ],
    "GPv2TradeData": [
        {"type": "uint256", "name": "sellTokenIndex"},
        {"type": "uint256", "name": "buyTokenIndex"},
        {"type": "address", "name": "receiver"},
        {"type": "uint256", "name": "sellAmount"},
        {"type": "uint256", "name": "buyAmount"},
        {"type": "uint32", "name": "validTo"},
        {"type": "bytes32", "name": "appData"},
        {"type": "uint256", "name": "feeAmount"},
        {"type": "uint256", "name": "flags"},
        {"type": "uint256", "name": "executedAmount"},
        {"type": "bytes", "name": "signature"},
    ],
    "GPv2InteractionData": [
        {"type": "address", "name": "target"},
        {"type": "uint256", "name": "value"},
        {"type": "bytes", "name": "callData"},
    ],
}

APP_DATA = "0x80b560006b96ae18be8a708574995140228a3b5c6fd541d6ab937f7937280d0b"
ETHER = 10**18


def make_trade(**overrides: Any) -> dict[str, Any]:
    """Return a GPv2TradeData value, with optional field overrides."""
    trade: dict[str, Any] = {
        "sellTokenIndex": 0,
        "buyTokenIndex": 1,
        "receiver": "0x" + "11" * 20,
        "sellAmount": ETHER,
        "buyAmount": ETHER // 2,
        "validTo": 123456,
        "appData": APP_DATA,
        "feeAmount": 0,
        "flags": 0x11,
        "executedAmount": ETHER,
        "signature": "0x" + "00" * 48 + "0555" + "55" * 24 + "50",
    }
    trade.update(overrides)
    return trade


def make_interaction(**overrides: Any) -> dict[str, Any]:
    """Return a GPv2InteractionData value, with optional field overrides."""
    interaction: dict[str, Any] = {
        "target": "0x" + "22" * 20,
        "value": ETHER // 10,
        "callData": "0x3434343434343434343434355555555555555555555555555555555554",
    }
    interaction.update(overrides)
    return interaction


@pytest.fixture
def config() -> Config:
    """Create a test configuration."""
    return Config(log_level="DEBUG")


@pytest.fixture
def mail_registry() -> TypeRegistry:
    """Create a registry with the EIP-712 example Mail types."""
    return TypeRegistry.from_types(MAIL_TYPES)


@pytest.fixture
def settlement_registry() -> TypeRegistry:
    """Create a registry with the settlement types."""
    return TypeRegistry.from_types(SETTLEMENT_TYPES)


@pytest.fixture
def mail_engine(config: Config) -> TypedDataEngine:
    """Create an engine for the Mail types."""
    return TypedDataEngine(MAIL_TYPES, config)


@pytest.fixture
def settlement_engine(config: Config) -> TypedDataEngine:
    """Create an engine for the settlement types."""
    return TypedDataEngine(SETTLEMENT_TYPES, config)


@pytest.fixture
def mail_message() -> dict[str, Any]:
    """Return the message from the EIP-712 reference example."""
    return {
        "from": {"name": "Cow", "wallet": "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"},
        "to": {"name": "Bob", "wallet": "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"},
        "contents": "Hello, Bob!",
    }


@pytest.fixture
def mail_domain() -> DomainContext:
    """Return the domain from the EIP-712 reference example."""
    return DomainContext(
        name="Ether Mail",
        version="1",
        chain_id=1,
        verifying_contract=VERIFYING_CONTRACT,
    )


@pytest.fixture
def settlement_domain() -> DomainContext:
    """Return the settlement signing domain."""
    return DomainContext(
        name="SignedSettlement",
        version="1",
        chain_id=1,
        verifying_contract=VERIFYING_CONTRACT,
    )


@pytest.fixture
def settle_data() -> dict[str, Any]:
    """Return a SettleData value with three trades and two interactions."""
    return {
        "tokens": ["0x" + "a1" * 20, "0x" + "a2" * 20, "0x" + "a3" * 20],
        "clearingPrices": [10 * ETHER, 5 * ETHER, 5 * 10**6],
        "trades": [
            make_trade(),
            make_trade(
                buyTokenIndex=2,
                receiver="0x" + "12" * 20,
                sellAmount=10 * ETHER,
                buyAmount=3 * ETHER // 10,
                validTo=78901234,
                executedAmount=3 * ETHER // 2,
            ),
            make_trade(
                sellTokenIndex=2,
                receiver="0x" + "13" * 20,
                sellAmount=ETHER // 10,
                validTo=567890,
                executedAmount=6 * ETHER // 5,
                signature="0x" + "23" * 300,
            ),
        ],
        "preInteractions": [
            make_interaction(),
            make_interaction(
                target="0x" + "33" * 20,
                value=12 * ETHER,
                callData="0x666666666666666666666666666666666666666666666666663434343434",
            ),
        ],
    }
