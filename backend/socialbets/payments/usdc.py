"""USDC transfer requests in the wallet send-calls format."""

from __future__ import annotations

import logging
import re
from decimal import ROUND_DOWN, Decimal

from pydantic import BaseModel, ConfigDict, Field

from socialbets.markets.models import PaymentRequest

logger = logging.getLogger(__name__)

USDC_DECIMALS = 6

# ERC-20 transfer(address,uint256)
TRANSFER_SELECTOR = "a9059cbb"

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class USDCNetwork(BaseModel):
    """USDC deployment on a single chain."""

    network_id: str
    chain_id: int
    token_address: str
    network_name: str


NETWORKS: dict[str, USDCNetwork] = {
    "base-sepolia": USDCNetwork(
        network_id="base-sepolia",
        chain_id=84532,
        token_address="0x036CbD53842c5426634e7929541eC2318f3dCF7e",
        network_name="Base Sepolia",
    ),
    "base-mainnet": USDCNetwork(
        network_id="base-mainnet",
        chain_id=8453,
        token_address="0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
        network_name="Base Mainnet",
    ),
}


class CallMetadata(BaseModel):
    """Human-readable description attached to a single call."""

    model_config = ConfigDict(populate_by_name=True)

    description: str
    transaction_type: str = Field(default="transfer", alias="transactionType")
    currency: str = "USDC"
    amount: int
    decimals: int = USDC_DECIMALS
    network_id: str = Field(alias="networkId")


class WalletCall(BaseModel):
    """One contract call the payer's wallet is asked to sign."""

    to: str
    data: str
    metadata: CallMetadata


class WalletSendCalls(BaseModel):
    """Batch of calls requested from the payer's wallet."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = "1.0"
    from_address: str = Field(alias="from")
    chain_id: str = Field(alias="chainId")
    calls: list[WalletCall]

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


def to_minimum_units(amount: Decimal | int | float | str) -> int:
    """Convert a USDC amount into its smallest unit, truncating toward zero."""
    scaled = Decimal(str(amount)) * (Decimal(10) ** USDC_DECIMALS)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def is_address(value: str) -> bool:
    return bool(_ADDRESS_RE.match(value))


def encode_transfer(recipient: str, amount_units: int) -> str:
    """ABI-encode an ERC-20 ``transfer`` call."""
    if not is_address(recipient):
        raise ValueError(f"Invalid recipient address: {recipient}")
    if amount_units < 0:
        raise ValueError(f"Transfer amount must be non-negative: {amount_units}")
    recipient_word = recipient[2:].lower().rjust(64, "0")
    amount_word = format(amount_units, "x").rjust(64, "0")
    return f"0x{TRANSFER_SELECTOR}{recipient_word}{amount_word}"


class USDCHandler:
    """Builds USDC transfer requests for a configured network."""

    def __init__(self, network_id: str):
        if network_id not in NETWORKS:
            raise ValueError(f"Unsupported network: {network_id}")
        self.network = NETWORKS[network_id]

    def create_transfer_calls(
        self,
        payer: str,
        payee: str,
        amount_units: int,
    ) -> WalletSendCalls:
        """Create the send-calls payload moving ``amount_units`` from payer to payee."""
        if not is_address(payer):
            raise ValueError(f"Invalid payer address: {payer}")

        display_amount = Decimal(amount_units) / (Decimal(10) ** USDC_DECIMALS)
        return WalletSendCalls(
            from_address=payer,
            chain_id=hex(self.network.chain_id),
            calls=[
                WalletCall(
                    to=self.network.token_address,
                    data=encode_transfer(payee, amount_units),
                    metadata=CallMetadata(
                        description=f"Transfer {display_amount} USDC on {self.network.network_name}",
                        amount=amount_units,
                        network_id=self.network.network_id,
                    ),
                )
            ],
        )

    def create_payment_calls(self, request: PaymentRequest) -> WalletSendCalls:
        return self.create_transfer_calls(
            payer=request.payer,
            payee=request.payee,
            amount_units=request.amount_units,
        )
