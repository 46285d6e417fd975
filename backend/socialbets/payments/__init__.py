"""Payment request construction."""

from .usdc import (
    NETWORKS,
    USDCHandler,
    WalletSendCalls,
    encode_transfer,
    to_minimum_units,
)

__all__ = [
    "NETWORKS",
    "USDCHandler",
    "WalletSendCalls",
    "encode_transfer",
    "to_minimum_units",
]
