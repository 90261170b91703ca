"""Stellar/Soroban integration components."""

from rps_watch.stellar.adapter import SorobanLedgerAdapter

__all__ = ["SorobanLedgerAdapter"]
