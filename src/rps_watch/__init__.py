"""rps_watch - polling sync layer for an on-chain Rock-Paper-Scissors game."""

__version__ = "0.1.0"
