"""LMSR automated market maker: pricing engine and collateral ledger."""

__version__ = "0.1.0"
