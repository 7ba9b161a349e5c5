"""
Protocol operations built on the transaction pipeline.
"""
from . import participation, registry, token, trading

__all__ = ["participation", "registry", "token", "trading"]
