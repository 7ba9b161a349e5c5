"""
Chain access: the client adapter and receipt log decoding.
"""
from .client import ChainClient, Web3ChainClient, convert_receipt
from .events import decode_log, decode_logs

__all__ = ["ChainClient", "Web3ChainClient", "convert_receipt", "decode_log", "decode_logs"]
