"""
Chain collaborator interfaces and the web3-backed reader.
"""

from .base import (
    ChainReader,
    ChainWriter,
    ContractCall,
    ReadConfig,
    WalletSession,
    Web3ChainReader,
)
from .errors import ChainError, ContractError, ErrorHandler, RemoteCallError

__all__ = [
    'ChainReader',
    'ChainWriter',
    'ContractCall',
    'ReadConfig',
    'WalletSession',
    'Web3ChainReader',
    'ChainError',
    'ContractError',
    'ErrorHandler',
    'RemoteCallError',
]
