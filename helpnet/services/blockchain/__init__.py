"""
Blockchain access.

RPC endpoint failover, contract reads and owner transactions.
"""

from .contract_reader import ContractReader, QueueInfo, TokenAddresses
from .rpc_endpoint_selector import RpcEndpointSelector, create_async_web3

__all__ = [
    "ContractReader",
    "QueueInfo",
    "RpcEndpointSelector",
    "TokenAddresses",
    "create_async_web3",
]
