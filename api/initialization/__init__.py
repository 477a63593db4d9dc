"""
API Initialization Module.

This module contains all initialization logic split into focused modules:
- logging: Logger configuration
- services: Service construction (RPC, contract, sync, read models)
- shutdown: Graceful shutdown handler
"""

__all__ = []
