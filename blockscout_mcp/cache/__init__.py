"""
Cache module for chain registry records.
"""

from blockscout_mcp.cache.chain_cache import ChainCache, ReadWriteLock

__all__ = ['ChainCache', 'ReadWriteLock']
