"""
HelpNet indexer.

Indexes the HelpNet mutual-aid contract events into PostgreSQL and keeps
aggregate counters in Redis.
"""

__version__ = "1.0.0"
