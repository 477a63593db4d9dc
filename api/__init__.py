"""
HTTP API.

aiohttp application exposing the indexed data and owner operations under
/api.
"""
