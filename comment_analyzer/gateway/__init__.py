"""Dispatch gateway for the analyze API.

Provides the async machinery between callers and the rate-limited API:
  - Priority tiers of in-flight calls (HIGH / NORMAL / LOW, bounded)
  - Pacer releasing at most one result per tick
  - Dispatcher worker multiplexing submissions, ticks and shutdown
  - Remote call adapter (httpx) and response decoder
"""
