"""Test package for X-AI Chat.

Unit tests for isolated logic and integration tests for full exchanges.

Structure:
    - unit/: Store, decoder, config and presentation helpers
    - integration/: Ingestor exchanges against fake streaming backends

Fake backends run through httpx.MockTransport, so no network is needed.
Leverages pytest with pytest-check for soft assertions.
"""
