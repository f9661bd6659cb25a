"""Integration tests for the ingestor, httpx and the store working together.

Coverage:
    - Successful, failed and empty exchanges
    - Multipart request format and bearer header
    - Rejection of overlapping submissions and cancellation

Backends are in-process httpx.MockTransport handlers that stream chunks
exactly as each test defines them.
"""
