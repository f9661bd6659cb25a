"""Unit tests for individual components in isolation.

Coverage:
    - store/: Provisional replacement, promotion and notifications
    - client/: Incremental decoding and configuration
    - ui/: Welcome phrase and bubble styling helpers
"""
