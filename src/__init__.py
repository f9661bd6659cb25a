"""X-AI Chat - streaming chat client for a remote assistant endpoint.

Combines httpx for streamed HTTP exchanges, NiceGUI for the chat page,
and Pydantic for models and configuration.

Components:
    - client: Request submission and incremental response ingestion
    - store: Chat log with provisional entry reconciliation
    - ui: Web interface for chat interactions
    - models: Entry, attachment and state schemas
"""

__version__ = "0.1.0"
