"""NiceGUI interface - thin visualization layer for the chat.

Responsibilities:
    - Chat log display, re-rendered on every store change
    - Thinking indicator while an exchange is in flight
    - Attachment picker (gallery, camera, documents)
    - Daily welcome phrase

Contains no exchange logic. Delegates everything to the StreamIngestor.
"""
