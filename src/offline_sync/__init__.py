"""offline-sync: offline-first record client with queued changes and sync."""

__version__ = "0.1.0"
