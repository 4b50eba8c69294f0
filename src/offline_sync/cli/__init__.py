"""offline-sync CLI.

Command-line client that works against a local record database and
syncs with the record server when it is reachable.

Usage:
    osync add NAME EMAIL        Create a record
    osync list                  List local records
    osync pending               Show changes waiting to sync
    osync sync                  Sync with the server
    osync serve                 Run the record server
"""

from offline_sync.cli.main import app, main

__all__ = ["app", "main"]
