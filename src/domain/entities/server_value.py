"""Server-assigned value placeholders."""

from typing import Final


class ServerTimestamp:
    """Marker the store replaces with its own commit time in milliseconds."""

    def __repr__(self) -> str:
        return "ServerValue.TIMESTAMP"


class ServerValue:
    """Namespace for server-side value sentinels."""

    TIMESTAMP: Final = ServerTimestamp()
