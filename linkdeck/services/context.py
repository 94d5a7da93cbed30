"""Transport metadata of an inbound request."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Peer address and headers captured for activity recording.

    Missing headers are carried as empty strings; an empty ``peer`` means
    the transport did not expose the client address.
    """

    peer: str = ""
    referer: str = ""
    user_agent: str = ""
