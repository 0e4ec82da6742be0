"""
Client data entity.

A client is one engineer waiting for espresso. It carries a fixed priority
window; whether it is "super-busy" is derived from the window and the
current time on every check.
"""

from dataclasses import dataclass

from .errors import InvalidClient


@dataclass(frozen=True)
class Client:
    """
    Immutable client with a closed priority window ``[priority_from, priority_to]``.

    Attributes:
        client_id: Unique sequence number assigned at creation
        priority_from: Absolute timestamp (seconds) when the window opens
        priority_to: Absolute timestamp (seconds) when the window closes

    Example:
        >>> client = Client(client_id=7, priority_from=10.0, priority_to=20.0)
        >>> client.is_priority(15.0)
        True
        >>> client.is_priority(20.5)
        False
    """

    client_id: int
    priority_from: float
    priority_to: float

    def is_priority(self, now: float) -> bool:
        """True iff ``now`` falls inside the priority window (both ends inclusive)."""
        return self.priority_from <= now <= self.priority_to

    def validate(self) -> None:
        """
        Check the window invariant.

        Raises:
            InvalidClient: If priority_from > priority_to
        """
        if self.priority_from > self.priority_to:
            raise InvalidClient(self)

    @property
    def window_length(self) -> float:
        """Length of the priority window in seconds."""
        return self.priority_to - self.priority_from
