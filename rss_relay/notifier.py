"""
Protocol definition for notification backends.

Defines the interface the poll cycle uses to deliver messages.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """
    Protocol defining the interface for notification backends.

    A notifier delivers plain text messages to one fixed destination.
    The @runtime_checkable decorator allows using isinstance() checks
    against this protocol for structural typing validation.
    """

    async def deliver(self, message: str) -> None:
        """
        Deliver a message to the destination.

        Parameters
        ----------
        message : str
            Text to send.

        Raises
        ------
        DeliveryError
            If the message could not be delivered.
        """
        ...
