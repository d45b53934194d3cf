"""The contract between the timeline store and the SNL command executor.

The executor (transport, authentication, timeouts and retries) lives
outside this library. Anything with a matching async execute() method
can back a TimelineStore.
"""

from typing import Any, Protocol, runtime_checkable

__all__ = ["CommandExecutor"]


@runtime_checkable
class CommandExecutor(Protocol):
    """Runs SNL command text against the key/value store."""

    async def execute(self, command: str, token: str) -> Any:
        """Run one command on behalf of the holder of ``token``.

        Returns:
            The store's raw response: usually a mapping of key to payload,
            possibly JSON text, or None when there is nothing to return.

        """
        ...
