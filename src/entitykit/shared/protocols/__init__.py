"""Protocol interfaces for dependency inversion."""

from entitykit.shared.protocols.storage import KeyValueStore

__all__ = ["KeyValueStore"]
