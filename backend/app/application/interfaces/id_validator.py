"""Port for checking caller-supplied reference ids before they reach the store."""

from abc import ABC, abstractmethod


class IdValidator(ABC):

    @abstractmethod
    def is_valid(self, value: str) -> bool:
        """Whether ``value`` is a well-formed record id for the backing store."""
        ...
