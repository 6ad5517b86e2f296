"""Record id validation — ids are UUID strings assigned on insert."""

from uuid import UUID

from app.application.interfaces import IdValidator


class UUIDIdValidator(IdValidator):
    """Accepts canonical UUID strings (hyphenated, any case)."""

    def is_valid(self, value: str) -> bool:
        if not isinstance(value, str) or len(value) != 36:
            return False
        try:
            UUID(value)
        except ValueError:
            return False
        return True
