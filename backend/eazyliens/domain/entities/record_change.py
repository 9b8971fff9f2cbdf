"""Domain entity for change notifications on the record table."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ChangeAction(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class RecordChange:
    """A single insert/update/delete on the record table.

    Listeners never inspect the payload beyond logging it; any change means
    the current page is re-fetched.
    """

    action: ChangeAction
    record_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.action.value, "record_id": self.record_id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RecordChange":
        return cls(action=ChangeAction(data["action"]), record_id=data.get("record_id"))
