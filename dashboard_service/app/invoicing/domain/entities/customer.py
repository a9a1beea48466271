from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Customer:
    id: str
    name: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Customer":
        return cls(id=str(record["id"]), name=record["name"])

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}
