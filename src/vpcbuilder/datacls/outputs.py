from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

from pydantic import BaseModel, ConfigDict


class OutputEntry(BaseModel):
    """
        Class represents one stack output: a value with optional description and export name.
    """
    model_config = ConfigDict(frozen=True)

    value: Any
    description: Optional[str] = None
    export_name: Optional[Any] = None

    def to_template(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if self.description is not None:
            body["Description"] = self.description
        if self.export_name is not None:
            body["Export"] = {"Name": self.export_name}
        body["Value"] = self.value
        return body


class OutputGraph(Mapping):
    """
        Ordered, immutable mapping of output name -> OutputEntry.
    """

    def __init__(self, entries: Optional[Dict[str, OutputEntry]] = None):
        self._entries: Dict[str, OutputEntry] = dict(entries or {})

    def __getitem__(self, name: str) -> OutputEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OutputGraph):
            return self._entries == other._entries
        return NotImplemented

    def merge(self, *others: "OutputGraph") -> "OutputGraph":
        merged = dict(self._entries)
        for other in others:
            merged.update(other.items())
        return OutputGraph(merged)

    def to_template(self) -> Dict[str, Dict[str, Any]]:
        return {name: entry.to_template() for name, entry in self._entries.items()}
