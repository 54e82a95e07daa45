"""
Resource Graph

A ResourceGraph is an immutable mapping of unique logical name -> ResourceNode.
Nodes refer to each other by name only (``Ref``, ``Fn::GetAtt``, ``Fn::Sub``
placeholders and ``DependsOn``), which is how the provisioning engine resolves
them. Assembly threads graph values through ``merge()`` instead of mutating a
shared dictionary.
"""

import copy
import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import DuplicateResourceError

logger = logging.getLogger(__name__)

PSEUDO_PREFIX = "AWS::"
_SUB_PLACEHOLDER = re.compile(r"\$\{([^}!]+)\}")


def _collect_refs(value: Any, found: Set[str]) -> None:
    if isinstance(value, dict):
        if len(value) == 1:
            key, arg = next(iter(value.items()))
            if key == "Ref" and isinstance(arg, str):
                found.add(arg)
                return
            if key == "Fn::GetAtt" and isinstance(arg, list) and arg:
                found.add(arg[0])
                return
            if key == "Fn::Sub":
                template, variables = (arg, {}) if isinstance(arg, str) else (arg[0], arg[1])
                for placeholder in _SUB_PLACEHOLDER.findall(template):
                    name = placeholder.split(".", 1)[0]
                    if name not in variables:
                        found.add(name)
                _collect_refs(variables, found)
                return
        for item in value.values():
            _collect_refs(item, found)
    elif isinstance(value, list):
        for item in value:
            _collect_refs(item, found)


class ResourceNode(BaseModel):
    """
    A named, typed resource definition with a property bag.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    properties: Dict[str, Any] = Field(default_factory=dict)
    depends_on: List[str] = Field(default_factory=list)
    # resource-level attributes, e.g. DeletionPolicy or CreationPolicy
    attributes: Dict[str, Any] = Field(default_factory=dict)

    def references(self) -> Set[str]:
        """Every logical name this node points at, pseudo parameters excluded."""
        found: Set[str] = set(self.depends_on)
        _collect_refs(self.properties, found)
        _collect_refs(self.attributes, found)
        return {name for name in found if not name.startswith(PSEUDO_PREFIX)}

    def to_template(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"Type": self.type}
        if self.depends_on:
            body["DependsOn"] = list(self.depends_on)
        body.update(copy.deepcopy(self.attributes))
        body["Properties"] = copy.deepcopy(self.properties)
        return body


class ResourceGraph(Mapping):
    """
    Immutable mapping of logical name -> ResourceNode.
    """

    def __init__(self, nodes: Optional[Dict[str, ResourceNode]] = None):
        self._nodes: Dict[str, ResourceNode] = dict(nodes or {})

    @classmethod
    def of(cls, *nodes: ResourceNode) -> "ResourceGraph":
        """Build a graph from nodes, rejecting conflicting names."""
        return cls().merge(*(cls({node.name: node}) for node in nodes))

    def __getitem__(self, name: str) -> ResourceNode:
        return self._nodes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResourceGraph):
            return self._nodes == other._nodes
        return NotImplemented

    def __repr__(self) -> str:
        return f"ResourceGraph({list(self._nodes)})"

    def merge(self, *others: "ResourceGraph") -> "ResourceGraph":
        """
        Return a new graph holding this graph's nodes followed by the others'.

        The same name may appear twice only if both nodes are identical.
        """
        merged = dict(self._nodes)
        for other in others:
            for name, node in other.items():
                existing = merged.get(name)
                if existing is not None and existing != node:
                    raise DuplicateResourceError(
                        f"Resource '{name}' is defined twice with different definitions."
                    )
                merged[name] = node
        return ResourceGraph(merged)

    def of_type(self, resource_type: str) -> List[ResourceNode]:
        return [node for node in self._nodes.values() if node.type == resource_type]

    def dangling_references(self) -> List[Tuple[str, str]]:
        """(node, reference) pairs that do not resolve to a node in this graph."""
        dangling = []
        for name, node in self._nodes.items():
            for target in sorted(node.references()):
                if target not in self._nodes:
                    dangling.append((name, target))
        return dangling

    def to_template(self) -> Dict[str, Dict[str, Any]]:
        return {name: node.to_template() for name, node in self._nodes.items()}
