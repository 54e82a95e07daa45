"""
VPC Builder Run Context

Data classes exchanged between the run orchestrator, the external data
providers and the graph assembler.
"""

import copy
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .graph import ResourceGraph
from .outputs import OutputGraph
from .plan import AddressPlan


class ExternalData(BaseModel):
    """
    Results of the external lookups for one run.

    ``None`` means the lookup was not performed.
    """
    model_config = ConfigDict(frozen=True)

    zones: Optional[List[str]] = None
    nat_image_id: Optional[str] = None
    bastion_image_id: Optional[str] = None
    available_services: Optional[List[str]] = None
    prefix_lists: Dict[str, str] = Field(default_factory=dict)


class NetworkAttachment(BaseModel):
    """
    Caller-owned attachment list. The assembler appends the application
    security group and the application subnets so the caller can wire its own
    compute resources into the generated network.
    """
    security_group_ids: List[Any] = Field(default_factory=list)
    subnet_ids: List[Any] = Field(default_factory=list)

    def to_template(self) -> Dict[str, List[Any]]:
        return {
            "securityGroupIds": list(self.security_group_ids),
            "subnetIds": list(self.subnet_ids),
        }


class AssemblyResult(BaseModel):
    """
    Everything one run produces.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    plan: AddressPlan
    resources: ResourceGraph
    outputs: OutputGraph
    attachment: NetworkAttachment = Field(default_factory=NetworkAttachment)

    def merge_into(self, template: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Merge resources and outputs into a copy of an existing template.

        A generated resource or output replaces the template entry of the same
        name as a whole; every other entry and top-level key is kept.
        """
        merged = copy.deepcopy(template or {})
        resources = merged.get("Resources") or {}
        resources.update(self.resources.to_template())
        merged["Resources"] = resources
        outputs = merged.get("Outputs") or {}
        outputs.update(self.outputs.to_template())
        merged["Outputs"] = outputs
        return merged
