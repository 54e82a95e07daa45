"""
VPC Builder Data Classes

- plan: AddressPlan computed by the address planner
- graph: ResourceNode and ResourceGraph
- outputs: OutputEntry and OutputGraph
- contexts: ExternalData, NetworkAttachment and AssemblyResult
"""

from .plan import AddressPlan
from .graph import ResourceNode, ResourceGraph
from .outputs import OutputEntry, OutputGraph
from .contexts import ExternalData, NetworkAttachment, AssemblyResult

__all__ = [
    'AddressPlan',
    'ResourceNode',
    'ResourceGraph',
    'OutputEntry',
    'OutputGraph',
    'ExternalData',
    'NetworkAttachment',
    'AssemblyResult',
]
