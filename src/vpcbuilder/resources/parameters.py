from typing import Any, List, Optional

from ..datacls import ResourceGraph, ResourceNode
from .intrinsics import ref, join, sub, STACK_NAME

PARAMETER_PATH_PREFIX = "/vpc"


def parameter_name(logical_id: str) -> str:
    return f"Parameter{logical_id}"


def build_parameter(logical_id: str, value: Optional[List[Any]] = None) -> ResourceGraph:
    """
    SSM parameter publishing a resource id under ``/vpc/<stack>/<logical_id>``.

    Without a value the parameter holds ``Ref logical_id``; a list value is
    joined with commas and stored as a ``StringList``.
    """
    if value:
        param_type = "StringList"
        param_value = join(",", value)
    else:
        param_type = "String"
        param_value = ref(logical_id)

    return ResourceGraph.of(ResourceNode(
        name=parameter_name(logical_id),
        type="AWS::SSM::Parameter",
        properties={
            "Name": sub(f"{PARAMETER_PATH_PREFIX}/${{{STACK_NAME}}}/{logical_id}"),
            "Tier": "Standard",
            "Type": param_type,
            "Value": param_value,
        },
    ))
