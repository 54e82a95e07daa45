from ipaddress import IPv4Network
from typing import Optional, Union

from .. import constants
from ..constants import SubnetTier
from ..datacls import ResourceGraph, ResourceNode
from .intrinsics import ref, sub, tag, name_tag, STACK_NAME


def subnet_name(tier: SubnetTier, position: int) -> str:
    return f"{SubnetTier(tier).value}Subnet{position}"


def network_tag(tier: SubnetTier) -> dict:
    """Public tier resources are tagged ``Network=Public``, the rest ``Private``."""
    return tag("Network", "Public" if SubnetTier(tier) is SubnetTier.PUBLIC else "Private")


def build_subnet(tier: SubnetTier,
                 position: int,
                 zone: str,
                 block: Union[str, IPv4Network],
                 stage: Optional[str] = None) -> ResourceGraph:
    """
    Build the ``{Tier}Subnet{Position}`` node placed in ``zone``.

    Args:
        tier: subnet tier, its value is the naming prefix
        position: 1-based zone position
        zone: availability zone the subnet lives in
        block: address block of the subnet
        stage: optional stage label, added as ``STAGE`` tag
    """
    tier = SubnetTier(tier)
    tags = [
        name_tag(sub(f"${{{STACK_NAME}}}-{tier.value.lower()}-{zone}")),
        network_tag(tier),
    ]
    if stage:
        tags.append(tag("STAGE", stage))
    return ResourceGraph.of(ResourceNode(
        name=subnet_name(tier, position),
        type="AWS::EC2::Subnet",
        properties={
            "AvailabilityZone": zone,
            "CidrBlock": str(block),
            "Tags": tags,
            "VpcId": ref(constants.VPC),
        },
    ))
