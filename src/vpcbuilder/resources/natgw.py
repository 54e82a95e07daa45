from ..constants import SubnetTier
from ..datacls import ResourceGraph, ResourceNode
from .intrinsics import ref, get_att, sub, tag, name_tag, STACK_NAME
from .subnets import subnet_name


def nat_gateway_name(position: int) -> str:
    return f"NatGateway{position}"


def build_eip(position: int) -> ResourceGraph:
    return ResourceGraph.of(ResourceNode(
        name=f"EIP{position}",
        type="AWS::EC2::EIP",
        properties={"Domain": "vpc"},
    ))


def build_nat_gateway(position: int) -> ResourceGraph:
    """NAT gateway placed in ``PublicSubnet{P}``, using the address ``EIP{P}``."""
    subnet = subnet_name(SubnetTier.PUBLIC, position)
    return ResourceGraph.of(ResourceNode(
        name=nat_gateway_name(position),
        type="AWS::EC2::NatGateway",
        properties={
            "AllocationId": get_att(f"EIP{position}", "AllocationId"),
            "SubnetId": ref(subnet),
            "Tags": [
                name_tag(sub(f"${{{STACK_NAME}}}-${{{subnet}.AvailabilityZone}}")),
                tag("Network", "Public"),
            ],
        },
    ))


def build_nat_gateway_pair(position: int) -> ResourceGraph:
    """Elastic address and NAT gateway, always produced together at the same position."""
    return build_eip(position).merge(build_nat_gateway(position))
