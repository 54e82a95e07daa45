"""
Route tables, their subnet associations and default routes.

Names follow ``{Tier}RouteTable{P}``, ``{Tier}RouteTableAssociation{P}`` and
``{Tier}Route{P}``; the route table and association reference the subnet
``{Tier}Subnet{P}`` by the same formula.
"""

from typing import Optional

from .. import constants
from ..constants import SubnetTier
from ..datacls import ResourceGraph, ResourceNode
from ..exceptions import InvalidRouteTargetError
from .intrinsics import ref, sub, name_tag, STACK_NAME
from .subnets import subnet_name, network_tag


def route_table_name(tier: SubnetTier, position: int) -> str:
    return f"{SubnetTier(tier).value}RouteTable{position}"


def build_route_table(tier: SubnetTier, position: int) -> ResourceGraph:
    tier = SubnetTier(tier)
    subnet = subnet_name(tier, position)
    return ResourceGraph.of(ResourceNode(
        name=route_table_name(tier, position),
        type="AWS::EC2::RouteTable",
        properties={
            "VpcId": ref(constants.VPC),
            "Tags": [
                name_tag(sub(f"${{{STACK_NAME}}}-{tier.value.lower()}-${{{subnet}.AvailabilityZone}}")),
                network_tag(tier),
            ],
        },
    ))


def build_route_table_association(tier: SubnetTier, position: int) -> ResourceGraph:
    tier = SubnetTier(tier)
    return ResourceGraph.of(ResourceNode(
        name=f"{tier.value}RouteTableAssociation{position}",
        type="AWS::EC2::SubnetRouteTableAssociation",
        properties={
            "RouteTableId": ref(route_table_name(tier, position)),
            "SubnetId": ref(subnet_name(tier, position)),
        },
    ))


def build_route(tier: SubnetTier,
                position: int,
                nat_gateway: Optional[str] = None,
                gateway: Optional[str] = None,
                instance: Optional[str] = None) -> ResourceGraph:
    """
    Default route (``0.0.0.0/0``) of ``{Tier}RouteTable{P}``.

    Exactly one target must be given: a NAT gateway, an internet gateway or
    an instance, each by logical name. Public routes and internet gateway
    routes wait for the gateway attachment.

    Raises:
        InvalidRouteTargetError: when no target or more than one is given
    """
    tier = SubnetTier(tier)
    targets = {
        "NatGatewayId": nat_gateway,
        "GatewayId": gateway,
        "InstanceId": instance,
    }
    chosen = {key: name for key, name in targets.items() if name}
    if not chosen:
        raise InvalidRouteTargetError(
            f"Unable to create route {tier.value}Route{position}: "
            f"either NatGatewayId, GatewayId or InstanceId must be provided"
        )
    if len(chosen) > 1:
        raise InvalidRouteTargetError(
            f"Unable to create route {tier.value}Route{position}: "
            f"only one target may be provided, got {', '.join(chosen)}"
        )

    properties = {
        "DestinationCidrBlock": constants.ANYWHERE_CIDR,
        "RouteTableId": ref(route_table_name(tier, position)),
    }
    for key, name in chosen.items():
        properties[key] = ref(name)

    depends_on = []
    if tier is SubnetTier.PUBLIC or gateway:
        depends_on.append(constants.INTERNET_GATEWAY_ATTACHMENT)

    return ResourceGraph.of(ResourceNode(
        name=f"{tier.value}Route{position}",
        type="AWS::EC2::Route",
        properties=properties,
        depends_on=depends_on,
    ))
