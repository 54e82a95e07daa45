"""
Network ACLs.

Public and application tiers share one shape: a single allow-all rule pair
and one association per zone. The database tier only admits traffic from
the application blocks, one rule pair per block numbered ``100 + i``.
"""

from ipaddress import IPv4Network
from typing import Optional, Sequence, Union

from .. import constants
from ..constants import SubnetTier
from ..datacls import ResourceGraph, ResourceNode
from .intrinsics import ref, tag, name_tag, stack_name_join
from .subnets import subnet_name

BASE_RULE_NUMBER = 100


def network_acl_name(tier: SubnetTier) -> str:
    return f"{SubnetTier(tier).value}NetworkAcl"


def build_network_acl(tier: SubnetTier, stage: Optional[str] = None) -> ResourceGraph:
    tier = SubnetTier(tier)
    tags = [name_tag(stack_name_join(tier.value.lower()))]
    if stage:
        tags.insert(0, tag("STAGE", stage))
    return ResourceGraph.of(ResourceNode(
        name=network_acl_name(tier),
        type="AWS::EC2::NetworkAcl",
        properties={
            "Tags": tags,
            "VpcId": ref(constants.VPC),
        },
    ))


def build_network_acl_entry(tier: SubnetTier,
                            cidr_block: Union[str, IPv4Network],
                            egress: bool = False,
                            protocol: int = -1,
                            rule_action: str = "allow",
                            rule_number: int = BASE_RULE_NUMBER) -> ResourceGraph:
    """``{Tier}NetworkAcl{Ingress|Egress}{RuleNumber}``"""
    acl = network_acl_name(tier)
    direction = "Egress" if egress else "Ingress"
    return ResourceGraph.of(ResourceNode(
        name=f"{acl}{direction}{rule_number}",
        type="AWS::EC2::NetworkAclEntry",
        properties={
            "CidrBlock": str(cidr_block),
            "NetworkAclId": ref(acl),
            "Egress": egress,
            "Protocol": protocol,
            "RuleAction": rule_action,
            "RuleNumber": rule_number,
        },
    ))


def build_network_acl_association(tier: SubnetTier, position: int) -> ResourceGraph:
    tier = SubnetTier(tier)
    return ResourceGraph.of(ResourceNode(
        name=f"{tier.value}SubnetNetworkAclAssociation{position}",
        type="AWS::EC2::SubnetNetworkAclAssociation",
        properties={
            "SubnetId": ref(subnet_name(tier, position)),
            "NetworkAclId": ref(network_acl_name(tier)),
        },
    ))


def _allow_all_network_acl(tier: SubnetTier, num_zones: int, stage: Optional[str]) -> ResourceGraph:
    if num_zones < 1:
        return ResourceGraph()

    graph = build_network_acl(tier, stage).merge(
        build_network_acl_entry(tier, constants.ANYWHERE_CIDR),
        build_network_acl_entry(tier, constants.ANYWHERE_CIDR, egress=True),
    )
    return graph.merge(*(
        build_network_acl_association(tier, position)
        for position in range(1, num_zones + 1)
    ))


def build_public_network_acl(num_zones: int, stage: Optional[str] = None) -> ResourceGraph:
    return _allow_all_network_acl(SubnetTier.PUBLIC, num_zones, stage)


def build_app_network_acl(num_zones: int, stage: Optional[str] = None) -> ResourceGraph:
    return _allow_all_network_acl(SubnetTier.APP, num_zones, stage)


def build_db_network_acl(app_blocks: Sequence[Union[str, IPv4Network]],
                         stage: Optional[str] = None) -> ResourceGraph:
    """One ingress/egress pair per application block, plus one association per zone."""
    if not app_blocks:
        return ResourceGraph()

    graph = build_network_acl(SubnetTier.DB, stage)
    for index, block in enumerate(app_blocks):
        rule_number = BASE_RULE_NUMBER + index
        graph = graph.merge(
            build_network_acl_entry(SubnetTier.DB, block, rule_number=rule_number),
            build_network_acl_entry(SubnetTier.DB, block, egress=True, rule_number=rule_number),
            build_network_acl_association(SubnetTier.DB, index + 1),
        )
    return graph
