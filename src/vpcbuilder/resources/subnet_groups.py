"""
Database subnet groups. Each collects ``DBSubnet1..n`` in zone order.
"""

import logging
from typing import Callable, Dict, List

from .. import constants
from ..constants import SubnetTier
from ..datacls import ResourceGraph, ResourceNode
from ..exceptions import ConfigurationError
from .intrinsics import ref, STACK_NAME
from .subnets import subnet_name

logger = logging.getLogger(__name__)


def _db_subnet_refs(num_zones: int) -> List[dict]:
    return [ref(subnet_name(SubnetTier.DB, p)) for p in range(1, num_zones + 1)]


def _subnet_group(kind: str, resource_type: str, num_zones: int, **properties) -> ResourceGraph:
    if num_zones < 1:
        return ResourceGraph()
    properties["SubnetIds"] = _db_subnet_refs(num_zones)
    return ResourceGraph.of(ResourceNode(
        name=constants.SUBNET_GROUP_NAMES[kind],
        type=resource_type,
        properties=properties,
    ))


def build_rds_subnet_group(num_zones: int) -> ResourceGraph:
    return _subnet_group(
        "rds", "AWS::RDS::DBSubnetGroup", num_zones,
        DBSubnetGroupName=ref(STACK_NAME),
        DBSubnetGroupDescription=ref(STACK_NAME),
    )


def build_redshift_subnet_group(num_zones: int) -> ResourceGraph:
    return _subnet_group(
        "redshift", "AWS::Redshift::ClusterSubnetGroup", num_zones,
        Description=ref(STACK_NAME),
    )


def build_elasticache_subnet_group(num_zones: int) -> ResourceGraph:
    return _subnet_group(
        "elasticache", "AWS::ElastiCache::SubnetGroup", num_zones,
        CacheSubnetGroupName=ref(STACK_NAME),
        Description=ref(STACK_NAME),
    )


def build_dax_subnet_group(num_zones: int) -> ResourceGraph:
    return _subnet_group(
        "dax", "AWS::DAX::SubnetGroup", num_zones,
        SubnetGroupName=ref(STACK_NAME),
        Description=ref(STACK_NAME),
    )


SUBNET_GROUP_BUILDERS: Dict[str, Callable[[int], ResourceGraph]] = {
    "rds": build_rds_subnet_group,
    "redshift": build_redshift_subnet_group,
    "elasticache": build_elasticache_subnet_group,
    "dax": build_dax_subnet_group,
}


def build_subnet_groups(num_zones: int, kinds: List[str]) -> ResourceGraph:
    """
    Subnet groups for the requested kinds.

    Returns an empty graph with fewer than two zones.

    Raises:
        ConfigurationError: if a kind is not one of rds, redshift, elasticache, dax
    """
    invalid = [kind for kind in kinds if kind.lower() not in SUBNET_GROUP_BUILDERS]
    if invalid:
        raise ConfigurationError(
            f"Invalid subnetGroups option. Valid options: {', '.join(constants.VALID_SUBNET_GROUPS)}"
        )
    if num_zones < constants.MIN_SUBNET_GROUP_ZONES:
        logger.debug(f"[SubnetGroups] {num_zones} zone(s), skipping subnet groups")
        return ResourceGraph()

    return ResourceGraph().merge(*(
        SUBNET_GROUP_BUILDERS[kind.lower()](num_zones) for kind in kinds
    ))
