"""
Stack outputs derived from the emitted resources.
"""

from typing import Dict, Iterable, List, Optional

from .. import constants
from ..constants import SubnetTier
from ..datacls import OutputEntry, OutputGraph
from .bastion import BASTION_EIP
from .intrinsics import ref, join, STACK_NAME
from .subnets import subnet_name


def build_base_outputs() -> OutputGraph:
    return OutputGraph({
        "VPC": OutputEntry(
            description="VPC logical resource ID",
            value=ref(constants.VPC),
        ),
        "AppSecurityGroupId": OutputEntry(
            description="Security Group logical resource ID that applications use "
                        "when running within the VPC",
            value=ref(constants.APP_SECURITY_GROUP),
        ),
    })


def build_subnet_outputs(zones: List[str], tiers: Iterable[SubnetTier]) -> OutputGraph:
    """One output per zone and tier, named like the subnet it exposes."""
    entries: Dict[str, OutputEntry] = {}
    for tier in tiers:
        tier = SubnetTier(tier)
        for position, zone in enumerate(zones, start=1):
            name = subnet_name(tier, position)
            entries[name] = OutputEntry(
                description=f"{tier.value} subnet in {zone}",
                value=ref(name),
            )
    return OutputGraph(entries)


def build_subnet_group_outputs(kinds: Iterable[str]) -> OutputGraph:
    entries = {}
    for kind in kinds:
        name = constants.SUBNET_GROUP_NAMES[kind.lower()]
        entries[name] = OutputEntry(
            description=f"Subnet Group for {kind.lower()}",
            value=ref(name),
        )
    return OutputGraph(entries)


def build_bastion_outputs() -> OutputGraph:
    return OutputGraph({
        BASTION_EIP: OutputEntry(
            description="Public IP of Bastion host",
            value=ref(BASTION_EIP),
        ),
        "BastionSSHUser": OutputEntry(
            description="SSH username for the Bastion host",
            value=constants.BASTION_SSH_USER,
        ),
    })


def build_outputs(zones: Optional[List[str]] = None,
                  tiers: Iterable[SubnetTier] = (),
                  subnet_groups: Iterable[str] = (),
                  create_bastion_host: bool = False) -> OutputGraph:
    """
    Base outputs plus per-zone subnets, the given subnet groups and,
    optionally, the bastion host.
    """
    outputs = build_base_outputs().merge(
        build_subnet_outputs(zones or [], tiers),
        build_subnet_group_outputs(subnet_groups),
    )
    if create_bastion_host:
        outputs = outputs.merge(build_bastion_outputs())
    return outputs


def export_outputs(outputs: OutputGraph) -> OutputGraph:
    """Export every output as ``<stack name>-<output key>``."""
    return OutputGraph({
        name: entry.model_copy(update={"export_name": join("-", [ref(STACK_NAME), name])})
        for name, entry in outputs.items()
    })
