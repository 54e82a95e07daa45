import ipaddress
import logging
from typing import Dict, List, Sequence, Union

from .. import constants
from ..constants import SubnetTier
from ..datacls import AddressPlan
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def halve(block: ipaddress.IPv4Network) -> List[ipaddress.IPv4Network]:
    """Split a block into its two equal halves, lower half first."""
    return list(block.subnets(prefixlen_diff=1))


def split(block: ipaddress.IPv4Network, levels: int) -> List[ipaddress.IPv4Network]:
    """Halve ``block`` ``levels`` times, giving ``2 ** levels`` blocks in ascending order."""
    blocks = [block]
    for _ in range(levels):
        blocks = [half for parent in blocks for half in halve(parent)]
    return blocks


class AddressPlanner:
    """
    Carves a root block into per-zone, per-tier blocks.

    The root is halved four times into 16 zone blocks; zone ``i`` gets block
    ``i``. Each zone block is halved: the lower half is the App tier, the
    upper half is halved again into Public and DB.
    """

    def __init__(self, root_block: Union[str, ipaddress.IPv4Network]):
        try:
            self.root = ipaddress.ip_network(root_block)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid address block '{root_block}': {e}")
        if not isinstance(self.root, ipaddress.IPv4Network):
            raise ConfigurationError(f"Address block '{root_block}' is not an IPv4 network.")

        levels = constants.ZONE_SPLIT_LEVELS + constants.TIER_SPLIT_LEVELS
        if self.root.prefixlen + levels > self.root.max_prefixlen:
            raise ConfigurationError(
                f"Address block {self.root} is too small to be split into zone and tier blocks; "
                f"use a prefix of /{self.root.max_prefixlen - levels} or shorter."
            )

    def plan(self, zones: Sequence[str], with_database: bool = True) -> AddressPlan:
        """Allocates one zone block per zone and splits it into tier blocks."""
        zones = list(zones)
        if not zones:
            logger.debug(f"[Plan] No zones given for {self.root}, returning an empty plan.")
            return AddressPlan(root=self.root)
        if len(zones) > constants.MAX_ZONES:
            raise ConfigurationError(
                f"{len(zones)} zones requested but {self.root} only has {constants.MAX_ZONES} zone blocks."
            )
        duplicates = sorted({zone for zone in zones if zones.count(zone) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate zones: {', '.join(duplicates)}")

        logger.info(f"Planning {self.root} across {len(zones)} zone(s): {', '.join(zones)}")
        zone_blocks: Dict[str, ipaddress.IPv4Network] = {}
        blocks: Dict[str, Dict[SubnetTier, ipaddress.IPv4Network]] = {}
        tiers: Dict[SubnetTier, List[ipaddress.IPv4Network]] = {tier: [] for tier in SubnetTier}
        if not with_database:
            del tiers[SubnetTier.DB]

        # unused trailing blocks are left unallocated
        for zone, zone_block in zip(zones, split(self.root, constants.ZONE_SPLIT_LEVELS)):
            app, rest = halve(zone_block)
            public, db = halve(rest)

            zone_tiers = {SubnetTier.APP: app, SubnetTier.PUBLIC: public}
            if with_database:
                zone_tiers[SubnetTier.DB] = db

            zone_blocks[zone] = zone_block
            blocks[zone] = zone_tiers
            for tier, block in zone_tiers.items():
                tiers[tier].append(block)
            logger.debug(f"[Plan] {zone}: {zone_block} -> "
                         + ", ".join(f"{tier.value}={block}" for tier, block in zone_tiers.items()))

        return AddressPlan(root=self.root, zones=zones, zone_blocks=zone_blocks, blocks=blocks, tiers=tiers)


def plan(root_block: Union[str, ipaddress.IPv4Network],
         zones: Sequence[str],
         with_database: bool = True) -> AddressPlan:
    """Convenience wrapper around ``AddressPlanner(root_block).plan(zones)``."""
    return AddressPlanner(root_block).plan(zones, with_database=with_database)
