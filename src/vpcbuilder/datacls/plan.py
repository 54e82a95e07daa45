"""
Address Plan

The AddressPlan is computed once per run from a root block and an ordered
zone list, and is treated as read-only by everything downstream.
"""

from ipaddress import IPv4Network
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from ..constants import SubnetTier


class AddressPlan(BaseModel):
    """
    Mapping zone -> (tier -> block) plus tier -> blocks in zone order.
    """
    model_config = ConfigDict(frozen=True)

    root: IPv4Network
    zones: List[str] = Field(default_factory=list)
    zone_blocks: Dict[str, IPv4Network] = Field(default_factory=dict)
    blocks: Dict[str, Dict[SubnetTier, IPv4Network]] = Field(default_factory=dict)
    tiers: Dict[SubnetTier, List[IPv4Network]] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.zones

    @property
    def num_zones(self) -> int:
        return len(self.zones)

    def block(self, zone: str, tier: SubnetTier) -> IPv4Network:
        return self.blocks[zone][tier]

    def tier_blocks(self, tier: SubnetTier) -> List[IPv4Network]:
        return list(self.tiers.get(tier, []))

    def has_tier(self, tier: SubnetTier) -> bool:
        return bool(self.tiers.get(tier))

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        """Render the plan as plain strings, keyed by zone then tier."""
        return {
            zone: {
                "Zone": str(self.zone_blocks[zone]),
                **{tier.value: str(block) for tier, block in self.blocks[zone].items()},
            }
            for zone in self.zones
        }
