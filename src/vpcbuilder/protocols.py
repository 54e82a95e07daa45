"""
VPC Builder Protocol Definitions

This module contains the Protocol definitions for the external data
providers consumed by the builder.

Protocols are the foundation layer with zero dependencies on other vpcbuilder modules.
"""

from typing import Protocol, Dict, List, Optional, runtime_checkable


# ============================================================================
# Zone Protocols
# ============================================================================

@runtime_checkable
class ZoneProvider(Protocol):
    """
    Protocol for availability zone discovery.
    """

    def get_zones(self, region: str) -> List[str]:
        """
        List the zones usable in a region.

        Args:
            region: Region name, e.g. 'us-east-1'

        Returns:
            Available zone names, sorted alphabetically
        """
        ...


# ============================================================================
# Image Protocols
# ============================================================================

@runtime_checkable
class ImageProvider(Protocol):
    """
    Protocol for machine image lookups.
    """

    def get_image_id(self, name_pattern: str) -> Optional[str]:
        """
        Find the newest machine image whose name matches a pattern.

        Args:
            name_pattern: Image name pattern with '*' wildcards

        Returns:
            The image id, or None when nothing matches
        """
        ...


# ============================================================================
# Service Catalog Protocols
# ============================================================================

@runtime_checkable
class ServiceCatalogProvider(Protocol):
    """
    Protocol for the endpoint service catalog of a region.
    """

    def get_endpoint_services(self, region: str) -> Optional[List[str]]:
        """
        List the endpoint service names offered in a region.

        Returns:
            Sorted full service names, e.g. 'com.amazonaws.us-east-1.s3',
            or None when the catalog is unknown
        """
        ...

    def get_prefix_lists(self, region: str) -> Dict[str, str]:
        """
        Map gateway services to their managed prefix list ids.

        Returns:
            e.g. {'s3': 'pl-63a5400a', 'dynamodb': 'pl-02cd2c6b'}
        """
        ...


@runtime_checkable
class DataProvider(ZoneProvider, ImageProvider, ServiceCatalogProvider, Protocol):
    """
    A provider answering every lookup a build may need.
    """
    ...
