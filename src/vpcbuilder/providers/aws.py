"""
AWS data provider backed by boto3.

Each lookup is a blocking EC2 API call; the builder dispatches them to an
executor so they run concurrently.
"""

import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .. import constants
from ..exceptions import ProviderError

logger = logging.getLogger(__name__)

ENDPOINT_SERVICES_PAGE_SIZE = 1000


class AwsProvider:
    """
    Zone, image, endpoint service and prefix list lookups through the EC2 API.

    Args:
        region: Region the client talks to
        session: Optional boto3 session, a default session is created otherwise
        client: Optional pre-built EC2 client, mainly for tests
    """

    def __init__(self, region: str, session: Optional[boto3.Session] = None, client: Any = None):
        self.region = region
        self.session = session
        self._clients: Dict[str, Any] = {}
        if client is not None:
            self._clients["ec2"] = client

    def _client(self, service: str):
        """Get or create a boto3 client for the given service."""
        if service not in self._clients:
            if self.session is None:
                self.session = boto3.Session(region_name=self.region)
            self._clients[service] = self.session.client(service, region_name=self.region)
        return self._clients[service]

    def _call(self, operation: str, **params) -> Dict[str, Any]:
        logger.debug(f"[AWS] ec2.{operation}({params})")
        try:
            return getattr(self._client("ec2"), operation)(**params)
        except (BotoCoreError, ClientError) as e:
            raise ProviderError(f"EC2 {operation} failed in {self.region}: {e}") from e

    def get_zones(self, region: str) -> List[str]:
        response = self._call(
            "describe_availability_zones",
            Filters=[
                {"Name": "region-name", "Values": [region]},
                {"Name": "opt-in-status", "Values": ["opt-in-not-required"]},
                {"Name": "state", "Values": ["available"]},
            ],
        )
        zones = sorted(
            zone["ZoneName"]
            for zone in response.get("AvailabilityZones", [])
            if zone.get("State", "available") == "available"
        )
        logger.debug(f"[AWS] Zones in {region}: {zones}")
        return zones

    def get_image_id(self, name_pattern: str) -> Optional[str]:
        response = self._call(
            "describe_images",
            Owners=["amazon"],
            Filters=[
                {"Name": "architecture", "Values": ["x86_64"]},
                {"Name": "image-type", "Values": ["machine"]},
                {"Name": "is-public", "Values": ["true"]},
                {"Name": "name", "Values": [name_pattern]},
                {"Name": "state", "Values": ["available"]},
                {"Name": "root-device-type", "Values": ["ebs"]},
                {"Name": "virtualization-type", "Values": ["hvm"]},
            ],
        )
        images = sorted(
            response.get("Images", []),
            key=lambda image: image.get("CreationDate", ""),
            reverse=True,
        )
        if not images:
            logger.debug(f"[AWS] No image matches '{name_pattern}'")
            return None
        logger.debug(f"[AWS] Newest image for '{name_pattern}': {images[0]['ImageId']}")
        return images[0]["ImageId"]

    def _paginate(self, operation: str, key: str, **params) -> List[Any]:
        """Collect ``key`` from every page of a NextToken-paginated call."""
        items: List[Any] = []
        while True:
            response = self._call(operation, **params)
            items.extend(response.get(key, []))
            token = response.get("NextToken")
            if not token:
                return items
            params["NextToken"] = token

    def get_endpoint_services(self, region: str) -> List[str]:
        return sorted(self._paginate(
            "describe_vpc_endpoint_services",
            "ServiceNames",
            MaxResults=ENDPOINT_SERVICES_PAGE_SIZE,
        ))

    def get_prefix_lists(self, region: str) -> Dict[str, str]:
        names = {
            f"{constants.SERVICE_NAME_PREFIX}.{region}.{service}": service
            for service in sorted(constants.GATEWAY_ENDPOINT_SERVICES)
        }
        entries = self._paginate(
            "describe_managed_prefix_lists",
            "PrefixLists",
            Filters=[{"Name": "owner-id", "Values": ["AWS"]}],
        )
        prefix_lists = {}
        for prefix_list in entries:
            service = names.get(prefix_list.get("PrefixListName"))
            if service:
                prefix_lists[service] = prefix_list["PrefixListId"]
        return prefix_lists
