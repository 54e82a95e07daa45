import fnmatch
import logging
from typing import Dict, List, Optional

from .. import constants
from ..exceptions import ProviderError

logger = logging.getLogger(__name__)


class StaticProvider:
    """
    Provider answering from data supplied up front.

    Used by tests and by the CLI when the configuration carries an
    ``external`` section. Services may be given short ('s3') or full
    ('com.amazonaws.us-east-1.s3'); short names are expanded per region.
    Without services the catalog is unknown and lookups return None.
    Images are a name -> id mapping matched with shell-style patterns;
    ``image_id`` is returned for any pattern when set.
    """

    def __init__(self,
                 zones: Optional[List[str]] = None,
                 image_id: Optional[str] = None,
                 images: Optional[Dict[str, str]] = None,
                 services: Optional[List[str]] = None,
                 prefix_lists: Optional[Dict[str, str]] = None):
        self.zones = zones
        self.image_id = image_id
        self.images = dict(images or {})
        self.services = services
        self.prefix_lists = dict(prefix_lists or {})

    def get_zones(self, region: str) -> List[str]:
        if self.zones is None:
            raise ProviderError(f"No zones configured for region '{region}'.")
        return sorted(self.zones)

    def get_image_id(self, name_pattern: str) -> Optional[str]:
        if self.image_id:
            return self.image_id
        # newest first, assuming image names sort by their date stamp
        for name in sorted(self.images, reverse=True):
            if fnmatch.fnmatchcase(name, name_pattern):
                return self.images[name]
        logger.debug(f"[Static] No image matches '{name_pattern}'")
        return None

    def get_endpoint_services(self, region: str) -> Optional[List[str]]:
        if self.services is None:
            logger.debug(f"[Static] No endpoint service catalog for '{region}'")
            return None
        prefix = f"{constants.SERVICE_NAME_PREFIX}."
        return sorted(
            service if service.startswith(prefix) else f"{prefix}{region}.{service}"
            for service in self.services
        )

    def get_prefix_lists(self, region: str) -> Dict[str, str]:
        return dict(self.prefix_lists)
