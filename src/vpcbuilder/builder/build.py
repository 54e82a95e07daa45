import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from .. import constants
from ..config import VpcOptions
from ..datacls import AddressPlan, AssemblyResult, ExternalData, NetworkAttachment, OutputGraph, ResourceGraph
from ..exceptions import ProviderError
from ..protocols import DataProvider
from .assemble import GraphAssembler
from .net import AddressPlanner

logger = logging.getLogger(__name__)


class VpcBuilder:
    """
    Runs one build: external lookups, address planning and graph assembly.

    Args:
        options: validated options
        provider: data provider answering zone, image and service lookups
        region: region to build for, defaults to ``options.region``
        attachment: caller-owned attachment list to append to
    """

    def __init__(self,
                 options: VpcOptions,
                 provider: DataProvider,
                 region: Optional[str] = None,
                 attachment: Optional[NetworkAttachment] = None):
        self.options = options
        self.provider = provider
        self.region = region or options.region
        self.attachment = attachment if attachment is not None else NetworkAttachment()
        if self.region != options.region:
            self.options = options.model_copy(update={"region": self.region})
        logger.debug(f"[Builder] Initialized for region '{self.region}'.")

    async def run(self) -> AssemblyResult:
        """Orchestrates the lookups, planning and assembly step by step."""
        logger.info(f"[Builder] Starting VPC build in {self.region}...")

        # Independent lookups, issued concurrently
        external = await self._collect()

        zones = external.zones if external.zones is not None else list(self.options.zones)
        if not zones:
            logger.warning(f"[Builder] No availability zones in {self.region}, nothing to build.")
            plan = AddressPlanner(self.options.cidr_block).plan([])
            return AssemblyResult(plan=plan, resources=ResourceGraph(), outputs=OutputGraph(),
                                  attachment=self.attachment)

        logger.debug("[Builder] Invoking AddressPlanner...")
        plan = self._plan(zones)

        logger.debug("[Builder] Invoking GraphAssembler...")
        resources, outputs = GraphAssembler(self.options, plan, external, self.attachment).assemble()

        logger.info(f"[Builder] Build finished: {len(resources)} resources, {len(outputs)} outputs.")
        return AssemblyResult(plan=plan, resources=resources, outputs=outputs, attachment=self.attachment)

    def _plan(self, zones: List[str]) -> AddressPlan:
        return AddressPlanner(self.options.cidr_block).plan(zones, with_database=self.options.create_db_subnet)

    def _lookups(self) -> Dict[str, Callable[[], Any]]:
        """Only the lookups the options actually need."""
        lookups: Dict[str, Callable[[], Any]] = {}
        if not self.options.zones:
            logger.info(f"[Builder] Discovering available zones in {self.region}...")
            lookups["zones"] = lambda: self.provider.get_zones(self.region)
        if self.options.create_nat_instance:
            lookups["nat_image_id"] = lambda: self.provider.get_image_id(constants.NAT_INSTANCE_IMAGE_PATTERN)
        if self.options.create_bastion_host:
            lookups["bastion_image_id"] = lambda: self.provider.get_image_id(constants.BASTION_IMAGE_PATTERN)
        if self.options.services:
            lookups["available_services"] = lambda: self.provider.get_endpoint_services(self.region)
        if any(service in constants.GATEWAY_ENDPOINT_SERVICES for service in self.options.services):
            lookups["prefix_lists"] = lambda: self.provider.get_prefix_lists(self.region)
        return lookups

    async def _collect(self) -> ExternalData:
        lookups = self._lookups()
        if not lookups:
            return ExternalData()

        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=len(lookups)) as executor:
            tasks = [loop.run_in_executor(executor, lookup) for lookup in lookups.values()]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        collected: Dict[str, Any] = {}
        for key, result in zip(lookups.keys(), results):
            if isinstance(result, Exception):
                logger.error(f"[Builder] Lookup '{key}' failed: {result}")
                if isinstance(result, ProviderError):
                    raise result
                raise ProviderError(f"Lookup '{key}' failed: {result}") from result
            logger.debug(f"[Builder] Lookup '{key}' -> {result}")
            collected[key] = result
        return ExternalData(**collected)
