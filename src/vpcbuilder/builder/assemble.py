"""
Graph assembly.

Turns validated options, an address plan and the external lookup results
into one resource graph and one outputs graph. Every step returns a
ResourceGraph that is merged into the accumulated value; nothing is
mutated in place except the caller's attachment list, which is appended to
once every gate has passed.
"""

import logging
from typing import List, Optional, Tuple

from .. import constants
from ..constants import SubnetTier
from ..config import VpcOptions
from ..datacls import AddressPlan, ExternalData, NetworkAttachment, OutputGraph, ResourceGraph
from ..exceptions import (
    ConfigurationError,
    DanglingReferenceError,
    MissingResourceError,
    UnavailableServiceError,
)
from ..resources import (
    build_vpc,
    build_internet_gateway,
    build_app_security_group,
    build_dhcp_options,
    build_subnet,
    build_route_table,
    build_route_table_association,
    build_route,
    build_nat_gateway_pair,
    nat_gateway_name,
    build_nat_security_group,
    build_nat_instance,
    build_bastion,
    build_public_network_acl,
    build_app_network_acl,
    build_db_network_acl,
    build_endpoint_services,
    build_endpoint_security_group,
    is_gateway_service,
    build_subnet_groups,
    build_flow_log_bundle,
    build_parameter,
    build_outputs,
    export_outputs,
    subnet_name,
)
from ..resources.intrinsics import ref

logger = logging.getLogger(__name__)


class GraphAssembler:
    """
    Decides which builders run, with which cross-references, for one run.

    Validation gates (NAT exclusion, machine image, endpoint catalog,
    subnet group kinds) run before anything is built, so a failure never
    leaves a partial graph behind.
    """

    def __init__(self,
                 options: VpcOptions,
                 plan: AddressPlan,
                 external: Optional[ExternalData] = None,
                 attachment: Optional[NetworkAttachment] = None):
        self.options = options
        self.plan = plan
        self.external = external or ExternalData()
        self.attachment = attachment
        self.zones = list(plan.zones)
        self.num_zones = len(self.zones)
        self.nat_count = options.nat_gateway_count(self.num_zones)

    @property
    def db_enabled(self) -> bool:
        return self.options.create_db_subnet and self.plan.has_tier(SubnetTier.DB)

    def assemble(self) -> Tuple[ResourceGraph, OutputGraph]:
        if self.plan.is_empty:
            logger.warning("[Assembler] Address plan has no zones, nothing to assemble.")
            return ResourceGraph(), OutputGraph()

        self._validate()
        logger.info(f"[Assembler] Generating a VPC in {self.options.region} ({self.plan.root}) "
                    f"across {self.num_zones} availability zones: {', '.join(self.zones)}")

        subnet_groups = self._subnet_group_kinds()
        graph = ResourceGraph().merge(
            self._network(),
            self._zones(),
            self._nat_gateways(),
            self._network_acls(),
            self._nat_instance(),
            self._bastion(),
            self._endpoints(),
            self._subnet_groups(subnet_groups),
            self._flow_logs(),
            self._dhcp_options(),
            self._parameters(),
        )
        self._check_references(graph)

        outputs = self._outputs(subnet_groups)
        self._attach()
        logger.info(f"[Assembler] Assembled {len(graph)} resources and {len(outputs)} outputs.")
        return graph, outputs

    # ------------------------------------------------------------------
    # Validation gates
    # ------------------------------------------------------------------

    def _validate(self):
        if self.options.create_nat_gateway and self.options.create_nat_instance:
            raise ConfigurationError("Please choose either createNatGateway or createNatInstance, not both")

        if self.options.create_bastion_host and not self.options.bastion_host_key_name:
            raise MissingResourceError("bastionHostKeyName must be provided if createBastionHost is true")

        missing = [name for name, enabled, image_id in (
            ("bastion host", self.options.create_bastion_host, self.external.bastion_image_id),
            ("NAT instance", self.options.create_nat_instance, self.external.nat_image_id),
        ) if enabled and not image_id]
        if missing:
            raise MissingResourceError(f"No machine image found for the {' and '.join(missing)}.")

        invalid = [kind for kind in self.options.subnet_groups if kind not in constants.VALID_SUBNET_GROUPS]
        if invalid:
            raise ConfigurationError(
                f"Invalid subnetGroups option. Valid options: {', '.join(constants.VALID_SUBNET_GROUPS)}"
            )

        self._validate_services()

    def _validate_services(self):
        services = self.options.services
        if not services:
            return
        available = self.external.available_services
        if available is None:
            logger.warning(f"[Assembler] No endpoint service catalog for {self.options.region}, "
                           f"services are not checked: {', '.join(services)}")
            return

        offered = set(available)
        prefix = f"{constants.SERVICE_NAME_PREFIX}.{self.options.region}"
        unavailable = [service for service in services if f"{prefix}.{service}" not in offered]
        if unavailable:
            raise UnavailableServiceError(
                f"Requested services are not available in {self.options.region}: {', '.join(unavailable)}",
                services=unavailable,
            )

    # ------------------------------------------------------------------
    # Feature blocks
    # ------------------------------------------------------------------

    def _network(self) -> ResourceGraph:
        return build_vpc(self.plan.root, self.options.stage).merge(
            build_internet_gateway(self.options.stage),
            build_app_security_group(self.external.prefix_lists or None),
        )

    def _app_route_target(self, index: int) -> dict:
        if self.nat_count > 0:
            return {"nat_gateway": nat_gateway_name((index % self.nat_count) + 1)}
        if self.options.create_nat_instance:
            return {"instance": constants.NAT_INSTANCE}
        # no NAT: App routes go to the internet gateway. Older templates left the
        # App tier without a default route here.
        return {"gateway": constants.INTERNET_GATEWAY}

    def _tier(self, tier: SubnetTier, position: int, zone: str) -> ResourceGraph:
        return build_subnet(tier, position, zone, self.plan.block(zone, tier), self.options.stage).merge(
            build_route_table(tier, position),
            build_route_table_association(tier, position),
        )

    def _zones(self) -> ResourceGraph:
        graph = ResourceGraph()
        for index, zone in enumerate(self.zones):
            position = index + 1
            graph = graph.merge(
                self._tier(SubnetTier.APP, position, zone),
                build_route(SubnetTier.APP, position, **self._app_route_target(index)),
                self._tier(SubnetTier.PUBLIC, position, zone),
                build_route(SubnetTier.PUBLIC, position, gateway=constants.INTERNET_GATEWAY),
            )
            if self.db_enabled:
                # no default route, the database tier stays private
                graph = graph.merge(self._tier(SubnetTier.DB, position, zone))
        return graph

    def _nat_gateways(self) -> ResourceGraph:
        if self.nat_count < 1:
            return ResourceGraph()
        if self.nat_count > constants.DEFAULT_VPC_EIP_LIMIT:
            logger.warning(f"[Assembler] Number of NAT gateways ({self.nat_count}) is greater than the "
                           f"default EIP limit ({constants.DEFAULT_VPC_EIP_LIMIT}). Please ensure you "
                           f"requested an EIP limit increase.")
        logger.debug(f"[Assembler] Provisioning {self.nat_count} NAT gateway(s)")
        return ResourceGraph().merge(*(
            build_nat_gateway_pair(position) for position in range(1, self.nat_count + 1)
        ))

    def _network_acls(self) -> ResourceGraph:
        if not self.options.create_network_acl:
            return ResourceGraph()
        graph = build_public_network_acl(self.num_zones, self.options.stage).merge(
            build_app_network_acl(self.num_zones, self.options.stage),
        )
        if self.db_enabled:
            graph = graph.merge(build_db_network_acl(self.plan.tier_blocks(SubnetTier.APP), self.options.stage))
        return graph

    def _nat_instance(self) -> ResourceGraph:
        if not self.options.create_nat_instance:
            return ResourceGraph()
        logger.debug(f"[Assembler] Provisioning NAT instance from {self.external.nat_image_id}")
        return build_nat_security_group().merge(build_nat_instance(self.external.nat_image_id, self.zones))

    def _bastion(self) -> ResourceGraph:
        if not self.options.create_bastion_host:
            return ResourceGraph()
        logger.debug(f"[Assembler] Provisioning bastion host from {self.external.bastion_image_id}")
        return build_bastion(
            self.options.bastion_host_key_name,
            self.external.bastion_image_id,
            self.num_zones,
            str(self.options.bastion_host_source_cidr),
        )

    def _endpoints(self) -> ResourceGraph:
        services = self.options.services
        if not services:
            return ResourceGraph()
        logger.info(f"[Assembler] Provisioning VPC endpoints for: {', '.join(services)}")
        graph = build_endpoint_services(services, self.num_zones)
        if any(not is_gateway_service(service) for service in services):
            graph = graph.merge(build_endpoint_security_group())
        return graph

    def _subnet_group_kinds(self) -> List[str]:
        if not self.db_enabled or not self.options.subnet_groups:
            return []
        if self.num_zones < constants.MIN_SUBNET_GROUP_ZONES:
            logger.warning(f"[Assembler] Less than {constants.MIN_SUBNET_GROUP_ZONES} zones; "
                           f"skipping subnet group provisioning")
            return []
        return list(self.options.subnet_groups)

    def _subnet_groups(self, kinds: List[str]) -> ResourceGraph:
        if not kinds:
            return ResourceGraph()
        return build_subnet_groups(self.num_zones, kinds)

    def _flow_logs(self) -> ResourceGraph:
        if not self.options.create_flow_logs:
            return ResourceGraph()
        logger.info("[Assembler] Enabling VPC Flow Logs to S3")
        return build_flow_log_bundle()

    def _dhcp_options(self) -> ResourceGraph:
        if not self.options.create_dhcp_options:
            return ResourceGraph()
        return build_dhcp_options(self.options.region)

    def _app_subnet_refs(self) -> List[dict]:
        return [ref(subnet_name(SubnetTier.APP, position)) for position in range(1, self.num_zones + 1)]

    def _parameters(self) -> ResourceGraph:
        if not self.options.create_parameters:
            return ResourceGraph()
        return build_parameter(constants.VPC).merge(
            build_parameter(constants.APP_SECURITY_GROUP),
            build_parameter("AppSubnets", self._app_subnet_refs()),
        )

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def _check_references(self, graph: ResourceGraph):
        dangling = graph.dangling_references()
        if dangling:
            details = ", ".join(f"{node} -> {target}" for node, target in dangling)
            raise DanglingReferenceError(f"Unresolved references in the resource graph: {details}")

    def _outputs(self, subnet_groups: List[str]) -> OutputGraph:
        tiers = [SubnetTier.APP, SubnetTier.PUBLIC]
        if self.db_enabled:
            tiers.append(SubnetTier.DB)
        outputs = build_outputs(
            zones=self.zones,
            tiers=tiers,
            subnet_groups=subnet_groups,
            create_bastion_host=self.options.create_bastion_host,
        )
        if self.options.export_outputs:
            outputs = export_outputs(outputs)
        return outputs

    def _attach(self):
        if self.attachment is None:
            return
        logger.debug("[Assembler] Updating the network attachment list")
        self.attachment.security_group_ids.append(ref(constants.APP_SECURITY_GROUP))
        self.attachment.subnet_ids.extend(self._app_subnet_refs())


def assemble(options: VpcOptions,
             plan: AddressPlan,
             external: Optional[ExternalData] = None,
             attachment: Optional[NetworkAttachment] = None) -> Tuple[ResourceGraph, OutputGraph]:
    """Assemble the resource and outputs graphs for one run."""
    return GraphAssembler(options, plan, external, attachment).assemble()
