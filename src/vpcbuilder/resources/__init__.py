"""
VPC Builder Resource Builders

Pure functions returning a ResourceGraph (or OutputGraph) per resource kind.

- intrinsics: Ref / Fn::* helpers and tags
- vpc: VPC, internet gateway, application security group, DHCP options
- subnets: per-zone subnets
- routes: route tables, associations and default routes
- natgw: elastic address + NAT gateway pairs
- nat_instance: NAT instance and its security group
- bastion: bastion host auto-scaling group
- nacl: network ACLs
- endpoints: VPC endpoints
- subnet_groups: database subnet groups
- flow_logs: flow log bucket, policy and flow log
- parameters: SSM parameters
- outputs: stack outputs
"""

from .vpc import build_vpc, build_internet_gateway, build_app_security_group, build_dhcp_options
from .subnets import build_subnet, subnet_name
from .routes import build_route_table, build_route_table_association, build_route, route_table_name
from .natgw import build_eip, build_nat_gateway, build_nat_gateway_pair, nat_gateway_name
from .nat_instance import build_nat_security_group, build_nat_instance
from .bastion import (
    build_bastion,
    build_bastion_eip,
    build_bastion_iam_role,
    build_bastion_instance_profile,
    build_bastion_security_group,
    build_bastion_launch_configuration,
    build_bastion_auto_scaling_group,
)
from .nacl import (
    build_network_acl,
    build_network_acl_entry,
    build_network_acl_association,
    build_public_network_acl,
    build_app_network_acl,
    build_db_network_acl,
)
from .endpoints import (
    build_vpc_endpoint,
    build_endpoint_services,
    build_endpoint_security_group,
    endpoint_resource_name,
    is_gateway_service,
)
from .subnet_groups import (
    build_rds_subnet_group,
    build_redshift_subnet_group,
    build_elasticache_subnet_group,
    build_dax_subnet_group,
    build_subnet_groups,
)
from .flow_logs import build_log_bucket, build_log_bucket_policy, build_vpc_flow_logs, build_flow_log_bundle
from .parameters import build_parameter
from .outputs import build_outputs, export_outputs

__all__ = [
    'build_vpc',
    'build_internet_gateway',
    'build_app_security_group',
    'build_dhcp_options',
    'build_subnet',
    'subnet_name',
    'build_route_table',
    'build_route_table_association',
    'build_route',
    'route_table_name',
    'build_eip',
    'build_nat_gateway',
    'build_nat_gateway_pair',
    'nat_gateway_name',
    'build_nat_security_group',
    'build_nat_instance',
    'build_bastion',
    'build_bastion_eip',
    'build_bastion_iam_role',
    'build_bastion_instance_profile',
    'build_bastion_security_group',
    'build_bastion_launch_configuration',
    'build_bastion_auto_scaling_group',
    'build_network_acl',
    'build_network_acl_entry',
    'build_network_acl_association',
    'build_public_network_acl',
    'build_app_network_acl',
    'build_db_network_acl',
    'build_vpc_endpoint',
    'build_endpoint_services',
    'build_endpoint_security_group',
    'endpoint_resource_name',
    'is_gateway_service',
    'build_rds_subnet_group',
    'build_redshift_subnet_group',
    'build_elasticache_subnet_group',
    'build_dax_subnet_group',
    'build_subnet_groups',
    'build_log_bucket',
    'build_log_bucket_policy',
    'build_vpc_flow_logs',
    'build_flow_log_bundle',
    'build_parameter',
    'build_outputs',
    'export_outputs',
]
