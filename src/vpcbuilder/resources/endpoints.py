"""
VPC endpoints.

``s3`` and ``dynamodb`` are gateway endpoints attached to the application
route tables. Every other service is an interface endpoint placed in the
application subnets behind ``AppEndpointSecurityGroup``.
"""

from typing import Any, List, Sequence

from .. import constants
from ..constants import SubnetTier
from ..datacls import ResourceGraph, ResourceNode
from ..utils import to_pascal
from .intrinsics import ref, join, name_tag, stack_name_join, REGION
from .routes import route_table_name
from .subnets import subnet_name


def endpoint_resource_name(service: str) -> str:
    """'kinesis-streams' -> 'KinesisStreamsVPCEndpoint'"""
    return f"{to_pascal(service)}VPCEndpoint"


def is_gateway_service(service: str) -> bool:
    return service in constants.GATEWAY_ENDPOINT_SERVICES


def build_vpc_endpoint(service: str,
                       route_table_ids: Sequence[Any] = (),
                       subnet_ids: Sequence[Any] = ()) -> ResourceGraph:
    properties = {
        "ServiceName": join(".", [constants.SERVICE_NAME_PREFIX, ref(REGION), service]),
        "VpcId": ref(constants.VPC),
    }
    if is_gateway_service(service):
        properties["VpcEndpointType"] = "Gateway"
        properties["RouteTableIds"] = list(route_table_ids)
        properties["PolicyDocument"] = {
            "Statement": [{
                "Effect": "Allow",
                "Principal": "*",
                "Resource": "*",
                "Action": f"{service}:*",
            }],
        }
    else:
        properties["VpcEndpointType"] = "Interface"
        properties["SubnetIds"] = list(subnet_ids)
        properties["PrivateDnsEnabled"] = True
        properties["SecurityGroupIds"] = [ref(constants.APP_ENDPOINT_SECURITY_GROUP)]

    return ResourceGraph.of(ResourceNode(
        name=endpoint_resource_name(service),
        type="AWS::EC2::VPCEndpoint",
        properties=properties,
    ))


def build_endpoint_services(services: List[str], num_zones: int) -> ResourceGraph:
    """One endpoint per service, sharing every zone's application route table or subnet."""
    if not services or num_zones < 1:
        return ResourceGraph()

    positions = range(1, num_zones + 1)
    route_table_ids = [ref(route_table_name(SubnetTier.APP, p)) for p in positions]
    subnet_ids = [ref(subnet_name(SubnetTier.APP, p)) for p in positions]
    return ResourceGraph().merge(*(
        build_vpc_endpoint(service, route_table_ids, subnet_ids) for service in services
    ))


def build_endpoint_security_group() -> ResourceGraph:
    """HTTPS from the application security group to the interface endpoints."""
    return ResourceGraph.of(ResourceNode(
        name=constants.APP_ENDPOINT_SECURITY_GROUP,
        type="AWS::EC2::SecurityGroup",
        properties={
            "GroupDescription": "Application access to VPC endpoints",
            "VpcId": ref(constants.VPC),
            "SecurityGroupIngress": [{
                "SourceSecurityGroupId": ref(constants.APP_SECURITY_GROUP),
                "Description": f"Allow inbound HTTPS traffic from {constants.APP_SECURITY_GROUP}",
                "IpProtocol": "tcp",
                "FromPort": 443,
                "ToPort": 443,
            }],
            "Tags": [name_tag(stack_name_join("app-endpoint"))],
        },
    ))
