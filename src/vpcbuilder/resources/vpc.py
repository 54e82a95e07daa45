"""
Network root resources: the VPC, its internet gateway, the application
security group and the optional DHCP option set.
"""

from typing import Dict, Optional, Union
from ipaddress import IPv4Network

from .. import constants
from ..datacls import ResourceGraph, ResourceNode
from .intrinsics import ref, get_att, sub, tag, name_tag, stack_name_tag, REGION, STACK_NAME


HTTPS_PORT = 443
HTTP_PORT = 80


def build_vpc(cidr_block: Union[str, IPv4Network] = constants.DEFAULT_CIDR_BLOCK,
              stage: Optional[str] = None) -> ResourceGraph:
    """Tagged VPC node for the root address block."""
    tags = [name_tag(ref(STACK_NAME))]
    if stage:
        tags.append(tag("STAGE", stage))
    return ResourceGraph.of(ResourceNode(
        name=constants.VPC,
        type="AWS::EC2::VPC",
        properties={
            "CidrBlock": str(cidr_block),
            "EnableDnsSupport": True,
            "EnableDnsHostnames": True,
            "InstanceTenancy": "default",
            "Tags": tags,
        },
    ))


def build_internet_gateway(stage: Optional[str] = None) -> ResourceGraph:
    """Internet gateway and its attachment to the VPC."""
    tags = [stack_name_tag("igw"), tag("Network", "Public")]
    if stage:
        tags.append(tag("STAGE", stage))
    gateway = ResourceNode(
        name=constants.INTERNET_GATEWAY,
        type="AWS::EC2::InternetGateway",
        properties={"Tags": tags},
    )
    attachment = ResourceNode(
        name=constants.INTERNET_GATEWAY_ATTACHMENT,
        type="AWS::EC2::VPCGatewayAttachment",
        properties={
            "InternetGatewayId": ref(constants.INTERNET_GATEWAY),
            "VpcId": ref(constants.VPC),
        },
    )
    return ResourceGraph.of(gateway, attachment)


def _https_rule(description: str, **target) -> Dict:
    return {
        "Description": description,
        "IpProtocol": "tcp",
        "FromPort": HTTPS_PORT,
        "ToPort": HTTPS_PORT,
        **target,
    }


def build_app_security_group(prefix_lists: Optional[Dict[str, str]] = None) -> ResourceGraph:
    """
    Security group handed to application workloads, plus a rule locking down
    the VPC default security group.

    When the managed prefix lists for S3 and DynamoDB are known, egress to
    them is allowed explicitly so gateway endpoints are reachable.
    """
    egress = [_https_rule("permit HTTPS outbound", CidrIp=constants.ANYWHERE_CIDR)]
    if prefix_lists:
        if prefix_lists.get("s3"):
            egress.append(_https_rule("permit HTTPS to S3", DestinationPrefixListId=prefix_lists["s3"]))
            egress.append({
                "Description": "permit HTTP to S3",
                "IpProtocol": "tcp",
                "FromPort": HTTP_PORT,
                "ToPort": HTTP_PORT,
                "DestinationPrefixListId": prefix_lists["s3"],
            })
        if prefix_lists.get("dynamodb"):
            egress.append(_https_rule("permit HTTPS to DynamoDB",
                                      DestinationPrefixListId=prefix_lists["dynamodb"]))

    default_egress = ResourceNode(
        name=constants.DEFAULT_SECURITY_GROUP_EGRESS,
        type="AWS::EC2::SecurityGroupEgress",
        properties={
            "IpProtocol": "-1",
            "DestinationSecurityGroupId": get_att(constants.VPC, "DefaultSecurityGroup"),
            "GroupId": get_att(constants.VPC, "DefaultSecurityGroup"),
        },
    )
    app_group = ResourceNode(
        name=constants.APP_SECURITY_GROUP,
        type="AWS::EC2::SecurityGroup",
        properties={
            "GroupDescription": "Application Security Group",
            "SecurityGroupEgress": egress,
            "SecurityGroupIngress": [_https_rule("permit HTTPS inbound", CidrIp=constants.ANYWHERE_CIDR)],
            "VpcId": ref(constants.VPC),
            "Tags": [stack_name_tag("sg")],
        },
    )
    return ResourceGraph.of(default_egress, app_group)


def build_dhcp_options(region: str) -> ResourceGraph:
    """DHCP option set using the provider DNS, associated with the VPC."""
    if region == "us-east-1":
        domain_name = "ec2.internal"
    else:
        domain_name = sub(f"${{{REGION}}}.compute.internal")
    options = ResourceNode(
        name="DHCPOptions",
        type="AWS::EC2::DHCPOptions",
        properties={
            "DomainName": domain_name,
            "DomainNameServers": ["AmazonProvidedDNS"],
            "Tags": [stack_name_tag("DHCPOptionsSet")],
        },
    )
    association = ResourceNode(
        name="VPCDHCPOptionsAssociation",
        type="AWS::EC2::VPCDHCPOptionsAssociation",
        properties={
            "VpcId": ref(constants.VPC),
            "DhcpOptionsId": ref("DHCPOptions"),
        },
    )
    return ResourceGraph.of(options, association)
