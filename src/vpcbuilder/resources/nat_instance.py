"""
NAT instance: a single EC2 instance in the first public subnet that
forwards HTTP/HTTPS traffic of the application tier.
"""

from typing import List, Optional

from .. import constants
from ..constants import SubnetTier
from ..datacls import ResourceGraph, ResourceNode
from .intrinsics import ref, select, stack_name_tag
from .subnets import subnet_name


def _web_rules(direction: str, **target) -> List[dict]:
    rules = []
    for protocol, port in (("HTTP", 80), ("HTTPS", 443)):
        rules.append({
            "Description": direction.format(protocol=protocol),
            "IpProtocol": "tcp",
            "FromPort": port,
            "ToPort": port,
            **target,
        })
    return rules


def build_nat_security_group() -> ResourceGraph:
    """Allows web traffic in from the application security group and out to the internet."""
    return ResourceGraph.of(ResourceNode(
        name=constants.NAT_SECURITY_GROUP,
        type="AWS::EC2::SecurityGroup",
        properties={
            "GroupDescription": "NAT Instance",
            "VpcId": ref(constants.VPC),
            "SecurityGroupEgress": _web_rules(
                "Allow outbound {protocol} access to the Internet",
                CidrIp=constants.ANYWHERE_CIDR,
            ),
            "SecurityGroupIngress": _web_rules(
                f"Allow inbound {{protocol}} traffic from {constants.APP_SECURITY_GROUP}",
                SourceSecurityGroupId=ref(constants.APP_SECURITY_GROUP),
            ),
            "Tags": [stack_name_tag("nat")],
        },
    ))


def build_nat_instance(image_id: Optional[str], zones: Optional[List[str]] = None) -> ResourceGraph:
    """
    NAT instance in ``PublicSubnet1``. Returns an empty graph without an
    image id or zones.
    """
    if not image_id or not zones:
        return ResourceGraph()

    return ResourceGraph.of(ResourceNode(
        name=constants.NAT_INSTANCE,
        type="AWS::EC2::Instance",
        depends_on=[constants.INTERNET_GATEWAY_ATTACHMENT],
        properties={
            "AvailabilityZone": select(0, list(zones)),
            "BlockDeviceMappings": [{
                "DeviceName": "/dev/xvda",
                "Ebs": {
                    "VolumeSize": 10,
                    "VolumeType": "gp2",
                    "DeleteOnTermination": True,
                },
            }],
            "ImageId": image_id,
            "InstanceType": constants.INSTANCE_TYPE,
            "Monitoring": False,
            "NetworkInterfaces": [{
                "AssociatePublicIpAddress": True,
                "DeleteOnTermination": True,
                "Description": "eth0",
                "DeviceIndex": "0",
                "GroupSet": [ref(constants.NAT_SECURITY_GROUP)],
                "SubnetId": ref(subnet_name(SubnetTier.PUBLIC, 1)),
            }],
            # forwarding requires the check off
            "SourceDestCheck": False,
            "Tags": [stack_name_tag("nat")],
        },
    ))
