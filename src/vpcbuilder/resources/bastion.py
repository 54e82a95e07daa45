"""
Bastion host: an auto-scaling group of one instance spread over the public
subnets, which associates itself with a fixed elastic address on boot.
"""

import logging
from typing import Optional

from .. import constants
from ..constants import SubnetTier
from ..datacls import ResourceGraph, ResourceNode
from .intrinsics import ref, join, base64, stack_name_join, name_tag, REGION, STACK_NAME
from .subnets import subnet_name

logger = logging.getLogger(__name__)

BASTION_EIP = "BastionEIP"
BASTION_IAM_ROLE = "BastionIamRole"
BASTION_INSTANCE_PROFILE = "BastionInstanceProfile"
BASTION_SECURITY_GROUP = "BastionSecurityGroup"
BASTION_LAUNCH_CONFIGURATION = "BastionLaunchConfiguration"
BASTION_AUTO_SCALING_GROUP = "BastionAutoScalingGroup"


def build_bastion_eip() -> ResourceGraph:
    return ResourceGraph.of(ResourceNode(
        name=BASTION_EIP,
        type="AWS::EC2::EIP",
        properties={"Domain": "vpc"},
    ))


def build_bastion_iam_role() -> ResourceGraph:
    """Role allowing the instance to claim the bastion address and register with SSM."""
    return ResourceGraph.of(ResourceNode(
        name=BASTION_IAM_ROLE,
        type="AWS::IAM::Role",
        properties={
            "AssumeRolePolicyDocument": {
                "Statement": [{
                    "Effect": "Allow",
                    "Principal": {"Service": "ec2.amazonaws.com"},
                    "Action": ["sts:AssumeRole"],
                }],
            },
            "Policies": [{
                "PolicyName": "Allow EIP Association",
                "PolicyDocument": {
                    "Version": "2012-10-17",
                    "Statement": [{
                        "Action": [
                            "ec2:AssociateAddress",
                            "ec2:DescribeAddresses",
                            "ec2:DisassociateAddress",
                        ],
                        "Resource": "*",
                        "Effect": "Allow",
                    }],
                },
            }],
            "ManagedPolicyArns": ["arn:aws:iam::aws:policy/service-role/AmazonEC2RoleforSSM"],
        },
    ))


def build_bastion_instance_profile() -> ResourceGraph:
    return ResourceGraph.of(ResourceNode(
        name=BASTION_INSTANCE_PROFILE,
        type="AWS::IAM::InstanceProfile",
        properties={"Roles": [ref(BASTION_IAM_ROLE)]},
    ))


def build_bastion_security_group(source_cidr: str = constants.ANYWHERE_CIDR) -> ResourceGraph:
    """SSH and ICMP from ``source_cidr``."""
    source_cidr = str(source_cidr)
    return ResourceGraph.of(ResourceNode(
        name=BASTION_SECURITY_GROUP,
        type="AWS::EC2::SecurityGroup",
        properties={
            "GroupDescription": "Bastion Host",
            "VpcId": ref(constants.VPC),
            "SecurityGroupIngress": [
                {
                    "Description": "Allow inbound SSH access to the bastion host",
                    "IpProtocol": "tcp",
                    "FromPort": 22,
                    "ToPort": 22,
                    "CidrIp": source_cidr,
                },
                {
                    "Description": "Allow inbound ICMP to the bastion host",
                    "IpProtocol": "icmp",
                    "FromPort": -1,
                    "ToPort": -1,
                    "CidrIp": source_cidr,
                },
            ],
            "Tags": [name_tag(stack_name_join("bastion"))],
        },
    ))


def _user_data() -> dict:
    return base64(join("", [
        "#!/bin/bash\n",
        "set -x\n",
        "export PATH=$PATH:/usr/local/bin\n",
        "yum install -y aws-cfn-bootstrap\n",
        'EIP_LIST="',
        ref(BASTION_EIP),
        '"\n',
        "cfn-init -v --stack ",
        ref(STACK_NAME),
        f" --resource {BASTION_LAUNCH_CONFIGURATION} --region ",
        ref(REGION),
        "\n",
        "cfn-signal -e $? --stack ",
        ref(STACK_NAME),
        f" --resource {BASTION_AUTO_SCALING_GROUP} --region ",
        ref(REGION),
        "\n",
    ]))


def build_bastion_launch_configuration(key_name: str, image_id: str) -> ResourceGraph:
    return ResourceGraph.of(ResourceNode(
        name=BASTION_LAUNCH_CONFIGURATION,
        type="AWS::AutoScaling::LaunchConfiguration",
        properties={
            "AssociatePublicIpAddress": True,
            "BlockDeviceMappings": [{
                "DeviceName": "/dev/xvda",
                "Ebs": {
                    "VolumeSize": 10,
                    "VolumeType": "gp2",
                    "DeleteOnTermination": True,
                },
            }],
            "KeyName": key_name,
            "ImageId": image_id,
            "InstanceMonitoring": False,
            "IamInstanceProfile": ref(BASTION_INSTANCE_PROFILE),
            "InstanceType": constants.INSTANCE_TYPE,
            "SecurityGroups": [ref(BASTION_SECURITY_GROUP)],
            "UserData": _user_data(),
        },
    ))


def build_bastion_auto_scaling_group(num_zones: int = 0) -> ResourceGraph:
    """One instance spread across ``PublicSubnet1..n``. Empty without zones."""
    if num_zones < 1:
        return ResourceGraph()

    return ResourceGraph.of(ResourceNode(
        name=BASTION_AUTO_SCALING_GROUP,
        type="AWS::AutoScaling::AutoScalingGroup",
        attributes={
            "CreationPolicy": {
                "ResourceSignal": {"Count": 1, "Timeout": "PT30M"},
            },
        },
        properties={
            "LaunchConfigurationName": ref(BASTION_LAUNCH_CONFIGURATION),
            "VPCZoneIdentifier": [
                ref(subnet_name(SubnetTier.PUBLIC, position))
                for position in range(1, num_zones + 1)
            ],
            "MinSize": 1,
            "MaxSize": 1,
            "Cooldown": "300",
            "DesiredCapacity": 1,
            "Tags": [{
                "Key": "Name",
                "Value": stack_name_join("bastion"),
                "PropagateAtLaunch": True,
            }],
        },
    ))


def build_bastion(key_name: str,
                  image_id: str,
                  num_zones: int = 0,
                  source_cidr: Optional[str] = None) -> ResourceGraph:
    """
    Every bastion node. Returns an empty graph without zones, key pair name
    or image id.
    """
    if num_zones < 1 or not key_name or not image_id:
        logger.debug(f"[Bastion] Skipping bastion host: zones={num_zones}, "
                     f"key={key_name!r}, image={image_id!r}")
        return ResourceGraph()

    return build_bastion_eip().merge(
        build_bastion_iam_role(),
        build_bastion_instance_profile(),
        build_bastion_security_group(source_cidr or constants.ANYWHERE_CIDR),
        build_bastion_launch_configuration(key_name, image_id),
        build_bastion_auto_scaling_group(num_zones),
    )
