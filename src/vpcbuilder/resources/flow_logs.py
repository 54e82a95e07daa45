"""
VPC flow logs delivered to an S3 bucket.
"""

from .. import constants
from ..datacls import ResourceGraph, ResourceNode
from .intrinsics import ref, get_att, sub, name_tag, STACK_NAME

LOG_DELIVERY_SERVICE = "delivery.logs.amazonaws.com"


def build_log_bucket() -> ResourceGraph:
    """Encrypted, private bucket kept after the stack is deleted."""
    return ResourceGraph.of(ResourceNode(
        name=constants.LOG_BUCKET,
        type="AWS::S3::Bucket",
        attributes={
            "DeletionPolicy": "Retain",
            "UpdateReplacePolicy": "Retain",
        },
        properties={
            "AccessControl": "LogDeliveryWrite",
            "BucketEncryption": {
                "ServerSideEncryptionConfiguration": [{
                    "ServerSideEncryptionByDefault": {"SSEAlgorithm": "AES256"},
                }],
            },
            "PublicAccessBlockConfiguration": {
                "BlockPublicAcls": True,
                "BlockPublicPolicy": True,
                "IgnorePublicAcls": True,
                "RestrictPublicBuckets": True,
            },
            "Tags": [name_tag(sub(f"${{{STACK_NAME}}} Logs"))],
        },
    ))


def build_log_bucket_policy() -> ResourceGraph:
    """Lets the log delivery service check the bucket ACL and write objects."""
    return ResourceGraph.of(ResourceNode(
        name=constants.LOG_BUCKET_POLICY,
        type="AWS::S3::BucketPolicy",
        properties={
            "Bucket": ref(constants.LOG_BUCKET),
            "PolicyDocument": {
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Sid": "AWSLogDeliveryAclCheck",
                        "Effect": "Allow",
                        "Principal": {"Service": LOG_DELIVERY_SERVICE},
                        "Action": "s3:GetBucketAcl",
                        "Resource": get_att(constants.LOG_BUCKET, "Arn"),
                    },
                    {
                        "Sid": "AWSLogDeliveryWrite",
                        "Effect": "Allow",
                        "Principal": {"Service": LOG_DELIVERY_SERVICE},
                        "Action": "s3:PutObject",
                        "Resource": sub(
                            f"arn:${{AWS::Partition}}:s3:::${{{constants.LOG_BUCKET}}}"
                            f"/AWSLogs/${{AWS::AccountId}}/*"
                        ),
                        "Condition": {
                            "StringEquals": {"s3:x-amz-acl": "bucket-owner-full-control"},
                        },
                    },
                ],
            },
        },
    ))


def build_vpc_flow_logs() -> ResourceGraph:
    """Flow log of all VPC traffic, created once the bucket policy exists."""
    return ResourceGraph.of(ResourceNode(
        name=constants.FLOW_LOG,
        type="AWS::EC2::FlowLog",
        depends_on=[constants.LOG_BUCKET_POLICY],
        properties={
            "LogDestinationType": "s3",
            "LogDestination": get_att(constants.LOG_BUCKET, "Arn"),
            "ResourceId": ref(constants.VPC),
            "ResourceType": "VPC",
            "TrafficType": "ALL",
        },
    ))


def build_flow_log_bundle() -> ResourceGraph:
    return build_log_bucket().merge(build_log_bucket_policy(), build_vpc_flow_logs())
