from enum import Enum

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "net": "vpcbuilder.builder.net",
    "plan": "vpcbuilder.builder.net",
    "asm": "vpcbuilder.builder.assemble",
    "assemble": "vpcbuilder.builder.assemble",
    "build": "vpcbuilder.builder.build",
    "bld": "vpcbuilder.builder.build",
    "conf": "vpcbuilder.config",
    "prov": "vpcbuilder.providers",
    "aws": "vpcbuilder.providers.aws",
    "res": "vpcbuilder.resources",
    "graph": "vpcbuilder.datacls.graph",
}

# Top-level modules within vpcbuilder for auto-prefixing
KNOWN_TOP_MODULES = {
    "builder",
    "resources",
    "providers",
    "datacls",
    "utils",
    "exceptions",
    "config",
    "cli",
}

LOG_LEVELS_ENV = "VPCB_LOG_LEVELS"


# --- Subnet Tiers ---

class SubnetTier(str, Enum):
    APP = "App"
    PUBLIC = "Public"
    DB = "DB"


# --- Address Planning ---
DEFAULT_CIDR_BLOCK = "10.0.0.0/16"
# the root block is halved this many times, giving 2 ** 4 = 16 zone blocks
ZONE_SPLIT_LEVELS = 4
MAX_ZONES = 2 ** ZONE_SPLIT_LEVELS
# App = zone block halved once, Public/DB = the second half halved again
TIER_SPLIT_LEVELS = 2
ANYWHERE_CIDR = "0.0.0.0/0"

# @see https://docs.aws.amazon.com/vpc/latest/userguide/amazon-vpc-limits.html
DEFAULT_VPC_EIP_LIMIT = 5


# --- Fixed Resource Names ---
VPC = "VPC"
INTERNET_GATEWAY = "InternetGateway"
INTERNET_GATEWAY_ATTACHMENT = "InternetGatewayAttachment"
APP_SECURITY_GROUP = "AppSecurityGroup"
APP_ENDPOINT_SECURITY_GROUP = "AppEndpointSecurityGroup"
DEFAULT_SECURITY_GROUP_EGRESS = "DefaultSecurityGroupEgress"
NAT_INSTANCE = "NatInstance"
NAT_SECURITY_GROUP = "NatSecurityGroup"
LOG_BUCKET = "LogBucket"
LOG_BUCKET_POLICY = "LogBucketPolicy"
FLOW_LOG = "S3FlowLog"


# --- Endpoint Services ---
DEFAULT_SERVICES = ["s3", "dynamodb"]
GATEWAY_ENDPOINT_SERVICES = {"s3", "dynamodb"}
SERVICE_NAME_PREFIX = "com.amazonaws"


# --- Subnet Groups ---
SUBNET_GROUP_NAMES = {
    "rds": "RDSSubnetGroup",
    "redshift": "RedshiftSubnetGroup",
    "elasticache": "ElastiCacheSubnetGroup",
    "dax": "DAXSubnetGroup",
}
VALID_SUBNET_GROUPS = list(SUBNET_GROUP_NAMES.keys())
MIN_SUBNET_GROUP_ZONES = 2


# --- Machine Images ---
NAT_INSTANCE_IMAGE_PATTERN = "amzn-ami-vpc-nat-*"
BASTION_IMAGE_PATTERN = "amzn2-ami-hvm-*-x86_64-ebs"
INSTANCE_TYPE = "t2.micro"
BASTION_SSH_USER = "ec2-user"


# --- Output Formats ---
OUTPUT_FORMATS = ("json", "yaml")
