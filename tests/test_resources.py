import pytest

from vpcbuilder import resources
from vpcbuilder.constants import SubnetTier
from vpcbuilder.resources import (
    build_vpc,
    build_internet_gateway,
    build_app_security_group,
    build_dhcp_options,
    build_subnet,
    build_nat_gateway_pair,
    build_nat_security_group,
    build_nat_instance,
    build_bastion,
    build_flow_log_bundle,
    build_parameter,
)
from vpcbuilder.resources.intrinsics import ref


def tags_of(node):
    return {t["Key"]: t["Value"] for t in node.properties.get("Tags", [])}


class TestNetworkRoot:
    """Tests for the VPC, internet gateway and application security group."""

    def test_vpc_properties(self):
        """The VPC should carry the root block, DNS flags and stage tag."""
        vpc = build_vpc("10.0.0.0/16", stage="prod")["VPC"]
        assert vpc.type == "AWS::EC2::VPC"
        assert vpc.properties["CidrBlock"] == "10.0.0.0/16"
        assert vpc.properties["EnableDnsSupport"] is True
        assert vpc.properties["EnableDnsHostnames"] is True
        assert vpc.properties["InstanceTenancy"] == "default"
        assert tags_of(vpc) == {"Name": ref("AWS::StackName"), "STAGE": "prod"}

    def test_internet_gateway_and_attachment(self):
        """The attachment should reference both the gateway and the VPC."""
        graph = build_internet_gateway()
        assert set(graph) == {"InternetGateway", "InternetGatewayAttachment"}
        attachment = graph["InternetGatewayAttachment"]
        assert attachment.properties["InternetGatewayId"] == ref("InternetGateway")
        assert attachment.properties["VpcId"] == ref("VPC")
        assert tags_of(graph["InternetGateway"])["Network"] == "Public"

    def test_app_security_group_without_prefix_lists(self):
        """Only the generic HTTPS egress rule without prefix lists."""
        graph = build_app_security_group()
        assert set(graph) == {"DefaultSecurityGroupEgress", "AppSecurityGroup"}
        egress = graph["AppSecurityGroup"].properties["SecurityGroupEgress"]
        assert len(egress) == 1
        assert egress[0]["CidrIp"] == "0.0.0.0/0"

    def test_app_security_group_with_prefix_lists(self):
        """Prefix lists add S3 (HTTP and HTTPS) and DynamoDB egress rules."""
        graph = build_app_security_group({"s3": "pl-s3", "dynamodb": "pl-ddb"})
        egress = graph["AppSecurityGroup"].properties["SecurityGroupEgress"]
        targets = [(r["FromPort"], r.get("DestinationPrefixListId")) for r in egress]
        assert targets == [(443, None), (443, "pl-s3"), (80, "pl-s3"), (443, "pl-ddb")]

    def test_default_security_group_is_locked_down(self):
        """The default group should only allow egress to itself."""
        rule = build_app_security_group()["DefaultSecurityGroupEgress"]
        assert rule.properties["GroupId"] == {"Fn::GetAtt": ["VPC", "DefaultSecurityGroup"]}
        assert rule.properties["DestinationSecurityGroupId"] == rule.properties["GroupId"]

    @pytest.mark.parametrize("region,expected", [
        ("us-east-1", "ec2.internal"),
        ("eu-west-1", {"Fn::Sub": "${AWS::Region}.compute.internal"}),
    ])
    def test_dhcp_domain_name(self, region, expected):
        """us-east-1 uses its legacy domain name, every other region the regional one."""
        graph = build_dhcp_options(region)
        assert graph["DHCPOptions"].properties["DomainName"] == expected
        assert graph["VPCDHCPOptionsAssociation"].references() == {"VPC", "DHCPOptions"}


class TestSubnet:
    """Tests for subnet nodes."""

    def test_subnet_shape(self):
        """Name, zone, block and tags should follow the tier."""
        graph = build_subnet(SubnetTier.PUBLIC, 2, "us-east-1b", "10.0.48.0/21", stage="dev")
        subnet = graph["PublicSubnet2"]
        assert subnet.properties["AvailabilityZone"] == "us-east-1b"
        assert subnet.properties["CidrBlock"] == "10.0.48.0/21"
        assert subnet.properties["VpcId"] == ref("VPC")
        assert tags_of(subnet) == {
            "Name": {"Fn::Sub": "${AWS::StackName}-public-us-east-1b"},
            "Network": "Public",
            "STAGE": "dev",
        }

    @pytest.mark.parametrize("tier", [SubnetTier.APP, SubnetTier.DB])
    def test_private_tiers(self, tier):
        """App and DB subnets are tagged as private."""
        graph = build_subnet(tier, 1, "us-east-1a", "10.0.0.0/21")
        assert tags_of(graph[f"{tier.value}Subnet1"])["Network"] == "Private"


class TestNatGateway:
    """Tests for NAT gateway pairs."""

    def test_pair(self):
        """EIP{P} and NatGateway{P} come together, placed in PublicSubnet{P}."""
        graph = build_nat_gateway_pair(3)
        assert list(graph) == ["EIP3", "NatGateway3"]
        nat = graph["NatGateway3"]
        assert nat.properties["AllocationId"] == {"Fn::GetAtt": ["EIP3", "AllocationId"]}
        assert nat.properties["SubnetId"] == ref("PublicSubnet3")
        assert graph["EIP3"].properties == {"Domain": "vpc"}


class TestNatInstance:
    """Tests for the NAT instance and its security group."""

    def test_missing_image_or_zones(self):
        """Without an image id or zones nothing is produced."""
        assert len(build_nat_instance(None, ["a"])) == 0
        assert len(build_nat_instance("ami-1", [])) == 0

    def test_instance(self):
        """The instance lives in PublicSubnet1 with source/dest check off."""
        node = build_nat_instance("ami-1", ["us-east-1a", "us-east-1b"])["NatInstance"]
        assert node.depends_on == ["InternetGatewayAttachment"]
        assert node.properties["ImageId"] == "ami-1"
        assert node.properties["SourceDestCheck"] is False
        assert node.properties["AvailabilityZone"] == {"Fn::Select": ["0", ["us-east-1a", "us-east-1b"]]}
        interface = node.properties["NetworkInterfaces"][0]
        assert interface["SubnetId"] == ref("PublicSubnet1")
        assert interface["GroupSet"] == [ref("NatSecurityGroup")]

    def test_security_group(self):
        """Web traffic is admitted from the application security group only."""
        group = build_nat_security_group()["NatSecurityGroup"]
        ingress = group.properties["SecurityGroupIngress"]
        assert [r["FromPort"] for r in ingress] == [80, 443]
        assert all(r["SourceSecurityGroupId"] == ref("AppSecurityGroup") for r in ingress)


class TestBastion:
    """Tests for the bastion host bundle."""

    def test_full_bundle(self):
        """Every bastion node should be produced."""
        graph = build_bastion("my-key", "ami-1", 2, "192.0.2.0/24")
        assert set(graph) == {
            "BastionEIP",
            "BastionIamRole",
            "BastionInstanceProfile",
            "BastionSecurityGroup",
            "BastionLaunchConfiguration",
            "BastionAutoScalingGroup",
        }
        asg = graph["BastionAutoScalingGroup"]
        assert asg.properties["VPCZoneIdentifier"] == [ref("PublicSubnet1"), ref("PublicSubnet2")]
        assert asg.to_template()["CreationPolicy"]["ResourceSignal"]["Count"] == 1
        launch = graph["BastionLaunchConfiguration"]
        assert launch.properties["KeyName"] == "my-key"
        assert launch.properties["ImageId"] == "ami-1"
        assert "BastionEIP" in launch.references()
        ingress = graph["BastionSecurityGroup"].properties["SecurityGroupIngress"]
        assert {r["CidrIp"] for r in ingress} == {"192.0.2.0/24"}

    def test_self_contained(self):
        """Bastion nodes only reference each other, the VPC and the public subnets."""
        graph = build_bastion("my-key", "ami-1", 2)
        external = {ref_name for node in graph.values() for ref_name in node.references()} - set(graph)
        assert external == {"VPC", "PublicSubnet1", "PublicSubnet2"}

    @pytest.mark.parametrize("key_name,image_id,num_zones", [
        (None, "ami-1", 2),
        ("my-key", None, 2),
        ("my-key", "ami-1", 0),
    ])
    def test_missing_inputs(self, key_name, image_id, num_zones):
        """Any missing input gives an empty graph."""
        assert len(build_bastion(key_name, image_id, num_zones)) == 0


class TestFlowLogs:
    """Tests for the flow log bundle."""

    def test_bundle(self):
        """The bucket is retained and the flow log waits for the bucket policy."""
        graph = build_flow_log_bundle()
        assert list(graph) == ["LogBucket", "LogBucketPolicy", "S3FlowLog"]
        bucket = graph["LogBucket"].to_template()
        assert bucket["DeletionPolicy"] == "Retain"
        assert bucket["UpdateReplacePolicy"] == "Retain"
        flow_log = graph["S3FlowLog"]
        assert flow_log.depends_on == ["LogBucketPolicy"]
        assert flow_log.properties["ResourceId"] == ref("VPC")
        assert flow_log.properties["TrafficType"] == "ALL"
        assert graph.dangling_references() == [("S3FlowLog", "VPC")]


class TestParameter:
    """Tests for SSM parameters."""

    def test_single_value(self):
        """Without a value the parameter holds a Ref to the logical id."""
        node = build_parameter("VPC")["ParameterVPC"]
        assert node.properties["Type"] == "String"
        assert node.properties["Value"] == ref("VPC")
        assert node.properties["Name"] == {"Fn::Sub": "/vpc/${AWS::StackName}/VPC"}

    def test_list_value(self):
        """A list value is joined into a StringList."""
        node = build_parameter("AppSubnets", [ref("AppSubnet1"), ref("AppSubnet2")])["ParameterAppSubnets"]
        assert node.properties["Type"] == "StringList"
        assert node.properties["Value"] == {"Fn::Join": [",", [ref("AppSubnet1"), ref("AppSubnet2")]]}


ZONES = ["us-east-1a", "us-east-1b", "us-east-1c"]

BUILDER_CALLS = [
    pytest.param(lambda: resources.build_vpc("10.0.0.0/16", stage="prod"), id="vpc"),
    pytest.param(lambda: resources.build_internet_gateway("prod"), id="internet_gateway"),
    pytest.param(lambda: resources.build_app_security_group({"s3": "pl-s3"}), id="app_security_group"),
    pytest.param(lambda: resources.build_dhcp_options("eu-west-1"), id="dhcp_options"),
    pytest.param(lambda: resources.build_subnet(SubnetTier.DB, 2, "us-east-1b", "10.0.28.0/22"), id="subnet"),
    pytest.param(lambda: resources.build_route_table(SubnetTier.APP, 1), id="route_table"),
    pytest.param(lambda: resources.build_route_table_association(SubnetTier.APP, 1), id="route_table_association"),
    pytest.param(lambda: resources.build_route(SubnetTier.PUBLIC, 1, gateway="InternetGateway"), id="route"),
    pytest.param(lambda: resources.build_nat_gateway_pair(2), id="nat_gateway_pair"),
    pytest.param(resources.build_nat_security_group, id="nat_security_group"),
    pytest.param(lambda: resources.build_nat_instance("ami-1", ZONES), id="nat_instance"),
    pytest.param(lambda: resources.build_bastion("key", "ami-1", 3, "192.0.2.0/24"), id="bastion"),
    pytest.param(lambda: resources.build_public_network_acl(3, "prod"), id="public_network_acl"),
    pytest.param(lambda: resources.build_app_network_acl(3), id="app_network_acl"),
    pytest.param(lambda: resources.build_db_network_acl(["10.0.0.0/21", "10.0.16.0/21"]), id="db_network_acl"),
    pytest.param(lambda: resources.build_endpoint_services(["s3", "kms"], 3), id="endpoint_services"),
    pytest.param(resources.build_endpoint_security_group, id="endpoint_security_group"),
    pytest.param(lambda: resources.build_subnet_groups(3, ["rds", "dax"]), id="subnet_groups"),
    pytest.param(resources.build_flow_log_bundle, id="flow_log_bundle"),
    pytest.param(lambda: resources.build_parameter("AppSubnets", [ref("AppSubnet1")]), id="parameter"),
    pytest.param(lambda: resources.build_outputs(ZONES, list(SubnetTier), ["rds"], True), id="outputs"),
]


class TestBuildersArePure:
    """Tests that builders depend only on their arguments."""

    @pytest.mark.parametrize("call", BUILDER_CALLS)
    def test_same_arguments_same_result(self, call):
        """Calling a builder twice yields equal, independent results."""
        first, second = call(), call()
        assert len(first) > 0
        assert first.to_template() == second.to_template()
        assert first is not second

