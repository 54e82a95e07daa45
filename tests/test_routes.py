import pytest

from vpcbuilder.constants import SubnetTier
from vpcbuilder.exceptions import InvalidRouteTargetError
from vpcbuilder.resources import build_route, build_route_table, build_route_table_association
from vpcbuilder.resources.intrinsics import ref


class TestRouteTables:
    """Tests for route tables and their associations."""

    def test_route_table_name_tag_uses_subnet_zone(self):
        """The name tag resolves the zone from the matching subnet."""
        table = build_route_table(SubnetTier.APP, 2)["AppRouteTable2"]
        assert table.properties["Tags"][0]["Value"] == {
            "Fn::Sub": "${AWS::StackName}-app-${AppSubnet2.AvailabilityZone}"
        }
        assert table.references() == {"VPC", "AppSubnet2"}

    def test_association(self):
        """The association links the table and subnet of the same position."""
        node = build_route_table_association(SubnetTier.DB, 3)["DBRouteTableAssociation3"]
        assert node.properties == {"RouteTableId": ref("DBRouteTable3"), "SubnetId": ref("DBSubnet3")}


class TestRoute:
    """Tests for default routes."""

    def test_nat_gateway_route(self):
        """A NAT gateway target needs no attachment dependency."""
        route = build_route(SubnetTier.APP, 1, nat_gateway="NatGateway1")["AppRoute1"]
        assert route.properties == {
            "DestinationCidrBlock": "0.0.0.0/0",
            "RouteTableId": ref("AppRouteTable1"),
            "NatGatewayId": ref("NatGateway1"),
        }
        assert route.depends_on == []

    def test_public_route_waits_for_attachment(self):
        """Public routes depend on the internet gateway attachment."""
        route = build_route(SubnetTier.PUBLIC, 2, gateway="InternetGateway")["PublicRoute2"]
        assert route.properties["GatewayId"] == ref("InternetGateway")
        assert route.depends_on == ["InternetGatewayAttachment"]

    def test_instance_route(self):
        """An instance target is referenced through InstanceId."""
        route = build_route(SubnetTier.APP, 1, instance="NatInstance")["AppRoute1"]
        assert route.properties["InstanceId"] == ref("NatInstance")

    def test_no_target(self):
        """A route without a target is rejected with the route name."""
        with pytest.raises(InvalidRouteTargetError, match="AppRoute1: either NatGatewayId, GatewayId or InstanceId"):
            build_route(SubnetTier.APP, 1)

    def test_two_targets(self):
        """A route with more than one target is rejected."""
        with pytest.raises(InvalidRouteTargetError, match="only one target"):
            build_route(SubnetTier.APP, 1, nat_gateway="NatGateway1", gateway="InternetGateway")
