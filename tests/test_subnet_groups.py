import pytest

from vpcbuilder.exceptions import ConfigurationError
from vpcbuilder.resources import build_subnet_groups
from vpcbuilder.resources.intrinsics import ref


class TestSubnetGroups:
    """Tests for database subnet groups."""

    def test_all_kinds(self):
        """Each kind produces its own resource type over every DB subnet."""
        graph = build_subnet_groups(3, ["rds", "redshift", "elasticache", "dax"])
        assert {name: node.type for name, node in graph.items()} == {
            "RDSSubnetGroup": "AWS::RDS::DBSubnetGroup",
            "RedshiftSubnetGroup": "AWS::Redshift::ClusterSubnetGroup",
            "ElastiCacheSubnetGroup": "AWS::ElastiCache::SubnetGroup",
            "DAXSubnetGroup": "AWS::DAX::SubnetGroup",
        }
        expected = [ref("DBSubnet1"), ref("DBSubnet2"), ref("DBSubnet3")]
        assert all(node.properties["SubnetIds"] == expected for node in graph.values())

    def test_rds_names(self):
        """The RDS group is named and described after the stack."""
        node = build_subnet_groups(2, ["rds"])["RDSSubnetGroup"]
        assert node.properties["DBSubnetGroupName"] == ref("AWS::StackName")
        assert node.properties["DBSubnetGroupDescription"] == ref("AWS::StackName")

    def test_single_zone_is_skipped(self):
        """Fewer than two zones produce no groups."""
        assert len(build_subnet_groups(1, ["rds"])) == 0

    def test_invalid_kind(self):
        """Unknown kinds are rejected with the valid options."""
        with pytest.raises(ConfigurationError, match="Valid options: rds, redshift, elasticache, dax"):
            build_subnet_groups(2, ["rds", "aurora"])
