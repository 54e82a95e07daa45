import pytest
from botocore.exceptions import ClientError

from vpcbuilder.exceptions import ProviderError
from vpcbuilder.protocols import DataProvider
from vpcbuilder.providers import AwsProvider, StaticProvider


class FakeEc2:
    """Records calls and answers from canned responses, one list per operation."""

    def __init__(self, **responses):
        self.responses = {name: list(pages) for name, pages in responses.items()}
        self.calls = []

    def __getattr__(self, operation):
        def _call(**params):
            self.calls.append((operation, dict(params)))
            answer = self.responses[operation].pop(0)
            if isinstance(answer, Exception):
                raise answer
            return answer
        return _call


class TestStaticProvider:
    """Tests for the in-memory provider."""

    def test_is_data_provider(self, static_provider):
        """The static provider satisfies the provider protocol."""
        assert isinstance(static_provider, DataProvider)

    def test_zones_sorted(self, static_provider):
        """Zones are returned in alphabetical order."""
        assert static_provider.get_zones("us-east-1") == ["us-east-1a", "us-east-1b", "us-east-1c"]

    def test_missing_zones(self):
        """Asking for zones that were never given is an error."""
        with pytest.raises(ProviderError, match="No zones configured"):
            StaticProvider().get_zones("us-east-1")

    def test_image_patterns(self):
        """The newest matching image name wins."""
        provider = StaticProvider(images={
            "amzn-ami-vpc-nat-2018.03.0.20200101": "ami-old",
            "amzn-ami-vpc-nat-2018.03.0.20230101": "ami-new",
            "amzn2-ami-hvm-2.0.20230101-x86_64-ebs": "ami-bastion",
        })
        assert provider.get_image_id("amzn-ami-vpc-nat-*") == "ami-new"
        assert provider.get_image_id("amzn2-ami-hvm-*-x86_64-ebs") == "ami-bastion"
        assert provider.get_image_id("windows-*") is None

    def test_services_expanded_per_region(self):
        """Short service names are expanded, full names kept."""
        provider = StaticProvider(services=["s3", "com.amazonaws.eu-west-1.kms"])
        assert provider.get_endpoint_services("eu-west-1") == [
            "com.amazonaws.eu-west-1.kms",
            "com.amazonaws.eu-west-1.s3",
        ]

    def test_unknown_catalog(self):
        """Without services the catalog is unknown."""
        assert StaticProvider().get_endpoint_services("us-east-1") is None


class TestAwsProvider:
    """Tests for the EC2 backed provider, against a recorded client."""

    def test_zones(self):
        """Only available zones of the region are returned, sorted."""
        client = FakeEc2(describe_availability_zones=[{"AvailabilityZones": [
            {"ZoneName": "us-east-1b", "State": "available"},
            {"ZoneName": "us-east-1a", "State": "available"},
            {"ZoneName": "us-east-1c", "State": "impaired"},
        ]}])
        provider = AwsProvider("us-east-1", client=client)
        assert provider.get_zones("us-east-1") == ["us-east-1a", "us-east-1b"]
        _, params = client.calls[0]
        assert {"Name": "region-name", "Values": ["us-east-1"]} in params["Filters"]

    def test_newest_image(self):
        """The image with the latest creation date wins."""
        client = FakeEc2(describe_images=[{"Images": [
            {"ImageId": "ami-old", "CreationDate": "2020-01-01T00:00:00.000Z"},
            {"ImageId": "ami-new", "CreationDate": "2023-01-01T00:00:00.000Z"},
        ]}])
        provider = AwsProvider("us-east-1", client=client)
        assert provider.get_image_id("amzn-ami-vpc-nat-*") == "ami-new"
        _, params = client.calls[0]
        assert params["Owners"] == ["amazon"]
        assert {"Name": "name", "Values": ["amzn-ami-vpc-nat-*"]} in params["Filters"]

    def test_no_image(self):
        """No match gives None."""
        provider = AwsProvider("us-east-1", client=FakeEc2(describe_images=[{"Images": []}]))
        assert provider.get_image_id("nothing-*") is None

    def test_endpoint_services_paginated(self):
        """Every page of the service catalog is collected."""
        client = FakeEc2(describe_vpc_endpoint_services=[
            {"ServiceNames": ["com.amazonaws.us-east-1.s3"], "NextToken": "page-2"},
            {"ServiceNames": ["com.amazonaws.us-east-1.kms"]},
        ])
        provider = AwsProvider("us-east-1", client=client)
        assert provider.get_endpoint_services("us-east-1") == [
            "com.amazonaws.us-east-1.kms",
            "com.amazonaws.us-east-1.s3",
        ]
        assert [params.get("NextToken") for _, params in client.calls] == [None, "page-2"]

    def test_prefix_lists(self):
        """Managed prefix lists are mapped to their gateway service."""
        client = FakeEc2(describe_managed_prefix_lists=[{"PrefixLists": [
            {"PrefixListName": "com.amazonaws.us-east-1.s3", "PrefixListId": "pl-s3"},
            {"PrefixListName": "com.amazonaws.us-east-1.dynamodb", "PrefixListId": "pl-ddb"},
            {"PrefixListName": "com.amazonaws.global.cloudfront.origin-facing", "PrefixListId": "pl-cf"},
        ]}])
        provider = AwsProvider("us-east-1", client=client)
        assert provider.get_prefix_lists("us-east-1") == {"s3": "pl-s3", "dynamodb": "pl-ddb"}

    def test_prefix_lists_paginated(self):
        """Prefix lists on later pages are found by following NextToken."""
        client = FakeEc2(describe_managed_prefix_lists=[
            {"PrefixLists": [{"PrefixListName": "com.amazonaws.us-east-1.s3", "PrefixListId": "pl-s3"}],
             "NextToken": "page-2"},
            {"PrefixLists": [{"PrefixListName": "com.amazonaws.us-east-1.dynamodb", "PrefixListId": "pl-ddb"}]},
        ])
        provider = AwsProvider("us-east-1", client=client)
        assert provider.get_prefix_lists("us-east-1") == {"s3": "pl-s3", "dynamodb": "pl-ddb"}
        assert [params.get("NextToken") for _, params in client.calls] == [None, "page-2"]
        assert all(params["Filters"] == [{"Name": "owner-id", "Values": ["AWS"]}] for _, params in client.calls)

    def test_client_error_is_wrapped(self):
        """API failures surface as ProviderError."""
        error = ClientError({"Error": {"Code": "UnauthorizedOperation", "Message": "denied"}},
                            "DescribeAvailabilityZones")
        provider = AwsProvider("us-east-1", client=FakeEc2(describe_availability_zones=[error]))
        with pytest.raises(ProviderError, match="describe_availability_zones failed"):
            provider.get_zones("us-east-1")
