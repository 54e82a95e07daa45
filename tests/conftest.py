import pytest

from vpcbuilder.builder import plan as make_plan
from vpcbuilder.config import VpcOptions
from vpcbuilder.datacls import ExternalData
from vpcbuilder.providers import StaticProvider

ZONES = ["us-east-1a", "us-east-1b", "us-east-1c"]
REGION = "us-east-1"
IMAGE_ID = "ami-0123456789abcdef0"
BASTION_IMAGE_ID = "ami-0fedcba9876543210"


def catalog(*services, region=REGION):
    return [f"com.amazonaws.{region}.{service}" for service in services]


@pytest.fixture
def make_catalog():
    """Factory for full endpoint service names."""
    return catalog


@pytest.fixture
def zones():
    return list(ZONES)


@pytest.fixture
def make_options():
    """Factory for validated options, camelCase keys as in a config file."""
    def _make(**overrides) -> VpcOptions:
        data = {"zones": list(ZONES), "region": REGION}
        data.update(overrides)
        return VpcOptions.model_validate(data)
    return _make


@pytest.fixture
def three_zone_plan():
    return make_plan("10.0.0.0/16", ZONES)


@pytest.fixture
def external():
    return ExternalData(
        nat_image_id=IMAGE_ID,
        bastion_image_id=BASTION_IMAGE_ID,
        available_services=catalog("s3", "dynamodb", "kms", "kinesis-streams", "secretsmanager"),
        prefix_lists={"s3": "pl-63a5400a", "dynamodb": "pl-02cd2c6b"},
    )


@pytest.fixture
def static_provider():
    return StaticProvider(
        zones=["us-east-1c", "us-east-1a", "us-east-1b"],
        image_id=IMAGE_ID,
        services=["s3", "dynamodb", "kms"],
        prefix_lists={"s3": "pl-63a5400a", "dynamodb": "pl-02cd2c6b"},
    )
