import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator, ConfigDict
from ipaddress import IPv4Network

from . import constants
from .providers import StaticProvider
from .exceptions import (
    ConfigurationError,
    ConfigParsingError,
    ConfigFileMissingError,
    ConfigValidationError,
    MissingResourceError,
)


logger = logging.getLogger(__name__)

# legacy key -> (current key, field name, value transform)
LEGACY_KEYS = {
    "useNatGateway": ("createNatGateway", "create_nat_gateway", lambda v: v),
    "useNetworkAcl": ("createNetworkAcl", "create_network_acl", lambda v: v),
    "skipDbCreation": ("createDbSubnet", "create_db_subnet", lambda v: not v if isinstance(v, bool) else v),
}


class VpcOptions(BaseModel):
    """
        Class Config-Validation Model describe the VPC options.

    Built once at the boundary and read-only afterwards. Keys are accepted in
    camelCase or snake_case.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    cidr_block: IPv4Network = Field(IPv4Network(constants.DEFAULT_CIDR_BLOCK), alias="cidrBlock")
    zones: List[str] = Field(default_factory=list)
    services: List[str] = Field(default_factory=lambda: list(constants.DEFAULT_SERVICES))
    create_nat_gateway: Union[bool, int] = Field(False, alias="createNatGateway")
    create_network_acl: bool = Field(False, alias="createNetworkAcl")
    create_db_subnet: bool = Field(True, alias="createDbSubnet")
    create_flow_logs: bool = Field(False, alias="createFlowLogs")
    create_nat_instance: bool = Field(False, alias="createNatInstance")
    create_bastion_host: bool = Field(False, alias="createBastionHost")
    bastion_host_key_name: Optional[str] = Field(None, alias="bastionHostKeyName")
    bastion_host_source_cidr: IPv4Network = Field(IPv4Network(constants.ANYWHERE_CIDR),
                                                  alias="bastionHostSourceCidr")
    export_outputs: bool = Field(False, alias="exportOutputs")
    subnet_groups: List[str] = Field(default_factory=lambda: list(constants.VALID_SUBNET_GROUPS),
                                     alias="subnetGroups")
    create_dhcp_options: bool = Field(False, alias="createDhcpOptions")
    create_parameters: bool = Field(False, alias="createParameters")
    stage: str = "dev"
    region: str = "us-east-1"

    @model_validator(mode='before')
    @classmethod
    def apply_legacy_keys(cls, data: Any) -> Any:
        """ Map legacy option names onto their current names when the current one is absent """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for legacy, (current, field, transform) in LEGACY_KEYS.items():
            if legacy not in data:
                continue
            value = data.pop(legacy)
            if current in data or field in data:
                logger.debug(f"Ignoring legacy option '{legacy}', '{current}' is set.")
                continue
            logger.warning(f"Option '{legacy}' is deprecated, use '{current}' instead.")
            data[current] = transform(value)
        return data

    @field_validator('create_nat_gateway', mode='before')
    @classmethod
    def check_nat_gateway(cls, value: Any) -> Union[bool, int]:
        """ Only booleans and non-negative whole numbers are accepted """
        if isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int):
            raise ConfigurationError("createNatGateway must be either a boolean or a number")
        if value < 0:
            raise ConfigurationError("createNatGateway must not be negative")
        return value

    @field_validator('services', mode='before')
    @classmethod
    def normalize_services(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [s.strip().lower() if isinstance(s, str) else s for s in value]
        return value

    @field_validator('subnet_groups', mode='before')
    @classmethod
    def check_subnet_groups(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        kinds = [s.strip().lower() if isinstance(s, str) else s for s in value]
        if any(kind not in constants.VALID_SUBNET_GROUPS for kind in kinds):
            raise ConfigurationError(
                f"Invalid subnetGroups option. Valid options: {', '.join(constants.VALID_SUBNET_GROUPS)}"
            )
        return kinds

    @model_validator(mode='after')
    def check_exclusive_options(self) -> 'VpcOptions':
        """ Check contradictory or incomplete feature requests """
        if self.create_nat_gateway and self.create_nat_instance:
            raise ConfigurationError("Please choose either createNatGateway or createNatInstance, not both")
        if self.create_bastion_host and not self.bastion_host_key_name:
            raise MissingResourceError("bastionHostKeyName must be provided if createBastionHost is true")
        levels = constants.ZONE_SPLIT_LEVELS + constants.TIER_SPLIT_LEVELS
        if self.cidr_block.prefixlen + levels > self.cidr_block.max_prefixlen:
            raise ConfigurationError(
                f"cidrBlock {self.cidr_block} is too small, use a prefix of "
                f"/{self.cidr_block.max_prefixlen - levels} or shorter"
            )
        if len(self.zones) != len(set(self.zones)):
            raise ConfigurationError(f"zones must not contain duplicates: {self.zones}")
        if len(self.zones) > constants.MAX_ZONES:
            raise ConfigurationError(f"At most {constants.MAX_ZONES} zones are supported, got {len(self.zones)}")
        return self

    def nat_gateway_count(self, num_zones: int) -> int:
        """Number of NAT gateways for ``num_zones`` zones, clamped to the zone count."""
        if isinstance(self.create_nat_gateway, bool):
            return num_zones if self.create_nat_gateway else 0
        return min(self.create_nat_gateway, num_zones)


class ExternalModel(BaseModel):
    """
        Class Config-Validation Model describe `external`, static answers for the data providers
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    zones: Optional[List[str]] = None
    image_id: Optional[str] = Field(None, alias="imageId")
    images: Dict[str, str] = Field(default_factory=dict)
    services: Optional[List[str]] = None
    prefix_lists: Dict[str, str] = Field(default_factory=dict, alias="prefixLists")

    def to_provider(self) -> StaticProvider:
        return StaticProvider(
            zones=self.zones,
            image_id=self.image_id,
            images=self.images,
            services=self.services,
            prefix_lists=self.prefix_lists,
        )


class ConfigModel(BaseModel):
    """
        Class Config-Validation Model describe the whole configuration file
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    vpc_config: VpcOptions = Field(default_factory=VpcOptions, alias="vpcConfig")
    external: Optional[ExternalModel] = None


class Config:
    """
    Loads and validates the configuration file using Pydantic models.
    It is the sole gatekeeper for configuration.

    Options live either under a ``vpcConfig`` key or at the top level.
    """
    def __init__(self, config_path: Union[str, Path]):
        self.path = str(config_path)
        logger.info(f"Loading configuration from '{self.path}'...")
        raw_data = self._load_raw_config()

        logger.info("Validating configuration structure with Pydantic...")
        try:
            self.model = ConfigModel.model_validate(self._normalize(raw_data))
            logger.debug(f"Configuration model validated successfully: \n{self.model.model_dump_json(indent=2)}")
            logger.info("Configuration validation passed.")
        except ValidationError as e:
            raise ConfigValidationError(f"Configuration validation failed:\n{e}")

    def _load_raw_config(self) -> Dict[str, Any]:
        try:
            content = Path(self.path).read_text(encoding="utf-8")
            config_data = yaml.safe_load(content)
            if config_data is None:
                config_data = {}
            if not isinstance(config_data, dict):
                raise ConfigParsingError("Configuration file must be a YAML document containing a dictionary.")
            logger.debug(f"Successfully parsed YAML from '{self.path}'.")
            return config_data
        except FileNotFoundError:
            raise ConfigFileMissingError(f"Configuration file not found at: {self.path}")
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing YAML file: {e}")

    @staticmethod
    def _normalize(raw_data: Dict[str, Any]) -> Dict[str, Any]:
        """ Accept top-level options as if they were nested under `vpcConfig` """
        if "vpcConfig" in raw_data or "vpc_config" in raw_data:
            return raw_data
        data = {k: v for k, v in raw_data.items() if k != "external"}
        normalized: Dict[str, Any] = {"vpcConfig": data}
        if "external" in raw_data:
            normalized["external"] = raw_data["external"]
        return normalized

    @property
    def options(self) -> VpcOptions:
        return self.model.vpc_config

    @property
    def external(self) -> Optional[ExternalModel]:
        return self.model.external

    @property
    def region(self) -> str:
        return self.model.vpc_config.region

    def static_provider(self) -> Optional[StaticProvider]:
        """A provider answering from the `external` section, if there is one."""
        if self.model.external is None:
            return None
        return self.model.external.to_provider()
