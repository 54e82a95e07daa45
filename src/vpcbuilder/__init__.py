"""
VPCB (VPC Builder)

Generates a VPC CloudFormation template: an address plan carved out of one
block, and the subnets, routes, gateways, ACLs, endpoints and outputs that
go with it.

Main modules:
- builder: Address planning, graph assembly and run orchestration
- resources: Pure resource builders
- providers: Zone, image and endpoint service lookups
- config: Configuration loading and validation
- datacls: Type-safe data classes and models
- utils: Utility functions

Quick start example:
```python
import asyncio
from vpcbuilder import Config, VpcBuilder, AwsProvider

config = Config("vpc.yml")
builder = VpcBuilder(config.options, AwsProvider(config.region))
result = asyncio.run(builder.run())
template = result.merge_into({})
```
"""

__version__ = "0.1.0"

from .protocols import ZoneProvider, ImageProvider, ServiceCatalogProvider, DataProvider
from .config import Config, ConfigModel, VpcOptions
from .builder import AddressPlanner, GraphAssembler, VpcBuilder, plan, assemble
from .providers import StaticProvider, AwsProvider
from .datacls import AddressPlan, ResourceGraph, ResourceNode, OutputGraph, AssemblyResult
from .exceptions import (
    VpcBuilderError,
    ConfigurationError,
    ConfigValidationError,
    DefinitionError,
    MissingResourceError,
    UnavailableServiceError,
    InvalidRouteTargetError,
    ProviderError,
    BuildError,
)

__all__ = [
    # Version
    '__version__',
    # Protocols
    'ZoneProvider',
    'ImageProvider',
    'ServiceCatalogProvider',
    'DataProvider',
    # Config
    'Config',
    'ConfigModel',
    'VpcOptions',
    # Builder
    'AddressPlanner',
    'GraphAssembler',
    'VpcBuilder',
    'plan',
    'assemble',
    # Providers
    'StaticProvider',
    'AwsProvider',
    # Data classes
    'AddressPlan',
    'ResourceGraph',
    'ResourceNode',
    'OutputGraph',
    'AssemblyResult',
    # Exceptions
    'VpcBuilderError',
    'ConfigurationError',
    'ConfigValidationError',
    'DefinitionError',
    'MissingResourceError',
    'UnavailableServiceError',
    'InvalidRouteTargetError',
    'ProviderError',
    'BuildError',
]
