"""
VPC Builder Builder Module

- AddressPlanner: Address block partitioning
- GraphAssembler: Resource and outputs graph assembly
- VpcBuilder: Run orchestration (lookups, planning, assembly)

Usage:
    from vpcbuilder.builder import VpcBuilder
    from vpcbuilder.providers import AwsProvider

    builder = VpcBuilder(options, AwsProvider("us-east-1"))
    result = await builder.run()
"""

from .net import AddressPlanner, plan
from .assemble import GraphAssembler, assemble
from .build import VpcBuilder

__all__ = [
    'AddressPlanner',
    'plan',
    'GraphAssembler',
    'assemble',
    'VpcBuilder',
]
