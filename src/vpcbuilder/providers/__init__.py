"""
VPC Builder Data Providers

- StaticProvider: in-memory data from configuration or tests
- AwsProvider: lookups against the EC2 API through boto3
"""

from .static import StaticProvider
from .aws import AwsProvider

__all__ = [
    'StaticProvider',
    'AwsProvider',
]
