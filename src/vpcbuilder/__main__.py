"""
VPC Builder - Main entry point

Allows `python -m vpcbuilder`, delegating to cli.py.
"""

from .cli import cli

if __name__ == "__main__":
    cli()
