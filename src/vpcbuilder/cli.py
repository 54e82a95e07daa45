import click
import json
import logging
import traceback
import asyncio
import functools
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from .config import Config
from .builder import VpcBuilder, AddressPlanner
from .datacls import AssemblyResult
from .providers import AwsProvider, StaticProvider
from .utils import setup_logger, parse_module_levels
from .exceptions import (
    VpcBuilderError,
    ConfigurationError,
    ConfigParsingError,
    DefinitionError,
    ProviderError,
    BuildError,
)
from . import constants
from . import __version__


def complete_config_files(ctx, param, incomplete):
    """Auto-complete .yml and .yaml config files in current directory"""
    try:
        cwd = Path.cwd()
        yml_files = list(cwd.glob('*.yml')) + list(cwd.glob('*.yaml'))
        return sorted(f.name for f in yml_files if f.name.startswith(incomplete))
    except OSError as e:
        logging.debug(f"Config file auto-completion failed: {e}")
        return []


def setup_logging(debug: bool, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    module_levels = parse_module_levels(log_levels) if log_levels else None
    setup_logger(debug=debug, module_levels=module_levels, log_file=log_file)


def handle_errors(func):
    """Decorator to handle common exceptions"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            _abort(f"Configuration error: {e}")
        except DefinitionError as e:
            _abort(f"Definition error: {e}")
        except ProviderError as e:
            _abort(f"Lookup error: {e}")
        except BuildError as e:
            _abort(f"Build error: {e}")
        except VpcBuilderError as e:
            _abort(f"An unexpected application error occurred: {e}")
        except FileNotFoundError as e:
            _abort(f"A required file was not found: {e}")
    return wrapper


def _abort(message: str):
    logging.error(message)
    ctx = click.get_current_context()
    if ctx.obj and ctx.obj.get('debug'):
        traceback.print_exc()
    raise click.Abort()


def load_template(template_file: Optional[str]) -> Dict[str, Any]:
    """Read an existing JSON or YAML template to merge into."""
    if not template_file:
        return {}
    try:
        data = yaml.safe_load(Path(template_file).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigParsingError(f"Error parsing template '{template_file}': {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParsingError(f"Template '{template_file}' must contain a mapping.")
    return data


def dump_document(data: Dict[str, Any], fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    return json.dumps(data, indent=2) + "\n"


def write_document(content: str, output: Optional[str]):
    if not output:
        click.echo(content, nl=False)
        return
    try:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise BuildError(f"Failed to write '{output}': {e}")
    logging.info(f"Template written to '{output}'")


def select_provider(config: Config, region: str, offline: bool):
    """The configuration's static data when present or offline, the EC2 API otherwise."""
    provider = config.static_provider()
    if provider is not None:
        logging.debug("Using static data from the 'external' section")
        return provider
    if offline:
        logging.debug("Offline mode without an 'external' section")
        return StaticProvider()
    return AwsProvider(region)


@handle_errors
def do_build(config_file: str, output: Optional[str], fmt: str, template_file: Optional[str],
             region: Optional[str], offline: bool, attachment_file: Optional[str]):
    """Execute build command"""
    config = Config(config_file)
    region = region or config.region
    provider = select_provider(config, region, offline)

    builder = VpcBuilder(config.options, provider, region=region)
    result: AssemblyResult = asyncio.run(builder.run())

    template = result.merge_into(load_template(template_file))
    write_document(dump_document(template, fmt), output)
    if attachment_file:
        write_document(dump_document(result.attachment.to_template(), fmt), attachment_file)


@handle_errors
def do_plan(config_file: str, zones: Optional[str], fmt: str):
    """Execute plan command"""
    config = Config(config_file)
    options = config.options
    zone_list = [z.strip() for z in zones.split(',') if z.strip()] if zones else list(options.zones)
    if not zone_list:
        provider = config.static_provider()
        if provider is None:
            raise ConfigurationError("No zones to plan, pass --zones or list them in the configuration.")
        zone_list = provider.get_zones(config.region)

    plan = AddressPlanner(options.cidr_block).plan(zone_list, with_database=options.create_db_subnet)
    click.echo(dump_document({"CidrBlock": str(plan.root), "Zones": plan.to_dict()}, fmt), nl=False)


@handle_errors
def do_validate(config_file: str):
    """Execute validate command"""
    config = Config(config_file)
    options = config.options
    click.echo(f"Configuration '{config_file}' is valid.")
    logging.debug(f"Options: {options.model_dump_json(by_alias=True)}")


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'asm=DEBUG,net=INFO')")
@click.option('-f', '--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='vpcbuilder')
@click.pass_context
def cli(ctx, debug, log_levels, log_file):
    """VPC Builder - Generate VPC templates from configuration files

    \b
    Examples:
      vpcb build vpc.yml -o template.json   Build and write a template
      vpcb plan vpc.yml --zones a,b,c        Show the address plan
      vpcb validate vpc.yml                  Check a configuration
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, log_levels, log_file)


@cli.command()
@click.argument('config_file', shell_complete=complete_config_files)
@click.option('-o', '--output', help='Write the template to this file (default: stdout)')
@click.option('--format', 'fmt', type=click.Choice(constants.OUTPUT_FORMATS), default='json',
              show_default=True, help='Output format')
@click.option('-t', '--template', 'template_file', help='Existing template to merge the resources into')
@click.option('-r', '--region', help='Region to build for (default: from the configuration)')
@click.option('--offline', is_flag=True, help='Never call the EC2 API')
@click.option('-a', '--attachment', 'attachment_file', help='Write the security group and subnet references here')
@click.pass_context
def build(ctx, config_file, output, fmt, template_file, region, offline, attachment_file):
    """Build a VPC template from config file"""
    do_build(config_file, output, fmt, template_file, region, offline, attachment_file)


@cli.command()
@click.argument('config_file', shell_complete=complete_config_files)
@click.option('-z', '--zones', help='Comma-separated zones (default: from the configuration)')
@click.option('--format', 'fmt', type=click.Choice(constants.OUTPUT_FORMATS), default='yaml',
              show_default=True, help='Output format')
@click.pass_context
def plan(ctx, config_file, zones, fmt):
    """Print the address plan for config file"""
    do_plan(config_file, zones, fmt)


@cli.command()
@click.argument('config_file', shell_complete=complete_config_files)
@click.pass_context
def validate(ctx, config_file):
    """Validate config file"""
    do_validate(config_file)


if __name__ == '__main__':
    cli()
