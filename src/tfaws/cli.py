"""Command line interface for tfaws."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any, NoReturn

import click
import yaml

from .client import AwsClient
from .models import IpamConfig, IpamPoolConfig, IpamScopeConfig, Parameter, ParameterGroupConfig
from .naming import ENDPOINT_ENV_VAR, LOG_LEVEL_ENV_VAR
from .resources import (
    IpamAdapter,
    IpamPoolAdapter,
    IpamScopeAdapter,
    ParameterGroupAdapter,
    ResourceAdapter,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(package_name="tfaws")
@click.option("--region", help="AWS region (default: from the AWS config/environment).")
@click.option(
    "--endpoint-url",
    envvar=ENDPOINT_ENV_VAR,
    help=f"AWS endpoint URL (e.g., LocalStack). [env: {ENDPOINT_ENV_VAR}]",
)
@click.option("--profile", help="Named AWS profile.")
@click.option(
    "--log-level",
    envvar=LOG_LEVEL_ENV_VAR,
    default="WARNING",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help=f"Log level. [env: {LOG_LEVEL_ENV_VAR}]",
)
@click.pass_context
def cli(
    ctx: click.Context,
    region: str | None,
    endpoint_url: str | None,
    profile: str | None,
    log_level: str,
) -> None:
    """tfaws - lifecycle management for VPC IPAM and RDS parameter groups."""
    logging.basicConfig(format=LOG_FORMAT, level=log_level.upper())
    ctx.obj = {"region": region, "endpoint_url": endpoint_url, "profile": profile}


def _client(ctx: click.Context) -> AwsClient:
    """Build the AWS client from the global options."""
    opts = ctx.obj or {}
    return AwsClient.create(
        region=opts.get("region"),
        endpoint_url=opts.get("endpoint_url"),
        profile=opts.get("profile"),
    )


def _load_yaml(file_path: str) -> dict[str, Any]:
    """Load and parse a YAML file."""
    with open(file_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            click.echo(f"✗ Invalid YAML in {file_path}: {e}", err=True)
            sys.exit(1)
    if not isinstance(data, dict):
        click.echo("✗ YAML file must contain a mapping", err=True)
        sys.exit(1)
    return data


def _echo_state(state: Any) -> None:
    click.echo(yaml.safe_dump(state.to_dict(), sort_keys=False), nl=False)


def _fail(action: str, e: Exception) -> NoReturn:
    click.echo(f"✗ {action} failed: {e}", err=True)
    sys.exit(1)


def _lifecycle_group(
    name: str,
    label: str,
    adapter_cls: type[ResourceAdapter],
    config_from_dict: Callable[[dict[str, Any]], Any],
) -> click.Group:
    """Build a command group with create/show/apply/delete for one resource type."""

    @click.group(name, help=f"Manage {label}s ({adapter_cls.resource_type}).")
    def group() -> None:
        pass

    file_option = click.option(
        "--file",
        "-f",
        "file_path",
        required=True,
        type=click.Path(exists=True),
        help=f"YAML {label} configuration.",
    )

    @group.command("create")
    @file_option
    @click.pass_context
    def create(ctx: click.Context, file_path: str) -> None:
        """Create a resource from a YAML file."""
        try:
            config = config_from_dict(_load_yaml(file_path))
            state = adapter_cls(_client(ctx)).create(config)
        except Exception as e:
            _fail("Create", e)
        click.echo(f"✓ Created {label} {state.to_dict()['id']}", err=True)
        _echo_state(state)

    @group.command("show")
    @click.argument("resource_id")
    @click.pass_context
    def show(ctx: click.Context, resource_id: str) -> None:
        """Show the observed state of a resource."""
        try:
            state = adapter_cls(_client(ctx)).read(resource_id)
        except Exception as e:
            _fail("Read", e)
        if state is None:
            click.echo(f"✗ {label} {resource_id} not found", err=True)
            sys.exit(1)
        _echo_state(state)

    @group.command("apply")
    @click.argument("resource_id")
    @file_option
    @click.pass_context
    def apply(ctx: click.Context, resource_id: str, file_path: str) -> None:
        """Update an existing resource to match a YAML file."""
        try:
            config = config_from_dict(_load_yaml(file_path))
            state = adapter_cls(_client(ctx)).apply(resource_id, config)
        except Exception as e:
            _fail("Apply", e)
        click.echo(f"✓ Applied {label} {resource_id}", err=True)
        if state is not None:
            _echo_state(state)

    @group.command("delete")
    @click.argument("resource_id")
    @click.option("--yes", is_flag=True, help="Skip confirmation prompt.")
    @click.pass_context
    def delete(ctx: click.Context, resource_id: str, yes: bool) -> None:
        """Delete a resource and wait until it is gone."""
        if not yes:
            click.confirm(f"Delete {label} {resource_id}?", abort=True)
        try:
            adapter_cls(_client(ctx)).delete(resource_id)
        except Exception as e:
            _fail("Delete", e)
        click.echo(f"✓ Deleted {label} {resource_id}")

    return group


ipam = _lifecycle_group("ipam", "IPAM", IpamAdapter, IpamConfig.from_dict)
scope = _lifecycle_group("scope", "IPAM scope", IpamScopeAdapter, IpamScopeConfig.from_dict)
pool = _lifecycle_group("pool", "IPAM pool", IpamPoolAdapter, IpamPoolConfig.from_dict)
parameter_group = _lifecycle_group(
    "parameter-group", "DB parameter group", ParameterGroupAdapter, ParameterGroupConfig.from_dict
)


def _format_parameter(p: Parameter) -> str:
    return f"{p.name} = {p.value} ({p.apply_method.value})"


@parameter_group.command("plan")
@click.option(
    "--file",
    "-f",
    "file_path",
    required=True,
    type=click.Path(exists=True),
    help="YAML DB parameter group configuration.",
)
@click.option("--name", "-n", help="Existing group to diff against (default: a new group).")
@click.pass_context
def parameter_group_plan(ctx: click.Context, file_path: str, name: str | None) -> None:
    """Preview the modify and reset calls an apply would make."""
    try:
        config = ParameterGroupConfig.from_dict(_load_yaml(file_path))
        current: frozenset[Parameter] = frozenset()
        if name:
            state = ParameterGroupAdapter(_client(ctx)).read(name, parameters=config.parameters)
            if state is None:
                click.echo(f"✗ DB parameter group {name} not found", err=True)
                sys.exit(1)
            current = state.parameters
    except Exception as e:
        _fail("Plan", e)

    modifications = ParameterGroupAdapter.plan_modifications(current, config.parameters)
    resets = ParameterGroupAdapter.plan_resets(current, config.parameters)

    if not modifications and not resets:
        click.echo("No changes. Parameters are up-to-date.")
        return

    click.echo(f"Plan: {len(modifications)} modify call(s), {len(resets)} reset call(s)\n")
    for i, batch in enumerate(modifications, start=1):
        click.echo(f"  ~ modify #{i} ({len(batch)} parameter(s))")
        for p in batch:
            click.echo(f"      {_format_parameter(p)}")
    for i, batch in enumerate(resets, start=1):
        click.echo(f"  - reset #{i} ({len(batch)} parameter(s))")
        for p in batch:
            click.echo(f"      {p.name}")


cli.add_command(ipam)
cli.add_command(scope)
cli.add_command(pool)
cli.add_command(parameter_group)


if __name__ == "__main__":
    cli()
