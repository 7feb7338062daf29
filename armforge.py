#!/usr/bin/env python
import logging
import sys
from typing import Any, Callable, Dict, Optional

import click
from click.core import ParameterSource

import modules.helpers as helpers
from modules.arm_client import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, ArmClient, resource_id
from modules.config_loader import load_config
from modules.exceptions import ArmForgeError, MissingRequiredInputError
from modules.firewall_rules import new_application_rule
from modules.optional_fields import bound_parameters
from modules.utils.string_utils import parse_key_value_pairs
from modules.vmss_config import build_vmss_config


__version__ = "0.1.0"

compute_config = load_config("compute")
network_config = load_config("network")

# Click option name -> scale set parameter name
VMSS_OPTIONS = {
    "overprovision": "Overprovision",
    "location": "Location",
    "tag": "Tag",
    "sku_name": "SkuName",
    "sku_tier": "SkuTier",
    "sku_capacity": "SkuCapacity",
    "upgrade_policy_mode": "UpgradePolicyMode",
    "os_profile": "OsProfile",
    "storage_profile": "StorageProfile",
    "network_interface_configuration": "NetworkInterfaceConfiguration",
    "extension": "Extension",
    "single_placement_group": "SinglePlacementGroup",
    "zone_balance": "ZoneBalance",
    "platform_fault_domain_count": "PlatformFaultDomainCount",
    "zone": "Zone",
    "plan_name": "PlanName",
    "plan_publisher": "PlanPublisher",
    "plan_product": "PlanProduct",
    "plan_promotion_code": "PlanPromotionCode",
    "rolling_upgrade_policy": "RollingUpgradePolicy",
    "auto_os_upgrade": "AutoOSUpgrade",
    "disable_auto_rollback": "DisableAutoRollback",
    "health_probe_id": "HealthProbeId",
    "boot_diagnostic": "BootDiagnostic",
    "license_type": "LicenseType",
    "priority": "Priority",
    "eviction_policy": "EvictionPolicy",
    "assign_identity": "AssignIdentity",
    "identity_type": "IdentityType",
    "identity_id": "IdentityId",
}

# Options whose value is a path to a YAML/JSON document
DOCUMENT_OPTIONS = {
    "os_profile": helpers.load_document,
    "storage_profile": helpers.load_document,
    "rolling_upgrade_policy": helpers.load_document,
    "boot_diagnostic": helpers.load_document,
    "network_interface_configuration": helpers.load_document_list,
    "extension": helpers.load_document_list,
}


def my_excepthook(exc_type: type, exc_value: BaseException, exc_traceback: Any) -> None:
    """Custom exception hook for unhandled errors."""
    print(f"Unhandled error: {exc_type}, {exc_value}")


def _configure_logging(debug: bool) -> None:
    if not debug:
        sys.excepthook = my_excepthook
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(error: ArmForgeError) -> None:
    """Print a validation/request error and exit with status 1."""
    click.echo(click.style(f"\nERROR: {error}\n", fg="red", bold=True), err=True)
    sys.exit(1)


def _run(debug: bool, action: Callable[[], None]) -> None:
    """Run a command body, turning armforge errors into a clean exit."""
    try:
        action()
    except ArmForgeError as e:
        if debug:
            raise
        _fail(e)


def _bound(ctx: click.Context, names: Dict[str, str]) -> Dict[str, Any]:
    """Return {parameter name: value} for options the caller actually supplied."""
    supplied = bound_parameters(
        {option: ctx.params[option] for option in names},
        lambda option: ctx.get_parameter_source(option) == ParameterSource.DEFAULT,
    )
    return {names[option]: value for option, value in supplied.items()}


def _load_vmss_documents(ctx: click.Context) -> None:
    for option, loader in DOCUMENT_OPTIONS.items():
        path = ctx.params.get(option)
        if path is not None:
            ctx.params[option] = loader(path, VMSS_OPTIONS[option])


def _submit(
    body: Dict[str, Any],
    subscription_id: Optional[str],
    resource_group: Optional[str],
    name: Optional[str],
    access_token: Optional[str],
    endpoint: str,
    timeout: int,
) -> Dict[str, Any]:
    for parameter, value in (
        ("SubscriptionId", subscription_id),
        ("ResourceGroup", resource_group),
        ("Name", name),
        ("AccessToken", access_token),
    ):
        if not value:
            raise MissingRequiredInputError(
                f"{parameter} is required when submitting to Azure Resource Manager.",
                parameter=parameter,
            )
    target = resource_id(
        subscription_id,
        resource_group,
        compute_config.PROVIDER_NAMESPACE,
        compute_config.RESOURCE_TYPES["vmss"],
        name,
    )
    client = ArmClient(access_token, endpoint=endpoint, timeout=timeout)
    return client.put_resource(target, body, compute_config.API_VERSION)


@click.version_option(version=__version__, prog_name="armforge")
@click.group()
def cli():
    """
    armforge builds Azure Resource Manager request bodies from command line parameters

    For help with a specific command type:

    armforge [COMMAND] --help

    """
    pass


@cli.command("vmss-config")
@click.option("--debug", is_flag=True, default=False, help="Dump exception tracebacks")
@click.option("--overprovision/--no-overprovision", default=None, help="Overprovision VMs")
@click.option("--location", default=None, help="Azure region, e.g. westeurope")
@click.option("--tag", multiple=True, help="Resource tag as KEY=VALUE (repeatable)")
@click.option("--sku-name", "--account-type", "sku_name", default=None, help="VM size, e.g. Standard_D2s_v3")
@click.option("--sku-tier", default=None, help="SKU tier (Standard/Basic)")
@click.option("--sku-capacity", type=int, default=None, help="Number of VMs")
@click.option(
    "--upgrade-policy-mode",
    type=click.Choice(compute_config.UPGRADE_MODES, case_sensitive=False),
    default=None,
    help="Upgrade policy mode",
)
@click.option("--os-profile", default=None, help="Path to OS profile document (YAML/JSON)")
@click.option("--storage-profile", default=None, help="Path to storage profile document (YAML/JSON)")
@click.option(
    "--network-interface-configuration",
    default=None,
    help="Path to network interface configuration document(s) (YAML/JSON)",
)
@click.option("--extension", default=None, help="Path to extension document(s) (YAML/JSON)")
@click.option("--single-placement-group/--no-single-placement-group", default=None)
@click.option("--zone-balance", is_flag=True, default=False, help="Balance VMs across zones")
@click.option("--platform-fault-domain-count", type=int, default=None)
@click.option("--zone", multiple=True, help="Availability zone (repeatable)")
@click.option("--plan-name", default=None, help="Marketplace plan name")
@click.option("--plan-publisher", default=None, help="Marketplace plan publisher")
@click.option("--plan-product", default=None, help="Marketplace plan product")
@click.option("--plan-promotion-code", default=None, help="Marketplace plan promotion code")
@click.option(
    "--rolling-upgrade-policy",
    default=None,
    help="Path to rolling upgrade policy document (YAML/JSON)",
)
@click.option("--auto-os-upgrade", is_flag=True, default=False, help="Enable automatic OS upgrades")
@click.option("--disable-auto-rollback/--enable-auto-rollback", default=None)
@click.option("--health-probe-id", default=None, help="Load balancer probe resource ID")
@click.option("--boot-diagnostic", default=None, help="Path to boot diagnostics document (YAML/JSON)")
@click.option("--license-type", default=None, help="e.g. Windows_Server")
@click.option("--priority", default=None, help="VM priority (Regular/Low)")
@click.option(
    "--eviction-policy",
    type=click.Choice(compute_config.EVICTION_POLICIES, case_sensitive=False),
    default=None,
)
@click.option("--assign-identity", is_flag=True, default=False, help="Assign a system identity")
@click.option(
    "--identity-type",
    type=click.Choice(compute_config.IDENTITY_TYPES, case_sensitive=False),
    default=None,
)
@click.option("--identity-id", multiple=True, help="User assigned identity ID (repeatable)")
@click.option("--outfile", default=None, help="Also write the record to this JSON file")
@click.option("--submit", is_flag=True, default=False, help="PUT the scale set to Azure Resource Manager")
@click.option("--subscription-id", envvar="AZURE_SUBSCRIPTION_ID", default=None)
@click.option("--resource-group", default=None)
@click.option("--name", default=None, help="Scale set name (for --submit)")
@click.option("--access-token", envvar="AZURE_ACCESS_TOKEN", default=None)
@click.option("--endpoint", envvar="ARMFORGE_ARM_ENDPOINT", default=DEFAULT_ENDPOINT)
@click.option("--timeout", envvar="ARMFORGE_TIMEOUT", type=int, default=DEFAULT_TIMEOUT)
@click.pass_context
def vmss_config(
    ctx,
    debug,
    outfile,
    submit,
    subscription_id,
    resource_group,
    name,
    access_token,
    endpoint,
    timeout,
    **options,
):
    """Builds a Virtual Machine Scale Set configuration"""
    _configure_logging(debug)

    def action():
        _load_vmss_documents(ctx)
        bound = _bound(ctx, VMSS_OPTIONS)
        if "Tag" in bound:
            bound["Tag"] = parse_key_value_pairs(bound["Tag"])
        vmss = build_vmss_config(bound)
        helpers.print_record(vmss.to_dict(), "Scale set configuration")
        if outfile:
            helpers.export_record(vmss.to_dict(), outfile)
        if submit:
            response = _submit(
                vmss.to_arm_body(),
                subscription_id,
                resource_group,
                name,
                access_token,
                endpoint,
                timeout,
            )
            helpers.print_record(response, "Azure Resource Manager response")

    _run(debug, action)


@cli.command("firewall-app-rule")
@click.option("--debug", is_flag=True, default=False, help="Dump exception tracebacks")
@click.option("--name", required=True, help="The name of the application rule")
@click.option("--description", default=None, help="The description of the rule")
@click.option("--source-address", multiple=True, help="Source address (repeatable)")
@click.option("--target-fqdn", multiple=True, help="Target FQDN (repeatable)")
@click.option("--fqdn-tag", multiple=True, help="FQDN tag (repeatable)")
@click.option("--protocol", multiple=True, help="Protocol as protocol[:port], e.g. https:8443")
@click.option("--outfile", default=None, help="Also write the rule to this JSON file")
@click.pass_context
def firewall_app_rule(ctx, debug, name, description, outfile, **options):
    """Builds an Azure Firewall application rule"""
    _configure_logging(debug)

    def action():
        bound = bound_parameters(
            options,
            lambda option: ctx.get_parameter_source(option) == ParameterSource.DEFAULT,
        )
        rule = new_application_rule(
            name,
            description=description,
            source_address=bound.get("source_address"),
            target_fqdn=bound.get("target_fqdn"),
            fqdn_tag=bound.get("fqdn_tag"),
            protocol=bound.get("protocol"),
        )
        helpers.print_record(rule.to_dict(), "Application rule")
        if outfile:
            helpers.export_record(rule.to_dict(), outfile)

    _run(debug, action)


@cli.command("fqdn-tags")
def fqdn_tags():
    """Lists the FQDN tags accepted by application rules"""
    for tag in network_config.ALLOWED_FQDN_TAGS:
        click.echo(tag)


def main():
    cli()


if __name__ == "__main__":
    main()
