"""Virtual machine scale set configuration builder.

Maps the named scale set parameters onto a VirtualMachineScaleSet record.
Sub-records (sku, plan, upgrade_policy, virtual_machine_profile, identity) are
only created when one of their parameters is supplied.

upgrade_policy is the exception: automatic_os_upgrade always reflects the
AutoOSUpgrade switch, so upgrade_policy is always present.
"""

import logging
from typing import Any, Dict, List, Mapping

from modules.config_loader import load_config
from modules.models import (
    ApiEntityReference,
    AutoOSUpgradePolicy,
    DiagnosticsProfile,
    ExtensionProfile,
    NetworkProfile,
    Plan,
    ScaleSetIdentity,
    Sku,
    UpgradePolicy,
    VirtualMachineProfile,
    VirtualMachineScaleSet,
)
from modules.optional_fields import FieldRoute, RequestBuilder

logger = logging.getLogger(__name__)

compute_config = load_config("compute")

# Path segments shared by the routes below
SKU = ("sku", Sku)
PLAN = ("plan", Plan)
UPGRADE_POLICY = ("upgrade_policy", UpgradePolicy)
AUTO_OS_UPGRADE_POLICY = ("auto_os_upgrade_policy", AutoOSUpgradePolicy)
VM_PROFILE = ("virtual_machine_profile", VirtualMachineProfile)
NETWORK_PROFILE = ("network_profile", NetworkProfile)
HEALTH_PROBE = ("health_probe", ApiEntityReference)
DIAGNOSTICS_PROFILE = ("diagnostics_profile", DiagnosticsProfile)
EXTENSION_PROFILE = ("extension_profile", ExtensionProfile)
IDENTITY = ("identity", ScaleSetIdentity)


def _as_list(value: Any) -> List[Any]:
    return list(value)


def _as_tags(value: Mapping[str, Any]) -> Dict[str, str]:
    return {str(k): str(v) for k, v in value.items()}


def _assigned_identity(value: Any) -> str:
    return compute_config.ASSIGNED_IDENTITY_TYPE


VMSS_ROUTES = [
    FieldRoute("Overprovision", (), "overprovision"),
    FieldRoute("Location", (), "location"),
    FieldRoute("Tag", (), "tags", transform=_as_tags),
    FieldRoute("SinglePlacementGroup", (), "single_placement_group"),
    FieldRoute("ZoneBalance", (), "zone_balance", transform=bool),
    FieldRoute("PlatformFaultDomainCount", (), "platform_fault_domain_count"),
    FieldRoute("Zone", (), "zones", transform=_as_list),
    FieldRoute("SkuName", (SKU,), "name"),
    FieldRoute("SkuTier", (SKU,), "tier"),
    FieldRoute("SkuCapacity", (SKU,), "capacity"),
    FieldRoute("PlanName", (PLAN,), "name"),
    FieldRoute("PlanPublisher", (PLAN,), "publisher"),
    FieldRoute("PlanProduct", (PLAN,), "product"),
    FieldRoute("PlanPromotionCode", (PLAN,), "promotion_code"),
    FieldRoute("UpgradePolicyMode", (UPGRADE_POLICY,), "mode"),
    FieldRoute("RollingUpgradePolicy", (UPGRADE_POLICY,), "rolling_upgrade_policy"),
    # Only forced field: an absent switch still writes False.
    FieldRoute(
        "AutoOSUpgrade",
        (UPGRADE_POLICY,),
        "automatic_os_upgrade",
        always=True,
        default=False,
        transform=bool,
    ),
    FieldRoute(
        "DisableAutoRollback",
        (UPGRADE_POLICY, AUTO_OS_UPGRADE_POLICY),
        "disable_auto_rollback",
    ),
    FieldRoute("OsProfile", (VM_PROFILE,), "os_profile"),
    FieldRoute("StorageProfile", (VM_PROFILE,), "storage_profile"),
    FieldRoute("HealthProbeId", (VM_PROFILE, NETWORK_PROFILE, HEALTH_PROBE), "id"),
    FieldRoute(
        "NetworkInterfaceConfiguration",
        (VM_PROFILE, NETWORK_PROFILE),
        "network_interface_configurations",
        transform=_as_list,
    ),
    FieldRoute(
        "BootDiagnostic", (VM_PROFILE, DIAGNOSTICS_PROFILE), "boot_diagnostics"
    ),
    FieldRoute(
        "Extension", (VM_PROFILE, EXTENSION_PROFILE), "extensions", transform=_as_list
    ),
    FieldRoute("LicenseType", (VM_PROFILE,), "license_type"),
    FieldRoute("Priority", (VM_PROFILE,), "priority"),
    FieldRoute("EvictionPolicy", (VM_PROFILE,), "eviction_policy"),
    # IdentityType comes after AssignIdentity so an explicit type wins.
    FieldRoute("AssignIdentity", (IDENTITY,), "type", transform=_assigned_identity),
    FieldRoute("IdentityType", (IDENTITY,), "type"),
    FieldRoute("IdentityId", (IDENTITY,), "identity_ids", transform=_as_list),
]

VMSS_PARAMETERS = [route.parameter for route in VMSS_ROUTES]


def build_vmss_config(bound: Mapping[str, Any]) -> VirtualMachineScaleSet:
    """Build a scale set record from the supplied parameters.

    Args:
        bound: Supplied parameters only, keyed by parameter name
            (e.g. {"SkuName": "Standard_D2s_v3", "Zone": ["1", "2"]}).
            Switch parameters (ZoneBalance, AutoOSUpgrade, AssignIdentity)
            count as supplied only when set.

    Returns:
        VirtualMachineScaleSet

    Raises:
        ValueError: If ``bound`` names a parameter this command does not have
    """
    unknown = sorted(set(bound) - set(VMSS_PARAMETERS))
    if unknown:
        raise ValueError(f"Unknown scale set parameter(s): {', '.join(unknown)}")

    # Switches only count when turned on
    bound = {
        name: value
        for name, value in bound.items()
        if name not in ("ZoneBalance", "AssignIdentity") or value
    }
    logger.debug(f"Building scale set config from {sorted(bound)}")
    return RequestBuilder(VirtualMachineScaleSet(), VMSS_ROUTES).apply(bound)
