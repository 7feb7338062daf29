"""Request records emitted by armforge commands.

Records are plain mutable dataclasses. Every field defaults to None so a record
that was created lazily carries only the values the caller supplied. Field
metadata controls serialization:

    json: key used in the serialized form when camelCase of the attribute
          name is not the ARM property name
    arm:  "properties" for fields that live under the ARM "properties" object
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from modules.utils.string_utils import snake_to_camel

Document = Dict[str, Any]


def _json_name(f) -> str:
    return f.metadata.get("json", snake_to_camel(f.name))


def serialize(value: Any) -> Any:
    """Convert records (and containers of records) into JSON-ready values."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value


class Record:
    """Mixin providing camelCase dict serialization that omits unset fields."""

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[_json_name(f)] = serialize(value)
        return out


@dataclass
class Sku(Record):
    name: Optional[str] = None
    tier: Optional[str] = None
    capacity: Optional[int] = None


@dataclass
class Plan(Record):
    name: Optional[str] = None
    publisher: Optional[str] = None
    product: Optional[str] = None
    promotion_code: Optional[str] = None


@dataclass
class AutoOSUpgradePolicy(Record):
    disable_auto_rollback: Optional[bool] = None


@dataclass
class UpgradePolicy(Record):
    mode: Optional[str] = None
    rolling_upgrade_policy: Optional[Document] = None
    automatic_os_upgrade: Optional[bool] = field(
        default=None, metadata={"json": "automaticOSUpgrade"}
    )
    auto_os_upgrade_policy: Optional[AutoOSUpgradePolicy] = field(
        default=None, metadata={"json": "autoOSUpgradePolicy"}
    )


@dataclass
class ApiEntityReference(Record):
    id: Optional[str] = None


@dataclass
class NetworkProfile(Record):
    health_probe: Optional[ApiEntityReference] = None
    network_interface_configurations: Optional[List[Document]] = None


@dataclass
class DiagnosticsProfile(Record):
    boot_diagnostics: Optional[Document] = None


@dataclass
class ExtensionProfile(Record):
    extensions: Optional[List[Document]] = None


@dataclass
class VirtualMachineProfile(Record):
    os_profile: Optional[Document] = None
    storage_profile: Optional[Document] = None
    network_profile: Optional[NetworkProfile] = None
    diagnostics_profile: Optional[DiagnosticsProfile] = None
    extension_profile: Optional[ExtensionProfile] = None
    license_type: Optional[str] = None
    priority: Optional[str] = None
    eviction_policy: Optional[str] = None


@dataclass
class ScaleSetIdentity(Record):
    type: Optional[str] = None
    identity_ids: Optional[List[str]] = None


@dataclass
class VirtualMachineScaleSet(Record):
    """Root record for a virtual machine scale set configuration."""

    location: Optional[str] = None
    tags: Optional[Dict[str, str]] = None
    zones: Optional[List[str]] = None
    sku: Optional[Sku] = None
    plan: Optional[Plan] = None
    identity: Optional[ScaleSetIdentity] = None
    overprovision: Optional[bool] = field(default=None, metadata={"arm": "properties"})
    single_placement_group: Optional[bool] = field(
        default=None, metadata={"arm": "properties"}
    )
    zone_balance: Optional[bool] = field(default=None, metadata={"arm": "properties"})
    platform_fault_domain_count: Optional[int] = field(
        default=None, metadata={"arm": "properties"}
    )
    upgrade_policy: Optional[UpgradePolicy] = field(
        default=None, metadata={"arm": "properties"}
    )
    virtual_machine_profile: Optional[VirtualMachineProfile] = field(
        default=None, metadata={"arm": "properties"}
    )

    def to_arm_body(self) -> Dict[str, Any]:
        """Return the ARM REST request body, with scoped fields under "properties"."""
        body: Dict[str, Any] = {}
        properties: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            target = properties if f.metadata.get("arm") == "properties" else body
            target[_json_name(f)] = serialize(value)
        if properties:
            body["properties"] = properties
        return body


@dataclass
class ApplicationRuleProtocol(Record):
    """One resolved protocol/port pair of an application rule."""

    protocol_type: str
    port: int


@dataclass
class FirewallApplicationRule(Record):
    """An Azure Firewall application rule.

    Exactly one of target_fqdns / fqdn_tags is set.
    """

    name: str
    description: Optional[str] = None
    source_addresses: Optional[List[str]] = None
    protocols: List[ApplicationRuleProtocol] = field(default_factory=list)
    target_fqdns: Optional[List[str]] = None
    fqdn_tags: Optional[List[str]] = None
