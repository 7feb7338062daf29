"""Azure Firewall application rule construction.

Builds FirewallApplicationRule records from caller parameters. A rule targets
either explicit FQDNs or FQDN tags. Protocols are given as text such as
"http", "HTTPS" or "https:8443" and resolved to (protocol, port) pairs.

Parsing is split into three independent checks, each with its own error:
    - lexical shape (MalformedProtocolError)
    - protocol name allowlist (UnsupportedProtocolError)
    - numeric port (InvalidPortError)
"""

import logging
import re
from typing import Callable, Dict, List, Optional, Sequence

from modules.config_loader import load_config
from modules.exceptions import (
    ConflictingInputError,
    InvalidPortError,
    MalformedProtocolError,
    MissingRequiredInputError,
    UnknownFqdnTagError,
    UnsupportedCombinationError,
    UnsupportedProtocolError,
)
from modules.models import ApplicationRuleProtocol, FirewallApplicationRule
from modules.utils.string_utils import find_case_insensitive, join_names

logger = logging.getLogger(__name__)

network_config = load_config("network")

PROTOCOL_PATTERN = re.compile(r"(?P<protocol>[a-z]+)(?::(?P<port>[^:]*))?", re.IGNORECASE)
PORT_PATTERN = re.compile(r"[1-9][0-9]*")
MAX_PORT = 65535


def map_fqdn_tags(
    user_tags: Sequence[str], allowed: Optional[Sequence[str]] = None
) -> List[str]:
    """Translate user-supplied FQDN tags to their canonical names.

    Args:
        user_tags: Tags as typed by the caller (any casing)
        allowed: Canonical tag names, defaults to the network provider table

    Returns:
        Canonical tag names, in input order

    Raises:
        UnknownFqdnTagError: If a tag is not in the allowed table
    """
    allowed = network_config.ALLOWED_FQDN_TAGS if allowed is None else allowed
    mapped = []
    for tag in user_tags:
        canonical = find_case_insensitive(tag, allowed)
        if canonical is None:
            raise UnknownFqdnTagError(
                f"Invalid FQDN tag '{tag}'. Allowed tags are {join_names(allowed)}",
                parameter="FqdnTag",
                context={"value": tag},
            )
        mapped.append(canonical)
    return mapped


def parse_protocol(
    text: str, supported: Optional[Dict[str, int]] = None
) -> ApplicationRuleProtocol:
    """Resolve one "protocol[:port]" string.

    Args:
        text: User text, e.g. "http", "HtTpS:8443"
        supported: Protocol type to default port, defaults to the network table

    Returns:
        ApplicationRuleProtocol with the canonical protocol type and a concrete port

    Raises:
        MalformedProtocolError: Text is not of the form protocol[:port]
        UnsupportedProtocolError: Protocol name not in ``supported``
        InvalidPortError: Port suffix is not an integer in 1..65535
    """
    supported = network_config.APPLICATION_RULE_PROTOCOLS if supported is None else supported

    match = PROTOCOL_PATTERN.fullmatch(text)
    if not match:
        raise MalformedProtocolError(
            f"Invalid protocol '{text}'. Expected protocol[:port], e.g. https:8443",
            parameter="Protocol",
            context={"value": text},
        )

    protocol_type = find_case_insensitive(match.group("protocol"), supported)
    if protocol_type is None:
        raise UnsupportedProtocolError(
            f"Unsupported protocol {match.group('protocol')}. "
            f"Supported protocols are {join_names(p.lower() for p in supported)}",
            parameter="Protocol",
            context={"value": text},
        )

    port_text = match.group("port")
    if port_text is None:
        port = supported[protocol_type]
    elif PORT_PATTERN.fullmatch(port_text) and int(port_text) <= MAX_PORT:
        port = int(port_text)
    else:
        raise InvalidPortError(
            f"Invalid port {text}. Ports must be between 1 and {MAX_PORT}",
            parameter="Protocol",
            context={"value": text},
        )

    return ApplicationRuleProtocol(protocol_type=protocol_type, port=port)


def parse_protocols(
    protocols: Sequence[str], supported: Optional[Dict[str, int]] = None
) -> List[ApplicationRuleProtocol]:
    """Resolve every protocol string, preserving order and duplicates."""
    return [parse_protocol(text, supported) for text in protocols]


def new_application_rule(
    name: str,
    description: Optional[str] = None,
    source_address: Optional[List[str]] = None,
    target_fqdn: Optional[List[str]] = None,
    fqdn_tag: Optional[List[str]] = None,
    protocol: Optional[List[str]] = None,
    tag_lookup: Callable[[Sequence[str]], List[str]] = map_fqdn_tags,
) -> FirewallApplicationRule:
    """Build an application rule, validating the parameter combination.

    None or an empty list means "not supplied" for every optional parameter.

    Args:
        name: Rule name
        description: Free-text description
        source_address: Source addresses / CIDR ranges
        target_fqdn: Target FQDNs (exclusive with fqdn_tag)
        fqdn_tag: FQDN tags (exclusive with target_fqdn and protocol)
        protocol: Protocol strings, e.g. ["http", "https:8443"]
        tag_lookup: Maps user tags to canonical tags; its errors propagate

    Returns:
        FirewallApplicationRule

    Raises:
        MissingRequiredInputError: Empty name, or neither target_fqdn nor fqdn_tag given
        ConflictingInputError: Both target_fqdn and fqdn_tag given
        UnsupportedCombinationError: protocol given together with fqdn_tag
        MalformedProtocolError, UnsupportedProtocolError, InvalidPortError:
            see parse_protocol
    """
    if not name:
        raise MissingRequiredInputError(
            "A rule name must be specified.",
            parameter="Name",
        )
    if not fqdn_tag:
        if not target_fqdn:
            raise MissingRequiredInputError(
                "Either TargetFqdn or FqdnTag must be specified for a rule.",
                parameter="TargetFqdn",
            )
    else:
        if target_fqdn:
            raise ConflictingInputError(
                "TargetFqdn and FqdnTag cannot be specified in the same rule.",
                parameter="TargetFqdn",
            )
        if protocol:
            raise UnsupportedCombinationError(
                "Protocol parameter is not allowed when using FqdnTag.",
                parameter="Protocol",
            )
        protocol = list(network_config.FQDN_TAG_DEFAULT_PROTOCOLS)
        fqdn_tag = tag_lookup(fqdn_tag)

    protocols = parse_protocols(protocol or [])
    logger.debug(f"Application rule '{name}' resolved {len(protocols)} protocol(s)")

    return FirewallApplicationRule(
        name=name,
        description=description,
        source_addresses=list(source_address) if source_address is not None else None,
        protocols=protocols,
        target_fqdns=list(target_fqdn) if target_fqdn else None,
        fqdn_tags=fqdn_tag,
    )
