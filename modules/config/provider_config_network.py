# Network Provider Configuration for armforge
# Provider: Microsoft.Network
# Resources: Azure Firewall (application rule collections)

# Provider metadata
PROVIDER_NAME = "Network"
PROVIDER_NAMESPACE = "Microsoft.Network"
API_VERSION = "2018-07-01"

RESOURCE_TYPES = {
    "firewall": "azureFirewalls",
}

# Supported application rule protocols and their default ports.
# Keys are the canonical protocol type names sent to ARM.
APPLICATION_RULE_PROTOCOLS = {
    "Http": 80,
    "Https": 443,
}

# Protocols implied by an FQDN tag rule (user protocols are not allowed there)
FQDN_TAG_DEFAULT_PROTOCOLS = ["http", "https"]

# Canonical FQDN tag names accepted by Azure Firewall
ALLOWED_FQDN_TAGS = [
    "WindowsUpdate",
    "WindowsDiagnostics",
    "MicrosoftActiveProtectionService",
    "AppServiceEnvironment",
    "AzureBackup",
    "AzureKubernetesService",
    "WindowsVirtualDesktop",
]
