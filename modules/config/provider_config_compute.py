# Compute Provider Configuration for armforge
# Provider: Microsoft.Compute
# Resources: Virtual machine scale sets

# Provider metadata
PROVIDER_NAME = "Compute"
PROVIDER_NAMESPACE = "Microsoft.Compute"
API_VERSION = "2018-04-01"

RESOURCE_TYPES = {
    "vmss": "virtualMachineScaleSets",
}

# Accepted values for choice-type parameters
UPGRADE_MODES = ["Automatic", "Manual", "Rolling"]
EVICTION_POLICIES = ["Deallocate", "Delete"]
IDENTITY_TYPES = [
    "SystemAssigned",
    "UserAssigned",
    "SystemAssigned, UserAssigned",
    "None",
]

# Identity type set by the AssignIdentity switch
ASSIGNED_IDENTITY_TYPE = "SystemAssigned"
