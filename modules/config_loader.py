"""
Configuration Loader Module for armforge

This module provides dynamic loading of resource-provider configuration files.
Commands ask for the provider they target ('compute' or 'network') and get back
a module with API versions, resource types and validation tables.

"""

from typing import Any
import importlib
import logging

from modules.exceptions import ConfigurationError

# Configure logging
logger = logging.getLogger(__name__)

# Module name mapping for each resource provider
PROVIDER_CONFIG_MODULES = {
    "compute": "modules.config.provider_config_compute",
    "network": "modules.config.provider_config_network",
}

# Supported providers
SUPPORTED_PROVIDERS = ["compute", "network"]

REQUIRED_ATTRS = ["PROVIDER_NAME", "PROVIDER_NAMESPACE", "API_VERSION", "RESOURCE_TYPES"]


def _module_name(provider: str) -> str:
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(
            f"Provider '{provider}' not supported. "
            f"Must be one of: {', '.join(SUPPORTED_PROVIDERS)}"
        )
    module_name = PROVIDER_CONFIG_MODULES.get(provider)
    if not module_name:
        raise ConfigurationError(
            f"No configuration module mapped for provider '{provider}'",
            context={"provider": provider},
        )
    return module_name


def load_config(provider: str) -> Any:
    """
    Load resource-provider configuration module dynamically.

    Args:
        provider: Resource provider name ('compute' | 'network')

    Returns:
        Provider configuration module with constants and tables

    Raises:
        ValueError: If provider not supported
        ConfigurationError: If configuration module cannot be loaded or lacks
            a required attribute

    Examples:
        >>> load_config('compute').PROVIDER_NAMESPACE
        'Microsoft.Compute'

        >>> load_config('network').APPLICATION_RULE_PROTOCOLS['Https']
        443

    Usage Notes:
        - Configuration modules are cached after first import
        - Every load is checked by validate_config_module
        - Module must exist at modules/config/provider_config_{provider}.py
    """
    provider = provider.lower()
    module_name = _module_name(provider)

    try:
        config_module = importlib.import_module(module_name)
    except ImportError as e:
        logger.error(f"Failed to import configuration for provider '{provider}': {e}")
        raise ConfigurationError(
            f"Could not load configuration for provider '{provider}'. "
            f"Module '{module_name}' not found or has import errors. "
            f"Error: {e}",
            context={"provider": provider},
        ) from e

    validate_config_module(config_module, provider)
    logger.debug(f"Loaded configuration for provider '{provider}' from {module_name}")
    return config_module


def validate_config_module(config_module: Any, provider: str) -> bool:
    """
    Validate that a configuration module has required attributes.

    Required Attributes:
        - PROVIDER_NAME (str): Human-readable provider name
        - PROVIDER_NAMESPACE (str): ARM namespace, e.g. Microsoft.Compute
        - API_VERSION (str): api-version query parameter for requests
        - RESOURCE_TYPES (dict): short name to ARM resource type

    Raises:
        ConfigurationError: If validation fails
    """
    missing_attrs = [attr for attr in REQUIRED_ATTRS if not hasattr(config_module, attr)]

    if missing_attrs:
        raise ConfigurationError(
            f"Configuration module for provider '{provider}' is missing required attributes: "
            f"{', '.join(missing_attrs)}. Please ensure provider_config_{provider}.py defines all required constants.",
            context={"provider": provider},
        )

    logger.debug(f"Configuration module for '{provider}' passed validation")
    return True
