"""Azure Resource Manager client for armforge.

Submits finished request bodies to the ARM REST API. Authentication is a
bearer token obtained elsewhere (e.g. ``az account get-access-token``).
Responses are returned as parsed JSON and never interpreted here.
"""

import logging
from typing import Any, Dict, Optional

import requests

from modules.exceptions import ArmRequestError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://management.azure.com"
DEFAULT_TIMEOUT = 60


def resource_id(
    subscription_id: str,
    resource_group: str,
    namespace: str,
    resource_type: str,
    name: str,
) -> str:
    """Build an ARM resource ID.

    Examples:
        >>> resource_id("0000", "rg1", "Microsoft.Compute", "virtualMachineScaleSets", "ss1")
        '/subscriptions/0000/resourceGroups/rg1/providers/Microsoft.Compute/virtualMachineScaleSets/ss1'
    """
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/{namespace}/{resource_type}/{name}"
    )


def _error_details(response: requests.Response) -> Dict[str, Any]:
    """Extract ARM error code/message from an error response, if any."""
    try:
        payload = response.json()
    except ValueError:
        return {"body": response.text[:200]}
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        return {}
    return {"code": error.get("code"), "arm_message": error.get("message")}


class ArmClient:
    """Thin management-plane client over a requests session.

    Args:
        access_token: Bearer token for https://management.azure.com/
        endpoint: ARM endpoint (sovereign clouds use a different host)
        timeout: Per-request timeout in seconds
        session: Optional pre-configured requests.Session
    """

    def __init__(
        self,
        access_token: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        if not access_token:
            raise ArmRequestError(
                "An access token is required to call Azure Resource Manager",
                context={"endpoint": endpoint},
            )
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            }
        )

    def put_resource(
        self, resource_id: str, body: Dict[str, Any], api_version: str
    ) -> Dict[str, Any]:
        """Create or update a resource.

        Args:
            resource_id: Full ARM resource ID (see resource_id())
            body: JSON request body
            api_version: ARM api-version for the resource provider

        Returns:
            dict: Parsed JSON response body (empty if the response has none)

        Raises:
            ArmRequestError: On transport failure, non-2xx status or a non-JSON body
        """
        url = f"{self.endpoint}{resource_id}"
        logger.info(f"PUT {resource_id} (api-version {api_version})")
        try:
            response = self.session.put(
                url,
                params={"api-version": api_version},
                json=body,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise ArmRequestError(
                f"Request to Azure Resource Manager failed: {e}",
                context={"resource_id": resource_id},
            ) from e

        if not response.ok:
            context = {"resource_id": resource_id, "status_code": response.status_code}
            context.update(_error_details(response))
            logger.error(f"ARM returned {response.status_code} for {resource_id}")
            raise ArmRequestError(
                f"Azure Resource Manager rejected the request ({response.status_code})",
                context=context,
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise ArmRequestError(
                "Azure Resource Manager returned a response that is not JSON",
                context={"resource_id": resource_id, "status_code": response.status_code},
            ) from e
