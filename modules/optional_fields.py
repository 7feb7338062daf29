"""Optional-field request builder for armforge.

Commands accept a sparse set of named parameters. Whether a parameter was
supplied at all is tracked separately from its value, and nested request
records are only allocated once a parameter routed into them is present.

Routes are declared as data (see modules/vmss_config.py) and applied by
RequestBuilder.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import logging

logger = logging.getLogger(__name__)


class _Unset:
    """Sentinel type for parameters the caller did not supply."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()

# (attribute on parent, factory creating the child record)
PathSegment = Tuple[str, Callable[[], Any]]


@dataclass(frozen=True)
class OptionalField:
    """A named input whose presence is meaningful on its own.

    Args:
        name: Parameter name (e.g., "SkuName")
        value: Supplied value, or UNSET when absent
    """

    name: str
    value: Any = UNSET

    @property
    def present(self) -> bool:
        return self.value is not UNSET

    def get(self, default: Any = None) -> Any:
        return self.value if self.present else default


@dataclass(frozen=True)
class FieldRoute:
    """Routes one named parameter to an attribute inside the request tree.

    Args:
        parameter: Name of the input parameter (e.g., "HealthProbeId")
        path: Segments from the root record down to the target record
        attribute: Attribute set on the target record
        always: Apply even when the parameter is absent, using ``default``
        default: Value assigned for an absent ``always`` route
        transform: Optional conversion applied to the supplied value
    """

    parameter: str
    path: Tuple[PathSegment, ...]
    attribute: str
    always: bool = False
    default: Any = None
    transform: Optional[Callable[[Any], Any]] = None


def ensure_child(parent: Any, attribute: str, factory: Callable[[], Any]) -> Any:
    """Return ``parent.<attribute>``, creating it with ``factory`` if unset.

    Calling this twice returns the same child object.
    """
    child = getattr(parent, attribute)
    if child is None:
        child = factory()
        setattr(parent, attribute, child)
    return child


def optional_fields(bound: Mapping[str, Any], names: Iterable[str]) -> Dict[str, OptionalField]:
    """Wrap each named parameter as an OptionalField based on ``bound``."""
    return {name: OptionalField(name, bound.get(name, UNSET)) for name in names}


def bound_parameters(
    values: Mapping[str, Any], is_default: Callable[[str], bool]
) -> Dict[str, Any]:
    """Keep only the parameters whose value did not come from a default.

    Args:
        values: All parameter values, keyed by parameter name
        is_default: Returns True when the named parameter was not supplied

    Returns:
        dict: Parameter name to value, for supplied parameters only
    """
    return {name: value for name, value in values.items() if not is_default(name)}


class RequestBuilder:
    """Applies a list of FieldRoutes to a root record.

    The builder only looks at presence. It never validates values.
    """

    def __init__(self, root: Any, routes: List[FieldRoute]):
        self.root = root
        self.routes = routes

    def target(self, route: FieldRoute) -> Any:
        """Walk (and lazily create) the records on ``route.path``."""
        node = self.root
        for attribute, factory in route.path:
            node = ensure_child(node, attribute, factory)
        return node

    def apply(self, bound: Mapping[str, Any]) -> Any:
        """Assign every present (or forced) parameter and return the root.

        Args:
            bound: Supplied parameters only; presence is key membership

        Returns:
            The root record passed to the constructor
        """
        fields = optional_fields(bound, [route.parameter for route in self.routes])
        for route in self.routes:
            field = fields[route.parameter]
            if not field.present and not route.always:
                continue
            value = field.get(route.default)
            if field.present and route.transform is not None:
                value = route.transform(value)
            setattr(self.target(route), route.attribute, value)
            target = ".".join([segment[0] for segment in route.path] + [route.attribute])
            logger.debug(f"Set {target} from {route.parameter}")
        return self.root
