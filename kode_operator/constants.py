"""Names, defaults and condition types shared across the operator."""

from __future__ import annotations

import enum

KODE_FINALIZER_NAME = "kode.jacero.io/kode-finalizer"
ENTRY_POINT_FINALIZER_NAME = "kode.jacero.io/entrypoint-finalizer"
PVC_FINALIZER_NAME = "kode.jacero.io/kode-pvc-finalizer"

DEFAULT_KODE_VOLUME_STORAGE_NAME = "kode-storage"
DEFAULT_KODE_POD_PORT = 3000

DEFAULT_USERNAME = "abc"


class ConditionType(str, enum.Enum):
    """Condition types reported in the status of Kode and EntryPoint resources."""

    READY = "Ready"
    """The resource is fully operational and prepared to serve its purpose."""

    AVAILABLE = "Available"
    """The resource is accessible and can actively serve requests."""

    PROGRESSING = "Progressing"
    """The resource is actively working towards a desired state."""

    DEGRADED = "Degraded"
    """The resource is operational but not functioning optimally."""

    ERROR = "Error"
    """The resource has hit an error state that requires attention."""

    CONFIGURED = "Configured"
    """The resource has been configured with all necessary settings."""

    VALIDATED = "Validated"
    """The resource has been validated and is ready for provisioning."""

    HTTP_ROUTE_READY = "HTTPRouteReady"
    """The HTTP route is available and can be accessed."""

    HTTPS_ROUTE_READY = "HTTPSRouteReady"
    """The HTTPS route is available and can be accessed."""

    def __str__(self) -> str:
        return self.value


class ConditionStatus(str, enum.Enum):
    """Status of a condition: true, false or unknown."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value