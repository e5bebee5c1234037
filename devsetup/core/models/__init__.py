"""
Domain models — Pydantic types for the provisioner.

All models are re-exported here for convenient access:

    from devsetup.core.models import Action, PlatformProfile, ProvisionSettings
"""

from devsetup.core.models.action import Action, Receipt
from devsetup.core.models.platform import (
    PLATFORMS,
    PackageManager,
    PlatformId,
    PlatformProfile,
    get_platform,
)
from devsetup.core.models.privilege import PrivilegeMode
from devsetup.core.models.settings import DEFAULT_THEME_CONTENT, ProvisionSettings

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # platform.py
    "PLATFORMS",
    "PackageManager",
    "PlatformId",
    "PlatformProfile",
    "get_platform",
    # privilege.py
    "PrivilegeMode",
    # settings.py
    "DEFAULT_THEME_CONTENT",
    "ProvisionSettings",
]
