"""
Domain models — Pydantic types for brewdeck.

All models are re-exported here for convenient access:

    from brewdeck.core.models import ExternalCommand, Package, PackageKind
"""

from brewdeck.core.models.command import CommandResult, ExternalCommand
from brewdeck.core.models.package import (
    NO_DESCRIPTION,
    MutationResult,
    OutdatedPackage,
    OutdatedView,
    Package,
    PackageDetail,
    PackageKind,
    PackageView,
    SearchResult,
)

__all__ = [
    # command.py
    "CommandResult",
    "ExternalCommand",
    # package.py
    "MutationResult",
    "NO_DESCRIPTION",
    "OutdatedPackage",
    "OutdatedView",
    "Package",
    "PackageDetail",
    "PackageKind",
    "PackageView",
    "SearchResult",
]
