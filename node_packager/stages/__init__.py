from .stage_10_acquire import AcquireStage
from .stage_20_audit import AuditStage
from .stage_30_modify import ModifyManifestStage
from .stage_40_scan_native import ScanNativeModulesStage
from .stage_50_validate_native import ValidateNativeModulesStage
from .stage_60_bundle import BundleDependenciesStage
from .stage_70_archive import ArchiveStage
from .stage_80_relocate import RelocateArchiveStage

__all__ = [
    "AcquireStage",
    "AuditStage",
    "ModifyManifestStage",
    "ScanNativeModulesStage",
    "ValidateNativeModulesStage",
    "BundleDependenciesStage",
    "ArchiveStage",
    "RelocateArchiveStage",
]
