"""
Workflows

End-to-end operations built on the picopak core: pack, install, list,
remove and submit.
"""

from workflows.artifacts.pack import PackResult, pack_directory
from workflows.install import (
    InstalledPackage,
    InstallResult,
    install_package,
    is_package_name_reference,
    list_installed,
    remove_installed,
)
from workflows.submit import SubmissionResult, prepare_submission, resolve_artifact_url

__all__ = [
    "PackResult",
    "pack_directory",
    "InstalledPackage",
    "InstallResult",
    "install_package",
    "is_package_name_reference",
    "list_installed",
    "remove_installed",
    "SubmissionResult",
    "prepare_submission",
    "resolve_artifact_url",
]
