"""
Pre-flight environment inference and validation for the installer.
"""

from lib.exceptions import ValidationError

from .autodetect import K8sInstaller, K8sUninstaller
from .params import AzureParameters, InstallParameters, build_parameters, load_values_file

__all__ = [
    "ValidationError",
    "K8sInstaller",
    "K8sUninstaller",
    "InstallParameters",
    "AzureParameters",
    "build_parameters",
    "load_values_file",
]
