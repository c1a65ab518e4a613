"""Host introspection for the OS version and hardware model."""

import platform
import subprocess
from typing import Optional

from sofacheck.evaluator import HostFacts
from sofacheck.exceptions import HostFactsError
from sofacheck.log_utils import logger

SYSCTL_MODEL_COMMAND = ["sysctl", "-n", "hw.model"]
SYSCTL_TIMEOUT_SECONDS = 5


def get_system_version() -> str:
    """
    Return the macOS product version (e.g. "14.5").

    Raises:
        HostFactsError: If the host is not macOS or reports no version.
    """
    version, _, _ = platform.mac_ver()
    if not version:
        raise HostFactsError(
            "Could not determine macOS version", details=platform.system()
        )
    return version


def get_model_identifier() -> str:
    """
    Return the hardware model identifier (e.g. "Mac14,7") from sysctl.

    Raises:
        HostFactsError: If sysctl is missing, fails, or prints nothing.
    """
    try:
        result = subprocess.run(
            SYSCTL_MODEL_COMMAND,
            capture_output=True,
            text=True,
            check=True,
            timeout=SYSCTL_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise HostFactsError(
            "Could not determine hardware model", details=str(e)
        ) from e

    model = result.stdout.strip()
    if not model:
        raise HostFactsError("Could not determine hardware model", details="empty output")
    return model


def detect_host_facts(
    system_version: Optional[str] = None,
    model_identifier: Optional[str] = None,
) -> HostFacts:
    """
    Build HostFacts, introspecting only the values that were not supplied.

    Raises:
        HostFactsError: If a value has to be introspected and cannot be.
    """
    version = system_version or get_system_version()
    model = model_identifier or get_model_identifier()
    logger.debug(f"Host facts: system_version={version} model_identifier={model}")
    return HostFacts(system_version=version, model_identifier=model)
