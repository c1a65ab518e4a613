"""
Compatibility evaluation against the SOFA feed.

The feed lists macOS releases newest first under "OSVersions" and, under
"Models", the macOS versions each hardware model supports, again newest first.
A host is compatible when the newest macOS overall is also the newest macOS its
model supports. Version labels are compared as exact strings; "14.5" and
"14.5.0" are different labels.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from sofacheck.constants import (
    FEED_MODELS_KEY,
    FEED_OS_VERSION_KEY,
    FEED_OS_VERSIONS_KEY,
    FEED_SUPPORTED_OS_KEY,
    LABEL_UNSUPPORTED,
    RESULT_COLUMNS,
    STATUS_FAIL,
    STATUS_NO_DATA,
    STATUS_PASS,
    STATUS_UNSUPPORTED_HARDWARE,
    VIRTUAL_MODEL_MARKER,
    VIRTUAL_REFERENCE_MODEL,
)
from sofacheck.exceptions import FeedParseError
from sofacheck.log_utils import logger


class Compatibility(Enum):
    """Tri-state compatibility verdict."""

    COMPATIBLE = "compatible"
    INCOMPATIBLE = "incompatible"
    UNKNOWN = "unknown"

    @classmethod
    def from_bool(cls, value: bool) -> "Compatibility":
        return cls.COMPATIBLE if value else cls.INCOMPATIBLE

    def to_int(self) -> int:
        """Integer form used in table output: 1, 0, or -1 for unknown."""
        return {
            Compatibility.COMPATIBLE: 1,
            Compatibility.INCOMPATIBLE: 0,
            Compatibility.UNKNOWN: -1,
        }[self]


class Status(Enum):
    PASS = STATUS_PASS
    FAIL = STATUS_FAIL
    UNSUPPORTED_HARDWARE = STATUS_UNSUPPORTED_HARDWARE
    NO_DATA = STATUS_NO_DATA


@dataclass(frozen=True)
class HostFacts:
    """OS version and hardware model reported by the host."""

    system_version: str
    model_identifier: str


@dataclass(frozen=True)
class FeedDocument:
    """The parts of the SOFA feed the evaluator reads."""

    os_versions: List[Dict[str, Any]]
    models: Dict[str, Any] = field(default_factory=dict)

    @property
    def latest_macos(self) -> str:
        return self.os_versions[0][FEED_OS_VERSION_KEY]

    def supported_os(self, model_identifier: str) -> List[Any]:
        """
        Return the SupportedOS list for a model, or an empty list if the model is not listed.

        Raises:
            FeedParseError: If the model record exists but is not shaped as expected.
        """
        record = self.models.get(model_identifier)
        if record is None:
            return []
        if not isinstance(record, dict):
            raise FeedParseError(f"model record for {model_identifier} is not an object")
        supported = record.get(FEED_SUPPORTED_OS_KEY, [])
        if supported is None:
            return []
        if not isinstance(supported, list):
            raise FeedParseError(
                f"{FEED_SUPPORTED_OS_KEY} for {model_identifier} is not an array"
            )
        return supported


@dataclass(frozen=True)
class EvaluationResult:
    """One result row. Never mutated after construction."""

    system_version: str
    system_os_major: str
    model_identifier: str
    latest_macos: str
    latest_compatible_macos: str
    is_compatible: Compatibility
    status: str

    def as_row(self) -> Dict[str, Any]:
        """Return the result as an ordered column mapping with is_compatible as 1/0/-1."""
        values = {
            "system_version": self.system_version,
            "system_os_major": self.system_os_major,
            "model_identifier": self.model_identifier,
            "latest_macos": self.latest_macos,
            "latest_compatible_macos": self.latest_compatible_macos,
            "is_compatible": self.is_compatible.to_int(),
            "status": self.status,
        }
        return {column: values[column] for column in RESULT_COLUMNS}


def system_os_major(system_version: str) -> str:
    """Return the text before the first ".", or the whole string if there is none."""
    return system_version.split(".", 1)[0]


def normalize_model(model_identifier: str) -> str:
    """Map virtual machine model identifiers onto the Apple silicon reference model."""
    if VIRTUAL_MODEL_MARKER in model_identifier:
        return VIRTUAL_REFERENCE_MODEL
    return model_identifier


def parse_feed(data: bytes) -> FeedDocument:
    """
    Parse raw feed bytes into a FeedDocument.

    Raises:
        FeedParseError: If the bytes are not valid JSON, or the document lacks a
            non-empty OSVersions array whose first entry has a string OSVersion,
            or lacks a Models object.
    """
    try:
        document = json.loads(data)
    except (ValueError, RecursionError) as e:
        raise FeedParseError(str(e)) from e

    if not isinstance(document, dict):
        raise FeedParseError("feed document is not a JSON object")

    os_versions = document.get(FEED_OS_VERSIONS_KEY)
    if not isinstance(os_versions, list) or not os_versions:
        raise FeedParseError(f"{FEED_OS_VERSIONS_KEY} is missing or empty")
    first = os_versions[0]
    if not isinstance(first, dict) or not isinstance(
        first.get(FEED_OS_VERSION_KEY), str
    ):
        raise FeedParseError(
            f"first {FEED_OS_VERSIONS_KEY} entry has no string {FEED_OS_VERSION_KEY}"
        )

    models = document.get(FEED_MODELS_KEY)
    if not isinstance(models, dict):
        raise FeedParseError(f"{FEED_MODELS_KEY} is missing or not an object")

    return FeedDocument(os_versions=os_versions, models=models)


def evaluate(
    host: HostFacts,
    data: Optional[bytes] = None,
    document: Optional[FeedDocument] = None,
) -> EvaluationResult:
    """
    Compare the host against the feed.

    Parameters:
        host: The host's OS version and hardware model.
        data: Raw feed bytes; parsed with parse_feed() unless `document` is given.
        document: An already parsed feed.

    Returns:
        EvaluationResult: Status is "Pass" when the newest macOS matches the newest
        macOS supported by the model, "Fail" when it does not, and
        "Unsupported Hardware" when the model is absent or lists no supported OS.

    Raises:
        FeedParseError: If the feed is malformed.
    """
    if document is None:
        if data is None:
            raise ValueError("evaluate() needs either data or document")
        document = parse_feed(data)

    latest_macos = document.latest_macos
    model_identifier = normalize_model(host.model_identifier)
    if model_identifier != host.model_identifier:
        logger.debug(
            f"Virtual model {host.model_identifier} evaluated as {model_identifier}"
        )

    supported = document.supported_os(model_identifier)
    if supported:
        latest_compatible = supported[0]
        if not isinstance(latest_compatible, str):
            raise FeedParseError(
                f"first {FEED_SUPPORTED_OS_KEY} entry for {model_identifier} is not a string"
            )
        status = Status.PASS
    else:
        latest_compatible = LABEL_UNSUPPORTED
        status = Status.UNSUPPORTED_HARDWARE

    is_compatible = latest_macos == latest_compatible
    if not is_compatible and status is not Status.UNSUPPORTED_HARDWARE:
        status = Status.FAIL

    return EvaluationResult(
        system_version=host.system_version,
        system_os_major=system_os_major(host.system_version),
        model_identifier=model_identifier,
        latest_macos=latest_macos,
        latest_compatible_macos=latest_compatible,
        is_compatible=Compatibility.from_bool(is_compatible),
        status=status.value,
    )
