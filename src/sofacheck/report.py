"""
Single-row compatibility report.

generate() ties the fetcher and evaluator together and always returns exactly
one EvaluationResult: the evaluator's row, a "Could not obtain data" row when no
feed body is available, or an "Error parsing data" row when the body is
malformed.
"""

from typing import Optional

import requests

from sofacheck.cache import FeedCache
from sofacheck.config import FeedConfig
from sofacheck.constants import (
    LABEL_ERROR,
    LABEL_UNKNOWN,
    STATUS_PARSE_ERROR_PREFIX,
)
from sofacheck.evaluator import (
    Compatibility,
    EvaluationResult,
    HostFacts,
    Status,
    evaluate,
    system_os_major,
)
from sofacheck.exceptions import FeedParseError
from sofacheck.fetcher import fetch_feed
from sofacheck.log_utils import logger


def unavailable_row(host: HostFacts) -> EvaluationResult:
    return EvaluationResult(
        system_version=host.system_version,
        system_os_major=system_os_major(host.system_version),
        model_identifier=host.model_identifier,
        latest_macos=LABEL_UNKNOWN,
        latest_compatible_macos=LABEL_UNKNOWN,
        is_compatible=Compatibility.UNKNOWN,
        status=Status.NO_DATA.value,
    )


def parse_error_row(host: HostFacts, detail: str) -> EvaluationResult:
    return EvaluationResult(
        system_version=host.system_version,
        system_os_major=system_os_major(host.system_version),
        model_identifier=host.model_identifier,
        latest_macos=LABEL_ERROR,
        latest_compatible_macos=LABEL_ERROR,
        is_compatible=Compatibility.UNKNOWN,
        status=f"{STATUS_PARSE_ERROR_PREFIX}{detail}",
    )


def generate(
    host: HostFacts,
    config: Optional[FeedConfig] = None,
    cache: Optional[FeedCache] = None,
    session: Optional[requests.Session] = None,
) -> EvaluationResult:
    """
    Produce the compatibility row for a host.

    Parameters:
        host: OS version and hardware model of the machine being checked.
        config: Feed settings; defaults to FeedConfig.default().
        cache: Cache store passed through to fetch_feed().
        session: Optional requests session passed through to fetch_feed().

    Returns:
        EvaluationResult: Exactly one row, whichever path was taken.
    """
    outcome = fetch_feed(config, cache=cache, session=session)
    if not outcome.usable:
        return unavailable_row(host)

    try:
        result = evaluate(host, outcome.body)
    except FeedParseError as e:
        logger.error(f"Exception parsing SOFA data: {e.detail}")
        return parse_error_row(host, e.detail)

    logger.info(
        f"{result.model_identifier} on {result.system_version}: {result.status} "
        f"(latest {result.latest_macos}, latest compatible {result.latest_compatible_macos})"
    )
    return result
