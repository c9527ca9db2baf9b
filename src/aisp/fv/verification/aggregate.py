"""Fold per-property results into one document status."""

from __future__ import annotations

from typing import Iterable

from ..solver.result import PropertyOutcome
from .result import VerificationStatus, VerifiedProperty


def aggregate(properties: Iterable[VerifiedProperty]) -> VerificationStatus:
    """Derive the document status from its property results.

    Rules, first match wins:
        no properties             -> Incomplete
        only Unsupported          -> Disabled
        any Error                 -> Failed
        any Disproven             -> Failed
        all Proven                -> AllVerified
        otherwise                 -> PartiallyVerified

    Unsupported mixed with other results counts as Unknown.
    """
    properties = list(properties)
    if not properties:
        return VerificationStatus.incomplete()

    outcomes = [p.result.outcome for p in properties]
    if all(o is PropertyOutcome.UNSUPPORTED for o in outcomes):
        return VerificationStatus.disabled()

    errors = [p for p in properties if p.result.outcome is PropertyOutcome.ERROR]
    if errors:
        first = errors[0]
        return VerificationStatus.failed(
            f"{len(errors)} verification error(s); first: {first.id}: {first.result.reason}")

    disproven = [p.id for p in properties if p.result.outcome is PropertyOutcome.DISPROVEN]
    if disproven:
        return VerificationStatus.failed(f"Property disproven: {', '.join(disproven)}")

    if all(o is PropertyOutcome.PROVEN for o in outcomes):
        return VerificationStatus.all_verified()
    return VerificationStatus.partially_verified()
