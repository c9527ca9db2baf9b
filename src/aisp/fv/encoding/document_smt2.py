"""Document-level obligation families.

Temporal (LTL/CTL), type-soundness and functional-correctness encodings
are not defined yet; each encoder returns no obligations, so a document
without a tri-vector analysis verifies as Incomplete.
"""

from __future__ import annotations

from typing import List

from ..document import Document
from ..translator.environment import SmtEnvironment
from .obligation import Obligation


def encode_temporal(document: Document, env: SmtEnvironment) -> List[Obligation]:
    return []


def encode_type_safety(document: Document, env: SmtEnvironment) -> List[Obligation]:
    return []


def encode_correctness(document: Document, env: SmtEnvironment) -> List[Obligation]:
    return []
