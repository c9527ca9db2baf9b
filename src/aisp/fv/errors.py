"""
Error hierarchy for AISP formal verification.

Only SetupError and BackendUnavailableError abort a run. The others are
contained where they occur:

  FormulaError        -> that property's result becomes Error, the batch continues
  SolverTimeoutError  -> that property's result becomes Unknown
  PhaseError          -> the compliance phase falls back to conservative values
"""

from __future__ import annotations


class VerificationError(RuntimeError):
    """Base for all verification errors."""


class SetupError(VerificationError):
    """The solver environment for a document could not be built.

    Raised for unresolvable or cyclic type names and for names that clash
    with built-in solver sorts. Fatal: no property is checked.
    """


class FormulaError(VerificationError):
    """A single property's formula could not be built or parsed."""


class SolverTimeoutError(VerificationError):
    """The solver did not answer within the per-query timeout."""


class BackendUnavailableError(VerificationError):
    """No usable SMT solver backend could be constructed."""


class PhaseError(VerificationError):
    """One phase of the reference compliance validator failed."""
