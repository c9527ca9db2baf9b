"""
SMT verification engine.

One engine owns one solver session, one environment and one set of
statistics. Checks are issued and resolved strictly in call order; an
engine must not be shared between threads.
"""
import time
from typing import List, Optional, Tuple

import structlog

from ..config import VerificationConfig
from ..document import Document
from ..encoding.document_smt2 import encode_correctness, encode_temporal, encode_type_safety
from ..encoding.obligation import Obligation
from ..encoding.tri_vector_smt2 import encode_tri_vector
from ..errors import FormulaError, SetupError
from ..solver.base import SolverBackend
from ..solver.result import (
    CounterexampleModel,
    PropertyOutcome,
    PropertyResult,
    ProofCertificate,
    SolverResult,
    UnsatCore,
)
from ..translator.environment import EnvironmentBuilder, SmtEnvironment
from ..tri_vector import TriVectorAnalysis
from .aggregate import aggregate
from .backend import CheckOutcome
from .result import (
    DiagnosticLevel,
    DocumentVerificationResult,
    SolverDiagnostic,
    VerificationStats,
    VerificationStatus,
    VerifiedProperty,
)

logger = structlog.get_logger().bind(system="aisp.fv.engine")


class SmtVerificationEngine:
    """Decides properties with an SMT solver session.

    Every script passed to :meth:`check` asserts the negation of the
    property it stands for:

        unsat   -> Proven, with proof certificate and unsat core if enabled
        sat     -> Disproven, with counterexample model if enabled
        unknown -> Unknown (timeout or resource limit)
        parse failure -> Error, the session is left usable
    """

    def __init__(self,
                 session: SolverBackend,
                 config: Optional[VerificationConfig] = None,
                 builder: Optional[EnvironmentBuilder] = None):
        self.session = session
        self.config = config or VerificationConfig()
        self.builder = builder or EnvironmentBuilder()
        self._stats = VerificationStats()
        self._preamble = ""
        self._env: Optional[SmtEnvironment] = None
        self._log = logger.bind(backend=session.name)

    @property
    def enabled(self) -> bool:
        return True

    @property
    def stats(self) -> VerificationStats:
        return self._stats

    def reset(self) -> None:
        """Clear statistics, environment and all solver state."""
        self.session.reset()
        self._stats = VerificationStats()
        self._preamble = ""
        self._env = None

    def set_environment(self, env: SmtEnvironment) -> None:
        """Replace the solver state with an environment's declarations.

        Raises:
            SetupError: If the solver rejects the declarations
        """
        self.session.reset()
        self._env = None
        self._preamble = ""
        preamble = env.preamble()
        try:
            self.session.add_script(preamble)
        except FormulaError as exc:
            raise SetupError(f"Solver rejected environment declarations: {exc}") from exc
        self._env = env
        self._preamble = preamble

    def verify(self, formula: str, property_id: str) -> PropertyResult:
        return self.check(formula, property_id).result

    def check(self, formula: str, property_id: str) -> CheckOutcome:
        """Check one script and update the statistics.

        Args:
            formula: Declarations and assertions asserting the property's negation
            property_id: Identifier used for artifacts and logging

        Returns:
            CheckOutcome with the verdict and any artifacts the configuration asks for
        """
        self._stats.smt_queries += 1
        t0 = time.perf_counter()

        if self.config.incremental:
            self.session.push()
        else:
            self.session.reset()
            if self._preamble:
                self.session.add_script(self._preamble)

        try:
            outcome = self._check_scoped(formula, property_id, t0)
        finally:
            if self.config.incremental:
                self.session.pop()

        self._stats.total_time_ms += outcome.time_ms
        self._log.debug("smt_query_done",
                        property_id=property_id,
                        result=str(outcome.result),
                        time_ms=round(outcome.time_ms, 3))
        return outcome

    def _check_scoped(self, formula: str, property_id: str, t0: float) -> CheckOutcome:
        def elapsed_ms() -> float:
            return (time.perf_counter() - t0) * 1000.0

        try:
            self.session.add_script(formula)
            answer = self.session.check_sat()
        except FormulaError as exc:
            self._stats.errors += 1
            self._log.warning("formula_error", property_id=property_id, error=str(exc))
            return CheckOutcome(PropertyResult.error(str(exc)), time_ms=elapsed_ms())

        self._stats.solver_stats = self.session.statistics()

        if answer == SolverResult.UNSAT:
            self._stats.successful_proofs += 1
            return CheckOutcome(PropertyResult.proven(),
                                certificate=self._extract_proof(property_id),
                                unsat_core=self._extract_core(property_id),
                                time_ms=elapsed_ms())
        elif answer == SolverResult.SAT:
            self._stats.counterexamples += 1
            return CheckOutcome(PropertyResult.disproven(),
                                counterexample=self._extract_model(property_id),
                                time_ms=elapsed_ms())
        self._stats.timeouts += 1
        return CheckOutcome(PropertyResult.unknown(), time_ms=elapsed_ms())

    def _extract_proof(self, property_id: str) -> Optional[ProofCertificate]:
        if not self.config.generate_proofs:
            return None
        try:
            certificate = self.session.get_proof()
        except Exception as exc:
            self._log.warning("proof_extraction_failed", property_id=property_id, error=str(exc))
            return None
        if certificate is None:
            return None
        certificate.id = f"proof_{property_id}"
        certificate.explanation = f"Negation of {property_id} is unsatisfiable"
        return certificate

    def _extract_core(self, property_id: str) -> Optional[UnsatCore]:
        if not self.config.generate_unsat_cores:
            return None
        assertions = self.session.get_unsat_core()
        if assertions is None:
            return None
        core = UnsatCore(
            id=f"core_{property_id}",
            core_assertions=list(assertions),
            explanation=f"{len(assertions)} assertion(s) suffice to prove {property_id}",
        )
        if not assertions:
            core.suggestions.append("The property holds without any background facts")
        return core

    def _extract_model(self, property_id: str) -> Optional[CounterexampleModel]:
        if not self.config.generate_models:
            return None
        try:
            model = self.session.get_model()
        except Exception as exc:
            # The verdict stands; only the artifact is lost
            self._log.warning("model_extraction_failed", property_id=property_id, error=str(exc))
            model = None
        if model is None:
            model = CounterexampleModel()
        model.id = f"counterexample_{property_id}"
        model.explanation = f"Assignment violating {property_id}"
        return model

    def verify_obligation(self, obligation: Obligation) -> VerifiedProperty:
        return self._verify_obligation(obligation)[0]

    def _verify_obligation(self, obligation: Obligation) -> Tuple[VerifiedProperty, CheckOutcome]:
        if obligation.error is not None:
            self._stats.errors += 1
            self._log.warning("formula_error", property_id=obligation.id, error=obligation.error)
            outcome = CheckOutcome(PropertyResult.error(obligation.error))
        else:
            if self._env is None:
                # Obligations reference the domain sorts
                self.set_environment(self.builder.domain())
            outcome = self.check(obligation.script(), obligation.id)

        prop = VerifiedProperty(
            id=obligation.id,
            category=obligation.category,
            description=obligation.description,
            smt_formula=obligation.formula,
            result=outcome.result,
            verification_time_ms=outcome.time_ms,
            proof_certificate=outcome.certificate.summary() if outcome.certificate else None,
        )
        return prop, outcome

    def obligations(self, document: Document, env: SmtEnvironment,
                    tri_vector: Optional[TriVectorAnalysis] = None) -> List[Obligation]:
        """All obligations for a document, in verification order."""
        obligations = list(encode_tri_vector(tri_vector))
        obligations.extend(encode_temporal(document, env))
        obligations.extend(encode_type_safety(document, env))
        obligations.extend(encode_correctness(document, env))
        return obligations

    def verify_document(self, document: Document,
                        tri_vector: Optional[TriVectorAnalysis] = None) -> DocumentVerificationResult:
        """Verify every obligation derived from a document.

        Args:
            document: Document to verify; read only
            tri_vector: Tri-vector analysis of the document, if available

        Returns:
            DocumentVerificationResult; statistics are a snapshot of this engine's

        Raises:
            SetupError: If the solver environment cannot be built
        """
        t0 = time.perf_counter()
        spaces: List[str] = []
        if tri_vector is not None and tri_vector.signal is not None:
            spaces = [space.name for space in tri_vector.signal.spaces()]
        env = self.builder.build(document, reserved=spaces)
        self.set_environment(env)
        obligations = self.obligations(document, env, tri_vector)
        self._log.info("document_verification_started",
                       document=document.header.name,
                       properties=len(obligations))

        deadline = None
        if self.config.total_timeout_ms is not None:
            deadline = t0 + self.config.total_timeout_ms / 1000.0

        result = DocumentVerificationResult(status=VerificationStatus.incomplete())
        for obligation in obligations:
            if deadline is not None and time.perf_counter() >= deadline:
                self._stats.timeouts += 1
                result.verified_properties.append(VerifiedProperty(
                    id=obligation.id,
                    category=obligation.category,
                    description=obligation.description,
                    smt_formula=obligation.formula,
                    result=PropertyResult.unknown(),
                ))
                result.diagnostics.append(SolverDiagnostic(
                    DiagnosticLevel.PERFORMANCE,
                    f"Total timeout reached before {obligation.id} was started",
                    obligation.id))
                continue

            prop, outcome = self._verify_obligation(obligation)
            result.verified_properties.append(prop)
            if outcome.certificate is not None:
                result.proofs[prop.id] = outcome.certificate
            if outcome.counterexample is not None:
                result.counterexamples[prop.id] = outcome.counterexample
            if outcome.unsat_core is not None:
                result.unsat_cores[prop.id] = outcome.unsat_core
            if prop.result.outcome is PropertyOutcome.ERROR:
                result.diagnostics.append(SolverDiagnostic(
                    DiagnosticLevel.ERROR, prop.result.reason, prop.id))

        result.status = aggregate(result.verified_properties)
        result.stats = self._stats.copy()
        self._log.info("document_verification_done",
                       document=document.header.name,
                       status=str(result.status),
                       time_ms=round((time.perf_counter() - t0) * 1000.0, 3))
        return result
