"""
Tests for the backend facade and the disabled stand-in.
"""
import pytest

from aisp.fv.config import VerificationConfig
from aisp.fv.encoding import orthogonality_obligation
from aisp.fv.errors import BackendUnavailableError
from aisp.fv.solver.result import PropertyOutcome
from aisp.fv.tri_vector import OrthogonalityClaim, TriVectorAnalysis
from aisp.fv.verification import (
    DiagnosticLevel,
    DisabledBackend,
    SmtVerificationEngine,
    VerificationFacade,
    VerificationOutcome,
    create_session,
)

MISSING_SOLVER = VerificationConfig(solver="process", solver_command="/nonexistent/bin/smt-solver")


@pytest.fixture
def no_solvers(monkeypatch):
    """Make both the Z3 bindings and every solver executable unavailable."""
    monkeypatch.setattr("aisp.fv.verification.facade.Z3Solver", None)
    monkeypatch.setattr("aisp.fv.verification.facade.pick_solver", lambda: None)
    monkeypatch.setattr("aisp.fv.solver.process_solver.pick_solver", lambda: None)


class TestDisabled:

    def test_never_enabled(self):
        facade = VerificationFacade.new_disabled()
        assert not facade.enabled
        assert isinstance(facade.backend, DisabledBackend)

    def test_formula_calls_are_unsupported(self):
        facade = VerificationFacade.new_disabled()
        assert facade.verify_formula("(assert false)", "p").outcome is PropertyOutcome.UNSUPPORTED
        assert facade.check_formula("not even smt", "q").result.outcome is PropertyOutcome.UNSUPPORTED
        assert facade.stats.smt_queries == 0

    def test_obligation_keeps_identity(self):
        facade = VerificationFacade.new_disabled()
        ob = orthogonality_obligation(OrthogonalityClaim("V_H", "V_S"))

        prop = facade.verify_obligation(ob)

        assert prop.id == ob.id
        assert prop.smt_formula == ob.formula
        assert prop.result.outcome is PropertyOutcome.UNSUPPORTED
        assert prop.proof_certificate is None

    def test_document_is_disabled(self, full_document):
        facade = VerificationFacade.new_disabled()

        result = facade.verify_document(full_document, TriVectorAnalysis.reference())

        assert result.status.outcome is VerificationOutcome.DISABLED
        assert result.verified_properties == []
        assert [d.level for d in result.diagnostics] == [DiagnosticLevel.INFO]

    def test_reset(self):
        facade = VerificationFacade.new_disabled()
        facade.reset()
        assert facade.stats.smt_queries == 0


class TestSelection:

    def test_missing_executable(self):
        with pytest.raises(BackendUnavailableError):
            create_session(MISSING_SOLVER)
        assert not VerificationFacade.is_available(MISSING_SOLVER)
        assert not VerificationFacade.new(MISSING_SOLVER).enabled

    def test_z3_required_but_missing(self, no_solvers):
        config = VerificationConfig(solver="z3")
        with pytest.raises(BackendUnavailableError, match="z3-solver"):
            create_session(config)
        assert not VerificationFacade.is_available(config)
        assert not VerificationFacade.new(config).enabled

    def test_auto_without_any_solver(self, no_solvers):
        assert not VerificationFacade.is_available()
        facade = VerificationFacade.new()
        assert not facade.enabled
        assert facade.verify_formula("(assert false)", "p").outcome is PropertyOutcome.UNSUPPORTED

    def test_z3_preferred_when_installed(self):
        pytest.importorskip("z3")
        session = create_session(VerificationConfig())
        assert session.name == "z3"
        assert VerificationFacade.is_available()
        assert VerificationFacade.new().enabled

    def test_wraps_engine(self, scripted_session):
        facade = VerificationFacade(SmtVerificationEngine(scripted_session()))
        assert facade.enabled
        assert facade.verify_formula("(assert true)", "p").is_proven
        assert facade.stats.smt_queries == 1
        facade.reset()
        assert facade.stats.smt_queries == 0
