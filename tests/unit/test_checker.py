"""
Tests for high-level checker API.
"""
import pytest

from aisp.fv import (
    ComplianceLevel,
    SemanticAnalysis,
    TriVectorAnalysis,
    VerificationConfig,
    check_orthogonality,
    validate_reference_compliance,
    verify_batch,
    verify_document,
)
from aisp.fv.solver.result import PropertyOutcome
from aisp.fv.verification import SmtVerificationEngine, VerificationFacade, VerificationOutcome

NO_SOLVER = VerificationConfig(solver="process", solver_command="/nonexistent/bin/smt-solver")


@pytest.fixture
def scripted_facades(monkeypatch, scripted_session):
    """Route every facade the checker creates to a proving scripted session."""
    def new(cls, config=None):
        return cls(SmtVerificationEngine(scripted_session(), config))
    monkeypatch.setattr(VerificationFacade, "new", classmethod(new))


def test_verify_document_without_solver(full_document):
    """Test that a missing backend disables verification instead of raising."""
    result = verify_document(full_document, TriVectorAnalysis.reference(), NO_SOLVER)
    assert result.status.outcome is VerificationOutcome.DISABLED


def test_check_orthogonality_without_solver():
    prop = check_orthogonality("V_H", "V_S", config=NO_SOLVER)
    assert prop.id == "orthogonality_V_H_⊥_V_S"
    assert prop.result.outcome is PropertyOutcome.UNSUPPORTED


def test_validate_reference_compliance_without_solver(full_document, reference_source):
    result = validate_reference_compliance(full_document, reference_source,
                                           SemanticAnalysis.from_parses(99, 100),
                                           config=NO_SOLVER)
    assert result.verification_issues == []
    assert result.compliance_level is ComplianceLevel.LOW


def test_verify_document(scripted_facades, full_document):
    result = verify_document(full_document, TriVectorAnalysis.reference())
    assert result.status.outcome is VerificationOutcome.ALL_VERIFIED
    assert len(result.verified_properties) == 4


def test_check_orthogonality(scripted_facades):
    signal = TriVectorAnalysis.reference().signal
    prop = check_orthogonality("V_L", "V_S", signal)
    assert prop.result.is_proven
    assert prop.proof_certificate.startswith("proof_orthogonality_V_L_⊥_V_S")


def test_validate_reference_compliance(scripted_facades, full_document, reference_source):
    result = validate_reference_compliance(full_document, reference_source,
                                           SemanticAnalysis.from_parses(99, 100))
    assert result.compliance_level is ComplianceLevel.PERFECT


@pytest.mark.parametrize("parallel", [False, True])
def test_verify_batch_preserves_order(scripted_facades, empty_document, full_document, parallel):
    items = [
        (empty_document, None),
        (full_document, TriVectorAnalysis.reference()),
        (empty_document, TriVectorAnalysis.reference()),
    ]
    config = VerificationConfig(parallel=parallel, worker_threads=2)

    results = verify_batch(items, config)

    assert [r.status.outcome for r in results] == [
        VerificationOutcome.INCOMPLETE,
        VerificationOutcome.ALL_VERIFIED,
        VerificationOutcome.ALL_VERIFIED,
    ]
    # Each document had its own engine
    assert [r.stats.smt_queries for r in results] == [0, 4, 4]


def test_verify_batch_empty():
    assert verify_batch([]) == []


def test_verify_batch_without_solver(empty_document):
    results = verify_batch([(empty_document, None)] * 3, NO_SOLVER.with_options(parallel=True))
    assert [r.status.outcome for r in results] == [VerificationOutcome.DISABLED] * 3


def test_check_orthogonality_with_z3():
    pytest.importorskip("z3")
    signal = TriVectorAnalysis.reference().signal
    prop = check_orthogonality("V_H", "V_S", signal, config=VerificationConfig(solver="z3"))
    assert prop.result.is_proven
