"""
Tests for the external SMT-LIB executable backend.

Solver executables are replaced by small shell scripts that print canned
answers, so these tests need no installed solver.
"""
import os
import stat
import sys

import pytest

from aisp.fv.config import VerificationConfig
from aisp.fv.encoding import safety_isolation_obligation
from aisp.fv.errors import FormulaError
from aisp.fv.solver import ProcessSolver, SolverResult, SolverSpec, pick_solver
from aisp.fv.solver.process_solver import (
    SOLVER_ENV_VAR,
    _parse_solver_errors,
    _parse_solver_result,
    is_solver_available,
    parse_model_output,
    resolve_solver,
)
from aisp.fv.tri_vector import SafetyIsolation
from aisp.fv.verification import SmtVerificationEngine

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses /bin/sh scripts")

MODEL_OUTPUT = """sat
(
  (define-fun x () Int
    5)
  (define-fun |odd name| () Real
    (/ 1.0 2.0))
  (define-fun f ((x!0 Int)) Int
    0)
)
"""


def _fake_solver(tmp_path, body, name="fake-solver"):
    path = tmp_path / name
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return SolverSpec(name, (str(path),))


def test_parse_solver_result():
    assert _parse_solver_result("sat\n") == SolverResult.SAT
    assert _parse_solver_result("unsat") == SolverResult.UNSAT
    assert _parse_solver_result("; banner\n\nunknown\n") == SolverResult.UNKNOWN
    assert _parse_solver_result("") == SolverResult.UNKNOWN


def test_parse_solver_errors():
    out = 'unsat\n(error "line 3 column 10: unknown constant y")\n'
    assert _parse_solver_errors(out) == ["line 3 column 10: unknown constant y"]
    assert _parse_solver_errors("sat\n") == []


def test_parse_model_output():
    """Test that only constants are extracted, values keep SMT-LIB spelling."""
    assert parse_model_output(MODEL_OUTPUT) == {"x": "5", "odd name": "(/ 1.0 2.0)"}


def test_resolve_solver():
    assert resolve_solver("cvc5").argv[:3] == ("cvc5", "--lang", "smt2")
    spec = resolve_solver("/opt/solvers/bin/mysolver")
    assert spec.name == "mysolver"
    assert spec.argv == ("/opt/solvers/bin/mysolver",)


def test_missing_executable():
    assert not is_solver_available("/nonexistent/bin/smt-solver")
    with pytest.raises(FileNotFoundError):
        ProcessSolver.from_config(VerificationConfig(solver="process",
                                                     solver_command="/nonexistent/bin/smt-solver"))


@posix_only
def test_pick_solver_env_override(tmp_path, monkeypatch):
    spec = _fake_solver(tmp_path, "echo unsat")
    monkeypatch.setenv(SOLVER_ENV_VAR, spec.argv[0])
    assert pick_solver().argv == spec.argv


def test_unbalanced_script():
    solver = ProcessSolver(SolverSpec("none", ("none",)))
    with pytest.raises(FormulaError):
        solver.add_script("(assert (> x 0)")


def test_scopes():
    solver = ProcessSolver(SolverSpec("none", ("none",)))
    solver.add_script("(declare-sort Vector 0)")
    solver.push()
    solver.add_script("(declare-const v Vector)")
    assert "(declare-const v Vector)" in solver._script()
    solver.pop()
    script = solver._script()
    assert "(declare-sort Vector 0)" in script
    assert "(declare-const v Vector)" not in script
    assert script.rstrip().endswith("(check-sat)\n(get-model)")
    solver.reset()
    assert "(declare-sort Vector 0)" not in solver._script()


@posix_only
class TestRun:

    def test_unsat(self, tmp_path):
        solver = ProcessSolver(_fake_solver(tmp_path, "echo unsat"), timeout_ms=5000)
        solver.add_script("(assert false)")

        assert solver.check_sat() == SolverResult.UNSAT
        assert solver.get_proof() is None
        assert solver.get_model() is None
        assert solver.get_unsat_core() is None
        assert solver.statistics()["returncode"] == "0"

    def test_sat_with_model(self, tmp_path):
        body = "cat <<'EOF'\n" + MODEL_OUTPUT + "EOF"
        solver = ProcessSolver(_fake_solver(tmp_path, body), timeout_ms=5000)

        assert solver.check_sat() == SolverResult.SAT
        model = solver.get_model()
        assert model.assignments["x"] == "5"
        assert "define-fun f" in model.evaluation
        assert solver.get_proof() is None

    def test_error_output(self, tmp_path):
        body = "echo '(error \"line 1 column 9: unknown constant y\")'"
        solver = ProcessSolver(_fake_solver(tmp_path, body), timeout_ms=5000)
        with pytest.raises(FormulaError, match="unknown constant y"):
            solver.check_sat()

    def test_model_error_after_unsat_is_ignored(self, tmp_path):
        body = "echo unsat; echo '(error \"line 4 column 10: model is not available\")'"
        solver = ProcessSolver(_fake_solver(tmp_path, body), timeout_ms=5000)
        assert solver.check_sat() == SolverResult.UNSAT

    def test_timeout_is_unknown(self, tmp_path):
        solver = ProcessSolver(_fake_solver(tmp_path, "exec sleep 5"), timeout_ms=200)
        assert solver.check_sat() == SolverResult.UNKNOWN
        assert solver.statistics() == {}

    def test_script_reaches_solver(self, tmp_path):
        # Echo the query file back so the script can be inspected
        body = 'cat "$1"; echo unsat'
        solver = ProcessSolver(_fake_solver(tmp_path, body), timeout_ms=5000)
        solver.add_script("; V_H ⊥ V_S\n(declare-sort Vector 0)")

        assert solver.check_sat() == SolverResult.UNSAT
        assert "(set-logic ALL)" in solver._last.stdout
        assert "V_H ⊥ V_S" in solver._last.stdout

    def test_engine_over_process(self, tmp_path):
        session = ProcessSolver(_fake_solver(tmp_path, "echo unsat"), timeout_ms=5000)
        engine = SmtVerificationEngine(session)

        outcome = engine.check("(declare-const x Int)\n(assert (not (> x 0)))", "p")

        assert outcome.result.is_proven
        # Executables give no proof objects, so nothing stands in for one
        assert outcome.certificate is None
        assert outcome.unsat_core is None
        assert engine.verify_obligation(safety_isolation_obligation(SafetyIsolation())).proof_certificate is None
        assert os.path.exists(session.spec.argv[0])
