"""Run SMT solvers as subprocesses over SMT-LIBv2 scripts.

Solvers are expected to accept the SMT2 file as a positional argument and print
one of: sat/unsat/unknown, optionally followed by the `(get-model)` response.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple
import os
import re
import shutil
import subprocess
import tempfile
import time

import structlog

from ..errors import FormulaError, SolverTimeoutError
from .result import CounterexampleModel, ProofCertificate, SolverResult

logger = structlog.get_logger().bind(system="aisp.fv.solver.process")

SOLVER_ENV_VAR = "AISP_FV_SOLVER"


@dataclass(frozen=True)
class SolverSpec:
    """Describes how to invoke an external SMT solver."""

    name: str
    argv: Tuple[str, ...]


@dataclass(frozen=True)
class SolverRunResult:
    result: SolverResult
    stdout: str
    stderr: str
    returncode: int
    time_ms: float


_KNOWN_SOLVERS = {
    "z3": SolverSpec("z3", ("z3", "-smt2")),
    "cvc5": SolverSpec("cvc5", ("cvc5", "--lang", "smt2", "--produce-models")),
    "cvc4": SolverSpec("cvc4", ("cvc4", "--lang", "smt2", "--produce-models")),
    "yices": SolverSpec("yices", ("yices-smt2",)),
    "yices-smt2": SolverSpec("yices-smt2", ("yices-smt2",)),
}


def resolve_solver(name_or_path: str) -> SolverSpec:
    """Resolve a solver name to an invocation spec."""
    if name_or_path in _KNOWN_SOLVERS:
        return _KNOWN_SOLVERS[name_or_path]

    p = Path(name_or_path)
    return SolverSpec(p.name or str(p), (str(p),))


def is_solver_available(name_or_path: str) -> bool:
    """Return True if the solver executable appears runnable on this system."""
    spec = resolve_solver(name_or_path)
    exe = spec.argv[0]

    # Explicit path
    if os.path.sep in exe or (os.path.altsep and os.path.altsep in exe):
        return os.path.exists(exe) and os.access(exe, os.X_OK)

    return shutil.which(exe) is not None


def pick_solver(preferred: Sequence[str] = ("z3", "cvc5", "yices-smt2")) -> Optional[SolverSpec]:
    """Pick the first available solver from a preference list.

    Users can override by setting $AISP_FV_SOLVER.
    """
    env = os.environ.get(SOLVER_ENV_VAR)
    if env and is_solver_available(env):
        return resolve_solver(env)

    for n in preferred:
        if is_solver_available(n):
            return resolve_solver(n)

    return None


_ERROR_RE = re.compile(r'^\(error\s+"(?P<msg>.*)"\)\s*$')


def _parse_solver_result(stdout: str) -> SolverResult:
    for line in stdout.splitlines():
        s = line.strip()
        if not s or s.startswith(";"):
            continue
        if s == "sat":
            return SolverResult.SAT
        if s == "unsat":
            return SolverResult.UNSAT
        if s == "unknown":
            return SolverResult.UNKNOWN
    return SolverResult.UNKNOWN


def _parse_solver_errors(stdout: str) -> List[str]:
    errors = []
    for line in stdout.splitlines():
        m = _ERROR_RE.match(line.strip())
        if m:
            errors.append(m.group("msg"))
    return errors


def _sexpr_end(text: str, start: int) -> int:
    """Index one past the S-expression or atom beginning at ``start``."""
    if text[start] != "(":
        m = re.compile(r"[^\s()]+").match(text, start)
        return m.end() if m else start + 1
    depth = 0
    for i in range(start, len(text)):
        c = text[i]
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if depth == 0:
                return i + 1
    return len(text)


_DEFINE_CONST_RE = re.compile(r"\(define-fun\s+(?P<name>\|[^|]*\||[^\s()]+)\s+\(\)\s+(?P<sort>\S+)\s+")


def parse_model_output(stdout: str) -> Dict[str, str]:
    """Best-effort parse of the constants in a `(get-model)` response.

    Only nullary `(define-fun name () Sort value)` entries are extracted;
    function definitions are left to the raw model text. Values keep their
    SMT-LIB spelling with whitespace collapsed.
    """
    out: Dict[str, str] = {}
    for m in _DEFINE_CONST_RE.finditer(stdout):
        start = m.end()
        if start >= len(stdout):
            continue
        end = _sexpr_end(stdout, start)
        name = m.group("name").strip("|")
        out[name] = " ".join(stdout[start:end].split())
    return out


def run_solver(
    solver: SolverSpec,
    smt2_file: str | Path,
    *,
    timeout_s: Optional[float] = None,
    extra_args: Sequence[str] = (),
) -> SolverRunResult:
    """Run solver on an SMT2 file.

    Raises:
        SolverTimeoutError: If the solver outlives ``timeout_s``
    """
    smt2_path = Path(smt2_file)
    argv = [*solver.argv, *extra_args, str(smt2_path)]

    t0 = time.time()
    try:
        p = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            timeout=timeout_s,
        )
    except subprocess.TimeoutExpired as exc:
        raise SolverTimeoutError(
            f"{solver.name} did not answer within {timeout_s}s") from exc
    dt_ms = (time.time() - t0) * 1000.0

    res = _parse_solver_result(p.stdout)
    return SolverRunResult(
        result=res,
        stdout=p.stdout,
        stderr=p.stderr,
        returncode=p.returncode,
        time_ms=dt_ms,
    )


class ProcessSolver:
    """Solver session backed by an external SMT-LIB executable.

    Scripts are buffered per assertion scope and written to a temporary
    file for every check. Executables report no proof objects or unsat
    cores, so a proven property from this session carries no certificate.
    """

    name = "process"

    def __init__(self,
                 spec: SolverSpec,
                 timeout_ms: Optional[int] = None,
                 models: bool = True):
        self.spec = spec
        self.name = f"process:{spec.name}"
        self._timeout_ms = timeout_ms
        self._models = models
        self._scopes: List[List[str]] = [[]]
        self._last: Optional[SolverRunResult] = None

    @classmethod
    def from_config(cls, config) -> "ProcessSolver":
        """Build a session for the configured (or first available) executable.

        Raises:
            FileNotFoundError: If no solver executable is available
        """
        if config.solver_command:
            if not is_solver_available(config.solver_command):
                raise FileNotFoundError(f"Solver executable not found: {config.solver_command}")
            spec = resolve_solver(config.solver_command)
        else:
            spec = pick_solver()
            if spec is None:
                raise FileNotFoundError("No SMT solver executable found on PATH")
        return cls(spec,
                   timeout_ms=config.query_timeout_ms,
                   models=config.generate_models)

    def _script(self) -> str:
        lines = ["(set-option :produce-models true)", "(set-logic ALL)"]
        for scope in self._scopes:
            lines.extend(scope)
        lines.append("(check-sat)")
        if self._models:
            lines.append("(get-model)")
        return "\n".join(lines) + "\n"

    def add_script(self, script: str) -> None:
        if script.count("(") != script.count(")"):
            raise FormulaError("SMT-LIB parse error: unbalanced parentheses")
        self._scopes[-1].append(script)

    def check_sat(self) -> SolverResult:
        timeout_s = None
        if self._timeout_ms is not None:
            timeout_s = self._timeout_ms / 1000.0

        with tempfile.TemporaryDirectory(prefix="aisp_fv_") as tmp:
            path = Path(tmp) / "query.smt2"
            path.write_text(self._script(), encoding="utf-8")
            try:
                run = run_solver(self.spec, path, timeout_s=timeout_s)
            except SolverTimeoutError as exc:
                logger.info("solver_process_timeout", solver=self.spec.name, error=str(exc))
                self._last = None
                return SolverResult.UNKNOWN

        errors = _parse_solver_errors(run.stdout)
        # A failed (get-model) after unsat/unknown is expected and ignored
        errors = [e for e in errors if "model" not in e.lower()]
        if errors:
            self._last = None
            raise FormulaError(f"SMT-LIB parse error: {errors[0]}")

        self._last = run
        logger.debug("solver_process_done", solver=self.spec.name,
                     result=run.result.value, time_ms=run.time_ms)
        return run.result

    def get_model(self) -> Optional[CounterexampleModel]:
        if self._last is None or self._last.result != SolverResult.SAT:
            return None
        text = self._last.stdout
        body_start = text.find("sat") + len("sat")
        return CounterexampleModel(assignments=parse_model_output(text),
                                   evaluation=text[body_start:].strip())

    def get_proof(self) -> Optional[ProofCertificate]:
        return None

    def get_unsat_core(self) -> Optional[List[str]]:
        return None

    def statistics(self) -> Dict[str, str]:
        if self._last is None:
            return {}
        return {"time_ms": f"{self._last.time_ms:.3f}",
                "returncode": str(self._last.returncode)}

    def push(self) -> None:
        self._scopes.append([])

    def pop(self) -> None:
        if len(self._scopes) > 1:
            self._scopes.pop()

    def reset(self) -> None:
        self._scopes = [[]]
        self._last = None
