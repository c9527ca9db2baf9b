"""
Z3 SMT solver backend implementation.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
import z3

from ..errors import FormulaError
from .result import (
    CounterexampleModel,
    FunctionInterpretation,
    ProofCertificate,
    SolverResult,
)

logger = structlog.get_logger().bind(system="aisp.fv.solver.z3")

_TRACK_PREFIX = "track!"


class Z3Solver:
    """Z3 solver backend wrapper.

    Each instance owns a private ``z3.Context`` so independent instances can
    be driven from different threads. ``z3.parse_smt2_string`` does not keep
    declarations between calls, so scripts are buffered per assertion scope
    and each new script is parsed after the ones before it; only the
    assertions it adds are asserted. Every asserted term is tracked by a
    label when unsat cores are requested.
    """

    name = "z3"

    def __init__(self,
                 timeout_ms: Optional[int] = None,
                 proofs: bool = False,
                 unsat_cores: bool = False,
                 tactics: Sequence[str] = (),
                 random_seed: Optional[int] = None,
                 max_memory_mb: Optional[int] = None):
        """Initialize Z3 solver instance.

        Args:
            timeout_ms: Per-check timeout in milliseconds
            proofs: Enable proof generation for the context
            unsat_cores: Track assertions so unsat cores can be extracted
            tactics: Tactic names composed with ``Then``; empty uses the default solver
            random_seed: Solver random seed
            max_memory_mb: Memory cap in megabytes
        """
        self._ctx = z3.Context(proof=proofs)
        self._proofs = proofs
        self._track = unsat_cores
        self._tactics = tuple(tactics)
        self._params: List[Tuple[str, Any]] = []
        if timeout_ms is not None:
            self._params.append(("timeout", int(timeout_ms)))
        if random_seed is not None:
            self._params.append(("random_seed", int(random_seed)))
        if max_memory_mb is not None:
            self._params.append(("max_memory", int(max_memory_mb)))

        self.solver = self._make_solver()
        self._labels: Dict[str, str] = {}
        self._label_count = 0
        # Scripts and their assertion counts, one entry per push level
        self._scripts: List[List[str]] = [[]]
        self._counts: List[int] = [0]

    @classmethod
    def from_config(cls, config) -> "Z3Solver":
        return cls(timeout_ms=config.query_timeout_ms,
                   proofs=config.generate_proofs,
                   unsat_cores=config.generate_unsat_cores,
                   tactics=config.solver_tactics,
                   random_seed=config.random_seed,
                   max_memory_mb=config.max_memory_mb)

    def _make_solver(self) -> "z3.Solver":
        if not self._tactics:
            solver = z3.Solver(ctx=self._ctx)
        elif len(self._tactics) == 1:
            solver = z3.Tactic(self._tactics[0], ctx=self._ctx).solver()
        else:
            solver = z3.Then(*self._tactics, ctx=self._ctx).solver()

        for key, value in self._params:
            try:
                solver.set(key, value)
            except z3.Z3Exception as exc:
                logger.warning("solver_param_rejected", param=key, value=value, error=str(exc))
        return solver

    def add_script(self, script: str) -> None:
        """Parse an SMT-LIB script and assert every assertion it contains.

        Raises:
            FormulaError: If Z3 cannot parse the script
        """
        prior = [s for scope in self._scripts for s in scope]
        try:
            parsed = z3.parse_smt2_string("\n".join(prior + [script]), ctx=self._ctx)
        except z3.Z3Exception as exc:
            raise FormulaError(f"SMT-LIB parse error: {_error_text(exc)}") from exc

        skip = sum(self._counts)
        assertions = [parsed[i] for i in range(skip, len(parsed))]
        self._scripts[-1].append(script)
        self._counts[-1] += len(assertions)

        for assertion in assertions:
            if self._track:
                label = f"{_TRACK_PREFIX}{self._label_count}"
                self._label_count += 1
                self._labels[label] = assertion.sexpr()
                self.solver.assert_and_track(assertion, z3.Bool(label, self._ctx))
            else:
                self.solver.add(assertion)

    def check_sat(self) -> SolverResult:
        result = self.solver.check()
        if result == z3.sat:
            return SolverResult.SAT
        elif result == z3.unsat:
            return SolverResult.UNSAT
        logger.debug("z3_unknown", reason=self.solver.reason_unknown())
        return SolverResult.UNKNOWN

    def get_model(self) -> Optional[CounterexampleModel]:
        """Extract model from Z3 solver.

        Returns:
            CounterexampleModel with constant assignments, function
            interpretations and sort universes (id left empty)
        """
        model = self.solver.model()
        cex = CounterexampleModel(evaluation=model.sexpr())

        for decl in model.decls():
            name = decl.name()
            if name.startswith(_TRACK_PREFIX):
                continue
            if decl.arity() == 0:
                cex.assignments[name] = str(model[decl])
                continue

            interp = model[decl]
            entry = FunctionInterpretation(
                name=name,
                domain=[str(decl.domain(i)) for i in range(decl.arity())],
                codomain=str(decl.range()),
            )
            if isinstance(interp, z3.FuncInterp):
                for i in range(interp.num_entries()):
                    e = interp.entry(i)
                    args = [str(e.arg_value(j)) for j in range(e.num_args())]
                    entry.mapping.append((args, str(e.value())))
                else_value = interp.else_value()
                entry.default = str(else_value) if else_value is not None else None
            else:
                # Z3 may hand back a lambda term instead of a finite table
                entry.default = str(interp)
            cex.function_interpretations[name] = entry

        for sort in model.sorts():
            cex.universes[sort.name()] = [str(v) for v in model.get_universe(sort)]

        return cex

    def get_proof(self) -> Optional[ProofCertificate]:
        """Decode the proof object of the last unsat check.

        Returns:
            ProofCertificate with the proof term, DAG size and the asserted
            premises, or None when proof generation is off
        """
        if not self._proofs:
            return None
        proof = self.solver.proof()
        size, premises = _walk_proof(proof)
        return ProofCertificate(id="", format="z3", content=proof.sexpr(),
                                size=size, dependencies=premises)

    def get_unsat_core(self) -> Optional[List[str]]:
        if not self._track:
            return None
        return [self._labels.get(str(label), str(label)) for label in self.solver.unsat_core()]

    def statistics(self) -> Dict[str, str]:
        stats = self.solver.statistics()
        return {key: str(stats.get_key_value(key)) for key in stats.keys()}

    def push(self) -> None:
        """Push a new assertion scope."""
        self.solver.push()
        self._scripts.append([])
        self._counts.append(0)

    def pop(self) -> None:
        """Pop the most recent assertion scope."""
        self.solver.pop()
        if len(self._scripts) > 1:
            self._scripts.pop()
            self._counts.pop()

    def reset(self) -> None:
        """Reset solver state."""
        self.solver.reset()
        self._labels.clear()
        self._label_count = 0
        self._scripts = [[]]
        self._counts = [0]


def _error_text(exc: Exception) -> str:
    """Message of a Z3 exception; the bindings carry it as raw bytes."""
    value = getattr(exc, "value", None)
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if value is None:
        value = str(exc)
    return str(value).strip()


def _walk_proof(proof: Any) -> Tuple[int, List[str]]:
    """Count distinct proof-DAG nodes and collect asserted premises.

    The last argument of a proof rule application is its conclusion; every
    argument before it is a sub-proof.
    """
    seen = set()
    premises: List[str] = []
    stack = [proof]
    while stack:
        node = stack.pop()
        node_id = node.get_id()
        if node_id in seen:
            continue
        seen.add(node_id)
        if not z3.is_app(node) or node.num_args() == 0:
            continue
        conclusion = node.arg(node.num_args() - 1)
        if z3.is_app_of(node, z3.Z3_OP_PR_ASSERTED):
            premises.append(conclusion.sexpr())
            continue
        for i in range(node.num_args() - 1):
            stack.append(node.arg(i))
    return len(seen), premises
