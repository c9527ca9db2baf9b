"""
Verification configuration.
"""
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Tuple


SOLVER_CHOICES = ("auto", "z3", "process")


@dataclass(frozen=True)
class VerificationConfig:
    """Options recognised by the verification engine and its callers.

    Attributes:
        query_timeout_ms: Per-query solver timeout; exceeding it yields Unknown
        incremental: Use push/pop scopes instead of resetting between queries
        generate_proofs: Request proof objects for unsat answers
        generate_models: Request models for sat answers
        generate_unsat_cores: Request unsat cores for unsat answers
        solver_tactics: Tactic names composed in order (empty: default solver)
        max_memory_mb: Solver memory cap
        random_seed: Deterministic seed, or None for the solver default
        total_timeout_ms: Budget for a whole document run; properties not yet
            started when it is exhausted are reported as Unknown
        parallel: Let batch callers verify independent documents concurrently
        worker_threads: Thread count for parallel batches
        solver: Backend selection: "z3" (bindings), "process" (executable) or "auto"
        solver_command: Executable name or path for the process backend
    """
    query_timeout_ms: int = 30000
    incremental: bool = True
    generate_proofs: bool = True
    generate_models: bool = True
    generate_unsat_cores: bool = True
    solver_tactics: Tuple[str, ...] = ()
    max_memory_mb: int = 4096
    random_seed: Optional[int] = 42
    total_timeout_ms: Optional[int] = None
    parallel: bool = False
    worker_threads: int = 4
    solver: str = "auto"
    solver_command: Optional[str] = None

    def __post_init__(self):
        if self.query_timeout_ms <= 0:
            raise ValueError(f"query_timeout_ms must be positive, got {self.query_timeout_ms}")
        if self.worker_threads < 1:
            raise ValueError(f"worker_threads must be at least 1, got {self.worker_threads}")
        if self.solver not in SOLVER_CHOICES:
            raise ValueError(f"Unknown solver '{self.solver}', expected one of {SOLVER_CHOICES}")
        if not isinstance(self.solver_tactics, tuple):
            object.__setattr__(self, "solver_tactics", tuple(self.solver_tactics))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "VerificationConfig":
        """Build a config from a plain mapping (e.g. loaded from TOML/JSON).

        Raises:
            ValueError: If the mapping contains an unrecognised option
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown verification options: {', '.join(unknown)}")
        return cls(**dict(options))

    def with_options(self, **changes: Any) -> "VerificationConfig":
        return replace(self, **changes)
