"""padchain.expander
===================

High-level orchestration: validate codes, cost every numeric transition
through the directional chain and combine the lengths into the batch score.
Functions in this module are the primary public API used by the CLI.
"""

from __future__ import annotations

import multiprocessing
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import DEFAULT_LAYERS
from .cost import CostEvaluator
from .errors import MalformedCode
from .keypad import NUMERIC_LAYOUT
from .logging_utils import log_malformed
from .types import ACTIVATE, NUMERIC_KEYS, Key


# -----------------------------------------------------------------------------
# Configs and results
# -----------------------------------------------------------------------------
@dataclass
class ChainConfig:
    """Configuration knobs for a scoring run."""

    layers: int = DEFAULT_LAYERS
    max_workers: int = 1
    cache_path: Optional[str] = None
    log_rejections: bool = True
    fail_log: Optional[str] = None
    verbose: bool = True

    def __post_init__(self) -> None:
        if self.layers < 0:
            raise ValueError(f"layers must be >= 0, got {self.layers}")
        if self.max_workers < 0:
            raise ValueError(f"max_workers must be >= 0, got {self.max_workers}")

    @property
    def effective_workers(self) -> int:
        return self.max_workers or multiprocessing.cpu_count()


@dataclass
class CodeResult:
    code: str
    value: int
    length: int

    @property
    def complexity(self) -> int:
        return self.value * self.length


@dataclass
class ScoreReport:
    layers: int
    results: List[CodeResult] = field(default_factory=list)
    rejected: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(result.complexity for result in self.results)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "layers": self.layers,
            "total": self.total,
            "codes": [
                {"code": r.code, "value": r.value, "length": r.length, "complexity": r.complexity}
                for r in self.results
            ],
            "rejected": [{"code": code, "reason": reason} for code, reason in self.rejected],
        }


# -----------------------------------------------------------------------------
# Single codes
# -----------------------------------------------------------------------------
def parse_code(code: str) -> Tuple[Key, ...]:
    """Validate ``code`` and return its keys. A lower-case ``a`` counts as ``A``."""

    keys = tuple(code.strip().replace("a", ACTIVATE))
    if not keys:
        raise MalformedCode(code, "code is empty")
    bad = sorted({key for key in keys if key not in NUMERIC_KEYS})
    if bad:
        raise MalformedCode(code, f"characters {''.join(bad)!r} are not on the numeric keypad")
    return keys


def code_value(code: str) -> int:
    """Numeric value of ``code``: the run of digits before the first other character.

    ``"029A"`` is 29 and ``"000A"`` is 0. Only leading digits count, so a code
    that does not start with a digit (``"A029"``) is worth 0.
    """

    digits = []
    for char in code.strip():
        if not char.isdigit():
            break
        digits.append(char)
    return int("".join(digits)) if digits else 0


def total_length(code: str, layers: int, evaluator: CostEvaluator | None = None) -> int:
    """Minimal human keystrokes to type ``code`` through ``layers`` directional keypads."""

    evaluator = evaluator or CostEvaluator()
    length = 0
    current = ACTIVATE
    for key in parse_code(code):
        length += evaluator.transition_cost(NUMERIC_LAYOUT, current, key, layers)
        current = key
    return length


def expand_code(code: str, layers: int, evaluator: CostEvaluator | None = None) -> str:
    """One concrete optimal press string for ``code``. Only practical for a few layers."""

    evaluator = evaluator or CostEvaluator()
    parts = []
    current = ACTIVATE
    for key in parse_code(code):
        parts.append(evaluator.witness(NUMERIC_LAYOUT, current, key, layers))
        current = key
    return "".join(parts)


# -----------------------------------------------------------------------------
# Batches
# -----------------------------------------------------------------------------
def _reject(report: ScoreReport, exc: MalformedCode, config: ChainConfig) -> None:
    report.rejected.append((exc.code, exc.reason))
    if config.verbose:
        print(f"[WARN] skipping {exc}")
    if config.log_rejections:
        log_malformed(exc.code, exc.reason, config.fail_log)


def score_codes(
    codes: Iterable[str],
    config: ChainConfig | None = None,
    evaluator: CostEvaluator | None = None,
) -> ScoreReport:
    """Score every code in-process, sharing one evaluator across the batch.

    Malformed codes are skipped and reported on the returned
    :class:`ScoreReport`; the remaining codes are still scored.
    """

    config = config or ChainConfig()
    evaluator = evaluator or CostEvaluator()
    codes = list(codes)
    report = ScoreReport(layers=config.layers)
    for index, code in enumerate(codes, start=1):
        try:
            length = total_length(code, config.layers, evaluator)
        except MalformedCode as exc:
            _reject(report, exc, config)
            continue
        result = CodeResult(code=code.strip(), value=code_value(code), length=length)
        report.results.append(result)
        if config.verbose:
            print(
                f"[{index}/{len(codes)}] {result.code}: length={result.length} "
                f"value={result.value} complexity={result.complexity}"
            )
    return report


def score_single_code(code: str, layers: int) -> Dict[str, Any]:
    """Worker function executed in subprocesses; builds its own evaluator."""

    evaluator = CostEvaluator()
    try:
        length = total_length(code, layers, evaluator)
    except MalformedCode as exc:
        return {"code": exc.code, "error": exc.reason}
    return {"code": code.strip(), "value": code_value(code), "length": length, "cache_size": len(evaluator.cache)}


def score_codes_parallel(codes: Sequence[str], config: ChainConfig) -> ScoreReport:
    """Score codes across a process pool. Results keep input order."""

    codes = list(codes)
    outcomes: Dict[int, Dict[str, Any]] = {}
    with ProcessPoolExecutor(max_workers=config.effective_workers) as executor:
        futures = {executor.submit(score_single_code, code, config.layers): index for index, code in enumerate(codes)}
        for done, future in enumerate(as_completed(futures), start=1):
            index = futures[future]
            outcome = future.result()
            outcomes[index] = outcome
            if config.verbose and "error" not in outcome:
                print(f"[{done}/{len(codes)}] {outcome['code']}: length={outcome['length']} value={outcome['value']}")

    report = ScoreReport(layers=config.layers)
    for index in sorted(outcomes):
        outcome = outcomes[index]
        if "error" in outcome:
            _reject(report, MalformedCode(outcome["code"], outcome["error"]), config)
            continue
        report.results.append(CodeResult(code=outcome["code"], value=outcome["value"], length=outcome["length"]))
    return report


__all__ = [
    "ChainConfig",
    "CodeResult",
    "ScoreReport",
    "parse_code",
    "code_value",
    "total_length",
    "expand_code",
    "score_codes",
    "score_single_code",
    "score_codes_parallel",
]
