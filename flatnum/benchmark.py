"""Backend benchmarking: latency per operation and agreement with the reference."""

from __future__ import annotations

import argparse
import json
import logging
import math
import os
import random
import statistics
import time
from typing import Callable, Dict, List, Mapping, Sequence, Tuple

from . import kernel
from .spectral import fft as _reference_fft

LOGGER = logging.getLogger(__name__)

Case = Tuple[str, Callable[[], object]]


def _percentile(values: Sequence[float], pct: float) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    k = (len(ordered) - 1) * pct / 100.0
    f = math.floor(k)
    c = math.ceil(k)
    if f == c:
        return ordered[int(k)]
    return ordered[f] + (ordered[c] - ordered[f]) * (k - f)


def _as_list(value) -> List[float]:
    if isinstance(value, list):
        return value
    return [float(value)]


def _linf(left: Sequence[float], right: Sequence[float]) -> float:
    worst = 0.0
    for x, y in zip(left, right):
        if x == y or (x != x and y != y):
            continue
        worst = max(worst, math.fabs(x - y))
    return worst


def _build_cases(size: int, seed: int) -> List[Case]:
    rng = random.Random(seed)
    a = [rng.uniform(-1.0, 1.0) for _ in range(size)]
    b = [rng.uniform(-1.0, 1.0) for _ in range(size)]
    side = max(1, int(math.isqrt(size)))
    mat = a[: side * side]
    fft_len = 1 << max(0, size.bit_length() - 1)
    signal = a[:fft_len]
    spectrum = _reference_fft(signal)
    half = spectrum[: 2 * (fft_len // 2 + 1)]
    return [
        ("add_arrays", lambda: kernel.add_arrays(a, b)),
        ("exp", lambda: kernel.exp(a)),
        ("sum", lambda: kernel.sum(a)),
        ("variance", lambda: kernel.variance(a)),
        ("dot", lambda: kernel.dot(a, b)),
        ("matmul", lambda: kernel.matmul(mat, mat, side, side, side)),
        ("transpose", lambda: kernel.transpose(mat, side, side)),
        ("fft", lambda: kernel.fft(signal)),
        ("ifft", lambda: kernel.ifft(spectrum, fft_len)),
        ("irfft", lambda: kernel.irfft(half, fft_len)),
    ]


def _time_case(func: Callable[[], object], runs: int) -> Tuple[object, List[float]]:
    latencies: List[float] = []
    result: object = None
    for _ in range(max(1, runs)):
        start = time.perf_counter()
        result = func()
        latencies.append((time.perf_counter() - start) * 1000.0)
    return result, latencies


def run_benchmark(
    *,
    size: int = 1024,
    runs: int = 5,
    backends: Sequence[str] | None = None,
    output_dir: str | None = "reports",
    seed: int = 7,
) -> Dict[str, object]:
    """Time every case on each backend and compare results with ``python``."""

    if size < 1:
        raise ValueError("benchmark size must be positive")
    names = list(backends) if backends is not None else kernel.available_backends()
    cases = _build_cases(size, seed)
    previous = kernel.get_backend_info()["name"]

    reference: Dict[str, List[float]] = {}
    report: Dict[str, Dict[str, Dict[str, float]]] = {}
    try:
        for backend in ["python"] + [n for n in names if n != "python"]:
            kernel.set_backend(backend)
            LOGGER.info("benchmarking backend %s (size=%d, runs=%d)", backend, size, runs)
            per_op: Dict[str, Dict[str, float]] = {}
            for op, func in cases:
                result, latencies = _time_case(func, runs)
                values = _as_list(result)
                if backend == "python":
                    reference[op] = values
                per_op[op] = {
                    "mean_ms": float(statistics.mean(latencies)),
                    "p95_ms": _percentile(latencies, 95.0),
                    "linf": _linf(values, reference.get(op, values)),
                }
            report[backend] = per_op
    finally:
        kernel.set_backend(previous)

    metrics: Dict[str, object] = {
        "size": size,
        "runs": runs,
        "seed": seed,
        "backends": report,
    }

    if output_dir is not None:
        os.makedirs(output_dir, exist_ok=True)
        with open(os.path.join(output_dir, "benchmark_report.json"), "w", encoding="utf-8") as fh:
            json.dump(metrics, fh, indent=2)
        _write_markdown_report(metrics, os.path.join(output_dir, "benchmark_report.md"))

    return metrics


def _write_markdown_report(metrics: Mapping[str, object], path: str) -> None:
    backends = metrics.get("backends", {})
    lines = ["# flatnum backend benchmark", ""]
    lines.append(f"- Buffer size: {metrics.get('size')}")
    lines.append(f"- Runs per case: {metrics.get('runs')}")
    lines.append("")
    if isinstance(backends, Mapping):
        for backend, per_op in backends.items():
            lines.append(f"## {backend}")
            lines.append("| Operation | Mean (ms) | p95 (ms) | L_inf vs python |")
            lines.append("| --- | --- | --- | --- |")
            for op, info in per_op.items():
                lines.append(
                    "| {op} | {mean:.4f} | {p95:.4f} | {linf:.2e} |".format(
                        op=op,
                        mean=info.get("mean_ms", 0.0),
                        p95=info.get("p95_ms", 0.0),
                        linf=info.get("linf", 0.0),
                    )
                )
            lines.append("")

    with open(path, "w", encoding="utf-8") as handle:
        handle.write("\n".join(lines))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Benchmark flatnum backends")
    parser.add_argument("--size", type=int, default=1024)
    parser.add_argument("--runs", type=int, default=5)
    parser.add_argument("--backend", action="append", dest="backends")
    parser.add_argument("--output-dir", default="reports")
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    metrics = run_benchmark(
        size=args.size,
        runs=args.runs,
        backends=args.backends,
        output_dir=args.output_dir,
        seed=args.seed,
    )
    for backend, per_op in metrics["backends"].items():
        worst = max((info["linf"] for info in per_op.values()), default=0.0)
        print(f"{backend}: worst L_inf vs python = {worst:.2e}")
    return 0


__all__ = [
    "main",
    "run_benchmark",
]


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
