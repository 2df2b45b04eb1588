"""
beatcoach analysis benchmark.

Usage:
    python scripts/benchmark.py [--quick]

Modes:
    default : 3-minute synthetic tracks, 3 warm-up + 5 timed runs per case
    --quick : 30-second tracks, 2 warm-up + 3 timed runs (CI-friendly)

Output: timing table plus the tempo each case resolved to, printed to stdout.
Run from an environment where the package is installed (pip install -e .).
"""

import argparse
import time
from typing import List

import numpy as np

from beatcoach.core.analyzer import FeatureAnalyzer
from beatcoach.pipeline import AudioPipeline

_SEP = "─" * 72
SR = 44100


def _hdr(title: str) -> None:
    print(f"\n{_SEP}")
    print(f"  {title}")
    print(_SEP)


def _timeit(fn, *args, warmup: int = 2, runs: int = 5, **kwargs) -> List[float]:
    """Run fn(*args, **kwargs), discard warmup iterations, return timed samples."""
    for _ in range(warmup):
        fn(*args, **kwargs)
    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        fn(*args, **kwargs)
        times.append(time.perf_counter() - t0)
    return times


def _stats(times: List[float]) -> str:
    arr = np.array(times)
    return f"mean={arr.mean()*1000:.1f} ms  min={arr.min()*1000:.1f} ms  max={arr.max()*1000:.1f} ms"


# ---------------------------------------------------------------------------
# Synthetic signals
# ---------------------------------------------------------------------------

def _click_track(seconds: float, bpm: float, n_channels: int = 2) -> List[np.ndarray]:
    """Sine bursts on every beat over a quiet noise bed."""
    rng = np.random.RandomState(0)
    n = int(seconds * SR)
    t = np.arange(n) / SR
    y = 0.01 * rng.randn(n)
    beat_len = int(0.03 * SR)
    for start in np.arange(0, seconds, 60.0 / bpm):
        i = int(start * SR)
        y[i:i + beat_len] += 0.8 * np.sin(2 * np.pi * 110 * t[i:i + beat_len])
    y = y.astype(np.float32)
    return [y.copy() for _ in range(n_channels)]


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="beatcoach analysis benchmark")
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Use 30 s tracks instead of 3 minutes for fast CI runs",
    )
    args = parser.parse_args()

    seconds = 30.0 if args.quick else 180.0
    warmup, runs = (2, 3) if args.quick else (3, 5)

    pipeline = AudioPipeline()
    analyzer = FeatureAnalyzer()

    _hdr(f"Stage timings  ({seconds:.0f} s @ {SR} Hz, stereo)")
    channels = _click_track(seconds, bpm=120)
    mono = channels[0]
    energy = analyzer.compute_energy(mono, SR)
    onsets = analyzer.detect_onsets(energy.energies, energy.block_duration)

    print(f"  compute_energy   {_stats(_timeit(analyzer.compute_energy, mono, SR, warmup=warmup, runs=runs))}")
    print(f"  detect_onsets    {_stats(_timeit(analyzer.detect_onsets, energy.energies, energy.block_duration, warmup=warmup, runs=runs))}")
    print(f"  estimate_tempo   {_stats(_timeit(analyzer.estimate_tempo, onsets, warmup=warmup, runs=runs))}")
    print(f"  build_sections   {_stats(_timeit(analyzer.build_sections, mono, seconds, warmup=warmup, runs=runs))}")

    _hdr("End-to-end analyze_samples")
    for bpm in (80, 100, 120, 140, 170):
        channels = _click_track(seconds, bpm=bpm)
        times = _timeit(pipeline.analyze_samples, channels, SR, seconds, warmup=warmup, runs=runs)
        features = pipeline.analyze_samples(channels, SR, seconds)
        print(
            f"  {bpm:>3} BPM in  ->  {features.bpm:>3} BPM out "
            f"(conf {features.beat_confidence:.2f})  {_stats(times)}"
        )

    print()


if __name__ == "__main__":
    main()
