"""
Feature extraction module for audio analysis.

Works on a mono signal and produces the rhythmic and energy drivers:
block RMS energy, onset timestamps, a histogram-mode tempo estimate,
and coarse intensity sections.

The onset/tempo stages are deliberately simple: adaptive thresholding
against a trailing mean, then a vote over inter-onset intervals. The
confidence score is surfaced so consumers can judge the estimate.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from beatcoach.core.config import AnalysisConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnergyProfile:
    """Per-block RMS energy."""

    energies: np.ndarray     # (n_blocks,) float64
    block_duration: float    # seconds per block
    average: float           # mean of energies, 0.0 when there are no blocks

    @property
    def n_blocks(self) -> int:
        return len(self.energies)


@dataclass(frozen=True)
class TempoEstimate:
    """Tempo vote result. bpm == 0 means no tempo could be estimated."""

    bpm: int
    confidence: float   # [0,1]


@dataclass(frozen=True)
class Section:
    """One equal-duration slice of the track."""

    start: float
    end: float
    intensity: float    # RMS over the section's raw samples


@dataclass(frozen=True)
class AnalysisResult:
    """Intermediate products of one analysis run."""

    energy: EnergyProfile
    onset_times: np.ndarray
    tempo: TempoEstimate
    sections: tuple[Section, ...]


# ---------------------------------------------------------------------------
# Feature analyzer
# ---------------------------------------------------------------------------

class FeatureAnalyzer:
    """
    Extracts energy, onset, tempo and section features from mono audio.

    All stages are pure functions of their inputs and the config.
    """

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()

    # ------------------------------------------------------------------
    # Energy
    # ------------------------------------------------------------------

    def compute_energy(self, samples: np.ndarray, sample_rate: float) -> EnergyProfile:
        """
        Compute RMS energy over fixed-size, non-overlapping blocks.

        A trailing partial block is discarded.

        Args:
            samples: Mono signal.
            sample_rate: Sample rate in Hz.

        Returns:
            EnergyProfile with one RMS value per full block.
        """
        block_size = self.config.block_size
        n_blocks = len(samples) // block_size

        # Blocks are independent; one vectorised pass keeps them in order.
        blocks = np.asarray(
            samples[: n_blocks * block_size], dtype=np.float64
        ).reshape(n_blocks, block_size)
        energies = np.sqrt(np.mean(np.square(blocks), axis=1)) if n_blocks else np.zeros(0)
        energies.setflags(write=False)

        average = float(np.mean(energies)) if n_blocks else 0.0

        return EnergyProfile(
            energies=energies,
            block_duration=self.config.block_duration(sample_rate),
            average=average,
        )

    # ------------------------------------------------------------------
    # Onsets
    # ------------------------------------------------------------------

    def detect_onsets(self, energies: np.ndarray, block_duration: float) -> np.ndarray:
        """
        Flag blocks whose energy jumps above the trailing mean.

        Block ``i`` is an onset when ``energies[i]`` exceeds the mean of the
        ``history_size`` blocks before it times ``sensitivity``. Blocks
        without a full history are never onsets, and adjacent blocks may
        both be flagged.

        Returns:
            Strictly increasing onset times in seconds (possibly empty).
        """
        history = self.config.history_size
        energies = np.asarray(energies, dtype=np.float64)

        if len(energies) <= history:
            return np.array([], dtype=np.float64)

        # Row j is the window energies[j : j + history], i.e. the history of
        # block j + history.
        trailing_mean = sliding_window_view(energies[:-1], history).mean(axis=1)
        is_onset = energies[history:] > trailing_mean * self.config.sensitivity
        onset_blocks = np.nonzero(is_onset)[0] + history

        return onset_blocks * block_duration

    # ------------------------------------------------------------------
    # Tempo
    # ------------------------------------------------------------------

    def estimate_tempo(self, onset_times: np.ndarray) -> TempoEstimate:
        """
        Estimate BPM as the mode of clamped inter-onset BPM candidates.

        Ties go to the candidate seen first. Confidence is the share of
        candidates that voted for the winner.
        """
        if len(onset_times) < 2:
            return TempoEstimate(bpm=0, confidence=0.0)

        intervals = np.diff(np.asarray(onset_times, dtype=np.float64))
        intervals = intervals[intervals > 0]

        candidates = [self._interval_to_bpm(interval) for interval in intervals]
        if not candidates:
            return TempoEstimate(bpm=0, confidence=0.0)

        # Counter keeps insertion order and most_common(1) returns the first
        # maximum, so the first-seen candidate wins a tie.
        histogram = Counter(candidates)
        bpm, score = histogram.most_common(1)[0]
        confidence = min(1.0, max(0.0, score / len(candidates)))

        logger.debug(
            "Tempo vote: %d candidates, %d buckets, winner %d BPM (%d votes)",
            len(candidates),
            len(histogram),
            bpm,
            score,
        )
        return TempoEstimate(bpm=bpm, confidence=confidence)

    def _interval_to_bpm(self, interval: float) -> int:
        """Round half-up then clamp into [min_bpm, max_bpm]."""
        bpm = math.floor(60.0 / interval + 0.5)
        return int(min(self.config.max_bpm, max(self.config.min_bpm, bpm)))

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def build_sections(self, samples: np.ndarray, duration: float) -> tuple[Section, ...]:
        """
        Split the track into equal-duration sections with RMS intensity.

        Sample ranges use ``len(samples) // section_count`` per section, the
        last section taking any remainder. Time boundaries are derived from
        ``duration / section_count`` and the last section ends exactly at
        ``duration``.
        """
        n_sections = self.config.section_count
        samples_per_section = len(samples) // n_sections
        step = duration / n_sections

        sections = []
        for index in range(n_sections):
            is_last = index == n_sections - 1
            start_sample = index * samples_per_section
            end_sample = len(samples) if is_last else start_sample + samples_per_section

            chunk = np.asarray(samples[start_sample:end_sample], dtype=np.float64)
            intensity = float(np.sqrt(np.mean(np.square(chunk)))) if len(chunk) else 0.0

            sections.append(
                Section(
                    start=step * index,
                    end=duration if is_last else step * (index + 1),
                    intensity=intensity,
                )
            )

        return tuple(sections)

    # ------------------------------------------------------------------
    # Main analysis
    # ------------------------------------------------------------------

    def analyze(
        self,
        samples: np.ndarray,
        sample_rate: float,
        duration: float,
    ) -> AnalysisResult:
        """
        Run every analysis stage on a mono signal.

        Args:
            samples: Mono signal.
            sample_rate: Sample rate in Hz.
            duration: Track duration in seconds.

        Returns:
            AnalysisResult with all intermediate features.
        """
        energy = self.compute_energy(samples, sample_rate)
        onset_times = self.detect_onsets(energy.energies, energy.block_duration)
        tempo = self.estimate_tempo(onset_times)
        sections = self.build_sections(samples, duration)

        logger.debug(
            "Analyzed %d blocks: %d onsets, average energy %.4f",
            energy.n_blocks,
            len(onset_times),
            energy.average,
        )

        return AnalysisResult(
            energy=energy,
            onset_times=onset_times,
            tempo=tempo,
            sections=sections,
        )
