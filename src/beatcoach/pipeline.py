"""
End-to-end feature extraction.

    bytes ──► Decoder ──► mix_to_mono ──► FeatureAnalyzer ──► descriptors
                                                                 │
                                                                 ▼
                                                           AudioFeatures

Decoding is the only awaited step. Everything after it is synchronous
and CPU-bound. Each call opens its own decode session and closes it on
every exit path.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import numpy as np

from beatcoach.core.analyzer import FeatureAnalyzer, Section
from beatcoach.core.config import AnalysisConfig
from beatcoach.core.decoder import Decoder, LibrosaDecoder
from beatcoach.core.descriptors import (
    describe_energy,
    describe_tempo,
    normalize_intensity,
)
from beatcoach.core.errors import EmptySignalError
from beatcoach.core.mixer import mix_to_mono

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioFeatures:
    """Feature summary handed to the dance-plan generator."""

    bpm: int                   # never 0; falls back to config.default_bpm
    beat_confidence: float     # [0,1]
    energy: float              # raw average block RMS
    energy_label: str          # "soft" | "balanced" | "powerful"
    intensity: float           # energy normalized to [0,1]
    duration: float
    tempo_label: str           # "slow" | "medium" | "fast" | "very-fast"
    recommended_style: str
    sections: tuple[Section, ...]


class AudioPipeline:
    """
    Decodes audio bytes and extracts :class:`AudioFeatures`.

    Args:
        config: Analysis constants. Defaults to :class:`AnalysisConfig`.
        decoder: Decoder backend. Defaults to :class:`LibrosaDecoder`.
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        decoder: Decoder | None = None,
    ):
        self.config = config or AnalysisConfig()
        self.decoder = decoder or LibrosaDecoder()
        self.analyzer = FeatureAnalyzer(self.config)

    async def extract_features(self, data: bytes) -> AudioFeatures:
        """
        Decode *data* and extract features.

        Raises:
            DecodeUnsupportedError: The host cannot decode audio.
            DecodeFormatError: The bytes are not valid audio.
            EmptySignalError: The audio decoded to nothing.
        """
        session = self.decoder.open()
        try:
            decoded = await session.decode(data)
        finally:
            session.close()

        return self.analyze_samples(
            decoded.channels,
            decoded.sample_rate,
            decoded.duration,
        )

    def analyze_samples(
        self,
        channels: Sequence[np.ndarray],
        sample_rate: float,
        duration: float,
    ) -> AudioFeatures:
        """
        Extract features from already-decoded channels.

        Raises:
            EmptySignalError: If there are no channels or no samples.
        """
        t0 = time.perf_counter()
        mono = mix_to_mono(channels)
        if len(mono) == 0:
            raise EmptySignalError("Decoded audio contains no samples")

        result = self.analyzer.analyze(mono, sample_rate, duration)

        bpm = result.tempo.bpm
        if bpm == 0:
            # Consumers never see 0 BPM; confidence 0 marks the value as a guess.
            logger.warning(
                "No tempo detected, falling back to %d BPM", self.config.default_bpm
            )
            bpm = self.config.default_bpm

        intensity = normalize_intensity(
            result.energy.average, self.config.intensity_ceiling
        )
        tempo = describe_tempo(bpm)

        features = AudioFeatures(
            bpm=bpm,
            beat_confidence=result.tempo.confidence,
            energy=result.energy.average,
            energy_label=describe_energy(intensity),
            intensity=intensity,
            duration=duration,
            tempo_label=tempo.label,
            recommended_style=tempo.style,
            sections=result.sections,
        )

        logger.info(
            "Extracted features: %d BPM (confidence %.2f), %s energy, %.1fs in %.1f ms",
            features.bpm,
            features.beat_confidence,
            features.energy_label,
            features.duration,
            (time.perf_counter() - t0) * 1000,
        )
        return features

    def process(self, audio_path: str | Path) -> AudioFeatures:
        """
        Read an audio file and extract its features in one step.

        Args:
            audio_path: Path to audio file (wav, flac, ogg).

        Returns:
            AudioFeatures for the file.
        """
        data = Path(audio_path).read_bytes()
        return asyncio.run(self.extract_features(data))


async def extract_features(
    data: bytes,
    decoder: Decoder | None = None,
    config: AnalysisConfig | None = None,
) -> AudioFeatures:
    """Extract :class:`AudioFeatures` from raw audio bytes."""
    return await AudioPipeline(config=config, decoder=decoder).extract_features(data)
