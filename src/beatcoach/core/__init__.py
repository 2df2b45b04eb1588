"""Core audio processing modules."""

from beatcoach.core.analyzer import FeatureAnalyzer
from beatcoach.core.decoder import DecodedAudio, LibrosaDecoder
from beatcoach.core.mixer import mix_to_mono

__all__ = ["FeatureAnalyzer", "DecodedAudio", "LibrosaDecoder", "mix_to_mono"]
