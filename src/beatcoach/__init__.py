"""Audio feature extraction for the dance coach."""

from beatcoach.core.analyzer import FeatureAnalyzer
from beatcoach.core.config import AnalysisConfig
from beatcoach.core.decoder import LibrosaDecoder
from beatcoach.io.exporter import FeaturesExporter
from beatcoach.pipeline import AudioFeatures, AudioPipeline, extract_features

__version__ = "0.1.0"
__all__ = [
    "AnalysisConfig",
    "AudioFeatures",
    "AudioPipeline",
    "FeatureAnalyzer",
    "FeaturesExporter",
    "LibrosaDecoder",
    "extract_features",
]
