"""
Feature serialization module.

Converts :class:`AudioFeatures` into the JSON payload consumed by the
dance-plan generator and the UI. Output stays in memory; callers decide
where it goes.
"""

import json
from typing import Any

from beatcoach.core.analyzer import Section
from beatcoach.pipeline import AudioFeatures


class FeaturesExporter:
    """
    Exports audio features to the camelCase JSON contract.
    """

    def __init__(self, precision: int | None = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values.
                       None leaves floats untouched.
        """
        self.precision = precision

    def _round(self, value: float) -> float:
        """Round to configured precision."""
        if self.precision is None:
            return float(value)
        return round(float(value), self.precision)

    def _section(self, section: Section) -> dict[str, float]:
        return {
            "start": self._round(section.start),
            "end": self._round(section.end),
            "intensity": self._round(section.intensity),
        }

    def to_dict(self, features: AudioFeatures) -> dict[str, Any]:
        """
        Build the payload dictionary.

        Args:
            features: Extracted features.

        Returns:
            Dictionary ready for ``json.dumps``.
        """
        return {
            "bpm": int(features.bpm),
            "beatConfidence": self._round(features.beat_confidence),
            "energy": self._round(features.energy),
            "energyLabel": features.energy_label,
            "intensity": self._round(features.intensity),
            "duration": self._round(features.duration),
            "tempoLabel": features.tempo_label,
            "recommendedStyle": features.recommended_style,
            "sections": [self._section(s) for s in features.sections],
        }

    def to_json(self, features: AudioFeatures, indent: int | None = 2) -> str:
        """Serialize features to a JSON string."""
        return json.dumps(self.to_dict(features), indent=indent)
