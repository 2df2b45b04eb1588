"""Map numeric tempo and energy onto the categorical labels used downstream."""

from dataclasses import dataclass

from beatcoach.core.config import INTENSITY_CEILING

# Upper bounds (exclusive) of each tempo class
SLOW_BPM_LIMIT = 90
MEDIUM_BPM_LIMIT = 110
FAST_BPM_LIMIT = 135

# Upper bounds (exclusive) of each energy class, on normalized intensity
SOFT_INTENSITY_LIMIT = 0.25
BALANCED_INTENSITY_LIMIT = 0.55

TEMPO_LABELS = ("slow", "medium", "fast", "very-fast")
ENERGY_LABELS = ("soft", "balanced", "powerful")


@dataclass(frozen=True)
class TempoDescriptor:
    label: str   # one of TEMPO_LABELS
    style: str


def describe_tempo(bpm: float) -> TempoDescriptor:
    """Tempo class and a suggested dance style for *bpm*."""
    if bpm <= 0:
        return TempoDescriptor("medium", "groove")
    if bpm < SLOW_BPM_LIMIT:
        return TempoDescriptor("slow", "lyrical contemporary")
    if bpm < MEDIUM_BPM_LIMIT:
        return TempoDescriptor("medium", "hip-hop groove")
    if bpm < FAST_BPM_LIMIT:
        return TempoDescriptor("fast", "commercial hip-hop")
    return TempoDescriptor("very-fast", "street jazz / house")


def describe_energy(intensity: float) -> str:
    """Energy class for a normalized intensity in [0,1]."""
    if intensity < SOFT_INTENSITY_LIMIT:
        return "soft"
    if intensity < BALANCED_INTENSITY_LIMIT:
        return "balanced"
    return "powerful"


def normalize_intensity(average_energy: float, ceiling: float = INTENSITY_CEILING) -> float:
    """Project raw average RMS onto [0,1] against an empirical ceiling."""
    return max(0.0, min(1.0, average_energy / ceiling))
