"""
Tunable analysis constants.

Every threshold used by the analysis stages lives here so it can be
tuned without touching the algorithms.
"""

from dataclasses import dataclass

from beatcoach.core.errors import ConfigError

BLOCK_SIZE = 1024          # samples per energy block
HISTORY_SIZE = 43          # ~1s of blocks at 1024 samples / 44.1kHz
SENSITIVITY = 1.35         # onset threshold over the trailing mean
SECTION_COUNT = 6
INTENSITY_CEILING = 0.7    # average RMS mapped to intensity 1.0
MIN_BPM = 60
MAX_BPM = 190
DEFAULT_BPM = 104          # reported when no tempo could be estimated


@dataclass(frozen=True)
class AnalysisConfig:
    """Parameters shared by every stage of one analysis run."""

    block_size: int = BLOCK_SIZE
    history_size: int = HISTORY_SIZE
    sensitivity: float = SENSITIVITY
    section_count: int = SECTION_COUNT
    intensity_ceiling: float = INTENSITY_CEILING
    min_bpm: int = MIN_BPM
    max_bpm: int = MAX_BPM
    default_bpm: int = DEFAULT_BPM

    def __post_init__(self):
        if self.block_size < 1:
            raise ConfigError(f"block_size must be >= 1, got {self.block_size}")
        if self.history_size < 1:
            raise ConfigError(f"history_size must be >= 1, got {self.history_size}")
        if self.sensitivity <= 0:
            raise ConfigError(f"sensitivity must be > 0, got {self.sensitivity}")
        if self.section_count < 1:
            raise ConfigError(f"section_count must be >= 1, got {self.section_count}")
        if self.intensity_ceiling <= 0:
            raise ConfigError(
                f"intensity_ceiling must be > 0, got {self.intensity_ceiling}"
            )
        if not 0 < self.min_bpm <= self.max_bpm:
            raise ConfigError(
                f"invalid BPM range [{self.min_bpm}, {self.max_bpm}]"
            )
        if not self.min_bpm <= self.default_bpm <= self.max_bpm:
            raise ConfigError(
                f"default_bpm {self.default_bpm} outside "
                f"[{self.min_bpm}, {self.max_bpm}]"
            )

    def block_duration(self, sample_rate: float) -> float:
        """Seconds covered by one energy block at *sample_rate*."""
        return self.block_size / sample_rate
