"""Engine configuration."""

from dataclasses import dataclass

# Maximum iterations for Newton-Raphson convergence
MAX_ITERATIONS = 255

# Amplification bounds and ramp limits
MIN_AMP = 1
MAX_AMP = 1_000_000
MAX_AMP_CHANGE = 10
MIN_RAMP_DURATION = 86_400  # one day, in seconds


@dataclass(frozen=True)
class EngineConfig:
    """Tunable policy parameters for the invariant engine.

    Attributes:
        max_iterations: Newton-Raphson step bound for both solvers (default: 255)
        min_amp: Smallest accepted amplification coefficient (default: 1)
        max_amp: Largest accepted amplification coefficient (default: 1,000,000)
        max_amp_change: Largest factor A may move by in a single ramp,
            up or down (default: 10)
        min_ramp_duration: Shortest accepted ramp window in seconds
            (default: 86,400)
    """

    max_iterations: int = MAX_ITERATIONS
    min_amp: int = MIN_AMP
    max_amp: int = MAX_AMP
    max_amp_change: int = MAX_AMP_CHANGE
    min_ramp_duration: int = MIN_RAMP_DURATION

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if not 0 < self.min_amp <= self.max_amp:
            raise ValueError(f"Invalid amp bounds [{self.min_amp}, {self.max_amp}]")
        if self.max_amp_change < 1:
            raise ValueError(f"max_amp_change must be >= 1, got {self.max_amp_change}")
        if self.min_ramp_duration < 1:
            raise ValueError(f"min_ramp_duration must be >= 1, got {self.min_ramp_duration}")


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
