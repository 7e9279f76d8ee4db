"""Amplification coefficient ramp.

A pool's A moves between two values over a time window instead of jumping,
so no single block can reprice the curve. The ramp is an immutable value:
starting or stopping a ramp returns a new AmplificationRamp and the caller
persists it.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from stableswap.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from stableswap.errors import InvalidAmplification, InvalidRampWindow

logger = structlog.get_logger()


@dataclass(frozen=True)
class AmplificationRamp:
    """Ramp state for the amplification coefficient.

    The constructor accepts ramp_stop_ts == ramp_start_ts only when
    initial_amp == target_amp. That zero-length window is the settled form
    built by fixed() and stop_ramp(); it never interpolates. A ramp that
    actually moves A must come from start_ramp(), which rejects
    stop_ts <= now and windows shorter than the configured minimum.

    Attributes:
        initial_amp: Effective A at ramp_start_ts
        target_amp: Effective A from ramp_stop_ts onwards
        ramp_start_ts: Window start (unix seconds)
        ramp_stop_ts: Window end (unix seconds), >= ramp_start_ts
    """

    initial_amp: int
    target_amp: int
    ramp_start_ts: int = 0
    ramp_stop_ts: int = 0

    def __post_init__(self) -> None:
        if self.initial_amp <= 0 or self.target_amp <= 0:
            raise InvalidAmplification(
                f"Amplification must be positive, got {self.initial_amp} -> {self.target_amp}"
            )
        if self.ramp_stop_ts < self.ramp_start_ts:
            raise InvalidRampWindow(
                f"Ramp stops at {self.ramp_stop_ts} before it starts at {self.ramp_start_ts}"
            )
        # A zero-length window cannot interpolate between two distinct values
        if self.ramp_stop_ts == self.ramp_start_ts and self.initial_amp != self.target_amp:
            raise InvalidRampWindow(
                f"Zero-length ramp window at {self.ramp_start_ts} with "
                f"{self.initial_amp} != {self.target_amp}"
            )

    @classmethod
    def fixed(cls, amp: int, ts: int = 0) -> AmplificationRamp:
        """Non-ramping state, as set at pool creation."""
        return cls(initial_amp=amp, target_amp=amp, ramp_start_ts=ts, ramp_stop_ts=ts)

    def effective_amp(self, now: int) -> int:
        """Return A as of timestamp `now`.

        Clamped to initial_amp before the window and target_amp after it,
        linearly interpolated (truncating) inside it.
        """
        if now <= self.ramp_start_ts:
            return self.initial_amp
        if now >= self.ramp_stop_ts:
            return self.target_amp

        elapsed = now - self.ramp_start_ts
        duration = self.ramp_stop_ts - self.ramp_start_ts
        # Unsigned arithmetic, so the direction is handled explicitly
        if self.target_amp > self.initial_amp:
            return self.initial_amp + (self.target_amp - self.initial_amp) * elapsed // duration
        return self.initial_amp - (self.initial_amp - self.target_amp) * elapsed // duration

    def is_ramping(self, now: int) -> bool:
        """True while `now` lies strictly inside an active window."""
        return self.ramp_start_ts < now < self.ramp_stop_ts and self.initial_amp != self.target_amp

    def start_ramp(
        self,
        target_amp: int,
        now: int,
        stop_ts: int,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> AmplificationRamp:
        """Begin ramping towards target_amp, finishing at stop_ts.

        The currently effective A becomes the new initial value, so
        re-ramping mid-window never jumps.

        Raises:
            InvalidRampWindow: If stop_ts <= now or the window is shorter
                than config.min_ramp_duration
            InvalidAmplification: If target_amp is outside the configured
                bounds or moves A by more than config.max_amp_change
        """
        if stop_ts <= now:
            raise InvalidRampWindow(f"Ramp must end after it starts: start={now}, stop={stop_ts}")
        if stop_ts - now < config.min_ramp_duration:
            raise InvalidRampWindow(
                f"Ramp duration {stop_ts - now}s is shorter than {config.min_ramp_duration}s"
            )
        if not config.min_amp <= target_amp <= config.max_amp:
            raise InvalidAmplification(
                f"Target amplification {target_amp} outside [{config.min_amp}, {config.max_amp}]"
            )

        current_amp = self.effective_amp(now)
        if target_amp > current_amp * config.max_amp_change:
            raise InvalidAmplification(
                f"Ramp up {current_amp} -> {target_amp} exceeds factor {config.max_amp_change}"
            )
        if target_amp * config.max_amp_change < current_amp:
            raise InvalidAmplification(
                f"Ramp down {current_amp} -> {target_amp} exceeds factor {config.max_amp_change}"
            )

        logger.debug(
            "amp_ramp_started",
            initial_amp=current_amp,
            target_amp=target_amp,
            start_ts=now,
            stop_ts=stop_ts,
        )
        return AmplificationRamp(
            initial_amp=current_amp,
            target_amp=target_amp,
            ramp_start_ts=now,
            ramp_stop_ts=stop_ts,
        )

    def stop_ramp(self, now: int) -> AmplificationRamp:
        """Freeze A at its current effective value."""
        current_amp = self.effective_amp(now)
        logger.debug("amp_ramp_stopped", amp=current_amp, ts=now)
        return AmplificationRamp.fixed(current_amp, now)
