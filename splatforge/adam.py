"""Adam optimiser with an optional per-parameter learning-rate scaling."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

__all__ = [
    "AdaptiveMomentumState",
    "AdamState",
    "AdaptiveMomentum",
    "AdamScaledConfig",
    "AdamScaled",
]


def _as_float(x) -> np.ndarray:
    return np.asarray(x, dtype=np.float32)


@dataclass(frozen=True)
class AdaptiveMomentumState:
    """Running first and second moments and the number of steps taken."""

    time: int
    moment_1: np.ndarray
    moment_2: np.ndarray


@dataclass(frozen=True)
class AdamState:
    """Optimiser state of one parameter."""

    momentum: AdaptiveMomentumState | None = None
    scaling: np.ndarray | None = None


@dataclass(frozen=True)
class AdaptiveMomentum:
    """The bias-corrected moment estimate at the heart of Adam."""

    beta_1: float = 0.9
    beta_2: float = 0.999
    epsilon: float = 1e-5

    def transform(
        self, grad, state: AdaptiveMomentumState | None = None
    ) -> tuple[np.ndarray, AdaptiveMomentumState]:
        """Return the normalised update direction and the new moment state."""
        grad = _as_float(grad)
        squared = grad**2
        if state is None:
            moment_1 = grad * (1.0 - self.beta_1)
            moment_2 = squared * (1.0 - self.beta_2)
            time = 1
        else:
            moment_1 = state.moment_1 * self.beta_1 + grad * (1.0 - self.beta_1)
            moment_2 = state.moment_2 * self.beta_2 + squared * (1.0 - self.beta_2)
            time = state.time + 1
        new_state = AdaptiveMomentumState(time, moment_1, moment_2)

        corrected_1 = moment_1 / (1.0 - self.beta_1**time)
        corrected_2 = moment_2 / (1.0 - self.beta_2**time)
        update = corrected_1 / (np.sqrt(corrected_2) + self.epsilon)
        return update.astype(np.float32), new_state


@dataclass(frozen=True)
class AdamScaled:
    """Adam whose step can be scaled element-wise by a per-parameter tensor."""

    momentum: AdaptiveMomentum = field(default_factory=AdaptiveMomentum)
    weight_decay: float | None = None
    grad_clip_value: float | None = None
    grad_clip_norm: float | None = None

    def _clip(self, grad: np.ndarray) -> np.ndarray:
        if self.grad_clip_value is not None:
            return np.clip(grad, -self.grad_clip_value, self.grad_clip_value)
        if self.grad_clip_norm is not None:
            norm = float(np.sqrt(np.sum(grad.astype(np.float64) ** 2)))
            if norm > self.grad_clip_norm:
                return (grad * (self.grad_clip_norm / norm)).astype(np.float32)
        return grad

    def step(
        self, lr: float, tensor, grad, state: AdamState | None = None
    ) -> tuple[np.ndarray, AdamState]:
        """Apply one update; return the new parameter and its state."""
        tensor = _as_float(tensor)
        grad = self._clip(_as_float(grad))
        momentum = state.momentum if state is not None else None
        scaling = state.scaling if state is not None else None

        if self.weight_decay is not None:
            grad = tensor * self.weight_decay + grad

        update, momentum = self.momentum.transform(grad, momentum)
        new_state = AdamState(momentum=momentum, scaling=scaling)

        if scaling is not None:
            delta = update * (_as_float(scaling) * lr)
        else:
            delta = update * lr
        return (tensor - delta).astype(np.float32), new_state


@dataclass(frozen=True)
class AdamScaledConfig:
    """Settings for :class:`AdamScaled`. At most one clipping mode may be set."""

    beta_1: float = 0.9
    beta_2: float = 0.999
    epsilon: float = 1e-5
    weight_decay: float | None = None
    grad_clip_value: float | None = None
    grad_clip_norm: float | None = None

    def __post_init__(self) -> None:
        if self.grad_clip_value is not None and self.grad_clip_norm is not None:
            raise ValueError("choose either value or norm gradient clipping, not both")

    def init(self) -> AdamScaled:
        """Build the optimiser."""
        return AdamScaled(
            momentum=AdaptiveMomentum(self.beta_1, self.beta_2, self.epsilon),
            weight_decay=self.weight_decay,
            grad_clip_value=self.grad_clip_value,
            grad_clip_norm=self.grad_clip_norm,
        )