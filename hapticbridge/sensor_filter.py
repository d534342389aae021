"""Low-pass filtering of force/torque sensor readings."""

from __future__ import annotations

from typing import Callable, Optional

from hapticbridge.messages import FrankaState, Vector3, Wrench, WrenchStamped

SIM_INPUT_TOPIC = "/fts_broadcaster/wrench"
SIM_OUTPUT_TOPIC = "/calibrated_sensor/wrench"
FRANKA_INPUT_TOPIC = "/franka_robot_state_broadcaster/robot_state"
FRANKA_OUTPUT_TOPIC = "franka_calibrated_sensor/wrench"

SIM_ALPHA = 0.05
FRANKA_ALPHA = 0.001
# The simulated end effector weighs about 7.45 N along z.
SIM_OFFSET_Z = -7.448

WrenchPublisher = Callable[[WrenchStamped], None]


class IIRWrenchFilter:
    """First-order IIR (exponential) smoothing of a wrench.

    Each update computes ``alpha * (sample + offset) + (1 - alpha) * previous``.
    The filter state starts at zero.
    """

    def __init__(self, alpha: float, force_offset: Optional[Vector3] = None) -> None:
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self.force_offset = force_offset if force_offset is not None else Vector3()
        self._state = Wrench()

    @property
    def state(self) -> Wrench:
        """The most recent filtered wrench."""
        return self._state

    def reset(self) -> None:
        """Return the filter state to zero."""
        self._state = Wrench()

    def _blend(self, sample: Vector3, previous: Vector3) -> Vector3:
        a = self.alpha
        return Vector3(
            a * sample.x + (1.0 - a) * previous.x,
            a * sample.y + (1.0 - a) * previous.y,
            a * sample.z + (1.0 - a) * previous.z,
        )

    def update(self, wrench: Wrench) -> Wrench:
        """Feed one sample and return the new filtered wrench."""
        off = self.force_offset
        force = Vector3(
            wrench.force.x + off.x, wrench.force.y + off.y, wrench.force.z + off.z
        )
        self._state = Wrench(
            force=self._blend(force, self._state.force),
            torque=self._blend(wrench.torque, self._state.torque),
        )
        return self._state


class SensorFilter:
    """Smooths the simulated F/T sensor and removes the end-effector weight."""

    def __init__(
        self,
        publish: Optional[WrenchPublisher] = None,
        alpha: float = SIM_ALPHA,
        offset_z: float = SIM_OFFSET_Z,
    ) -> None:
        self.publish = publish
        self.filter = IIRWrenchFilter(alpha, Vector3(0.0, 0.0, offset_z))

    def on_wrench(self, msg: WrenchStamped) -> WrenchStamped:
        """Filter one reading; publish and return the result."""
        out = WrenchStamped(header=msg.header, wrench=self.filter.update(msg.wrench))
        if self.publish is not None:
            self.publish(out)
        return out


class FrankaSensorFilter:
    """Smooths the arm's estimated external wrench."""

    def __init__(
        self, publish: Optional[WrenchPublisher] = None, alpha: float = FRANKA_ALPHA
    ) -> None:
        self.publish = publish
        self.filter = IIRWrenchFilter(alpha)

    def on_robot_state(self, state: FrankaState) -> WrenchStamped:
        """Filter the wrench in one state report; publish and return the result."""
        values = state.o_f_ext_hat_k
        if len(values) < 6:
            raise ValueError(
                f"o_f_ext_hat_k needs 6 values, got {len(values)}"
            )
        fx, fy, fz, tx = values[:4]
        # All three torque channels are fed from the x torque component.
        sample = Wrench(force=Vector3(fx, fy, fz), torque=Vector3(tx, tx, tx))
        out = WrenchStamped(header=state.header, wrench=self.filter.update(sample))
        if self.publish is not None:
            self.publish(out)
        return out