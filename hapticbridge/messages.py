"""Message types exchanged between the haptic device, the robot and the bridges."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Vector3:
    """A three-component vector, also used for points and forces."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def norm(self) -> float:
        """Euclidean length of the vector."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def __sub__(self, other: object) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)


@dataclass(frozen=True)
class Quaternion:
    """An orientation; the default is the identity rotation."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass(frozen=True)
class Header:
    """Timestamp and reference frame of a stamped message."""

    stamp: float = 0.0
    frame_id: str = ""


@dataclass(frozen=True)
class Pose:
    """A position together with an orientation."""

    position: Vector3 = field(default_factory=Vector3)
    orientation: Quaternion = field(default_factory=Quaternion)


@dataclass(frozen=True)
class PoseStamped:
    """A pose with a header."""

    header: Header = field(default_factory=Header)
    pose: Pose = field(default_factory=Pose)


@dataclass(frozen=True)
class Wrench:
    """Force and torque acting on a body."""

    force: Vector3 = field(default_factory=Vector3)
    torque: Vector3 = field(default_factory=Vector3)


@dataclass(frozen=True)
class WrenchStamped:
    """A wrench with a header."""

    header: Header = field(default_factory=Header)
    wrench: Wrench = field(default_factory=Wrench)


@dataclass(frozen=True)
class ButtonEvent:
    """State of the two buttons on the haptic stylus."""

    grey_button: bool = False
    white_button: bool = False


@dataclass(frozen=True)
class ForceFeedback:
    """Force to be rendered on the haptic device."""

    force: Vector3 = field(default_factory=Vector3)


@dataclass(frozen=True)
class FrankaState:
    """The parts of the arm's state report used here.

    ``o_t_ee`` is the end-effector pose as a column-major 4x4 matrix and
    ``o_f_ext_hat_k`` the estimated external wrench (force, then torque).
    """

    header: Header = field(default_factory=Header)
    o_t_ee: tuple[float, ...] = ()
    o_f_ext_hat_k: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "o_t_ee", tuple(float(v) for v in self.o_t_ee))
        object.__setattr__(
            self, "o_f_ext_hat_k", tuple(float(v) for v in self.o_f_ext_hat_k)
        )


@dataclass(frozen=True)
class MoveGoal:
    """Goal for moving the gripper fingers to a width."""

    width: float
    speed: float


@dataclass(frozen=True)
class GraspGoal:
    """Goal for grasping an object with the gripper."""

    width: float
    speed: float
    force: float
    epsilon_inner: float
    epsilon_outer: float