"""Mapping between the haptic stylus workspace and the robot workspace."""

from __future__ import annotations

from dataclasses import dataclass

from hapticbridge.messages import (
    ForceFeedback,
    Pose,
    PoseStamped,
    Quaternion,
    Vector3,
    Wrench,
)

PHANTOM_POSE_TOPIC = "/phantom/pose"
PHANTOM_BUTTON_TOPIC = "/phantom/button"
PHANTOM_FEEDBACK_TOPIC = "/phantom/force_feedback"
ROBOT_POSE_TOPIC = "/cartesian_compliance_controller/current_pose"
ROBOT_WRENCH_TOPIC = "/cartesian_compliance_controller/ft_sensor_wrench"
ROBOT_TARGET_TOPIC = "/cartesian_compliance_controller/target_frame"

WORKSPACE_X = (-0.7, 0.7)
WORKSPACE_Y = (-0.7, 0.7)
WORKSPACE_Z = (0.0, 1.2)

# The device can render 3.3 N; 2 N is used to keep it safe.
FORCE_LIMIT = 2.0
# Distance between successive targets that decides whether a move is taken.
MOVEMENT_THRESHOLD = 0.55


@dataclass(frozen=True)
class PoseScaling:
    """Per-axis scale factors and x offset applied to stylus positions."""

    x: float
    y: float
    z: float
    x_offset: float = 0.55


SIM_SCALING = PoseScaling(4.167, 3.125, 7.143, 0.55)
FRANKA_SCALING = PoseScaling(12.0, 5.0, 10.0, 0.55)


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return min(max(value, low), high)


def map_phantom_pose(msg: PoseStamped, scaling: PoseScaling) -> PoseStamped:
    """Remap a stylus pose into the robot frame.

    The stylus y axis drives the robot x axis (plus an offset), the negated
    stylus x axis drives robot y, and z is scaled in place. Orientation x and
    y are swapped in the same way; z and w are kept.
    """
    pos = msg.pose.position
    ori = msg.pose.orientation
    position = Vector3(
        pos.y * scaling.x + scaling.x_offset,
        -pos.x * scaling.y,
        pos.z * scaling.z,
    )
    orientation = Quaternion(ori.y, -ori.x, ori.z, ori.w)
    return PoseStamped(header=msg.header, pose=Pose(position, orientation))


def movement_distance(current: Vector3, last: Vector3) -> float:
    """Euclidean distance between two positions."""
    return (current - last).norm()


def clamp_workspace(pose: PoseStamped) -> PoseStamped:
    """Clamp the position of a pose to the robot's allowed workspace."""
    pos = pose.pose.position
    position = Vector3(
        _clamp(pos.x, WORKSPACE_X),
        _clamp(pos.y, WORKSPACE_Y),
        _clamp(pos.z, WORKSPACE_Z),
    )
    return PoseStamped(
        header=pose.header,
        pose=Pose(position, pose.pose.orientation),
    )


def scale_force(wrench: Wrench, scale: float) -> ForceFeedback:
    """Turn a measured robot force into stylus feedback in the device frame."""
    f = wrench.force
    return ForceFeedback(Vector3(f.y * scale, -f.x * scale, -f.z * scale))


def clamp_force(feedback: ForceFeedback, limit: float = FORCE_LIMIT) -> ForceFeedback:
    """Limit each feedback component to the range [-limit, limit]."""
    if limit < 0:
        raise ValueError(f"force limit must not be negative, got {limit}")
    bounds = (-limit, limit)
    f = feedback.force
    return ForceFeedback(Vector3(_clamp(f.x, bounds), _clamp(f.y, bounds), _clamp(f.z, bounds)))


def zero_feedback() -> ForceFeedback:
    """Feedback that renders no force on the device."""
    return ForceFeedback(Vector3(0.0, 0.0, 0.0))