"""Bilateral teleoperation bridge for the simulated arm."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from hapticbridge.messages import (
    ButtonEvent,
    ForceFeedback,
    PoseStamped,
    Vector3,
    WrenchStamped,
)
from hapticbridge.teleop import (
    FORCE_LIMIT,
    MOVEMENT_THRESHOLD,
    SIM_SCALING,
    PoseScaling,
    clamp_force,
    clamp_workspace,
    map_phantom_pose,
    movement_distance,
    scale_force,
    zero_feedback,
)

GRIPPER_COMMAND_TOPIC = "/gripper_controller/commands"
VISUALISATION_TOPIC = "/phantom/visualization_pose"

OPEN_GRIPPER_VELOCITY = 0.05
CLOSE_GRIPPER_VELOCITY = -0.05
SIM_FORCE_SCALE = 1.0

PosePublisher = Callable[[PoseStamped], None]
FeedbackPublisher = Callable[[ForceFeedback], None]
GripperPublisher = Callable[[tuple[float, float]], None]

_Msg = TypeVar("_Msg")


def _emit(publisher: Optional[Callable[[_Msg], None]], msg: _Msg) -> bool:
    """Hand ``msg`` to ``publisher`` if one is attached; report whether it was."""
    if publisher is None:
        return False
    publisher(msg)
    return True


class SimBridge:
    """Connects the haptic stylus to the simulated arm and its gripper."""

    def __init__(
        self,
        publish_target: Optional[PosePublisher] = None,
        publish_feedback: Optional[FeedbackPublisher] = None,
        publish_gripper: Optional[GripperPublisher] = None,
        publish_visualisation: Optional[PosePublisher] = None,
        scaling: PoseScaling = SIM_SCALING,
        force_scale: float = SIM_FORCE_SCALE,
    ) -> None:
        self.publish_target = publish_target
        self.publish_feedback = publish_feedback
        self.publish_gripper = publish_gripper
        self.publish_visualisation = publish_visualisation
        self.scaling = scaling
        self.force_scale = force_scale
        self.white_pressed = False
        self.gripper_open = False
        self.last_robot_pose: Optional[PoseStamped] = None
        self.last_wished_pose = PoseStamped()

    def allowed_movement(self, current: Vector3, last: Vector3) -> bool:
        """True when the step is shorter than the threshold; such steps are held back."""
        return movement_distance(current, last) < MOVEMENT_THRESHOLD

    def on_phantom_pose(self, msg: PoseStamped) -> PoseStamped:
        """Map a stylus pose, publish it, and return what was published.

        The pose goes to the arm while the white button is held and to the
        visualisation topic otherwise.
        """
        wished = map_phantom_pose(msg, self.scaling)
        if self.allowed_movement(wished.pose.position, self.last_wished_pose.pose.position):
            wished = self.last_wished_pose
        else:
            self.last_wished_pose = wished
        wished = clamp_workspace(wished)
        if self.white_pressed:
            _emit(self.publish_target, wished)
        else:
            _emit(self.publish_visualisation, wished)
        return wished

    def on_robot_pose(self, msg: PoseStamped) -> None:
        """Remember the arm's latest pose."""
        self.last_robot_pose = msg

    def on_button(self, msg: ButtonEvent) -> Optional[tuple[float, float]]:
        """Handle a button event; return the gripper command sent, if any.

        Every event with the grey button held toggles the gripper. Releasing
        the white button stops the arm at its last known pose and removes
        force feedback.
        """
        command: Optional[tuple[float, float]] = None
        if msg.grey_button:
            self.gripper_open = not self.gripper_open
            velocity = OPEN_GRIPPER_VELOCITY if self.gripper_open else CLOSE_GRIPPER_VELOCITY
            command = (velocity, velocity)
            _emit(self.publish_gripper, command)

        was_pressed = self.white_pressed
        self.white_pressed = msg.white_button
        if was_pressed and not self.white_pressed:
            if self.last_robot_pose is not None:
                _emit(self.publish_target, self.last_robot_pose)
            _emit(self.publish_feedback, zero_feedback())
        return command

    def on_wrench(self, msg: WrenchStamped) -> ForceFeedback:
        """Turn a sensor reading into device feedback; publish and return it."""
        if not self.white_pressed:
            feedback = zero_feedback()
        else:
            feedback = clamp_force(scale_force(msg.wrench, self.force_scale), FORCE_LIMIT)
        _emit(self.publish_feedback, feedback)
        return feedback