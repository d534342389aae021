"""Bilateral teleoperation bridge for the real arm and its gripper."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar, Union

from hapticbridge.messages import (
    ButtonEvent,
    ForceFeedback,
    GraspGoal,
    MoveGoal,
    PoseStamped,
    Vector3,
    WrenchStamped,
)
from hapticbridge.teleop import (
    FORCE_LIMIT,
    FRANKA_SCALING,
    MOVEMENT_THRESHOLD,
    PoseScaling,
    clamp_force,
    clamp_workspace,
    map_phantom_pose,
    movement_distance,
    scale_force,
    zero_feedback,
)

MOVE_ACTION = "/panda_gripper/move"
GRASP_ACTION = "/panda_gripper/grasp"
VISUALISATION_TOPIC = "/phantom/pose/visualisation"

OPEN_GRIPPER_WIDTH = 0.08
CLOSE_GRIPPER_WIDTH = 0.0
GRIPPER_SPEED = 0.1
GRASP_FORCE = 60.0
GRASP_EPSILON_INNER = 0.01
GRASP_EPSILON_OUTER = 0.01
SERVER_TIMEOUT = 0.1
FRANKA_FORCE_SCALE = 0.5

Goal = Union[MoveGoal, GraspGoal]
PosePublisher = Callable[[PoseStamped], None]
FeedbackPublisher = Callable[[ForceFeedback], None]

_Msg = TypeVar("_Msg")


def _emit(publisher: Optional[Callable[[_Msg], None]], msg: _Msg) -> bool:
    """Hand ``msg`` to ``publisher`` if one is attached; report whether it was."""
    if publisher is None:
        return False
    publisher(msg)
    return True


class GripperClient:
    """Client for one gripper action server.

    ``send`` delivers a goal to the server; ``is_ready`` is asked, with a
    timeout in seconds, whether the server is available. Without ``is_ready``
    the server counts as available whenever ``send`` is given.
    """

    def __init__(
        self,
        action_name: str,
        send: Optional[Callable[[Goal], None]] = None,
        is_ready: Optional[Callable[[float], bool]] = None,
    ) -> None:
        self.action_name = action_name
        self._send = send
        self._is_ready = is_ready
        self.sent_goals: list[Goal] = []

    def wait_for_server(self, timeout: float) -> bool:
        """Whether the action server is available within the timeout."""
        if self._is_ready is None:
            return self._send is not None
        return bool(self._is_ready(timeout))

    def send_goal(self, goal: Goal) -> None:
        """Send a goal to the action server."""
        if self._send is None:
            raise RuntimeError(f"no action server attached to {self.action_name}")
        self._send(goal)
        self.sent_goals.append(goal)


class FrankaBridge:
    """Connects the haptic stylus to the real arm and its gripper."""

    def __init__(
        self,
        publish_target: Optional[PosePublisher] = None,
        publish_feedback: Optional[FeedbackPublisher] = None,
        publish_visualisation: Optional[PosePublisher] = None,
        move_client: Optional[GripperClient] = None,
        grasp_client: Optional[GripperClient] = None,
        scaling: PoseScaling = FRANKA_SCALING,
        force_scale: float = FRANKA_FORCE_SCALE,
    ) -> None:
        self.publish_target = publish_target
        self.publish_feedback = publish_feedback
        self.publish_visualisation = publish_visualisation
        self.move_client = move_client or GripperClient(MOVE_ACTION)
        self.grasp_client = grasp_client or GripperClient(GRASP_ACTION)
        self.scaling = scaling
        self.force_scale = force_scale
        self.white_pressed = False
        self.grey_pressed = False
        self.gripper_open = False
        self.gripper_speed = GRIPPER_SPEED
        self.last_robot_pose: Optional[PoseStamped] = None
        self.last_wished_pose = PoseStamped()

    def allowed_movement(self, current: Vector3, last: Vector3) -> bool:
        """True when the step is longer than the threshold; such jumps are ignored."""
        return movement_distance(current, last) > MOVEMENT_THRESHOLD

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

    def on_button(self, msg: ButtonEvent) -> Optional[Goal]:
        """Handle a button event; return the gripper goal sent, if any.

        Pressing the grey button toggles the gripper. Releasing the white
        button stops the arm at its last known pose and removes force feedback.
        """
        goal: Optional[Goal] = None
        if msg.grey_button and not self.grey_pressed:
            self.gripper_open = not self.gripper_open
            if self.gripper_open:
                goal = self.send_gripper_grasp(OPEN_GRIPPER_WIDTH)
            else:
                goal = self.send_gripper_move(CLOSE_GRIPPER_WIDTH)
        self.grey_pressed = msg.grey_button

        was_pressed = self.white_pressed
        self.white_pressed = msg.white_button
        if was_pressed and not self.white_pressed:
            if self.last_robot_pose is not None:
                _emit(self.publish_target, self.last_robot_pose)
            _emit(self.publish_feedback, zero_feedback())
        return goal

    def send_gripper_move(self, width: float) -> Optional[MoveGoal]:
        """Send a move goal; return it, or None if the server is unavailable."""
        if not self.move_client.wait_for_server(SERVER_TIMEOUT):
            return None
        goal = MoveGoal(width=width, speed=self.gripper_speed)
        self.move_client.send_goal(goal)
        return goal

    def send_gripper_grasp(self, width: float) -> Optional[GraspGoal]:
        """Send a grasp goal; return it, or None if the server is unavailable."""
        if not self.grasp_client.wait_for_server(SERVER_TIMEOUT):
            return None
        goal = GraspGoal(
            width=width,
            speed=self.gripper_speed,
            force=GRASP_FORCE,
            epsilon_inner=GRASP_EPSILON_INNER,
            epsilon_outer=GRASP_EPSILON_OUTER,
        )
        self.grasp_client.send_goal(goal)
        return goal

    def on_wrench(self, msg: WrenchStamped) -> ForceFeedback:
        """Turn a sensor reading into device feedback; publish and return it."""
        if not self.white_pressed:
            feedback = zero_feedback()
        else:
            feedback = clamp_force(scale_force(msg.wrench, self.force_scale), FORCE_LIMIT)
        _emit(self.publish_feedback, feedback)
        return feedback