# hapticbridge

The control logic of a haptic bilateral teleoperation system. A stylus-type
haptic device steers a robot arm. The forces measured at the arm's wrist are
fed back to the operator's hand. The package depends on nothing outside the
standard library.

You feed the handlers messages. They return the message they produced and
pass it to any publisher callbacks you attached. Publishers are plain
callables and all of them are optional.

## Modules

### `hapticbridge.messages`

Frozen dataclasses for the messages involved:

- `Vector3`, which supports subtraction and `norm()`.
- `Quaternion`, which defaults to the identity rotation.
- `Header`, `Pose`, `PoseStamped`, `Wrench` and `WrenchStamped`.
- `ButtonEvent`, with the fields `grey_button` and `white_button`.
- `ForceFeedback`.
- `FrankaState`, with `header`, `o_t_ee` and `o_f_ext_hat_k`. Its sequences
  are stored as tuples of floats.
- The gripper goals `MoveGoal` and `GraspGoal`.

### `hapticbridge.teleop`

The shared building blocks:

- `PoseScaling(x, y, z, x_offset=0.55)` holds the per-axis scale factors.
  `SIM_SCALING` is `(4.167, 3.125, 7.143)` and `FRANKA_SCALING` is
  `(12.0, 5.0, 10.0)`. Both use an x offset of 0.55.
- `map_phantom_pose(msg, scaling)` converts a stylus pose to the robot frame
  as follows. Header, orientation `z` and orientation `w` are kept.

  | Robot value | Computed from the stylus pose |
  |---|---|
  | x | `stylus.y * scaling.x + x_offset` |
  | y | `-stylus.x * scaling.y` |
  | z | `stylus.z * scaling.z` |
  | orientation x | stylus orientation y |
  | orientation y | negated stylus orientation x |

- `movement_distance(current, last)` returns the Euclidean distance between
  two positions.
- `clamp_workspace(pose)` clamps the position to x and y in [-0.7, 0.7] and
  z in [0.0, 1.2].
- `scale_force(wrench, scale)` turns a measured force into device feedback
  `(f.y, -f.x, -f.z) * scale`.
- `clamp_force(feedback, limit=2.0)` limits each component to
  `[-limit, limit]`. It raises `ValueError` for a negative limit.
- `zero_feedback()` returns feedback with no force in it.

### `hapticbridge.bridge_sim`: `SimBridge`

The bridge for a simulated arm. It takes these optional publishers:
`publish_target`, `publish_feedback`, `publish_gripper` and
`publish_visualisation`. It also takes `scaling`, which defaults to
`SIM_SCALING`, and `force_scale`, which defaults to 1.0.

- `allowed_movement(current, last)` is true when the step is shorter than
  0.55. Such steps are held back: the previous target is re-sent.
- `on_button(msg)`:
  - Every event with the grey button held toggles the gripper. It sends the
    velocity pair `(0.05, 0.05)` when the gripper opens and `(-0.05, -0.05)`
    when it closes, and returns the pair.
  - If the grey button is not held, the method returns `None`.

### `hapticbridge.bridge_franka`: `FrankaBridge` and `GripperClient`

The bridge for a real arm. It takes these optional publishers:
`publish_target`, `publish_feedback` and `publish_visualisation`. It also
takes `move_client` and `grasp_client`, `scaling`, which defaults to
`FRANKA_SCALING`, and `force_scale`, which defaults to 0.5.

- `allowed_movement(current, last)` is true when the step is longer than
  0.55. Such jumps are ignored and the previous target is kept.
- `on_button(msg)` toggles the gripper on a grey-button press, that is, a
  change from released to held:
  - When the gripper opens, it sends a grasp with width 0.08, speed 0.1,
    force 60.0 and epsilons 0.01.
  - When the gripper closes, it sends a move with width 0.0 and speed 0.1.
- `send_gripper_grasp(width)` and `send_gripper_move(width)` return the goal
  they sent. They return `None` when the client reports the server as
  unavailable.
- `GripperClient(action_name, send=None, is_ready=None)` wraps one action
  server.
  - `wait_for_server(timeout)` asks `is_ready`. Without `is_ready`, it
    reports the server as available whenever `send` is given.
  - `send_goal(goal)` raises `RuntimeError` when no `send` is attached.
  - Goals that were sent are recorded in `sent_goals`.
  - Clients created by default have no `send`, so no gripper goals go out.

### Behaviour common to both bridges

- `on_phantom_pose(msg)`:
  1. Maps the pose.
  2. Screens the step with `allowed_movement`.
  3. Clamps the result to the workspace.
  4. Publishes it to `publish_target` while the white button is held, and to
     `publish_visualisation` otherwise.
  5. Returns it.
- `on_robot_pose(msg)` remembers the arm's latest pose.
- Releasing the white button in `on_button` re-sends the last known arm pose,
  if there is one, to stop the arm. It also publishes zero feedback.
- `on_wrench(msg)` returns and publishes force feedback:
  - While the white button is held, the feedback is the wrench, scaled,
    remapped and clamped to 2 N per axis.
  - Otherwise the feedback is zero.

### `hapticbridge.sensor_filter`

- `IIRWrenchFilter(alpha, force_offset=None)` is a first-order smoother whose
  state starts at zero.
  - `update(wrench)` returns
    `alpha * (sample + offset) + (1 - alpha) * previous`. The offset applies
    to force only.
  - `reset()` zeroes the state. `state` holds the latest result.
  - `alpha` must lie in (0, 1]. Any other value raises `ValueError`.
- `SensorFilter(publish=None, alpha=0.05, offset_z=-7.448)` smooths a
  simulated sensor and removes the end-effector weight along z. Call it with
  `on_wrench(msg)`.
- `FrankaSensorFilter(publish=None, alpha=0.001)` smooths the
  `o_f_ext_hat_k` wrench of a `FrankaState`. Call it with
  `on_robot_state(state)`.
  - It needs at least six values and raises `ValueError` otherwise.
  - All three torque channels are fed from the x torque component.

Both filters keep the incoming header.

## What it does not do

The package has no transport, no node and no command-line program. It does
not subscribe to or publish on any topic by itself, and it does not talk to
action servers. Connecting the handlers to a running robot system is up to
the caller. The topic and action names the bridges are meant to use are
provided as module constants, for example `PHANTOM_POSE_TOPIC`,
`ROBOT_TARGET_TOPIC`, `MOVE_ACTION` and `GRASP_ACTION`. The package also has
no helper that reads the end-effector position out of `FrankaState.o_t_ee`.

## Testing

The test suite uses pytest, which is available through the `test` extra:

    pip install -e .[test]
    pytest