"""Haptic bilateral teleoperation: message types, pose mapping, force feedback, bridges and wrench filtering."""

__version__ = "0.1.0"