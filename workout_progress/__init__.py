"""Workout progress engine: active sessions, PR detection and muscle XP."""
