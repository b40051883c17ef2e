"""Documented models parsed and imported by the test suite."""
