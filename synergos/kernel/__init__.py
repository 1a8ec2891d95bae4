"""Kernel — the engine context object and its background control loop."""
