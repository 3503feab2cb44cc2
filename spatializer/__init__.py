"""Spatializer Panel - circular source positioning over OSC.

Tracks a fixed set of markers on a circle, converts their positions to
clockwise bearings and streams every change to an audio system via OSC.
"""

__version__ = "0.1.0"
