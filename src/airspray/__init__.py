"""
AirSpray
========

Pinch-to-spray particle painting driven by webcam hand tracking.

Modules:
    - capture: Camera frame acquisition
    - detection: MediaPipe hand landmarks and the latest-landmark slot
    - spray: Gesture interpretation, intensity mapping, particles, canvas
    - utils: Logging, performance monitoring, visualization
"""

__version__ = "1.0.0"
