"""
touch-indicator: relay touch gestures over WebSocket and track them as an
on-screen marker.
"""

__version__ = "0.3.0"
