"""
qfluency dashboard API.

Launch with: qfluency serve
Or programmatically: from qfluency.dashboard import launch; launch()
"""

from qfluency.dashboard.server import create_app, launch

__all__ = ["create_app", "launch"]
