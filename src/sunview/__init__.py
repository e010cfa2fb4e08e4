"""SunView.

A custom-drawn widget that shows the progress of the sun along a stylised arc
over a horizon line, with optional start, end and floating labels.
"""

__version__ = "1.0.0"
__author__ = "SunView Project"
