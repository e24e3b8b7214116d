"""wsldisplay — locate a reachable X11 display on the virtualization host."""

__version__ = "0.3.0"
