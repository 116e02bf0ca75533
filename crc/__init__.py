"""
Circuit Request Controller
===========================
Drives logistics-group request quantities from circuit signals.

Each group is controlled by at most one controller. Every cycle,
the controller's red and green channel readings become per-item
minimum / maximum requests, which are pushed to an optional
downstream request sink.
"""

__version__ = "1.0.0"
