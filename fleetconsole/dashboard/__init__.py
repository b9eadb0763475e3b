"""
fleetconsole Dashboard Module

Page data preparation for the dashboard, file manager, process manager and
console pages. All logic lives in plain Python for easy testing.
"""

from .controller import DashboardController

__all__ = ["DashboardController"]
