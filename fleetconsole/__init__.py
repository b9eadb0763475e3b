"""fleetconsole - server fleet administration dashboard."""

__version__ = "2.1.0"
