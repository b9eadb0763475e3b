"""
Dashboard Configuration

Metric thresholds and status badges for the dashboard pages.
"""

from typing import Dict

# Metric Thresholds for Color Coding
# Format: [low_threshold, medium_threshold, high_threshold]
# Colors: blue (optimal) -> green (normal) -> yellow (warning) -> red (critical)
METRIC_THRESHOLDS = {
    'cpu_usage': [50, 70, 90],
    'memory_usage_percent': [60, 80, 90],
    'disk_usage_percent': [50, 70, 85],
}

# Badge styling per server status (mirrors the status overview cards)
SERVER_STATUS_BADGES: Dict[str, str] = {
    'online': 'badge-success',
    'maintenance': 'badge-warning',
    'offline': 'badge-destructive',
    'error': 'badge-destructive',
}

PROCESS_STATUS_BADGES: Dict[str, str] = {
    'running': 'badge-success',
}

# Dashboard cards
ACTIVITY_WINDOW_HOURS = 8
DEFAULT_RAM_TOTAL_GB = 16
DEFAULT_DISK_TOTAL_GB = 1000


def get_metric_status(metric_name: str, value: float) -> str:
    """
    Determine the status level of a metric based on configured thresholds.

    Args:
        metric_name: Name of the metric (e.g., 'cpu_usage')
        value: Metric value to evaluate

    Returns:
        Status string: 'low', 'normal', 'high', 'critical' or 'no_data'
    """
    if value is None or metric_name not in METRIC_THRESHOLDS:
        return 'no_data'

    low, medium, high = METRIC_THRESHOLDS[metric_name]
    if value < low:
        return 'low'
    elif value < medium:
        return 'normal'
    elif value < high:
        return 'high'
    return 'critical'


def server_status_badge(status: str) -> str:
    return SERVER_STATUS_BADGES.get(status, 'badge-outline')


def process_status_badge(status: str) -> str:
    return PROCESS_STATUS_BADGES.get(status, 'badge-destructive')

