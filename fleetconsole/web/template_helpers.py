#!/usr/bin/env python3
"""
Template Helpers for fleetconsole pages
"""

import time


def format_datetime(timestamp):
    """Format timestamp as full datetime string."""
    if not timestamp:
        return ""
    try:
        return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(timestamp))
    except (TypeError, ValueError, OverflowError):
        return str(timestamp)


def format_date(timestamp):
    """Format timestamp as date only (file manager 'Modified' column)."""
    if not timestamp:
        return "-"
    try:
        return time.strftime("%Y-%m-%d", time.localtime(timestamp))
    except (TypeError, ValueError, OverflowError):
        return str(timestamp)


def format_bytes(bytes_value):
    """Format bytes value with appropriate unit."""
    if not bytes_value:
        return "0 B"
    try:
        bytes_val = float(bytes_value)
    except (TypeError, ValueError):
        return str(bytes_value)
    if bytes_val < 1024:
        return f"{bytes_val:.0f} B"
    elif bytes_val < 1024**2:
        return f"{bytes_val/1024:.1f} KB"
    elif bytes_val < 1024**3:
        return f"{bytes_val/(1024**2):.1f} MB"
    return f"{bytes_val/(1024**3):.1f} GB"


def setup_template_filters(templates):
    """Setup all template filters in Jinja2 environment."""
    templates.env.filters['format_datetime'] = format_datetime
    templates.env.filters['format_date'] = format_date
