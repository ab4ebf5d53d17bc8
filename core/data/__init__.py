"""
core/data - Data Services Layer

Modules:
    - ip_ranges: AWS public IP ranges (cache + filters)

Usage:
    from core.data.ip_ranges import load_ip_ranges, apply_filters
"""
