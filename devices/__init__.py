"""
Devices module - device licenses and their lifecycle.

This module handles:
- Device entity and license status transitions
- License lifecycle sweep (warning, expiry, grace, suspension)
- Bulk renew, co-term and grace token operations
- Dashboard and device reporting queries
"""
