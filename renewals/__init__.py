"""
Renewals module - renewal request workflow.

This module handles:
- RenewalRequest entity and its status machine
- Request creation, reseller quoting, approval and rejection
- Quote document access
"""
