"""
Booking Kernel - corporate service booking core.

A policy-gated booking lifecycle with:
- Pure, deterministic policy evaluation
- Single-owner booking aggregate with an explicit transition table
- Append-only timeline
- Pull-based SLA monitoring with injected time
- Immutable point-in-time receipts
"""

__version__ = "0.1.0"
