"""
Booking kernel domain layer.

Pure value objects shared by engines and services: catalog records, policy
inputs and decisions, the booking aggregate, workflow definitions and the
injectable clock.  Nothing in this package performs I/O.
"""
