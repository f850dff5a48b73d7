"""
Bounded persistent buffer for telemetry events.
"""
