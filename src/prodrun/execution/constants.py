"""
Timing constants for process supervision.
"""


class TimeoutConstants:
    """
    Centralized timeout configuration for the companion lifecycle.
    """
    # Companion liveness is polled at this granularity while stopping
    SHUTDOWN_POLL_INTERVAL = 1.0
    DEFAULT_MAX_SHUTDOWN_WAIT_SECONDS = 10

    # After a forced termination, survivors are killed outright
    TERMINATION_FORCE_TIMEOUT = 5.0

    # Log drain tasks finish once the pipes close
    DRAIN_JOIN_TIMEOUT = 5.0

    # Leftover processes are re-checked at this granularity, zombies included
    LEFTOVER_POLL_INTERVAL = 0.1
