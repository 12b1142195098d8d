"""
world.py: Stores global variables for chanmodes.
"""

from collections import deque

__all__ = ['testing']

# This indicates whether we're running in tests mode. Test fixtures set this so that
# the log module doesn't attach file loggers from the configuration.
testing = False

# Defines messages to be logged as soon as the log system is set up, for modules like conf that are
# initialized before log. This is processed (and then not used again) when the log module loads.
_log_queue = deque()
