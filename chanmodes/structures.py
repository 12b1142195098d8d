"""
structures.py - chanmodes data structures module.

This module contains custom data structures that may be useful in various situations.
"""

import collections

__all__ = ['KeyedDefaultdict']


class KeyedDefaultdict(collections.defaultdict):
    """
    Subclass of defaultdict allowing the key to be passed to the default factory.

    Per-connection state uses this so that an entry is created on first write access
    (d[name]), while read-only lookups can use d.get(name) without creating anything.
    """
    def __missing__(self, key):
        if self.default_factory is None:
            # If there is no default factory, just let defaultdict handle it
            return super().__missing__(key)
        else:
            value = self[key] = self.default_factory(key)
            return value
