"""
utils.py - chanmodes utilities module.

This module contains various utility functions related to parsing server capability
announcements and merging channel mode maps.
"""
import re

from .classes import ModeKind

__all__ = ['is_char', 'parse_isupport_chanmodes', 'parse_isupport_prefixes',
           'merge_mode_maps', 'split_hostmask']

# CHANMODES groups, in the order they're sent by the server.
CHANMODE_GROUPS = (ModeKind.LIST, ModeKind.PARAM_ALWAYS, ModeKind.PARAM_SETONLY, ModeKind.NOPARAM)

_PREFIX_RE = re.compile(r'^\((\S+)\)(\S+)$')

def is_char(obj):
    """Returns whether the given object is a string of exactly one character."""
    return isinstance(obj, str) and len(obj) == 1

def parse_isupport_chanmodes(value):
    """
    Separates a CHANMODES field like "beI,k,l,imnpst" into a dict mapping mode characters to
    ModeKinds. Returns None if the field doesn't have exactly four groups.
    """
    groups = value.split(',')
    if len(groups) != len(CHANMODE_GROUPS):
        return None

    modetypes = {}
    for kind, letters in zip(CHANMODE_GROUPS, groups):
        for letter in letters:
            modetypes[letter] = kind
    return modetypes

def parse_isupport_prefixes(value):
    """
    Separates prefixes field like "(qaohv)~&@%+" into a dict mapping prefixes to mode characters.
    Returns None if the field is malformed (including when the lengths of both halves differ).
    """
    prefixsearch = _PREFIX_RE.search(value)
    if not prefixsearch:
        return None

    letters, symbols = prefixsearch.group(1), prefixsearch.group(2)
    if len(letters) != len(symbols):
        return None
    return dict(zip(symbols, letters))

def merge_mode_maps(learned, candidate):
    """
    Merges a newly announced mode map (candidate) into an already learned one, returning a new dict.

    Entries already present in learned take precedence; letters only present in candidate are
    added. Neither input is modified, and either may be None.
    """
    merged = dict(candidate or {})
    merged.update(learned or {})
    return merged

def split_hostmask(mask):
    """
    Returns a nick!user@host hostmask split into three fields: nick, user, and host.
    """
    nick, identhost = mask.split('!', 1)
    ident, host = identhost.split('@', 1)
    if not all({nick, ident, host}):
        raise ValueError("Invalid user@host %r" % mask)
    return [nick, ident, host]
