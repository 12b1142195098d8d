"""
modemaps.py - Learns and resolves channel mode type and prefix maps.

Servers announce which channel modes they support (RPL_ISUPPORT CHANMODES=) and which of them
show up as nick prefixes in names replies (RPL_ISUPPORT PREFIX=). This module caches those
announcements per connection and answers lookups against them, falling back to a set of
defaults when a connection hasn't announced anything yet.
"""

from . import conf, structures, utils
from .classes import ModeKind, RequestProtocolExtension
from .log import log

__all__ = ['DEFAULT_MODE_TYPES', 'DEFAULT_PREFIXES', 'ConnectionMaps', 'ModeMaps']

DEFAULT_MODE_TYPES = {
    'b': ModeKind.LIST,  # ban
    'e': ModeKind.LIST,  # exempt
    'I': ModeKind.LIST,  # invex
    'k': ModeKind.PARAM_ALWAYS,  # channel key
    'l': ModeKind.PARAM_SETONLY,  # channel limit
    'i': ModeKind.NOPARAM,  # invite-only
    'm': ModeKind.NOPARAM,  # moderated
    'n': ModeKind.NOPARAM,  # no external privmsgs
    'p': ModeKind.NOPARAM,  # private
    's': ModeKind.NOPARAM,  # secret
    't': ModeKind.NOPARAM,  # topic lock
}

DEFAULT_PREFIXES = {
    '@': 'o',  # op
    '%': 'h',  # halfop
    '+': 'v',  # voice
}

# Capability tokens that enable extended names replies. Both are requested via PROTOCTL.
EXTENDED_NAMES_TOKENS = ('NAMESX', 'UHNAMES')


class ConnectionMaps():
    """Mode type and prefix maps learned for a single connection."""

    def __init__(self, name):
        self.name = name
        # These stay None until the server announces them.
        self.modes = None
        self.prefixes = None

    def __repr__(self):
        return "<%s for %r: modes=%s prefixes=%s>" % (self.__class__.__name__, self.name,
                                                      self.modes, self.prefixes)


class ModeMaps():
    """
    Stores default and per-connection channel mode maps.

    Connections are identified by their name attribute; all lookups take the connection
    object itself.
    """

    def __init__(self, default_modes=None, default_prefixes=None):
        if default_modes is not None:
            default_modes = conf.validate_mode_types(default_modes)
        else:
            default_modes = DEFAULT_MODE_TYPES.copy()

        if default_prefixes is not None:
            default_prefixes = conf.validate_prefixes(default_prefixes)
        else:
            default_prefixes = DEFAULT_PREFIXES.copy()

        # Prefix modes always take a parameter: the nick they're being set on.
        for mode in default_prefixes.values():
            default_modes[mode] = ModeKind.PARAM_ALWAYS

        self.default_modes = default_modes
        self.default_prefixes = default_prefixes

        # Connection name => ConnectionMaps, created when the first 005 arrives.
        self._store = structures.KeyedDefaultdict(ConnectionMaps)

    def __contains__(self, irc):
        return irc.name in self._store

    def get_connection_maps(self, irc):
        """Returns the ConnectionMaps learned for the connection, or None."""
        return self._store.get(irc.name)

    def forget(self, irc):
        """Drops all maps learned for the connection."""
        if self._store.pop(irc.name, None) is not None:
            log.debug('(%s) Forgetting learned mode maps', irc.name)

    def _get_modes(self, irc, caller, debug=True):
        maps = self._store.get(irc.name)
        if maps is not None and maps.modes is not None:
            return maps.modes

        if debug:
            log.debug('(%s) %s: no mode map found, using default', irc.name, caller)
        return self.default_modes

    def get_prefix_map(self, irc, debug=True, caller='get_prefix_map'):
        """
        Returns the map of prefixes to modes for the connection (or the default map if the
        server hasn't sent one yet).
        """
        maps = self._store.get(irc.name)
        if maps is not None and maps.prefixes is not None:
            return maps.prefixes

        if debug:
            log.debug('(%s) %s: no prefix map found, using default', irc.name, caller)
        return self.default_prefixes

    def get_mode_type(self, irc, mode, debug=True):
        """
        Returns the ModeKind of the given channel mode character as reported by the server,
        or None if the mode is unknown.
        """
        if not utils.is_char(mode):
            log.warning('(%s) get_mode_type: invalid argument %r', irc.name, mode)
            return None

        return self._get_modes(irc, 'get_mode_type', debug=debug).get(mode)

    def get_prefix_from_mode(self, irc, mode, debug=True):
        """
        Returns the prefix character corresponding to the given channel mode (e.g. 'o' => '@'),
        or None if the mode isn't a prefix mode.
        """
        if not utils.is_char(mode):
            log.warning('(%s) get_prefix_from_mode: invalid argument %r', irc.name, mode)
            return None

        for prefix, prefixmode in self.get_prefix_map(irc, debug=debug, caller='get_prefix_from_mode').items():
            if prefixmode == mode:
                return prefix
        return None

    def get_mode_from_prefix(self, irc, prefix, debug=True):
        """
        Returns the channel mode corresponding to the given prefix character (e.g. '@' => 'o'),
        or None if the prefix is unknown.
        """
        if not utils.is_char(prefix):
            log.warning('(%s) get_mode_from_prefix: invalid argument %r', irc.name, prefix)
            return None

        return self.get_prefix_map(irc, debug=debug, caller='get_mode_from_prefix').get(prefix)

    def process_capabilities(self, irc, tokens):
        """
        Updates the connection's maps from a list of RPL_ISUPPORT tokens, returning a list of
        outbound actions (protocol extensions to enable).
        """
        # <- :irc.example.net 005 nick CHANMODES=beI,k,l,imnpst PREFIX=(qaohv)~&@%+ NAMESX :are supported by this server
        maps = self._store[irc.name]
        actions = []

        for token in tokens:
            key, sep, value = token.partition('=')

            if not sep and key in EXTENDED_NAMES_TOKENS:
                log.debug('(%s) process_capabilities: requesting %s', irc.name, key)
                actions.append(RequestProtocolExtension(key))

            elif key == 'CHANMODES' and sep:
                modetypes = utils.parse_isupport_chanmodes(value)
                if modetypes is None:
                    log.debug('(%s) process_capabilities: ignoring malformed %r', irc.name, token)
                    continue

                log.debug('(%s) Parsing chanmode types from RPL_ISUPPORT', irc.name)
                maps.modes = utils.merge_mode_maps(maps.modes, modetypes)

            elif key == 'PREFIX' and sep:
                prefixes = utils.parse_isupport_prefixes(value)
                if prefixes is None:
                    log.debug('(%s) process_capabilities: ignoring malformed %r', irc.name, token)
                    continue

                log.debug('(%s) Parsing prefixes from RPL_ISUPPORT', irc.name)
                maps.prefixes = prefixes
                modetypes = dict.fromkeys(prefixes.values(), ModeKind.PARAM_ALWAYS)
                maps.modes = utils.merge_mode_maps(maps.modes, modetypes)

        log.debug('(%s) process_capabilities: maps are now %s', irc.name, maps)
        return actions
