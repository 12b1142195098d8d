"""
tracker.py - Channel mode tracker.

ChanModeTracker ties the mode maps, the mode change parser and the membership store together
behind a set of hook handlers. Host applications feed it already-split IRC events through
call_hooks() (or by calling the handle_* methods directly) and send whatever outbound actions
come back.

Hook handlers take the same arguments as every other hook: the connection object (anything
with name and nick attributes), the event source (usually a nick), the command name, and a
dict of parsed arguments.
"""

from . import conf
from .classes import ModeParseError
from .log import log
from .membership import Membership
from .modemaps import ModeMaps
from .parser import parse_mode_change

__all__ = ['ChanModeTracker']


class ChanModeTracker():
    """Monitors and provides access to channel mode information for any number of connections."""

    def __init__(self, config=None):
        """
        Accepts configuration (by default, the chanmodes: block of the loaded config).

        Supported keys:

        defaultmodetypes - optional replacement for the default mode type map
        defaultprefixes - optional replacement for the default prefix map

        Raises conf.ConfigurationError if either of these is invalid.
        """
        if config is None:
            config = conf.conf['chanmodes']

        self.maps = ModeMaps(config.get('defaultmodetypes'), config.get('defaultprefixes'))
        self.membership = Membership(self.maps)

        self.hooks = self.get_subscribed_events()

    def __repr__(self):
        return "<%s object tracking %s connection(s)>" % (self.__class__.__name__, len(self.maps._store))

    def get_subscribed_events(self):
        """Returns the mapping of hook (command) names to handler functions."""
        return {
            '005': self.handle_005,
            'ISUPPORT': self.handle_005,
            'MODE': self.handle_mode,
            'SENT_MODE': self.handle_mode,
            'JOIN': self.handle_join,
            'PART': self.handle_part,
            'KICK': self.handle_kick,
            'QUIT': self.handle_quit,
            'NICK': self.handle_nick,
            '353': self.handle_353,
            'NAMES': self.handle_353,
            'DISCONNECT': self.handle_disconnect,
        }

    def call_hooks(self, irc, hook_args):
        """
        Calls the handler for the given hook args ([source, command, args]), returning the list
        of outbound actions it produced.
        """
        source, command, parsed_args = hook_args
        hook_func = self.hooks.get(command.upper())
        if hook_func is None:
            return []

        log.debug('(%s) Raw hook data: [%r, %r, %r] (calling %s)', irc.name, source, command,
                  parsed_args, hook_func.__name__)
        try:
            return hook_func(irc, source, command, parsed_args) or []
        except Exception:
            # Bad hook data shouldn't take down the caller's read loop...
            log.exception('(%s) Unhandled exception caught in hook %r', irc.name, hook_func)
            log.error('(%s) The offending hook data was: %s', irc.name, hook_args)
            return []

    ### HOOK HANDLERS

    def handle_005(self, irc, source, command, args):
        """Handles 005 / RPL_ISUPPORT: generates the chanmode/prefix maps and enables NAMESX if supported."""
        tokens = args['tokens']
        if isinstance(tokens, str):
            tokens = tokens.split()
        return self.maps.process_capabilities(irc, tokens)

    def handle_mode(self, irc, source, command, args):
        """Handles sent and received MODE changes."""
        # <- :jlu5!~jlu5@127.0.0.1 MODE #dev +v ice
        # Disregard mode changes that are not applicable
        if not args.get('channel'):
            log.debug('(%s) Not a channel mode change, skipping', irc.name)
            return []
        if args.get('params') is None:
            log.debug('(%s) No trailing parameters, skipping', irc.name)
            return []

        return self.membership.change_modes(irc, args['channel'], args['modes'], args['params'])

    def handle_join(self, irc, source, command, args):
        """Handles JOINs."""
        # <- :jlu5|!~jlu5@127.0.0.1 JOIN #whatever
        self.membership.join(irc, source, args['channels'])

    def handle_part(self, irc, source, command, args):
        """Handles PARTs."""
        # <- :jlu5|!~jlu5@127.0.0.1 PART #whatever,#other
        self.membership.part(irc, source, args['channels'])

    def handle_kick(self, irc, source, command, args):
        """Handles KICKs."""
        # <- :jlu5!~jlu5@127.0.0.1 KICK #whatever jlu5| :xd
        self.membership.kick(irc, args['channel'], args['target'])

    def handle_quit(self, irc, source, command, args):
        """Handles QUITs."""
        self.membership.quit(irc, source)

    def handle_nick(self, irc, source, command, args):
        """Handles NICK changes."""
        # <- :jlu5|!~jlu5@127.0.0.1 NICK :jlu5_
        self.membership.change_nick(irc, source, args['newnick'])

    def handle_353(self, irc, source, command, args):
        """Handles 353 / RPL_NAMREPLY."""
        # <- :charybdis.midnight.vpn 353 ice = #test :ice @jlu5
        self.membership.load_names(irc, args['channel'], args['names'])

    def handle_disconnect(self, irc, source, command, args):
        """Drops everything known about a connection when it goes away."""
        self.membership.forget(irc)
        self.maps.forget(irc)

    ### MODE MAP ACCESS

    def get_channel_mode_type(self, irc, mode):
        """Returns the ModeKind of a channel mode as reported by the server, or None."""
        return self.maps.get_mode_type(irc, mode)

    def get_prefix_from_channel_mode(self, irc, mode):
        """Returns the prefix character for a channel mode as reported by the server, or None."""
        return self.maps.get_prefix_from_mode(irc, mode)

    def get_channel_mode_from_prefix(self, irc, prefix):
        """Returns the channel mode for a prefix character as reported by the server, or None."""
        return self.maps.get_mode_from_prefix(irc, prefix)

    def get_prefix_map(self, irc):
        """Returns the map of prefixes to modes for the connection."""
        return self.maps.get_prefix_map(irc)

    def parse_channel_mode_change(self, irc, modes, params=None):
        """
        Splits a mode change string into ModeOperations, according to the mode types reported
        by the server. Returns an empty list (and logs why) if the change can't be parsed.
        """
        try:
            return parse_mode_change(self.maps, irc, modes, params)
        except ModeParseError as e:
            log.warning('(%s) parse_channel_mode_change: %s (modes=%r, params=%r)', irc.name, e,
                        modes, params)
            return []

    ### QUERIES

    def user_has_prefix_mode(self, irc, channel, nick, mode):
        """Returns whether a user has a particular prefix mode in a particular channel."""
        return self.membership.user_has_prefix_mode(irc, channel, nick, mode)

    def get_user_prefix_modes(self, irc, channel, nick):
        """Returns the set of prefix modes a user holds in a particular channel."""
        return self.membership.get_user_prefix_modes(irc, channel, nick)

    def is_user_in_channel(self, irc, channel, nick):
        """Returns whether a user is in a particular channel."""
        return self.membership.is_user_in_channel(irc, channel, nick)

    def get_channel_users(self, irc, channel):
        """Returns the list of users in a particular channel."""
        return self.membership.get_channel_users(irc, channel)

    def get_user_channels(self, irc, nick):
        """Returns the list of channels a user is in."""
        return self.membership.get_user_channels(irc, nick)
