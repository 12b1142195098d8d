"""
membership.py - Tracks which users are in which channels, and the prefix modes they hold there.

State is stored per connection as channel name => nick => set of mode characters. Python dicts
keep insertion order, so channel and user listings come back in the order they were added.
"""

from . import structures, utils
from .classes import ModeParseError, RequestNameList
from .log import log
from .parser import parse_mode_change

__all__ = ['Membership']


class Membership():
    """
    Per-connection channel membership and prefix mode store.

    Every mutating method takes the connection object first and never touches another
    connection's data. Query methods never raise and return empty values for anything unknown.
    """

    def __init__(self, maps):
        self.maps = maps
        # Connection name => {channel => {nick => set of modes}}. Entries for a connection
        # are created on first write access.
        self._channels = structures.KeyedDefaultdict(lambda name: {})

    def __contains__(self, irc):
        return irc.name in self._channels

    def _get_channels(self, irc):
        return self._channels.get(irc.name, {})

    ### STATEKEEPING FUNCTIONS

    def join(self, irc, nick, channels):
        """Adds the user to each of the (comma separated) channels given."""
        chandata = self._channels[irc.name]
        for channel in channels.split(','):
            users = chandata.setdefault(channel, {})
            if nick not in users:
                log.debug('(%s) Adding user %s to channel %s', irc.name, nick, channel)
                users[nick] = set()

    def _remove_user(self, irc, channels, nick):
        """Removes mode data for a user in the given channels."""
        chandata = self._get_channels(irc)
        for channel in channels:
            users = chandata.get(channel)
            if users is None or nick not in users:
                continue
            log.debug('(%s) Removing user mode data for %s on %s', irc.name, nick, channel)
            del users[nick]

    def _remove_channels(self, irc, channels):
        chandata = self._get_channels(irc)
        for channel in channels:
            if chandata.pop(channel, None) is not None:
                log.debug('(%s) Deleting all modes for channel %s', irc.name, channel)

    def part(self, irc, nick, channels):
        """
        Removes the user from each of the (comma separated) channels given. If the user is us,
        the channels are dropped entirely.
        """
        if irc.name not in self._channels:
            return

        channels = channels.split(',')
        if nick == irc.nick:
            self._remove_channels(irc, channels)
        else:
            self._remove_user(irc, channels, nick)

    def kick(self, irc, channel, nick):
        """Removes a kicked user from the channel (or the whole channel, if the target is us)."""
        if irc.name not in self._channels:
            return

        if nick == irc.nick:
            self._remove_channels(irc, [channel])
        else:
            self._remove_user(irc, [channel], nick)

    def quit(self, irc, nick):
        """
        Removes a quitting user from all channels. If the user is us, all data for the
        connection is dropped.
        """
        if nick == irc.nick:
            self.forget(irc)
            return

        if irc.name not in self._channels:
            return

        self._remove_user(irc, list(self._channels[irc.name]), nick)

    def forget(self, irc):
        """Drops all membership data for the connection."""
        if self._channels.pop(irc.name, None) is not None:
            log.debug('(%s) Deleting all modes for connection', irc.name)

    def change_nick(self, irc, oldnick, newnick):
        """Moves a user's mode data over to their new nick in every channel."""
        for channel, users in self._get_channels(irc).items():
            if oldnick not in users:
                continue
            log.debug('(%s) Moving user mode data on %s from %s to %s', irc.name, channel,
                      oldnick, newnick)
            users[newnick] = users.pop(oldnick)

    def load_names(self, irc, channel, names):
        """
        Loads user and prefix mode data from a names reply (RPL_NAMREPLY), either on
        initial join or in response to a NAMES request.

        names may be a list with one name per item, or a single item containing all the
        names separated by spaces.
        """
        # <- :irc.example.net 353 ice = #test :ice @jlu5 %+foo
        prefixmap = self.maps.get_prefix_map(irc, debug=False)
        prefixes = ''.join(prefixmap)

        # The names should be in a single trailing param, but just in case...
        if isinstance(names, str):
            names = [names]
        if len(names) == 1:
            names = names[0].split(' ')

        users = self._channels[irc.name].setdefault(channel, {})
        for name in names:
            nick = name.lstrip(prefixes)
            nickprefixes = name[:len(name) - len(nick)]

            # Handle userhost-in-names where available.
            if '!' in nick:
                try:
                    nick = utils.split_hostmask(nick)[0]
                except ValueError:
                    log.debug('(%s) Failed to split hostmask %r from names reply on %s', irc.name,
                              name, channel)
                    continue

            if not nick:
                continue

            log.debug('(%s) Adding user %s to channel %s', irc.name, nick, channel)
            modes = users[nick] = set()

            for prefix in nickprefixes:
                mode = prefixmap[prefix]
                log.debug('(%s) Recording user mode %s for %s on %s', irc.name, mode, nick, channel)
                modes.add(mode)

    def change_modes(self, irc, channel, modes, params):
        """
        Applies a channel mode change to the prefix modes of the users it targets.

        Returns a list of outbound actions: if the change can't be parsed, our view of the
        channel is assumed to be stale, so it's dropped and a names list is requested to
        rebuild it.
        """
        try:
            changes = parse_mode_change(self.maps, irc, modes, params)
        except ModeParseError as e:
            log.warning('(%s) Could not parse mode change %r %r on %s (%s), refreshing prefixes',
                        irc.name, modes, params, channel, e)
            chandata = self._channels.get(irc.name)
            if chandata is not None:
                chandata.pop(channel, None)
            return [RequestNameList(channel)]

        for change in changes:
            if change.prefix is None:
                # Channel-wide setting; nothing to track here.
                continue

            if change.operation == '+':
                log.debug('(%s) Adding user mode %s (%s) to %s on %s', irc.name, change.mode,
                          change.prefix, change.param, channel)
                users = self._channels[irc.name].setdefault(channel, {})
                users.setdefault(change.param, set()).add(change.mode)
            elif change.operation == '-':
                log.debug('(%s) Removing user mode %s (%s) from %s on %s', irc.name, change.mode,
                          change.prefix, change.param, channel)
                users = self._get_channels(irc).get(channel, {})
                if change.param in users:
                    users[change.param].discard(change.mode)

        return []

    ### QUERY FUNCTIONS

    def _check_query_args(self, irc, caller, *args):
        """Returns whether all query arguments are strings, logging a warning if not."""
        if all(isinstance(arg, str) for arg in args):
            return True
        log.warning('(%s) %s: invalid argument(s) %r', irc.name, caller, args)
        return False

    def user_has_prefix_mode(self, irc, channel, nick, mode):
        """Returns whether a user has a particular prefix mode in a particular channel."""
        if not self._check_query_args(irc, 'user_has_prefix_mode', channel, nick, mode):
            return False
        return mode in self._get_channels(irc).get(channel, {}).get(nick, ())

    def get_user_prefix_modes(self, irc, channel, nick):
        """
        Returns the set of prefix modes for a user in a particular channel, or an empty set if
        the user has none (or isn't known).
        """
        if not self._check_query_args(irc, 'get_user_prefix_modes', channel, nick):
            return set()
        return set(self._get_channels(irc).get(channel, {}).get(nick, ()))

    def is_user_in_channel(self, irc, channel, nick):
        """Returns whether a user is in a particular channel."""
        if not self._check_query_args(irc, 'is_user_in_channel', channel, nick):
            return False
        return nick in self._get_channels(irc).get(channel, {})

    def get_channel_users(self, irc, channel):
        """Returns the list of users in a particular channel, in the order they were added."""
        if not self._check_query_args(irc, 'get_channel_users', channel):
            return []
        return list(self._get_channels(irc).get(channel, {}))

    def get_user_channels(self, irc, nick):
        """Returns the list of channels a particular user is in."""
        if not self._check_query_args(irc, 'get_user_channels', nick):
            return []
        return [channel for channel, users in self._get_channels(irc).items() if nick in users]
