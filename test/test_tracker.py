"""
Test cases for the tracker's hook handlers and query API (tracker.py).
"""
import unittest
import unittest.mock

from chanmodes import conf
from chanmodes.classes import ModeKind, RequestNameList, RequestProtocolExtension
from chanmodes.tracker import ChanModeTracker

import tracker_test_fixture as ttf

class TrackerTest(ttf.BaseTrackerTest):

    def _hook(self, source, command, args, irc=None):
        return self.tracker.call_hooks(irc or self.irc, [source, command, args])

    def test_get_subscribed_events(self):
        events = self.tracker.get_subscribed_events()
        self.assertIsInstance(events, dict)
        for command in ('005', 'MODE', 'JOIN', 'PART', 'KICK', 'QUIT', 'NICK', '353', 'DISCONNECT'):
            self.assertIn(command, events)
            self.assertTrue(callable(events[command]))

    def test_default_config(self):
        with unittest.mock.patch.dict(conf.conf, {'chanmodes': {'defaultprefixes': {'~': 'q'}}}):
            tracker = ChanModeTracker()
        self.assertEqual(tracker.get_prefix_map(self.irc), {'~': 'q'})
        self.assertEqual(tracker.get_channel_mode_type(self.irc, 'q'), ModeKind.PARAM_ALWAYS)

    def test_invalid_config(self):
        with self.assertRaises(conf.ConfigurationError):
            ChanModeTracker({'defaultmodetypes': 'ab'})
        with self.assertRaises(conf.ConfigurationError):
            ChanModeTracker({'defaultprefixes': {'@': 'ov'}})

    def test_unknown_hook(self):
        self.assertEqual(self._hook('irc.example.net', 'PRIVMSG', {'target': '#channel', 'text': 'hi'}), [])

    def test_hook_exception(self):
        with self.assertLogs('chanmodes', 'ERROR') as cm:
            # KICK without a target
            self.assertEqual(self._hook('user1', 'KICK', {'channel': '#channel'}), [])
        output = '\n'.join(cm.output)
        self.assertIn('Unhandled exception caught in hook', output)
        self.assertIn('The offending hook data was', output)

    def test_005(self):
        # <- :irc.example.net 005 BotNick CHANMODES=beI,k,l,imnpst PREFIX=(qaohv)~&@%+ NAMESX UHNAMES :are supported by this server
        actions = self._hook('irc.example.net', '005', {'tokens': 'CHANMODES=beI,k,l,imnpst '
                                                                  'PREFIX=(qaohv)~&@%+ NAMESX UHNAMES'})
        self.assertEqual(actions, [RequestProtocolExtension('NAMESX'), RequestProtocolExtension('UHNAMES')])
        self.assertEqual([action.to_raw() for action in actions], ['PROTOCTL NAMESX', 'PROTOCTL UHNAMES'])

        self.assertEqual(self.tracker.get_prefix_map(self.irc), {'~': 'q', '&': 'a', '@': 'o', '%': 'h', '+': 'v'})
        self.assertEqual(self.tracker.get_channel_mode_type(self.irc, 'a'), ModeKind.PARAM_ALWAYS)
        self.assertEqual(self.tracker.get_prefix_from_channel_mode(self.irc, 'q'), '~')
        self.assertEqual(self.tracker.get_channel_mode_from_prefix(self.irc, '&'), 'a')

        # The other connection still uses the defaults.
        self.assertIsNone(self.tracker.get_channel_mode_from_prefix(self.otherirc, '~'))

    def test_005_token_list(self):
        self.assertEqual(self._hook('irc.example.net', 'ISUPPORT', {'tokens': ['CHANMODES=ab,,c,d', 'PREFIX=(ef)!%']}), [])
        self.assertEqual(self.tracker.get_channel_mode_type(self.irc, 'c'), ModeKind.PARAM_SETONLY)
        self.assertEqual(self.tracker.get_channel_mode_from_prefix(self.irc, '!'), 'e')

    def test_defaults_without_learned_maps(self):
        for mode in 'beIklimnpstohvz':
            self.assertEqual(self.tracker.get_channel_mode_type(self.irc, mode),
                             self.tracker.maps.default_modes.get(mode))
            self.assertEqual(self.tracker.get_prefix_from_channel_mode(self.irc, mode),
                             {'o': '@', 'h': '%', 'v': '+'}.get(mode))
        for prefix in '@%+*':
            self.assertEqual(self.tracker.get_channel_mode_from_prefix(self.irc, prefix),
                             self.tracker.maps.default_prefixes.get(prefix))

    def test_join_part_kick_quit(self):
        self._hook('user1', 'JOIN', {'channels': '#channel'})
        self._hook('user2', 'JOIN', {'channels': '#channel,#other'})
        self._hook('user3', 'JOIN', {'channels': '#channel'})
        self.assertEqual(self.tracker.get_channel_users(self.irc, '#channel'), ['user1', 'user2', 'user3'])

        self._hook('user1', 'PART', {'channels': '#channel'})
        self.assertFalse(self.tracker.is_user_in_channel(self.irc, '#channel', 'user1'))

        self._hook('user2', 'KICK', {'channel': '#channel', 'target': 'user3'})
        self.assertEqual(self.tracker.get_channel_users(self.irc, '#channel'), ['user2'])

        self._hook('user2', 'QUIT', {'text': 'Bye'})
        self.assertEqual(self.tracker.get_user_channels(self.irc, 'user2'), [])
        self.assertEqual(self.tracker.get_channel_users(self.irc, '#other'), [])

    def test_nick(self):
        self._prepopulate()
        self._hook('user1', 'NICK', {'newnick': 'user7'})
        self.assertEqual(self.tracker.get_user_prefix_modes(self.irc, '#channel1', 'user7'), {'e', 'f'})
        self.assertEqual(self.tracker.get_user_prefix_modes(self.irc, '#channel2', 'user7'), {'f'})
        self.assertEqual(self.tracker.get_user_channels(self.irc, 'user1'), [])

    def test_names(self):
        self._load_dummy_maps()
        # <- :irc.example.net 353 BotNick = #c :%u1 &u2 u3
        self.assertEqual(self._hook('irc.example.net', '353', {'channel': '#c', 'names': ['%u1', '&u2', 'u3']}), [])
        self.assertEqual(self.tracker.get_user_prefix_modes(self.irc, '#c', 'u1'), {'e'})
        self.assertEqual(self.tracker.get_user_prefix_modes(self.irc, '#c', 'u2'), {'f'})
        self.assertEqual(self.tracker.get_channel_users(self.irc, '#c'), ['u1', 'u2', 'u3'])

    def test_mode(self):
        self._hook('user1', 'JOIN', {'channels': '#channel'})
        self._hook('user2', 'JOIN', {'channels': '#channel'})

        # <- :user1!~user1@127.0.0.1 MODE #channel +ov-k user1 user2 oldkey
        self.assertEqual(self._hook('user1', 'MODE', {'channel': '#channel', 'modes': '+ov-k',
                                                      'params': 'user1 user2 oldkey'}), [])
        self.assertTrue(self.tracker.user_has_prefix_mode(self.irc, '#channel', 'user1', 'o'))
        self.assertTrue(self.tracker.user_has_prefix_mode(self.irc, '#channel', 'user2', 'v'))

        self._hook(self.botnick, 'SENT_MODE', {'channel': '#channel', 'modes': '-o', 'params': 'user1'})
        self.assertFalse(self.tracker.user_has_prefix_mode(self.irc, '#channel', 'user1', 'o'))

    def test_mode_not_applicable(self):
        self._hook('user1', 'JOIN', {'channels': '#channel'})
        # User mode changes and changes without trailing params are skipped outright.
        self.assertEqual(self._hook('user1', 'MODE', {'modes': '+i', 'params': ''}), [])
        self.assertEqual(self._hook('user1', 'MODE', {'channel': '#channel', 'modes': '+z'}), [])
        self.assertEqual(self.tracker.get_channel_users(self.irc, '#channel'), ['user1'])

    def test_mode_resync(self):
        self._prepopulate()
        actions = self._hook('user1', 'MODE', {'channel': '#channel1', 'modes': '+z', 'params': 'nonsense'})
        self.assertEqual(actions, [RequestNameList('#channel1')])
        self.assertEqual(self.tracker.get_channel_users(self.irc, '#channel1'), [])

        # Resync via the names reply the caller asked for.
        self._hook('irc.example.net', 'NAMES', {'channel': '#channel1', 'names': '&%user1 user2'})
        self.assertEqual(self.tracker.get_user_prefix_modes(self.irc, '#channel1', 'user1'), {'e', 'f'})

    def test_self_quit(self):
        self._prepopulate()
        self._hook(self.botnick, 'QUIT', {})
        for channel in ('#channel1', '#channel2', '#channel3'):
            self.assertEqual(self.tracker.get_channel_users(self.irc, channel), [])
        self.assertFalse(self.tracker.is_user_in_channel(self.irc, '#channel1', 'user1'))

        # Learned maps survive a quit; the server still announced them.
        self.assertEqual(self.tracker.get_prefix_map(self.irc), ttf.DUMMY_PREFIXES)

    def test_disconnect(self):
        self._prepopulate()
        self._hook('irc.example.net', 'DISCONNECT', {})
        self.assertNotIn(self.irc, self.tracker.membership)
        self.assertNotIn(self.irc, self.tracker.maps)
        self.assertEqual(self.tracker.get_prefix_map(self.irc), {'@': 'o', '%': 'h', '+': 'v'})

    def test_parse_channel_mode_change(self):
        self._load_dummy_maps()
        self.assertEqual([str(op) for op in self.tracker.parse_channel_mode_change(self.irc, '+ai-ceg', 'param1 param2 user3')],
                         ['+a param1', '+i', '-c param2', '-e user3', '-g'])

    def test_connections_are_isolated(self):
        self._prepopulate()
        self._hook('user1', 'JOIN', {'channels': '#channel1'}, irc=self.otherirc)
        self._hook('user1', 'QUIT', {}, irc=self.otherirc)
        self.assertTrue(self.tracker.user_has_prefix_mode(self.irc, '#channel1', 'user1', 'e'))
        self.assertEqual(self.tracker.get_channel_users(self.otherirc, '#channel1'), [])

if __name__ == '__main__':
    unittest.main()
