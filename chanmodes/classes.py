"""
classes.py - Base classes for chanmodes.

This module contains the small value types shared by the rest of the package: channel mode
kinds, parsed mode operations, parse failures, connection identities, and the outbound actions
that event handlers hand back to their caller.
"""

import collections
import enum

__all__ = ['ModeKind', 'ModeOperation', 'ParseFailure', 'ModeParseError', 'Connection',
           'Action', 'RequestNameList', 'RequestProtocolExtension']


class ModeKind(enum.IntEnum):
    """
    Describes how a channel mode letter consumes parameters, following the four
    CHANMODES groups of RPL_ISUPPORT (http://www.irc.org/tech_docs/005.html):

    LIST = Mode that adds or removes a nick or address to a list. Always has a parameter.
    PARAM_ALWAYS = Mode that changes a setting and always has a parameter.
    PARAM_SETONLY = Mode that changes a setting and only has a parameter when set.
    NOPARAM = Mode that changes a setting and never has a parameter.
    """
    LIST = 1
    PARAM_ALWAYS = 2
    PARAM_SETONLY = 3
    NOPARAM = 4

    @classmethod
    def from_value(cls, value):
        """
        Coerces a configuration value (a ModeKind, its integer value, or its case-insensitive
        name such as "param_always") into a ModeKind. Raises ValueError if this isn't possible.
        """
        # bool is an int subclass, but True/False in a YAML map are almost certainly typos.
        if isinstance(value, bool):
            raise ValueError("Invalid mode kind %r" % value)
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError("Invalid mode kind %r" % value) from None
        raise ValueError("Invalid mode kind %r" % value)


class ModeOperation(collections.namedtuple('ModeOperation', 'operation mode prefix param')):
    """
    A single parsed mode change: +/- operation, mode character, prefix character (only for
    prefix modes such as +o), and the parameter consumed (if any).

    List requests (e.g. a bare "MODE #channel b") only carry the mode character.
    """
    __slots__ = ()

    def __new__(cls, operation=None, mode=None, prefix=None, param=None):
        return super().__new__(cls, operation, mode, prefix, param)

    @property
    def is_list_query(self):
        return self.operation is None

    def __str__(self):
        if self.is_list_query:
            return self.mode
        text = self.operation + self.mode
        if self.param is not None:
            text += ' ' + self.param
        return text


class ParseFailure(enum.Enum):
    """Reasons a mode change string may fail to parse."""
    INVALID_ARGUMENTS = 'invalid arguments'
    NO_OPERATION = 'no operation found'
    UNKNOWN_MODE = 'chanmode %s not recognised'
    NOT_ENOUGH_PARAMS = 'not enough params'
    TOO_MANY_PARAMS = 'too many params'
    CORRUPTED_STORE = 'corrupted mode store'


class ModeParseError(ValueError):
    """
    Exception raised when a mode change string can't be parsed. Any partial results are
    discarded by the parser before this is raised.
    """
    def __init__(self, reason, modes=None, params=None, mode=None):
        self.reason = reason
        self.modes = modes
        self.params = params
        self.mode = mode
        super().__init__(self.describe())

    def describe(self):
        """Returns the human-readable failure reason."""
        if self.reason is ParseFailure.UNKNOWN_MODE:
            return self.reason.value % self.mode
        return self.reason.value


class Connection():
    """
    Identifies a single tracked IRC connection.

    name is the stable key all per-connection state is stored under; nick is our own current
    nickname on that connection, which is used to tell our own PARTs, KICKs and QUITs apart
    from everyone else's.
    """
    def __init__(self, name, nick):
        self.name = name
        self.nick = nick

    def __repr__(self):
        return "<%s object for network %r as %r>" % (self.__class__.__name__, self.name, self.nick)


class Action():
    """Base class for outbound actions requested by the tracker."""
    command = None

    def __init__(self, target):
        self.target = target

    def to_raw(self):
        """Returns the raw IRC line (without trailing newline) for this action."""
        return '%s %s' % (self.command, self.target)

    def __eq__(self, other):
        return type(self) is type(other) and self.target == other.target

    def __hash__(self):
        return hash((type(self), self.target))

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.target)


class RequestNameList(Action):
    """Asks the server to resend the names list for a channel (a resync)."""
    command = 'NAMES'

    @property
    def channel(self):
        return self.target


class RequestProtocolExtension(Action):
    """Asks the server to enable a protocol extension such as NAMESX."""
    command = 'PROTOCTL'

    @property
    def name(self):
        return self.target
