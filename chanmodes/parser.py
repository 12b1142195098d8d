"""
parser.py - Channel mode change parser.

Splits a mode change string and its parameters (e.g. "+mv-k" "nick1 oldkey") into individual
ModeOperations, using the mode types learned for the connection to decide which modes
consume a parameter.
"""

from . import conf
from .classes import ModeKind, ModeOperation, ModeParseError, ParseFailure
from .log import log

__all__ = ['parse_mode_change']


def _log_debug_modes(*args, **kwargs):
    """
    Log debug info related to mode parsing if enabled.
    """
    if conf.conf['chanmodes'].get('log_mode_parsers'):
        log.debug(*args, **kwargs)

def _parse_list_request(maps, irc, modes):
    """
    Returns list request operations if every mode in the string is a list mode
    (e.g. "MODE #channel b" or "MODE #channel +bI"), or None otherwise.
    """
    chars = []
    for char in modes:
        if char != '+' and char not in chars:
            chars.append(char)

    if all(maps.get_mode_type(irc, char, debug=False) == ModeKind.LIST for char in chars):
        log.debug('(%s) parse_mode_change: input %r is a list request', irc.name, modes)
        return [ModeOperation(mode=char) for char in chars]
    return None

def parse_mode_change(maps, irc, modes, params=None):
    """
    Parses a channel mode change into a list of ModeOperations.

    maps: the ModeMaps instance to look up mode types and prefixes in
    modes: a mode string such as '+mvv-k'
    params: its parameters as a space separated string, e.g. 'User1 User2 OldKey' (optional)

    '+mv-k', 'User1 oldkey' => [ModeOperation('+', 'm', None, None),
                                ModeOperation('+', 'v', '+', 'User1'),
                                ModeOperation('-', 'k', None, 'oldkey')]

    Raises ModeParseError if the string can't be parsed; partial results are never returned.
    """
    if not isinstance(modes, str) or (params is not None and not isinstance(params, str)):
        raise ModeParseError(ParseFailure.INVALID_ARGUMENTS, modes, params)

    # Detect no-ops like a lone "+".
    if not modes.replace('+', '').replace('-', ''):
        return []

    if irc not in maps:
        log.debug('(%s) parse_mode_change: no mode maps found, using defaults', irc.name)

    # Repeated spaces shouldn't produce empty parameters.
    args = [arg for arg in params.split(' ') if arg] if params is not None else []

    # Special case: list request
    if not args and '-' not in modes:
        listmodes = _parse_list_request(maps, irc, modes)
        if listmodes is not None:
            return listmodes

    res = []
    operation = None
    for char in modes:
        if char in '+-':
            operation = char
            continue

        if not operation:
            raise ModeParseError(ParseFailure.NO_OPERATION, modes, params, char)

        modetype = maps.get_mode_type(irc, char, debug=False)
        _log_debug_modes('(%s) Current mode: %s%s (%s); args left: %s', irc.name, operation,
                         char, modetype, args)
        if modetype is None:
            raise ModeParseError(ParseFailure.UNKNOWN_MODE, modes, params, char)

        if modetype in (ModeKind.LIST, ModeKind.PARAM_ALWAYS):
            # Must have parameter.
            if not args:
                raise ModeParseError(ParseFailure.NOT_ENOUGH_PARAMS, modes, params, char)
            prefix = maps.get_prefix_from_mode(irc, char, debug=False)
            if prefix is not None:
                _log_debug_modes('(%s) Mode %s: This mode is a prefix mode (%s).', irc.name, char, prefix)
            res.append(ModeOperation(operation, char, prefix, args.pop(0)))

        elif modetype == ModeKind.PARAM_SETONLY:
            # Only has parameter when setting.
            if operation == '-':
                res.append(ModeOperation(operation, char))
            elif not args:
                raise ModeParseError(ParseFailure.NOT_ENOUGH_PARAMS, modes, params, char)
            else:
                res.append(ModeOperation(operation, char, param=args.pop(0)))

        elif modetype == ModeKind.NOPARAM:
            res.append(ModeOperation(operation, char))

        else:
            raise ModeParseError(ParseFailure.CORRUPTED_STORE, modes, params, char)

    if args:
        raise ModeParseError(ParseFailure.TOO_MANY_PARAMS, modes, params)

    return res
