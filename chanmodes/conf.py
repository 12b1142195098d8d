"""
conf.py - chanmodes configuration core.

This module is used to access the configuration of the current chanmodes instance.
It provides simple checks for validating and loading YAML-format configurations from arbitrary files,
including the default channel mode type and prefix maps used before a server announces its own.
"""

try:
    import yaml
except ImportError:
    raise ImportError("chanmodes requires PyYAML to function; please install it and try again.")

import logging
import os.path
import sys

from . import utils, world
from .classes import ModeKind

__all__ = ['ConfigurationError', 'conf', 'confname', 'validate', 'validate_mode_types',
           'validate_prefixes', 'load_conf']


class ConfigurationError(RuntimeError):
    """Error when config conditions aren't met."""

conf = {'chanmodes':
                {
                    'log_mode_parsers': False,
                },
        'logging':
                {
                    'console': 'INFO'
                },
        }
confname = 'unconfigured'

def validate(condition, errmsg):
    """Raises ConfigurationError with errmsg unless the given condition is met."""
    if not condition:
        raise ConfigurationError(errmsg)

def _log(level, text, *args, logger=None, **kwargs):
    if logger:
        logger.log(level, text, *args, **kwargs)
    else:
        world._log_queue.append((level, text))

def validate_mode_types(modetypes):
    """
    Validates a default mode type map (mode characters mapping to mode kinds), returning a
    normalized copy with ModeKind values.
    """
    validate(isinstance(modetypes, dict),
             'Configuration option "defaultmodetypes" must be of type "dict"')

    result = {}
    for mode, kind in modetypes.items():
        validate(utils.is_char(mode), 'The default mode type map provided is invalid')
        try:
            result[mode] = ModeKind.from_value(kind)
        except ValueError:
            raise ConfigurationError('The default mode type map provided is invalid') from None
    return result

def validate_prefixes(prefixes):
    """
    Validates a default prefix map (prefix characters mapping to mode characters), returning
    a copy of it.
    """
    validate(isinstance(prefixes, dict),
             'Configuration option "defaultprefixes" must be of type "dict"')

    for prefix, mode in prefixes.items():
        validate(utils.is_char(prefix) and utils.is_char(mode), 'The default prefix map provided is invalid')
    return dict(prefixes)

def _validate_conf(conf, logger=None):
    """Validates a parsed configuration dict."""
    validate(isinstance(conf, dict),
            "Invalid configuration given: should be type dict, not %s."
            % type(conf).__name__)

    # Both sections are optional; fill in the defaults where they're missing.
    conf.setdefault('chanmodes', {})
    conf.setdefault('logging', {'console': 'INFO'})

    for section in ('chanmodes', 'logging'):
        validate(isinstance(conf[section], dict), "Invalid %r section in config." % section)

    if 'defaultmodetypes' in conf['chanmodes']:
        conf['chanmodes']['defaultmodetypes'] = validate_mode_types(conf['chanmodes']['defaultmodetypes'])
    if 'defaultprefixes' in conf['chanmodes']:
        conf['chanmodes']['defaultprefixes'] = validate_prefixes(conf['chanmodes']['defaultprefixes'])

    prefixmodes = list(conf['chanmodes'].get('defaultprefixes', {}).values())
    if len(set(prefixmodes)) != len(prefixmodes):
        _log(logging.WARNING, 'The default prefix map assigns more than one prefix to the same '
                              'mode; only the first of them will be used when looking up prefixes '
                              'by mode.', logger=logger)

    return conf

def load_conf(filename, errors_fatal=True, logger=None):
    """Loads a chanmodes configuration file from the filename given."""
    global confname, conf
    # For the internal config name, strip off any .yml extensions and absolute paths
    confname = os.path.splitext(os.path.basename(filename))[0]
    try:
        with open(filename, 'r') as f:
            newconf = yaml.safe_load(f)
            conf = _validate_conf(newconf, logger=logger)
    except Exception as e:
        e = 'Failed to load config from %r: %s: %s' % (filename, type(e).__name__, e)

        if logger:  # Prefer using the Python logger when available
            logger.exception(e)
        else:  # Otherwise, fall back to a print() call.
            print('ERROR: %s' % e, file=sys.stderr)

        if errors_fatal:
            sys.exit(1)

        raise
    else:
        return conf
