"""
log.py - chanmodes logging module.

This module contains the logging portion of chanmodes. Other modules can access the package
logger object by importing "log" from this module (from .log import log).
"""

import logging
import logging.handlers
import os

from . import world, conf

# Stores a list of active file loggers.
fileloggers = []

console_level = conf.conf['logging'].get('console') or 'INFO'

logdir = os.path.join(os.getcwd(), 'log')

_format = '%(asctime)s [%(levelname)s] %(message)s'
logformatter = logging.Formatter(_format)

# Set up logging to STDERR
stdout_handler = logging.StreamHandler()
stdout_handler.setFormatter(logformatter)
stdout_handler.setLevel(console_level)

# Get the package logger object; modules can import this variable for convenience.
log = logging.getLogger('chanmodes')
log.addHandler(stdout_handler)

# The package logger accepts all events, so that each handler can filter events on its own
# instead of having everything below the console level dropped here.
log.setLevel(1)

def makeFileLogger(filename, level=None):
    """
    Initializes a file logging target with the given filename and level.
    """
    os.makedirs(logdir, exist_ok=True)

    # Use log names specific to the current instance, to prevent multiple
    # instances from overwriting each others' log files.
    target = os.path.join(logdir, '%s-%s.log' % (conf.confname, filename))

    logrotconf = conf.conf.get('logging', {}).get('filerotation', {})

    # Max amount of bytes per file, before rotation is done. Defaults to 50 MiB.
    maxbytes = logrotconf.get('max_bytes', 52428800)

    # Amount of backups to make (e.g. unconfigured-debug.log, unconfigured-debug.log.1, ...)
    # Defaults to 5.
    backups = logrotconf.get('backup_count', 5)

    filelogger = logging.handlers.RotatingFileHandler(target, maxBytes=maxbytes, backupCount=backups)
    filelogger.setFormatter(logformatter)

    # If no log level is specified, use the same one as the console.
    level = level or console_level
    filelogger.setLevel(level)

    log.addHandler(filelogger)
    fileloggers.append(filelogger)

    return filelogger

def stopFileLoggers():
    """
    De-initializes all file loggers.
    """
    for handler in fileloggers.copy():
        handler.close()
        log.removeHandler(handler)
        fileloggers.remove(handler)

def setupFileLoggers():
    """
    (Re)creates a file logger for each block in the logging:files config section.
    """
    stopFileLoggers()

    # Refresh the console level too, in case a new config was loaded since import.
    stdout_handler.setLevel(conf.conf['logging'].get('console') or 'INFO')

    if world.testing:
        return

    files = conf.conf['logging'].get('files')
    if files:
        for filename, config in files.items():
            makeFileLogger(filename, (config or {}).get('loglevel'))

# Flush any messages queued by modules that loaded before us.
while world._log_queue:
    level, text = world._log_queue.popleft()
    log.log(level, text)
