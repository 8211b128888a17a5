import logging
import os
from logging import getLogger

log = getLogger('infix')
logging.basicConfig(format='[infix] %(message)s')


def has_env(varname, value='true'):
    """
    Check environment variable is set.
    """
    return os.environ.get(varname, '').lower() == value


if has_env('DEBUG'):
    log.setLevel(logging.DEBUG)
elif has_env('INFIX_LOG', 'debug'):
    log.setLevel(logging.DEBUG)
elif has_env('INFIX_LOG', 'info'):
    log.setLevel(logging.INFO)
elif has_env('INFIX_LOG', 'error'):
    log.setLevel(logging.ERROR)
else:
    log.setLevel(logging.WARNING)
