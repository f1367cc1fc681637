"""
Logging configuration

stdout carries the MCP protocol, so every handler writes to stderr.
"""

import logging.config
from copy import deepcopy

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
            'stream': 'ext://sys.stderr',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'paypal_mcp': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'httpx': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}


def configure_logging(level: str = 'INFO') -> None:
    """Apply LOGGING with the package logger set to ``level``"""
    config = deepcopy(LOGGING)
    config['loggers']['paypal_mcp']['level'] = level
    logging.config.dictConfig(config)
