"""
config.py — Environment-driven settings for the Farmlytics backend.

Every setting can be overridden through an environment variable; paths
default to folders next to this file. create_app() copies these values
into app.config, where tests override them with test_config.
"""

import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

DATA_DIR = os.environ.get('FARMLYTICS_DATA_DIR', os.path.join(BASE_DIR, 'data'))

PRODUCTION_FILE = os.environ.get(
    'FARMLYTICS_PRODUCTION_FILE',
    'farmlytics_sas_production_cleaned_aggregated_historical.csv'
)
CONSUMPTION_FILE = os.environ.get(
    'FARMLYTICS_CONSUMPTION_FILE',
    'farmlytics_eicv_consumption_cleaned_aggregated_historical.csv'
)
ESTABLISHMENT_FILE = os.environ.get(
    'FARMLYTICS_ESTABLISHMENT_FILE',
    'farmlytics_establishment_census_cleaned.csv'
)

DATABASE = os.environ.get('CROP_PLAN_DB_PATH', os.path.join(DATA_DIR, 'crop_plans.db'))


# =============================================================================
# LOGGING SETTINGS
# =============================================================================

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
LOG_TO_FILE = os.environ.get('LOG_TO_FILE', 'False') == 'True'
LOG_FILE_PATH = os.environ.get('LOG_FILE_PATH', os.path.join(BASE_DIR, 'logs', 'farmlytics.log'))

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {message}',
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
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOG_FILE_PATH,
            'maxBytes': 1024 * 1024 * 10,  # 10MB
            'backupCount': 5,
            'formatter': 'verbose',
        } if LOG_TO_FILE else {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['console', 'file'] if LOG_TO_FILE else ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'werkzeug': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}


def get_config():
    """Return the default app.config mapping."""
    return {
        'DATA_DIR': DATA_DIR,
        'PRODUCTION_FILE': PRODUCTION_FILE,
        'CONSUMPTION_FILE': CONSUMPTION_FILE,
        'ESTABLISHMENT_FILE': ESTABLISHMENT_FILE,
        'DATABASE': DATABASE,
        'LOAD_DATASETS': True,
        'JSON_SORT_KEYS': False,
    }
