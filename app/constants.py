import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_DIR = os.environ.get('INDEXER_CONSOLE_CONFIG_DIR', os.path.join(APP_DIR, 'config'))
CONFIG_FILE = os.environ.get('INDEXER_CONSOLE_CONFIG', os.path.join(CONFIG_DIR, 'settings.yaml'))

# Backend endpoints consumed by the console
CACHE_CLEAR_ENDPOINT = '/api/settings/cache/clear'
ACTIVITY_CLEAR_ENDPOINT = '/api/settings/activity/clear'
LOCAL_INDEXERS_ENDPOINT = '/api/native/local'

# Seconds the success message stays visible after a cache clear
SUCCESS_DISMISS_SECONDS = 3.0

CACHE_CLEAR_FAILED_MESSAGE = 'Failed to clear cache'
ACTIVITY_CLEAR_FAILED_MESSAGE = 'Failed to clear activity'

# Indexer setting holding the chosen domain among the primary links
MIRROR_SETTING_KEY = '_mirror'

LEGACY_LABEL_SUFFIX = ' (Legacy)'
DEFAULT_LABEL_SUFFIX = ' (Default)'

BUILD_VERSION = '20261018_0900'

DEFAULT_SETTINGS = {
    "server": {
        "base_url": "http://localhost:3000",
        "timeout": 30,
    },
    "cache": {
        "dismiss_after": SUCCESS_DISMISS_SECONDS,
    },
}
