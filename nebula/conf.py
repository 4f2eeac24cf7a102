"""Fixed names of the Riot Client surface Nebula reads and rewrites."""

# Keyring service namespace
VAULT_SERVICE_NAME = 'ValorantAccountManager'

# Persisted document keys
ACCOUNTS_KEY = 'accounts'
VALORANT_PATH_KEY = 'valorantPath'
THEME_KEY = 'theme'

# Riot Client files and folders
INSTALLS_FILE = 'RiotClientInstalls.json'
PRIVATE_SETTINGS_FILE = 'RiotGamesPrivateSettings.yaml'
CLIENT_SETTINGS_FILE = 'RiotClientSettings.yaml'
DEFAULT_DATA_FOLDER = ('Riot Client', 'Data')
DEFAULT_CONFIG_FOLDER = ('Riot Client', 'Config')
BETA_DATA_FOLDER = ('Beta', 'Data')
BETA_CONFIG_FOLDER = ('Beta', 'Config')

# RiotClientInstalls.json keys, in order of preference
INSTALL_KEYS = ('rc_live', 'rc_default', 'rc_beta', 'rc_esports')

# Session cookies
SSID_COOKIE = 'ssid'
SUB_COOKIE = 'sub'
COOKIE_DOMAIN = 'auth.riotgames.com'

# Processes
TARGET_PROCESS = 'VALORANT-Win64-Shipping.exe'
PROTECTED_PROCESSES = (
    'RiotClientServices.exe',
    TARGET_PROCESS,
    'RiotClientUx.exe',
    'RiotClientUxRender.exe',
)
LAUNCH_ARGS = ('--launch-product=valorant', '--launch-patchline=live')

DEFAULT_REGION = 'NA'
DEFAULT_LOCALE = 'en_US'
PATCHLINE = 'live'
