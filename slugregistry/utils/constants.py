# Slug alphabet: base58 (no 0, O, I, l)
SLUG_ALPHABET = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'
SLUG_LENGTH = 8
SLUG_SHIFT_BITS = 6  # 2**6 = 64 covers the 58-symbol range

# Collision avoidance: advances tried before allocation fails closed
DEFAULT_MAX_ALLOCATION_ATTEMPTS = 10_000

# Currency: balances and prices are kept in the smallest unit
UNIT = 10**18

# Custom slug prices indexed by slug length (lengths >= 8 use the last tier)
# fmt: off
DEFAULT_PRICE_TIERS = (
    0,                # 0 characters
    UNIT,             # 1 character  -> 1
    UNIT // 2,        # 2 characters -> 0.5
    UNIT // 4,        # 3 characters -> 0.25
    UNIT // 10,       # 4 characters -> 0.1
    UNIT // 20,       # 5 characters -> 0.05
    UNIT * 3 // 100,  # 6 characters -> 0.03
    UNIT // 50,       # 7 characters -> 0.02
    UNIT // 100,      # 8+ characters -> 0.01
)
# fmt: on

# Referrer fee share, in basis points
MAX_FEE_SHARE_BIPS = 10_000
DEFAULT_FEE_SHARE_BIPS = 5_000

# Addresses
NULL_ADDRESS = '0x' + '0' * 40
NATIVE_ASSET = 'native'

# Application environment
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
PROJECT_ROOT_ENV = 'PROJECT_ROOT'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# AppConfig
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
APPCONFIG_AGENT_URL_ENV = 'APPCONFIG_AGENT_URL'
APPCONFIG_PROFILE_NAME_ENV = 'APPCONFIG_PROFILE_NAME'

# Log event codes
SLUG_MINTED = 'SLUG_MINTED'
MINT_REVERTED = 'MINT_REVERTED'
URL_EDITED = 'URL_EDITED'
BALANCE_CREDITED = 'BALANCE_CREDITED'
BALANCE_WITHDRAWN = 'BALANCE_WITHDRAWN'
FEE_SHARE_UPDATED = 'FEE_SHARE_UPDATED'
REGISTRY_PAUSED = 'REGISTRY_PAUSED'
REGISTRY_UNPAUSED = 'REGISTRY_UNPAUSED'
FOREIGN_ASSET_RECOVERED = 'FOREIGN_ASSET_RECOVERED'
PAYMENT_RECEIVED = 'PAYMENT_RECEIVED'
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

# Lambda error codes (handler-level; registry errors carry their own error_code)
MISSING_CALLER = 'MISSING_CALLER'
INVALID_REQUEST_BODY = 'INVALID_REQUEST_BODY'
INVALID_PATH_PARAMETERS = 'INVALID_PATH_PARAMETERS'
UNKNOWN_ADMIN_ACTION = 'UNKNOWN_ADMIN_ACTION'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
