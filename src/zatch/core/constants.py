"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Slug generation
MAX_SLUG_LENGTH = 63
MAX_PROPERTY_SLUG_LENGTH = 120

# Hash lengths
SHA256_HEX_LENGTH = 64

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_HOSTNAME_LENGTH = 253
MAX_IPV6_LENGTH = 45
MAX_USER_AGENT_LENGTH = 512
MAX_PAGE_KEY_LENGTH = 50
MAX_ROLE_LENGTH = 20
MAX_TITLE_LENGTH = 255

# Password requirements
MIN_PASSWORD_LENGTH = 12
MAX_PASSWORD_LENGTH = 128
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32
VERIFY_TOKEN_LENGTH = 32
FEED_TOKEN_BYTES = 24

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"

# Domain verification
DEFAULT_VERIFY_PREFIX = "_zatch-verify"
DNS_TXT_RECORD_TYPE = 16

# SEO limits
SEO_TITLE_MAX_LENGTH = 60
SEO_DESCRIPTION_MAX_LENGTH = 155

# Share page
SHARE_REDIRECT_SECONDS = 2
SHARE_CACHE_SECONDS = 3600

# Portal feeds
DEFAULT_FEED_PHOTO_LIMIT = 20
