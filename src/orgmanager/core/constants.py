"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Tenant namespaces
DEFAULT_NAMESPACE_PREFIX = "org_"
TENANT_USERS_TABLE = "users"
MAX_NAMESPACE_BYTES = 63  # PostgreSQL identifier limit
NAMESPACE_DIGEST_LENGTH = 8

# Hash lengths
SHA256_HEX_LENGTH = 64

# String field lengths
MAX_EMAIL_LENGTH = 255
MIN_ORG_NAME_LENGTH = 2
MAX_ORG_NAME_LENGTH = 100
MAX_ROLE_LENGTH = 20

# Password requirements
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 72
MAX_PASSWORD_BYTES = 72  # bcrypt ignores anything past this
BCRYPT_ROUNDS = 12

# Roles
ROLE_SUPER_ADMIN = "admin"
ROLE_ORG_ADMIN = "org_admin"

# Token settings
TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"
REFRESH_TOKEN_JTI_LENGTH = 16

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
