"""Environment-driven settings for Navigator Secrets."""
import os

# Name of the environment variable holding the hex-encoded master key.
ENCRYPTION_KEY_ENV = "ENCRYPTION_KEY"

SECRETS_TABLE = os.environ.get("SECRETS_TABLE", "secrets")

MIN_SECRET_LENGTH = 1
MAX_SECRET_LENGTH = int(os.environ.get("SECRETS_MAX_LENGTH", 10000))

# Shown in place of content for rows that fail authentication.
DECRYPTION_ERROR_PLACEHOLDER = "[Decryption Error]"
