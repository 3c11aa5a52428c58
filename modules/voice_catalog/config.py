"""
Voice catalog configuration.
"""

SHARED_VOICES_PATH = "/v1/shared-voices"

PAGE_SIZE = 100
MAX_PAGES = 5

# Cursor query parameter used when the continuation token is not a URL
PAGE_TOKEN_PARAM = "next_page_token"

API_KEY_HEADER = "xi-api-key"

REQUEST_TIMEOUT_SECONDS = 30.0
