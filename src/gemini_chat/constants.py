"""
Project-wide constants for the Gemini chat client

Endpoint layout, header names and encoding defaults live here so the request
builder, the HTTP service and the tests agree on them.
"""

# API and Network Constants
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_API_VERSION = "v1beta"
DEFAULT_REQUEST_TIMEOUT = 300.0  # seconds

# Model resources are addressed as "models/<name>"
MODEL_RESOURCE_PREFIX = "models/"

# Endpoint methods
GENERATE_CONTENT_METHOD = "generateContent"
STREAM_GENERATE_CONTENT_METHOD = "streamGenerateContent"
COUNT_TOKENS_METHOD = "countTokens"

# Headers
API_KEY_HEADER = "x-goog-api-key"
API_CLIENT_HEADER = "x-goog-api-client"
API_CLIENT_NAME = "gemini-chat-python"

# Server-sent events
SSE_QUERY_PARAMS = {"alt": "sse"}
SSE_DATA_FIELD = "data"

# Roles
USER_ROLE = "user"
MODEL_ROLE = "model"
SYSTEM_ROLE = "system"

# Image conversion
JPEG_MIME_TYPE = "image/jpeg"
DEFAULT_JPEG_QUALITY = 80

# Telemetry scopes
T_GENERATE_CONTENT = "generate_content"
T_GENERATE_CONTENT_STREAM = "generate_content_stream"
T_COUNT_TOKENS = "count_tokens"
T_STREAM_CHUNKS = "stream.chunks"
