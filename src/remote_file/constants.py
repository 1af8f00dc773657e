"""HTTP constants for remote file fetches."""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_NOT_MODIFIED = 304
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 600

# Conditional request headers
HEADER_IF_MODIFIED_SINCE = "if-modified-since"
HEADER_IF_NONE_MATCH = "if-none-match"

# Response Size Limits
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 1024 * 1024 * 1024  # 1 GB

# Chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 64 * 1024

# URIs ending in this suffix are fetched without transparent decompression
COMPRESSED_SUFFIX = "gz"
