"""Application-wide constants.

Centralizes header names, delivery API paths and other fixed values.
"""

# HTTP headers
ETAG_HEADER = "Etag"  # Canonical (title-cased) response header name
IF_NONE_MATCH_HEADER = "If-None-Match"

# Delivery API
DELIVERY_API_PATH = "/content/published/api/v1.1"
LOCATION_ASSET_TYPE = "CSM-Location"  # Content type listed by the panorama demo
LIST_ASSETS_LIMIT = 25

# Custom fields read from content items
FIELD_MODEL = "model"
FIELD_USDZ = "usdz"
FIELD_PRIMARY_MESH = "primarymeshname"
FIELD_IMAGE_MESHES = "imagemeshnames"
FIELD_TEXT_MESHES = "textmeshnames"
FIELD_PRICE = "price"
FIELD_SCENES = "360Scenes"
FIELD_TITLE = "title"
FIELD_HORIZONTAL_ANGLE = "horizontalAngle"
FIELD_FIELD_OF_VIEW = "fieldOfView"

# Timeouts (seconds)
TIMEOUT_HTTP_DEFAULT = 30.0

# Retry configuration
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_MIN_WAIT = 2  # Minimum wait between retries (seconds)
DEFAULT_RETRY_MAX_WAIT = 10  # Maximum wait between retries (seconds)

# Logging
LOG_FILE_PREFIX = "ardemo_"
LOG_ROTATION_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

__all__ = [
    "ETAG_HEADER",
    "IF_NONE_MATCH_HEADER",
    "DELIVERY_API_PATH",
    "LOCATION_ASSET_TYPE",
    "LIST_ASSETS_LIMIT",
    "FIELD_MODEL",
    "FIELD_USDZ",
    "FIELD_PRIMARY_MESH",
    "FIELD_IMAGE_MESHES",
    "FIELD_TEXT_MESHES",
    "FIELD_PRICE",
    "FIELD_SCENES",
    "FIELD_TITLE",
    "FIELD_HORIZONTAL_ANGLE",
    "FIELD_FIELD_OF_VIEW",
    "TIMEOUT_HTTP_DEFAULT",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_MIN_WAIT",
    "DEFAULT_RETRY_MAX_WAIT",
    "LOG_FILE_PREFIX",
    "LOG_ROTATION_BYTES",
    "LOG_BACKUP_COUNT",
]
