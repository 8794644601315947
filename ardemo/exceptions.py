"""Error types raised while parsing deep links, caching and reading assets.

Every error carries a fixed, user-facing message so the CLI (or any other
front end) can display ``str(error)`` directly.
"""


class ARDemoError(Exception):
    """Base class for all demo errors."""

    message = "An unexpected demo error occurred"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


# Deep link parameter validation


class ParameterError(ARDemoError):
    """A deep link parameter is missing or malformed."""


class QueryItemsMissingError(ParameterError):
    message = "No query items are available in the received URL"


class UrlParameterMissingError(ParameterError):
    message = 'The url parameters do not contain a "url" key and value'


class InvalidURLParameterError(ParameterError):
    message = 'Unable to create a URL from the "url" value provided'


class TokenParameterMissingError(ParameterError):
    message = 'The url parameters do not contain a "token" key and value'


class AssetIdParameterMissingError(ParameterError):
    message = 'The url parameters do not contain an "assetID" key and value'


class ImageIdParameterMissingError(ParameterError):
    message = 'The url parameters do not contain an "imageID" key and value'


class MugColorParameterMissingError(ParameterError):
    message = 'The url parameters do not contain a "mugColor" key and value'


class InvalidColorError(ParameterError):
    message = "Specified color is invalid"


# Cache


class CacheError(ARDemoError):
    """Base class for asset cache failures."""


class CachedItemNotFoundError(CacheError):
    message = "The requested item was not found in the cache"

    def __init__(self, key: str | None = None):
        super().__init__()
        self.key = key


class UnableToStoreError(CacheError):
    message = "The downloaded item could not be stored in the cache"


class CacheInitializationError(CacheError):
    message = "Unexpected error initializing the device cache location"


# Asset shape


class AssetShapeError(ARDemoError):
    """A fetched content item lacks the fields a demo requires."""


class ModelMissingError(AssetShapeError):
    message = 'Custom field "model" is missing from the content item'


class PrimaryMeshMissingError(AssetShapeError):
    message = 'Custom field "primarymeshname" is missing from the asset'


class ImageMeshesMissingError(AssetShapeError):
    message = 'Custom field "imagemeshnames" is missing from the asset'


class NoImagesAvailableError(AssetShapeError):
    message = "No 360Scenes are available for the specified content item"


class InvalidIndexError(AssetShapeError):
    message = "An invalid 360Scene index was requested"


class InvalidResponseError(AssetShapeError):
    message = "The content server returned a response that is not a content item"


__all__ = [
    "ARDemoError",
    "ParameterError",
    "QueryItemsMissingError",
    "UrlParameterMissingError",
    "InvalidURLParameterError",
    "TokenParameterMissingError",
    "AssetIdParameterMissingError",
    "ImageIdParameterMissingError",
    "MugColorParameterMissingError",
    "InvalidColorError",
    "CacheError",
    "CachedItemNotFoundError",
    "UnableToStoreError",
    "CacheInitializationError",
    "AssetShapeError",
    "ModelMissingError",
    "PrimaryMeshMissingError",
    "ImageMeshesMissingError",
    "NoImagesAvailableError",
    "InvalidIndexError",
    "InvalidResponseError",
]
