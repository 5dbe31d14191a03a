"""Exceptions raised by the property service and rendered by the HTTP adapters."""


class PropertyAPIError(Exception):
    """Base exception carrying the HTTP status the adapters should return"""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(PropertyAPIError):
    """Requested property id does not exist"""
    status_code = 404

    def __init__(self, property_id: str):
        self.property_id = property_id
        super().__init__("Property not found")


class BadRequestError(PropertyAPIError):
    """Request can't be routed (missing id, unsupported method)"""
    status_code = 400


class ValidationError(BadRequestError):
    """Field value rejected by the service"""


class UnknownRouteError(PropertyAPIError):
    """Path isn't served by this API"""
    status_code = 404
