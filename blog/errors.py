class BlogError(Exception):
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class ValidationError(BlogError, ValueError):
    status_code = 400

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class ConflictError(BlogError):
    status_code = 409


class NotFoundError(BlogError):
    status_code = 404


class StorageError(BlogError):
    status_code = 503
