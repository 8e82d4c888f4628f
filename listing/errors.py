# listing/errors.py


class ValidationError(ValueError):
    """A listing request carried a value that cannot be turned into a query.

    Raised before the store is touched, so a failed request never runs a
    partial predicate.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f'Invalid value for "{field}": {message}')
        self.field = field
        self.message = message
