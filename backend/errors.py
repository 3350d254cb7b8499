class PharmacyError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PharmacyError):
    pass


class NotFound(PharmacyError):
    pass
