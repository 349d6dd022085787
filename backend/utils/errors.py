"""
Application error types.

AppError carries an HTTP status code alongside a client-safe message.
Services and auth dependencies raise it; the handler registered in
backend/main.py renders it as {"success": false, "message": ...}.
"""


class AppError(Exception):
    """
    Operational error with a client-facing message and HTTP status.

    Args:
        message: The error message, which will be sent to the client.
        status_code: The HTTP status code to be sent with the response.
    """

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.is_operational = True

    def __repr__(self) -> str:
        return f"AppError(status_code={self.status_code}, message={self.message!r})"
