class InvoicePersistenceError(Exception):
    """The invoice store could not complete a statement.

    The message is safe to show; the driver error is kept as ``__cause__``.
    """

    def __init__(self, message: str = "Database Error") -> None:
        super().__init__(message)
        self.message = message
