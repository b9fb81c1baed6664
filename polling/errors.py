# polling/errors.py


class AthenaQueryError(RuntimeError):
    def __init__(self, message: str, execution_id: str | None = None, diagnostics: dict | None = None):
        super().__init__(message)
        self.execution_id = execution_id
        self.diagnostics = diagnostics or {}


class QuerySubmissionError(AthenaQueryError):
    pass


class QueryFailedError(AthenaQueryError):
    pass


class QueryCancelledError(AthenaQueryError):
    pass


class QueryPollError(AthenaQueryError):
    """Polling stopped without a terminal state (bad status payload, transient errors exhausted, ...)."""
