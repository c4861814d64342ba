"""Batch-level failures.

Only failures that abort a whole batch are exceptions. Per-row faults are
outcome values (see ``data/base.py``) and never raise.
"""


class BatchError(Exception):
    status_code = 500

    def __init__(self, code: str, message: str | None = None):
        super().__init__(message or code)
        self.code = code
        self.message = message or code

    def to_dict(self) -> dict:
        return {"detail": self.code, "message": self.message}


class ConfigurationError(BatchError):
    """Server-side misconfiguration, e.g. the upstream API key is missing."""
    status_code = 500


class InputError(BatchError):
    """The uploaded table is unusable: no file, bad encoding, empty, over the limit."""
    status_code = 400
