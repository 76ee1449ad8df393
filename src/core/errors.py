from typing import List, Optional, Dict, Any


class TradeExportError(Exception):
    """Base class for every error raised by the export core."""


class ValidationError(TradeExportError):
    """Bad or missing input. Raised before any upstream request is made."""


class AddressNotFound(ValidationError):
    def __init__(self, text: str):
        self.text = text
        super().__init__("No wallet address found in input")


class UpstreamError(TradeExportError):
    """
    The activity API answered with a non-success status or could not be reached.
    Carries the records accumulated before the failing page so callers can
    decide explicitly whether to discard or export them.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        records: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.records = records or []
