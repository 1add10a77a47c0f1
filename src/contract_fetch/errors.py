from typing import Any


class ContractFetchError(RuntimeError):
    pass


class ConfigError(ContractFetchError):
    pass


class ExplorerError(ContractFetchError):
    pass


class TransportError(ExplorerError):
    """The explorer could not be reached (connection failure, timeout, ...)."""


class EnvelopeStatusError(ExplorerError):
    """The explorer answered with an envelope whose status is not "1"."""

    def __init__(self, status: str, message: str, result: Any = None):
        self.status = status
        self.message = message
        self.result = result
        detail = f"bad status: {status}, message: {message}"
        if isinstance(result, str) and result:
            detail += f" ({result})"
        super().__init__(detail)


class SourceDecodeError(ContractFetchError, ValueError):
    pass


class UnwrapError(SourceDecodeError):
    pass
