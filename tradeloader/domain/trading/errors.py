"""
Domain-specific errors for the trading bounded context.

All errors raised from the domain layer and its adapters are defined
here. The CLI maps them to log lines and exit codes.
No framework imports allowed.
"""


class TradingDomainError(Exception):
    """Base error for all trading domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class SinkError(TradingDomainError):
    """Raised by a transactional sink adapter when an operation fails."""


class TransactionStateError(SinkError):
    """Raised when an operation refers to a transaction that is not open."""

    def __init__(self, name: str, action: str) -> None:
        super().__init__(f"Cannot {action}: transaction '{name}' is not open")
        self.name = name
        self.action = action


class SimulatedSinkFailure(SinkError):
    """Raised by the fault-injecting sink to simulate a flaky backend."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Simulated failure during {action}")
        self.action = action


class TradeFileFormatError(TradingDomainError):
    """Raised when a trade-list file cannot be parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid trade list {path}: {reason}")
        self.path = path
        self.reason = reason
