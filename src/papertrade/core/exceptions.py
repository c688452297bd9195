"""Application-level exceptions.

Domain errors are expected, recoverable rejections (bad input, policy,
insufficient balance). ``DependencyFailureError`` is raised when a
collaborator (store, price feed) fails unexpectedly, so callers can tell
"rejected by policy" apart from "could not complete".
"""


class AppError(Exception):
    """Base exception for application errors."""

    status_code: int = 400

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class DomainError(AppError):
    """Expected rejection of a request by validation or trading policy."""


class ValidationError(DomainError):
    """Raised when input validation fails."""

    status_code = 422

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str, code: str = "NOT_FOUND"):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}", code=code)


class AccountNotFoundError(NotFoundError):
    """Raised when an account id does not resolve."""

    def __init__(self, account_id: str):
        super().__init__("Account", account_id, code="ACCOUNT_NOT_FOUND")


class AccountInactiveError(DomainError):
    """Raised when mutating a closed account."""

    status_code = 409

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account is inactive: {account_id}", code="ACCOUNT_INACTIVE")


class InsufficientFundsError(DomainError):
    """Raised when a buy costs more than the available cash."""

    def __init__(self, requested: str, available: str):
        super().__init__(
            f"Insufficient funds: requested {requested}, available {available}",
            code="INSUFFICIENT_FUNDS",
        )


class InsufficientSharesError(DomainError):
    """Raised when attempting to sell more shares than owned."""

    def __init__(self, symbol: str, requested: str, available: str):
        super().__init__(
            f"Insufficient shares of {symbol}: requested {requested}, available {available}",
            code="INSUFFICIENT_SHARES",
        )


class DayTradingNotAllowedError(DomainError):
    """Raised when a day trade is attempted on an account type that forbids it."""

    status_code = 403

    def __init__(self, account_type: str):
        super().__init__(
            f"Day trading is not allowed for account type {account_type}",
            code="DAY_TRADING_NOT_ALLOWED",
        )


class BelowMinimumForDayTradingError(DomainError):
    """Raised when account equity is under the day-trading minimum."""

    status_code = 403

    def __init__(self, equity: str, minimum: str):
        super().__init__(
            f"Account equity {equity} is below the day trading minimum of {minimum}",
            code="BELOW_MINIMUM_FOR_DAY_TRADING",
        )


class DayTradeLimitExceededError(DomainError):
    """Raised when the rolling-window day-trade limit is reached."""

    status_code = 429

    def __init__(self, count: int, limit: int, window_days: int):
        super().__init__(
            f"Day trade limit reached: {count} of {limit} day trades "
            f"used in the rolling {window_days}-business-day window",
            code="DAY_TRADE_LIMIT_EXCEEDED",
        )


class PriceUnavailableError(DomainError):
    """Raised when a price cannot be resolved within the timeout."""

    status_code = 503

    def __init__(self, symbol: str, reason: str = "timed out"):
        self.symbol = symbol
        super().__init__(f"Price unavailable for {symbol}: {reason}", code="PRICE_UNAVAILABLE")


class DependencyFailureError(AppError):
    """Raised when a collaborator fails unexpectedly."""

    status_code = 503

    def __init__(self, dependency: str, detail: str):
        self.dependency = dependency
        super().__init__(f"{dependency} failed: {detail}", code="DEPENDENCY_FAILURE")
