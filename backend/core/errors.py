# core/errors.py
from decimal import Decimal


class CasinoError(Exception):
    """
    Base for every failure the casino reports to a caller.
    Carries a machine-readable code and the HTTP status the API uses.
    """

    code = "CASINO_ERROR"
    status_code = 400

    def __init__(self, message: str, code: str = None, status_code: int = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"success": False, "error": self.message, "code": self.code}


class InvalidBetError(CasinoError):
    code = "INVALID_BET"


class InvalidAmountError(CasinoError):
    code = "INVALID_AMOUNT"


class InsufficientFundsError(CasinoError):
    code = "INSUFFICIENT_FUNDS"
    status_code = 402

    def __init__(self, requested: Decimal, available: Decimal):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient funds. Required: {requested} SOL, Available: {available} SOL"
        )

    def to_dict(self):
        data = super().to_dict()
        data["requested"] = str(self.requested)
        data["available"] = str(self.available)
        return data


class PaymentRequiredError(CasinoError):
    code = "PAYMENT_REQUIRED"
    status_code = 402


class UserNotFoundError(CasinoError):
    code = "USER_NOT_FOUND"
    status_code = 404

    def __init__(self, identifier):
        super().__init__(f"User not found: {identifier}")


class WalletNotFoundError(CasinoError):
    code = "WALLET_NOT_FOUND"
    status_code = 404

    def __init__(self, identifier):
        super().__init__(f"Wallet not found: {identifier}")


class GameNotFoundError(CasinoError):
    code = "GAME_NOT_FOUND"
    status_code = 404

    def __init__(self, game_id):
        super().__init__(f"Game not found: {game_id}")


class ConflictError(CasinoError):
    code = "CONFLICT"
    status_code = 409


class RateLimitedError(CasinoError):
    code = "RATE_LIMITED"
    status_code = 429


class InsufficientReservesError(CasinoError):
    code = "INSUFFICIENT_RESERVES"


class LedgerInvariantError(CasinoError):
    """A ledger rule was already broken before this call (a bug, not user input)."""

    code = "LEDGER_INVARIANT"
    status_code = 500


class SettlementFailedError(CasinoError):
    code = "SETTLEMENT_FAILED"
    status_code = 503

    def __init__(self, message: str = "Settlement failed, retry"):
        super().__init__(message)
