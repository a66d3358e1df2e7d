from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    SELLER = "seller"

    def __str__(self):
        return self.value


class AuditAction(str, Enum):
    CREATE_RATE_CARD = "create_rate_card"
    UPDATE_RATE_CARD = "update_rate_card"
    DELETE_RATE_CARD = "delete_rate_card"

    def __str__(self):
        return self.value


class QuoteOutcome(str, Enum):
    OK = "ok"
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"

    def __str__(self):
        return self.value
