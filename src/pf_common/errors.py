"""Unified error codes and custom exceptions.

Every error belongs to one of five kinds, each with a fixed HTTP status:

  InputValidationError  400  client input malformed
  ConflictError         409  duplicate unique key
  NotFoundError         404  missing row / expired session
  UnauthorizedError     401  missing, invalid or consumed credential
  InternalError         500  store or serialization failure

Error code ranges:
  1xxx: Auth/User
  2xxx: Category
  3xxx: Expense
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class InputValidationError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 400)


class ConflictError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 409)


class NotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class UnauthorizedError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 401)


class InternalError(AppError):
    """Store or serialization failure. The message never carries the cause."""

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


# --- 1xxx: Auth/User ---

class DuplicateEmailError(ConflictError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists")


class InvalidCredentialsError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid email or password")


class InvalidRefreshTokenError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired")


class SessionUserNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__(1006, "User for this session no longer exists")


class InvalidAccessTokenError(UnauthorizedError):
    def __init__(self) -> None:
        super().__init__(1007, "Invalid or expired token")


class InvalidEmailError(InputValidationError):
    def __init__(self) -> None:
        super().__init__(1101, "Please enter a valid email")


class InvalidNameError(InputValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(1102, detail)


class PasswordRequiredError(InputValidationError):
    def __init__(self) -> None:
        super().__init__(1103, "Password is required")


class PasswordTooLongError(InputValidationError):
    def __init__(self, max_bytes: int) -> None:
        super().__init__(1104, f"Password must be at most {max_bytes} bytes")


class WeakPasswordError(InputValidationError):
    def __init__(self) -> None:
        super().__init__(1105, "Your password is too weak")


# --- 2xxx: Category ---

class ForeignKeyNotFoundError(NotFoundError):
    """Referenced category does not exist (or belongs to another user)."""

    def __init__(self) -> None:
        super().__init__(2001, "Referenced category not found")


class CategoryNameExistsError(ConflictError):
    def __init__(self, name: str) -> None:
        super().__init__(2002, f"Category already exists: {name}")


class InvalidCategoryNameError(InputValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(2101, detail)


# --- 3xxx: Expense ---

class ExpenseNotFoundError(NotFoundError):
    def __init__(self, expense_id: str) -> None:
        super().__init__(3001, f"Expense not found: {expense_id}")


class InvalidAmountError(InputValidationError):
    def __init__(self) -> None:
        super().__init__(3101, "Amount must be greater than zero")


class InvalidDescriptionError(InputValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(3102, detail)


class RequiredFieldMissingError(InputValidationError):
    def __init__(self) -> None:
        super().__init__(3103, "Required field missing")


# --- 9xxx: System ---

class MalformedRequestError(InputValidationError):
    def __init__(self, detail: str = "Malformed request") -> None:
        super().__init__(9003, detail)
