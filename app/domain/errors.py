"""
Report ledger error hierarchy.

Every error carries a machine-readable `code`; the message is user-facing
(Spanish) or, for store failures, the raw message from the database.

    ReportError
    +-- NotAuthenticatedError
    +-- AlreadyCompleteError
    +-- ReportNotFoundError
    +-- ReportNotLastError
    +-- AlreadyUnlockedError
    +-- MonthLockedError
    +-- StoreError
        +-- PermissionDeniedError
        +-- ConstraintViolationError
"""


class ReportError(Exception):
    code = "REPORT_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticatedError(ReportError):
    code = "NOT_AUTHENTICATED"

    def __init__(self, message: str = "No autenticado"):
        super().__init__(message)


class AlreadyCompleteError(ReportError):
    code = "ALREADY_COMPLETE"

    def __init__(self, period_year: int):
        super().__init__("Todos los meses ya están cerrados")
        self.period_year = period_year


class ReportNotFoundError(ReportError):
    code = "REPORT_NOT_FOUND"

    def __init__(self, report_id: int):
        super().__init__("Informe no encontrado")
        self.report_id = report_id


class ReportNotLastError(ReportError):
    code = "REPORT_NOT_LAST"

    def __init__(self, report_id: int | None, month_index: int | None = None, last_month_index: int | None = None):
        super().__init__("Solo se puede desbloquear el último informe del año")
        self.report_id = report_id
        self.month_index = month_index
        self.last_month_index = last_month_index


class AlreadyUnlockedError(ReportError):
    code = "ALREADY_UNLOCKED"

    def __init__(self, report_id: int):
        super().__init__("El último informe ya está desbloqueado")
        self.report_id = report_id


class MonthLockedError(ReportError):
    code = "MONTH_LOCKED"

    def __init__(self, period_year: int, month_index: int):
        super().__init__("El mes está cerrado. Desbloquea el informe para editar actividades")
        self.period_year = period_year
        self.month_index = month_index


class StoreError(ReportError):
    code = "STORE_ERROR"


class PermissionDeniedError(StoreError):
    code = "PERMISSION_DENIED"


class ConstraintViolationError(StoreError):
    code = "CONSTRAINT_VIOLATION"
