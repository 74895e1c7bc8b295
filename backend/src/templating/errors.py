from __future__ import annotations


class OnePagerError(Exception):
    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class ValidationError(OnePagerError):
    def __init__(self, message: str, code: str = "INVALID_REQUEST") -> None:
        super().__init__(message, code)


class NotFoundError(OnePagerError):
    def __init__(self, employee_id: str) -> None:
        super().__init__(f"There is no employee with ID: {employee_id}", "EMPLOYEE_NOT_FOUND")
        self.employee_id = employee_id


class TemplateError(OnePagerError):
    pass
