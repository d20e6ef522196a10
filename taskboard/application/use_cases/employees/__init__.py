"""Employee use cases."""

from taskboard.application.use_cases.employees.employee_queries import EmployeeService

__all__ = ["EmployeeService"]
