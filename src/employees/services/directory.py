"""Read-only employee directory."""

from ..models import Employee


class EmployeeDirectory:
    def __init__(self, queryset=None):
        self.queryset = (
            queryset
            if queryset is not None
            else Employee.objects.filter(is_active=True)
        )

    def list(self):
        return [
            employee.to_record()
            for employee in self.queryset.select_related("handover")
        ]

    def handover_candidates(self, exclude=None):
        """Active employees who can receive a handover.

        ``exclude`` is the employee being relieved (instance or pk).
        """
        candidates = self.queryset.filter(status=Employee.STATUS_ACTIVE)
        if exclude is not None:
            candidates = candidates.exclude(pk=getattr(exclude, "pk", exclude))
        return [
            {
                "id": employee.pk,
                "employee_id": employee.employee_id,
                "name": employee.display_name,
                "department": employee.department,
                "position": employee.position,
            }
            for employee in candidates.order_by("first_name", "last_name")
        ]
