"""Example: drive the service layer directly (no Flask, in-memory storage)."""

from shift_attendance.container import build_container
from shift_attendance.core.enums import Role, ShiftAction
from shift_attendance.users.model import Employee


def main():
    container = build_container(
        backend="memory",
        roster=[
            Employee(employee_id=1, full_name="Admin Demo", email="admin@example.com", role=Role.ADMIN),
            Employee(employee_id=2, full_name="Ayesha Khan", email="ayesha@example.com"),
            Employee(employee_id=3, full_name="Bilal Ahmed", email="bilal@example.com"),
        ],
    )
    service = container.attendance_service
    views = container.attendance_views

    service.record_action(2, ShiftAction.CLOCK_IN, notes="example")
    service.record_action(2, ShiftAction.BREAK_START)
    print(views.status(service.current_status(2)))

    today = container.normalizer.local_day(service.now())
    print(views.entries(service.list_day(today), now=service.now(), roster=service.roster_by_id()))
    print(views.totals(service.period_totals(2)))


if __name__ == "__main__":
    main()
