"""
Reporting and Export

Aggregations over approved time entries for the admin reporting
page, and the CSV export used for payroll and client billing.

Functions take already-loaded TimeEntry rows (with user and project)
so they can be tested without a database.
"""
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List
import csv
import io
from hrportal.utils.formatting import format_us_date, format_us_datetime, format_hours

OVERTIME_THRESHOLD_HOURS = 40
TREND_WEEKS = 12
DEFAULT_REPORT_DAYS = 90

CSV_HEADERS = [
    "Employee ID",
    "Employee Name",
    "Designation",
    "Date",
    "Project",
    "Client",
    "Task",
    "Hours",
    "Billable",
    "Description",
    "Reviewed At",
]


def week_start(day: date) -> date:
    """Monday of the ISO week containing day."""
    return day - timedelta(days=day.weekday())


def default_range(start_date: date = None, end_date: date = None):
    end_date = end_date or date.today()
    start_date = start_date or end_date - timedelta(days=DEFAULT_REPORT_DAYS)
    return start_date, end_date


def build_report(entries: Iterable, start_date: date, end_date: date) -> Dict:
    """
    Aggregate approved entries into the reporting payload.

    - Per project totals, with utilization against budget_hours
    - Per employee totals and number of distinct projects
    - Employee weeks over 40 hours, keyed by Monday
    - Team totals for the last 12 weeks that have entries
    """
    entries = list(entries)

    projects: Dict[int, Dict] = {}
    employees: Dict[int, Dict] = {}
    employee_projects = defaultdict(set)
    project_employees = defaultdict(set)
    weekly_by_user = defaultdict(lambda: defaultdict(float))
    weekly_billable = defaultdict(float)

    total_hours = 0.0
    billable_hours = 0.0

    for entry in entries:
        project = entry.project
        user = entry.user

        if project.id not in projects:
            projects[project.id] = {
                "project_id": project.id,
                "project_name": project.name,
                "client": project.client or "N/A",
                "total_hours": 0.0,
                "billable_hours": 0.0,
                "non_billable_hours": 0.0,
                "budget_hours": project.budget_hours,
                "utilization": None,
                "employee_count": 0,
            }
        if user.id not in employees:
            employees[user.id] = {
                "user_id": user.id,
                "employee_id": user.employee_id,
                "employee_name": user.full_name,
                "designation": user.designation or "N/A",
                "total_hours": 0.0,
                "billable_hours": 0.0,
                "non_billable_hours": 0.0,
                "project_count": 0,
            }

        key = "billable_hours" if entry.is_billable else "non_billable_hours"
        for bucket in (projects[project.id], employees[user.id]):
            bucket["total_hours"] += entry.hours
            bucket[key] += entry.hours

        employee_projects[user.id].add(project.id)
        project_employees[project.id].add(user.id)

        week = week_start(entry.date)
        weekly_by_user[week][user.id] += entry.hours
        if entry.is_billable:
            weekly_billable[week] += entry.hours

        total_hours += entry.hours
        if entry.is_billable:
            billable_hours += entry.hours

    for project_id, data in projects.items():
        data["employee_count"] = len(project_employees[project_id])
        if data["budget_hours"]:
            data["utilization"] = data["total_hours"] * 100 / data["budget_hours"]

    for user_id, data in employees.items():
        data["project_count"] = len(employee_projects[user_id])

    overtime = []
    for week, per_user in weekly_by_user.items():
        for user_id, hours in per_user.items():
            if hours > OVERTIME_THRESHOLD_HOURS:
                employee = employees[user_id]
                overtime.append({
                    "user_id": user_id,
                    "employee_id": employee["employee_id"],
                    "employee_name": employee["employee_name"],
                    "week_start": week,
                    "total_hours": hours,
                    "overtime_hours": hours - OVERTIME_THRESHOLD_HOURS,
                })

    trends = [
        {
            "week_start": week,
            "total_hours": sum(weekly_by_user[week].values()),
            "billable_hours": weekly_billable[week],
        }
        for week in sorted(weekly_by_user)[-TREND_WEEKS:]
    ]

    employee_count = len(employees)
    return {
        "date_range": {"start_date": start_date, "end_date": end_date},
        "overview": {
            "total_hours": total_hours,
            "billable_hours": billable_hours,
            "non_billable_hours": total_hours - billable_hours,
            "billable_percentage": billable_hours * 100 / total_hours if total_hours else 0.0,
            "total_projects": len(projects),
            "total_employees": employee_count,
            "average_hours_per_employee": total_hours / employee_count if employee_count else 0.0,
        },
        "project_hours": sorted(projects.values(), key=lambda p: p["total_hours"], reverse=True),
        "employee_hours": sorted(employees.values(), key=lambda e: e["total_hours"], reverse=True),
        "overtime_data": sorted(overtime, key=lambda o: o["overtime_hours"], reverse=True),
        "weekly_trends": trends,
    }


def export_csv(entries: List) -> str:
    """
    Render approved entries as CSV.

    Fields containing commas, quotes or newlines are quoted.
    Rows are joined with a bare newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)

    for entry in entries:
        writer.writerow([
            entry.user.employee_id,
            entry.user.full_name,
            entry.user.designation or "",
            format_us_date(entry.date),
            entry.project.name,
            entry.project.client or "",
            entry.task,
            format_hours(entry.hours),
            "Yes" if entry.is_billable else "No",
            entry.description or "",
            format_us_datetime(entry.reviewed_at) if entry.reviewed_at else "",
        ])

    return buffer.getvalue().rstrip("\n")


def export_filename(today: date = None) -> str:
    today = today or date.today()
    return f"approved_timesheets_{today.isoformat()}.csv"
