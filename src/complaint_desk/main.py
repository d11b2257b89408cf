"""Main entry point for the terminal front end.

This module provides an interactive command-line interface over the same
application context the HTTP API uses: log in as a student or admin, submit
and review complaints, update their status and export reports.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from complaint_desk.config import ADMIN_USER_ID, DATA_DIR
from complaint_desk.core.context import AppContext, build_context
from complaint_desk.core.exceptions import AssistantError, ValidationError
from complaint_desk.core.logging_config import setup_logging
from complaint_desk.schemas.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintDraft,
    ComplaintStatus,
)
from complaint_desk.schemas.notification import Notification, NotificationSeverity
from complaint_desk.schemas.report import ReportFilter
from complaint_desk.schemas.user import UserRole
from complaint_desk.utils import user_directory
from complaint_desk.utils.attachments import build_attachment
from complaint_desk.utils.complaint_filters import (
    ALL,
    filter_admin_view,
    filter_student_view,
    publish_due_alerts,
    summarize,
)
from complaint_desk.utils.converters import format_timestamp
from complaint_desk.utils.report_builder import build_report, report_filename, to_csv

logger = logging.getLogger(__name__)

_SEVERITY_MARKS = {
    NotificationSeverity.SUCCESS: "✅",
    NotificationSeverity.ERROR: "❌",
    NotificationSeverity.INFO: "ℹ️ ",
}


def print_banner() -> None:
    """Print program banner and description."""
    print("=" * 70)
    print("  Student's Complaints Management System")
    print("=" * 70)
    print()
    print("Students log in with their matriculation number (e.g. U2021/5570009)")
    print("to submit and track complaints. Administrators review complaints,")
    print("update their status and export reports.")
    print()
    print("=" * 70)
    print()


def print_notification(notification: Notification) -> None:
    if notification.visible:
        mark = _SEVERITY_MARKS.get(notification.severity, "")
        print(f"{mark} {notification.message}")


def print_complaint_line(complaint: Complaint) -> None:
    unread = "" if complaint.is_read_by_admin else " [new]"
    due = f" due {complaint.due_date.isoformat()}" if complaint.due_date else ""
    print(
        f"  {complaint.id}  {complaint.status.value:<11}  "
        f"{complaint.category.value:<20}  {complaint.student_name}{due}{unread}"
    )


def print_complaint(complaint: Complaint, show_admin_notes: bool) -> None:
    print("\n" + "=" * 70)
    print(f"Complaint {complaint.id}")
    print("=" * 70)
    print(f"Student:   {complaint.student_name} ({complaint.student_id})")
    print(f"Category:  {complaint.category.value}")
    print(f"Status:    {complaint.status.value}")
    print(f"Submitted: {format_timestamp(complaint.submitted_at)}")
    if complaint.resolved_at:
        print(f"Resolved:  {format_timestamp(complaint.resolved_at)}")
    if complaint.due_date:
        print(f"Due:       {complaint.due_date.isoformat()}")
    if complaint.attachment:
        print(f"Attachment: {complaint.attachment.name} ({complaint.attachment.size} bytes)")
    print()
    print(complaint.description)
    if show_admin_notes:
        student = user_directory.resolve_any(complaint.student_id)
        if student and student.email:
            print(f"\nContact: {student.email}, {student.phone or 'N/A'} "
                  f"({student.department}, level {student.level})")
        if complaint.admin_notes:
            print(f"\nAdmin notes: {complaint.admin_notes}")
    print("\nHistory:")
    for entry in complaint.history:
        note = f" - {entry.notes}" if entry.notes else ""
        print(f"  {format_timestamp(entry.changed_at)}  {entry.status.value}{note}")
    print("=" * 70 + "\n")


def print_commands(role: Optional[UserRole]) -> None:
    """Print the commands available to the current role."""
    print("\nAvailable commands:")
    if role is None:
        print("  [s] or student-login  - Log in as a student")
        print("  [a] or admin-login    - Log in as an administrator")
    elif role == UserRole.STUDENT:
        print("  [l] or list     - List my complaints")
        print("  [n] or new      - Submit a new complaint")
        print("  [v] or view     - View one of my complaints")
        print("  [p] or profile  - Show my profile")
        print("  [o] or logout   - Log out")
    else:
        print("  [l] or list      - List all complaints")
        print("  [v] or view      - Open a complaint")
        print("  [u] or status    - Update status and due date")
        print("  [t] or notes     - Edit admin notes")
        print("  [an] or stats    - Show analytics")
        print("  [r] or report    - Export a CSV report")
        print("  [o] or logout    - Log out")
    print("  [q] or quit           - Exit")
    print()


def _ask(prompt: str) -> str:
    return input(prompt).strip()


def _ask_date(prompt: str) -> Optional[date]:
    value = _ask(prompt)
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        print("Invalid date, expected YYYY-MM-DD. Leaving it empty.")
        return None


def _ask_due_date(current: Optional[date]) -> Optional[date]:
    """Blank keeps the current due date, "-" clears it."""
    shown = current.isoformat() if current else "none"
    value = _ask(f"Due date YYYY-MM-DD [{shown}] (- to clear): ")
    if not value:
        return current
    if value == "-":
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        print("Invalid date, expected YYYY-MM-DD. Keeping the current due date.")
        return current


def _choose(prompt: str, options: list) -> Optional[str]:
    for i, option in enumerate(options, 1):
        print(f"  {i}. {option}")
    value = _ask(prompt)
    if not value:
        return None
    if value.isdigit() and 1 <= int(value) <= len(options):
        return options[int(value) - 1]
    print("Invalid choice.")
    return None


def student_login(context: AppContext) -> None:
    student_id = _ask("Student ID: ")
    if not student_id:
        print("Student ID cannot be empty.")
    elif not context.session.login(UserRole.STUDENT, student_id):
        print("Invalid Student ID. Please check the format and try again.")
    else:
        print(f"\nWelcome, {context.session.user.name}.")


def admin_login(context: AppContext) -> None:
    username = _ask("Username: ")
    password = _ask("Password: ")
    if context.session.login(
        UserRole.ADMIN, ADMIN_USER_ID, username=username, password=password
    ):
        print(f"\nWelcome, {context.session.user.name}.")
        publish_due_alerts(
            context.complaints.complaints, context.notifications, context.today()
        )
    else:
        print("Invalid admin credentials.")


def submit_complaint(context: AppContext) -> None:
    categories = [c.value for c in ComplaintCategory]
    category = _choose("Category (number, empty for Academic): ", categories)

    keywords = _ask("Keywords for the AI assistant (empty to write it yourself): ")
    description = ""
    if keywords:
        try:
            description = context.description_assistant.generate_description(keywords)
            print(f"\nSuggested description:\n{description}\n")
            if _ask("Use this description? [y/N]: ").lower() != "y":
                description = ""
        except (ValidationError, AssistantError) as e:
            print(str(e))
    if not description:
        description = _ask("Description: ")

    attachment = None
    path = _ask("Attachment path (optional): ")
    try:
        if path:
            file_path = Path(path).expanduser()
            attachment = build_attachment(file_path.name, file_path.read_bytes())
        context.complaints.create(
            ComplaintDraft(
                category=category or ComplaintCategory.ACADEMIC,
                description=description,
            ),
            context.session.user,
            attachment,
        )
    except OSError:
        context.notifications.show("Failed to read file.", NotificationSeverity.ERROR)
        return
    except ValidationError as e:
        context.notifications.show(str(e), NotificationSeverity.ERROR)
        return
    context.notifications.show("Complaint submitted successfully!")


def list_complaints(context: AppContext, role: UserRole) -> None:
    search = _ask("Search (optional): ")
    if role == UserRole.STUDENT:
        complaints = filter_student_view(
            context.complaints.complaints, context.session.user.id, search
        )
    else:
        status = _choose("Status (number, empty for all): ", [s.value for s in ComplaintStatus])
        complaints = filter_admin_view(
            context.complaints.complaints, status=status or ALL, search=search
        )
    if not complaints:
        print("No complaints found.")
        return
    print()
    for complaint in complaints:
        print_complaint_line(complaint)
    print()


def view_complaint(context: AppContext, role: UserRole) -> None:
    complaint = context.complaints.get(_ask("Complaint ID: "))
    if complaint is None or (
        role == UserRole.STUDENT and complaint.student_id != context.session.user.id
    ):
        print("Complaint not found.")
        return
    if role == UserRole.ADMIN:
        complaint = context.complaints.mark_read(complaint.id) or complaint
    print_complaint(complaint, show_admin_notes=(role == UserRole.ADMIN))


def update_status(context: AppContext) -> None:
    complaint_id = _ask("Complaint ID: ")
    current = context.complaints.get(complaint_id)
    if current is None:
        print("Complaint not found.")
        return
    status = _choose("New status (number): ", [s.value for s in ComplaintStatus])
    if status is None:
        return
    due_date = _ask_due_date(current.due_date)
    if context.complaints.update_status(complaint_id, ComplaintStatus(status), due_date):
        context.notifications.show(f"Complaint {complaint_id} updated successfully.")
    else:
        print("Complaint not found.")


def update_notes(context: AppContext) -> None:
    complaint_id = _ask("Complaint ID: ")
    notes = _ask("Notes: ")
    if context.complaints.update_notes(complaint_id, notes):
        context.notifications.show(f"Notes for complaint {complaint_id} updated.")
    else:
        print("Complaint not found.")


def show_analytics(context: AppContext) -> None:
    summary = summarize(context.complaints.complaints)
    print("\n" + "=" * 70)
    print(f"Total: {summary['total']}  Resolved: {summary['resolved']}  "
          f"In Progress: {summary['in_progress']}  Pending: {summary['pending']}")
    print("\nBy category:")
    for category, count in summary["by_category"].items():
        print(f"  {category:<20} {count}")
    print("=" * 70 + "\n")


def export_report(context: AppContext) -> None:
    report_filter = ReportFilter(
        start_date=_ask_date("Start date YYYY-MM-DD (optional): "),
        end_date=_ask_date("End date YYYY-MM-DD (optional): "),
    )
    snapshot = build_report(
        context.complaints.complaints,
        report_filter,
        generated_at=context.clock(),
        timezone=context.timezone,
    )
    if not len(snapshot):
        print("No complaints match the selected filters.")
        return
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    output = DATA_DIR / report_filename(context.today())
    output.write_text(to_csv(snapshot), encoding="utf-8")
    print(f"Report with {len(snapshot)} complaints saved to {output}")


def show_profile(context: AppContext) -> None:
    user = context.session.user
    print("\n" + "=" * 70)
    print(f"Name:       {user.name}")
    print(f"ID:         {user.id}")
    print(f"Department: {user.department or '-'}")
    print(f"Level:      {user.level or '-'}")
    print(f"Email:      {user.email or '-'}")
    print(f"Phone:      {user.phone or '-'}")
    print("=" * 70 + "\n")


_STUDENT_COMMANDS = {
    ("l", "list"): lambda ctx: list_complaints(ctx, UserRole.STUDENT),
    ("n", "new"): submit_complaint,
    ("v", "view"): lambda ctx: view_complaint(ctx, UserRole.STUDENT),
    ("p", "profile"): show_profile,
}

_ADMIN_COMMANDS = {
    ("l", "list"): lambda ctx: list_complaints(ctx, UserRole.ADMIN),
    ("v", "view"): lambda ctx: view_complaint(ctx, UserRole.ADMIN),
    ("u", "status"): update_status,
    ("t", "notes"): update_notes,
    ("an", "stats"): show_analytics,
    ("r", "report"): export_report,
}


def _lookup(commands: dict, user_input: str):
    for names, handler in commands.items():
        if user_input in names:
            return handler
    return None


def run_cli(context: AppContext) -> None:
    """Run the command loop until the user quits."""
    unsubscribe = context.notifications.subscribe(print_notification)
    try:
        while True:
            user = context.session.user
            role = user.role if user else None
            print_commands(role)
            user_input = _ask("Enter command: ").lower()

            if user_input in ("q", "quit"):
                print("\nGoodbye.")
                return

            if role is None:
                if user_input in ("s", "student-login"):
                    student_login(context)
                elif user_input in ("a", "admin-login"):
                    admin_login(context)
                else:
                    print("\n❌ Invalid command, please try again.\n")
                continue

            if user_input in ("o", "logout"):
                context.session.logout()
                print("\nLogged out.")
                continue

            commands = _STUDENT_COMMANDS if role == UserRole.STUDENT else _ADMIN_COMMANDS
            handler = _lookup(commands, user_input)
            if handler is None:
                print("\n❌ Invalid command, please try again.\n")
                continue
            handler(context)
    finally:
        unsubscribe()


def main() -> None:
    """Main entry point."""
    setup_logging()
    print_banner()
    context = build_context()
    try:
        run_cli(context)
    except (KeyboardInterrupt, EOFError):
        print("\n\nInterrupted by user.")
    except Exception as e:
        logger.error("CLI failed: %s", e)
        raise
    finally:
        context.dispose()


if __name__ == "__main__":
    main()
