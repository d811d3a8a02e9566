"""Employee Manager terminal client.

One sub-command per screen. Each command fetches fresh data; the only state
kept between runs is the login session.

Usage:
    employee-manager signup --username alice123 --email alice@x.com
    employee-manager login --email alice@x.com
    employee-manager list
    employee-manager search --department eng
    employee-manager add --first-name Jo --last-name Lee --email jo@x.com \\
        --phone 555 --department IT --position Developer --salary 50000
    employee-manager edit <id> --salary 55000 --picture ./jo.png
    employee-manager delete <id>
"""

import argparse
import os
import sys
from getpass import getpass
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
from rich.console import Console
from rich.table import Table

from employee_manager.client.api import DEFAULT_API_URL, ApiError, EmployeeApiClient, LoginRequiredError
from employee_manager.client.session import SessionStore

console = Console()

# (flag, form field, help)
EMPLOYEE_FIELDS = [
    ("--first-name", "firstName", "First name"),
    ("--last-name", "lastName", "Last name"),
    ("--email", "email", "Work email"),
    ("--phone", "phoneNumber", "Phone number"),
    ("--department", "department", "Department"),
    ("--position", "position", "Position"),
    ("--salary", "salary", "Salary (>= 0)"),
    ("--date-of-joining", "dateOfJoining", "Joining date (YYYY-MM-DD)"),
]

# Fields the edit screen sends back unchanged when not overridden
EDITABLE_FIELDS = [field for _, field, _ in EMPLOYEE_FIELDS]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="employee-manager",
        description="Manage employee records from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--api-url",
        default=os.getenv("EMPLOYEE_MANAGER_API_URL", DEFAULT_API_URL),
        help="API base URL (env: EMPLOYEE_MANAGER_API_URL)",
    )
    parser.add_argument("--session-file", type=Path, default=None, help="Where the login session is kept")

    commands = parser.add_subparsers(dest="command", required=True)

    signup = commands.add_parser("signup", help="Create an account and log in")
    signup.add_argument("--username", required=True)
    signup.add_argument("--email", required=True)
    signup.add_argument("--password", help="Prompted for when omitted")

    login = commands.add_parser("login", help="Log in and store the session")
    login.add_argument("--email", required=True)
    login.add_argument("--password", help="Prompted for when omitted")

    commands.add_parser("logout", help="Forget the stored session")
    commands.add_parser("whoami", help="Show the logged-in user")
    commands.add_parser("list", help="List all employees, newest first")

    search = commands.add_parser("search", help="Search by department and/or position")
    search.add_argument("--department")
    search.add_argument("--position")

    view = commands.add_parser("view", help="Show one employee")
    view.add_argument("id")

    add = commands.add_parser("add", help="Create an employee")
    edit = commands.add_parser("edit", help="Update an employee; unspecified fields keep their values")
    edit.add_argument("id")
    for sub in (add, edit):
        for flag, field, help_text in EMPLOYEE_FIELDS:
            sub.add_argument(flag, dest=field, help=help_text)
        sub.add_argument("--picture", type=Path, help="Profile picture file")

    delete = commands.add_parser("delete", help="Delete an employee and its picture")
    delete.add_argument("id")
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    return parser.parse_args(argv)


def employee_table(employees: List[Dict[str, Any]], title: str = "Employees") -> Table:
    table = Table(title=title)
    for column in ("ID", "Name", "Email", "Department", "Position", "Salary"):
        table.add_column(column, justify="right" if column == "Salary" else "left")
    for e in employees:
        table.add_row(
            e["id"],
            f"{e['firstName']} {e['lastName']}",
            e["email"],
            e["department"],
            e["position"],
            f"{e['salary']:,.2f}",
        )
    return table


def print_employee(e: Dict[str, Any]) -> None:
    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    rows = [
        ("ID", e["id"]),
        ("Name", f"{e['firstName']} {e['lastName']}"),
        ("Email", e["email"]),
        ("Phone", e["phoneNumber"]),
        ("Department", e["department"]),
        ("Position", e["position"]),
        ("Salary", f"{e['salary']:,.2f}"),
        ("Joined", str(e.get("dateOfJoining", ""))[:10]),
        ("Picture", e.get("profilePicture") or "-"),
    ]
    for label, value in rows:
        table.add_row(label, value)
    console.print(table)


def form_fields(args: argparse.Namespace) -> Dict[str, Any]:
    return {field: getattr(args, field) for field in EDITABLE_FIELDS if getattr(args, field) is not None}


def run_command(client: EmployeeApiClient, args: argparse.Namespace) -> int:
    if args.command == "signup":
        password = args.password or getpass("Password: ")
        user = client.signup(args.username, args.email, password)
        console.print(f"[green]✓[/green] Account created. Logged in as [bold]{user['username']}[/bold]")
    elif args.command == "login":
        password = args.password or getpass("Password: ")
        user = client.login(args.email, password)
        console.print(f"[green]✓[/green] Logged in as [bold]{user['username']}[/bold]")
    elif args.command == "logout":
        client.logout()
        console.print("[green]✓[/green] Logged out")
    elif args.command == "whoami":
        user = client.me()
        console.print(f"{user['username']} <{user['email']}>")
    elif args.command == "list":
        employees = client.list_employees()
        if not employees:
            console.print("[dim]No employees yet[/dim]")
        else:
            console.print(employee_table(employees))
    elif args.command == "search":
        employees = client.search_employees(department=args.department, position=args.position)
        if not employees:
            console.print("[dim]No employees match[/dim]")
        else:
            console.print(employee_table(employees, title=f"{len(employees)} match(es)"))
    elif args.command == "view":
        print_employee(client.get_employee(args.id))
    elif args.command == "add":
        employee = client.create_employee(form_fields(args), picture=args.picture)
        console.print(f"[green]✓[/green] Employee created ({employee['id']})")
    elif args.command == "edit":
        # Full-record update: start from the stored record
        current = client.get_employee(args.id)
        fields = {field: current.get(field) for field in EDITABLE_FIELDS}
        fields.update(form_fields(args))
        employee = client.update_employee(args.id, fields, picture=args.picture)
        console.print(f"[green]✓[/green] Employee updated ({employee['id']})")
    elif args.command == "delete":
        if not args.yes:
            answer = console.input(f"Delete employee [bold]{args.id}[/bold]? [y/N] ").strip().lower()
            if answer not in ("y", "yes"):
                console.print("[dim]Cancelled[/dim]")
                return 0
        console.print(f"[green]✓[/green] {client.delete_employee(args.id)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    session = SessionStore(args.session_file)

    with EmployeeApiClient(args.api_url, session=session) as client:
        try:
            return run_command(client, args)
        except LoginRequiredError as exc:
            console.print(f"[yellow]{exc.message}.[/yellow] Run [bold]employee-manager login --email <email>[/bold]")
            return 1
        except ApiError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc.display_message}")
            return 1
        except httpx.TransportError as exc:
            console.print(f"[bold red]Cannot reach {args.api_url}:[/bold red] {exc}")
            return 1


if __name__ == "__main__":
    sys.exit(main())
