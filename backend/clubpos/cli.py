# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/clubpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to clubpos (PowerShell: $env:FLASK_APP="clubpos").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--username admin] [--password "Password123"]
#   Idempotent bootstrap: creates tables and the first admin account.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Staff inspection/bootstrap:
# - python -m flask staff list
#   List all staff accounts with roles and active status.
# - python -m flask staff create --username ana --name "Ana" --password "Password123" --role SALES
#   Create a staff account (prompts if options are omitted).
#
# Ledger checks:
# - python -m flask ledger verify
#   Recompute every member balance from ledger history and report mismatches.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Member, StaffUser
from .permissions import Role
from .services.auth_service import PasswordValidationError, StaffError, create_staff
from .services.ledger_service import Ledger


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--username', default='admin', help='Admin username')
@click.option('--name', default='Administrator', help='Admin display name')
@click.option('--password', default='Password123', help='Admin password')
@with_appcontext
def init_system(username, name, password):
    """
    Initialize the club POS: schema and first admin account.

    Safe to run twice; an existing admin account is left untouched.

    SECURITY: Change the default password immediately in production!
    """
    click.echo("START Initializing club POS...")

    db.create_all()
    click.echo("PASS Schema ready")

    existing = db.session.query(StaffUser).filter_by(username=username.strip().lower()).first()
    if existing:
        click.echo(f"WARN  Staff user '{existing.username}' already exists, skipping...")
        return

    try:
        staff = create_staff(username=username, name=name, password=password, role=Role.ADMIN)
    except (PasswordValidationError, StaffError) as e:
        click.echo(f"FAIL Could not create admin '{username}': {e}")
        raise SystemExit(1)

    click.echo(f"PASS Created admin: {staff.username} (ID: {staff.id})")
    click.echo("\nSECURITY Change the admin password immediately in production!")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA, including the transaction ledger!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('staff')
def staff_group():
    """Staff account inspection and bootstrap."""


@staff_group.command('list')
@with_appcontext
def list_staff_cli():
    """List all staff accounts."""
    staff_users = db.session.query(StaffUser).order_by(StaffUser.id.asc()).all()

    if not staff_users:
        click.echo("No staff users found.")
        return

    click.echo("\n" + "=" * 70)
    click.echo(f"{'ID':<5} {'Username':<20} {'Name':<25} {'Role':<10} {'Active'}")
    click.echo("=" * 70)
    for staff in staff_users:
        active_str = "Yes" if staff.is_active else "No"
        click.echo(f"{staff.id:<5} {staff.username:<20} {staff.name:<25} {staff.role:<10} {active_str}")
    click.echo("=" * 70 + "\n")


@staff_group.command('create')
@click.option('--username', prompt=True, help='Login name')
@click.option('--name', prompt=True, help='Display name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option(
    '--role',
    type=click.Choice([r.value for r in Role], case_sensitive=False),
    default=Role.SALES.value,
    show_default=True,
)
@with_appcontext
def create_staff_cli(username, name, password, role):
    """Create a staff account."""
    try:
        staff = create_staff(username=username, name=name, password=password, role=role)
    except (PasswordValidationError, StaffError) as e:
        click.echo(f"FAIL {e}")
        raise SystemExit(1)
    click.echo(f"PASS Created staff user: {staff.username} (ID: {staff.id}) with role '{staff.role}'")


@click.group('ledger')
def ledger_group():
    """Ledger consistency checks."""


@ledger_group.command('verify')
@with_appcontext
def verify_ledger():
    """
    Check that every member's balance equals deposits minus purchases.

    Exits with status 1 when any member is out of balance.
    """
    ledger = Ledger(db.session)
    members = db.session.query(Member).order_by(Member.id.asc()).all()

    mismatches = 0
    for member in members:
        expected = ledger.balance_from_history(member.id)
        if expected != member.balance_cents:
            mismatches += 1
            click.echo(
                f"FAIL Member {member.id} ({member.full_name}): "
                f"balance={member.balance_cents} ledger={expected}"
            )

    if mismatches:
        click.echo(f"\nFAIL {mismatches} of {len(members)} members out of balance")
        raise SystemExit(1)
    click.echo(f"PASS {len(members)} members balanced against the ledger")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(staff_group)
    app.cli.add_command(ledger_group)
