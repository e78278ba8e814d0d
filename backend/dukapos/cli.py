# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/dukapos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create tables (if missing) and the bootstrap super admin. Idempotent.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list [--role MERCHANT]
#   List users with role and status.
# - python -m flask users create --phone +255711000001 --name "Asha" --password "secret123" --role MERCHANT --business-name "Asha Shop"
#   Create a user as the operator (no provisioning rules applied).
# - python -m flask users set-status +255711000001 suspended
#   Change a user's status; leaving "active" ends their sessions.
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions
#   Delete expired sessions.
# - python -m flask maintenance cleanup-security-events --retention-days 90
#   Delete security events older than the retention window.

import click
from flask.cli import with_appcontext

from .extensions import db
from .errors import DomainError
from .models import User
from .permissions import Role, UserStatus
from .services import maintenance_service, session_service, user_service
from .services.auth_service import ensure_super_admin
from .validation import validate_payload


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize dukapos: create tables and the bootstrap super admin.

    SECURITY: The default super admin password is public. Change it!
    """
    click.echo("START Initializing dukapos...")
    db.create_all()
    click.echo("PASS Tables ready")

    admin = ensure_super_admin()
    if admin is None:
        click.echo("WARN Super admin bootstrap disabled (SUPER_ADMIN_BOOTSTRAP=false)")
    else:
        click.echo(f"PASS Super admin: {admin.phone_number} (ID: {admin.id})")
    click.echo("DONE dukapos initialized")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@click.option('--role', type=click.Choice([r.value for r in Role]), help='Filter by role')
@with_appcontext
def list_users(role):
    """List all users with role and status."""
    query = db.session.query(User)
    if role:
        query = query.filter_by(role=role)

    users = query.order_by(User.created_at.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'ID':<38} {'Phone':<16} {'Name':<24} {'Role':<12} {'Status'}")
    click.echo("="*100)

    for user in users:
        click.echo(f"{user.id:<38} {user.phone_number:<16} {user.full_name[:24]:<24} {user.role:<12} {user.status}")

    click.echo("="*100 + "\n")


@users_group.command('create')
@click.option('--phone', prompt=True, help='Phone number (login identifier)')
@click.option('--name', prompt=True, help='Full name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice([r.value for r in Role]), default=Role.MERCHANT.value, show_default=True)
@click.option('--email', default=None)
@click.option('--business-name', default=None, help='Creates the business for a MERCHANT')
@with_appcontext
def create_user_cli(phone, name, password, role, email, business_name):
    """Create a user as the operator."""
    payload = {"full_name": name, "phone_number": phone, "email": email, "business_name": business_name}
    try:
        patch = validate_payload(
            model=User,
            payload={k: v for k, v in payload.items() if v},
            policy=user_service.USER_POLICY,
            partial=False,
        )
        user = user_service.provision_user(
            patch=patch,
            role=Role(role),
            password=password,
            created_by_id=None,
        )
    except DomainError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)

    click.echo(f"PASS Created user: {user.full_name} ({user.phone_number}) with role '{user.role}'")
    click.echo("SECURITY Password securely hashed with bcrypt")


@users_group.command('set-status')
@click.argument('phone')
@click.argument('status', type=click.Choice([s.value for s in UserStatus]))
@with_appcontext
def set_status_cli(phone, status):
    """Set a user's status by phone number."""
    user = db.session.query(User).filter_by(phone_number=phone).first()
    if not user:
        click.echo(f"FAIL No user with phone {phone}")
        raise SystemExit(1)

    user.status = status
    if status != UserStatus.ACTIVE.value:
        ended = session_service.destroy_all_user_sessions(user.id, commit=False)
        click.echo(f"PASS Ended {ended} session(s)")
    db.session.commit()
    click.echo(f"PASS {user.full_name} is now {status}")


@click.group('maintenance')
def maintenance_group():
    """Maintenance and retention commands."""


@maintenance_group.command('cleanup-sessions')
@with_appcontext
def cleanup_sessions_cli():
    """Delete expired sessions."""
    deleted = session_service.cleanup_expired_sessions()
    click.echo(f"Deleted {deleted} expired sessions.")


@maintenance_group.command('cleanup-security-events')
@click.option('--retention-days', type=int, default=90, show_default=True)
@with_appcontext
def cleanup_security_events_cli(retention_days):
    """
    Cleanup old security events.

    Default retention: 90 days.
    """
    deleted = maintenance_service.cleanup_security_events(retention_days=retention_days)
    click.echo(f"Deleted {deleted} security events older than {retention_days} days.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
