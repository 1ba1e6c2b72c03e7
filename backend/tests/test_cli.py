"""Flask CLI commands: bootstrap, staff inspection and ledger verification."""

from clubpos.models import StaffUser


def _run(app, *args):
    return app.test_cli_runner().invoke(args=list(args))


def test_system_init_creates_admin_once(app, db_session):
    result = _run(app, "system", "init", "--username", "boss", "--password", "Secret123")
    assert result.exit_code == 0, result.output
    assert "Created admin: boss" in result.output

    again = _run(app, "system", "init", "--username", "boss")
    assert again.exit_code == 0
    assert "already exists" in again.output
    assert db_session.query(StaffUser).filter_by(username="boss").one().role == "ADMIN"


def test_system_init_rejects_weak_password(app, db_session):
    result = _run(app, "system", "init", "--password", "weak")
    assert result.exit_code == 1
    assert db_session.query(StaffUser).count() == 0


def test_staff_create_and_list(app, db_session):
    result = _run(
        app, "staff", "create",
        "--username", "caja1", "--name", "Caja Uno", "--password", "Secret123", "--role", "sales",
    )
    assert result.exit_code == 0, result.output

    listing = _run(app, "staff", "list")
    assert "caja1" in listing.output
    assert "SALES" in listing.output


def test_ledger_verify(app, pos, make_member):
    member = make_member()
    pos.wallet.deposit(member.id, "30")

    result = _run(app, "ledger", "verify")
    assert result.exit_code == 0
    assert "1 members balanced" in result.output

    # A balance changed behind the ledger's back
    member.balance_cents += 1
    pos.session.commit()

    result = _run(app, "ledger", "verify")
    assert result.exit_code == 1
    assert f"Member {member.id}" in result.output
