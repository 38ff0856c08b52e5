from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from app.core.config import settings
from app.core.exceptions import (
    AccountLockedException,
    EmailAlreadyExistsException,
    InvalidCredentialsException,
    InvalidTokenException,
    JobApplicationNotFoundException,
    SanitizationError,
)
from app.core.security import decode_token
from app.models.job_application import ApplicationStatus, JobApplication
from app.models.notification import NotificationType
from app.services import auth_service as auth_module
from app.services.auth_service import AuthService
from app.services.job_application_service import JobApplicationService, to_columns


def _returns(value):
    async def fake(*args, **kwargs):
        return value

    return fake


class Recorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))


# ── Login lockout ──


@pytest.fixture
def auth(monkeypatch):
    service = AuthService()
    monkeypatch.setattr(auth_module, "verify_password", lambda plain, hashed: plain == hashed)
    return service


async def test_login_success_resets_counters(auth, fake_db, user_factory, monkeypatch):
    user = user_factory(password_hash="pw", failed_login_attempts=3)
    monkeypatch.setattr(auth.user_repo, "get_by_email", _returns(user))

    tokens = await auth.login(fake_db, email=" Ada@Example.com ", password="pw")

    assert decode_token(tokens.access_token)["sub"] == str(user.id)
    assert user.failed_login_attempts == 0
    assert user.last_seen_at is not None
    assert fake_db.commits == 1


async def test_unknown_email_is_invalid_credentials(auth, fake_db, monkeypatch):
    monkeypatch.setattr(auth.user_repo, "get_by_email", _returns(None))

    with pytest.raises(InvalidCredentialsException):
        await auth.login(fake_db, email="nobody@example.com", password="pw")


async def test_inactive_user_cannot_login(auth, fake_db, user_factory, monkeypatch):
    monkeypatch.setattr(auth.user_repo, "get_by_email", _returns(user_factory(password_hash="pw", is_active=False)))

    with pytest.raises(InvalidCredentialsException):
        await auth.login(fake_db, email="ada@example.com", password="pw")


async def test_repeated_failures_lock_the_account(auth, fake_db, user_factory, monkeypatch):
    user = user_factory(password_hash="pw")
    monkeypatch.setattr(auth.user_repo, "get_by_email", _returns(user))

    for attempt in range(1, settings.max_failed_logins):
        with pytest.raises(InvalidCredentialsException):
            await auth.login(fake_db, email="ada@example.com", password="nope")
        assert user.failed_login_attempts == attempt

    with pytest.raises(AccountLockedException) as exc_info:
        await auth.login(fake_db, email="ada@example.com", password="nope")

    assert exc_info.value.code == "ACCOUNT_LOCKED"
    assert user.failed_login_attempts == 0
    assert user.lockout_until > datetime.now(timezone.utc)

    # Correct password is refused while locked
    with pytest.raises(AccountLockedException):
        await auth.login(fake_db, email="ada@example.com", password="pw")


async def test_expired_lockout_allows_login(auth, fake_db, user_factory, monkeypatch):
    user = user_factory(password_hash="pw", lockout_until=datetime.now(timezone.utc) - timedelta(minutes=1))
    monkeypatch.setattr(auth.user_repo, "get_by_email", _returns(user))

    await auth.login(fake_db, email="ada@example.com", password="pw")

    assert user.lockout_until is None


async def test_register_sends_welcome_and_rejects_duplicates(auth, fake_db, user_factory, monkeypatch):
    created = user_factory()
    notify = Recorder()
    monkeypatch.setattr(auth.user_repo, "email_exists", _returns(False))
    monkeypatch.setattr(auth.user_repo, "create", _returns(created))
    monkeypatch.setattr(auth_module, "hash_password", lambda password: f"hashed:{password}")
    monkeypatch.setattr(auth.notifications, "notify", notify)

    tokens = await auth.register(fake_db, email="Ada@Example.com", password="password1", full_name="Ada")

    assert decode_token(tokens.refresh_token)["type"] == "refresh"
    assert notify.calls[0][0][2] == NotificationType.SYSTEM_ANNOUNCEMENT
    assert fake_db.commits == 1

    monkeypatch.setattr(auth.user_repo, "email_exists", _returns(True))
    with pytest.raises(EmailAlreadyExistsException):
        await auth.register(fake_db, email="ada@example.com", password="password1")


async def test_refresh_rejects_access_tokens(auth, fake_db, user_factory):
    access = auth._generate_tokens(user_factory()).access_token

    with pytest.raises(InvalidTokenException):
        await auth.refresh(fake_db, refresh_token=access)


# ── Job applications ──


def test_to_columns_converts_types():
    resume_id = uuid4()
    values = to_columns({
        "status": "Interview",
        "priority": "",
        "applied_date": "2024-01-15",
        "interview_date": "2024-02-01",
        "deadline": None,
        "resume_id": str(resume_id),
    })

    assert values["status"] == "interview"
    assert "priority" not in values
    assert values["applied_date"] == date(2024, 1, 15)
    assert values["interview_date"] == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert values["deadline"] is None
    assert values["resume_id"] == resume_id


def test_to_columns_rejects_unknown_status():
    with pytest.raises(SanitizationError) as exc_info:
        to_columns({"status": "ghosted"})

    assert exc_info.value.field == "status"


def _application(user, **overrides):
    now = datetime.now(timezone.utc)
    values = dict(
        id=uuid4(),
        user_id=user.id,
        company="Globex",
        job_title="Engineer",
        status="applied",
        priority="medium",
        status_history=[{"status": "applied", "changed_at": now.isoformat(), "note": None}],
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return JobApplication(**values)


@pytest.fixture
def applications(monkeypatch):
    service = JobApplicationService()
    service.notify = Recorder()
    monkeypatch.setattr(service.notifications, "notify", service.notify)
    return service


async def test_status_change_appends_history_and_notifies(applications, fake_db, user, monkeypatch):
    application = _application(user)
    monkeypatch.setattr(applications.application_repo, "get_for_user", _returns(application))

    result = await applications.update_status(
        fake_db, user, application.id, status=ApplicationStatus.INTERVIEW, note="Phone screen booked"
    )

    assert result.status == ApplicationStatus.INTERVIEW
    assert [h.status for h in result.status_history] == [ApplicationStatus.APPLIED, ApplicationStatus.INTERVIEW]
    assert result.status_history[-1].note == "Phone screen booked"
    args, kwargs = applications.notify.calls[0]
    assert args[2] == NotificationType.JOB_APPLICATION_UPDATED
    assert args[4] == "Engineer at Globex moved from applied to interview."
    assert fake_db.commits == 1


async def test_same_status_without_note_is_a_no_op(applications, fake_db, user, monkeypatch):
    application = _application(user)
    monkeypatch.setattr(applications.application_repo, "get_for_user", _returns(application))

    result = await applications.update_status(fake_db, user, application.id, status=ApplicationStatus.APPLIED)

    assert len(result.status_history) == 1
    assert applications.notify.calls == []
    assert fake_db.commits == 0


async def test_other_users_application_is_not_found(applications, fake_db, user, monkeypatch):
    monkeypatch.setattr(applications.application_repo, "get_for_user", _returns(None))

    with pytest.raises(JobApplicationNotFoundException):
        await applications.update_status(fake_db, user, uuid4(), status=ApplicationStatus.OFFER)


async def test_board_has_a_column_per_status(applications, fake_db, user, monkeypatch):
    rows = [
        _application(user),
        _application(user, status="offer"),
        _application(user, status="offer", company="Initech"),
    ]
    monkeypatch.setattr(applications.application_repo, "get_all_for_user", _returns(rows))

    board = await applications.get_board(fake_db, user)

    assert [c.status for c in board.columns] == list(ApplicationStatus)
    counts = {c.status.value: c.count for c in board.columns}
    assert counts["applied"] == 1
    assert counts["offer"] == 2
    assert counts["rejected"] == 0
    assert board.total == 3
