import pytest
from sqlalchemy import update

from gigmarket.core.errors import BadRequest, Conflict, NotFound, Unauthorized
from gigmarket.models.user import User
from gigmarket.schemas.auth import ProfileUpdateRequest

PASSWORD = "Secret123"


def test_password_is_stored_hashed(db, auth, register):
    session = register("ada@mail.com")
    user = db.get(User, session.user.id)

    assert user.password_hash != PASSWORD
    assert auth.hasher.verify(PASSWORD, user.password_hash)
    assert not auth.hasher.verify("Wrong123", user.password_hash)


def test_register_normalizes_email_and_returns_public_user(register):
    session = register("  Ada@Mail.COM ")

    assert session.user.email == "ada@mail.com"
    assert session.access_token
    assert session.refresh_token
    assert not hasattr(session.user, "password_hash")
    assert not hasattr(session.user, "refresh_token")


def test_duplicate_registration_conflicts(register):
    register("ada@mail.com")

    with pytest.raises(Conflict) as exc:
        register("ADA@mail.com", role="client")

    assert exc.value.message == "User already exists with this email"


def test_wrong_password_and_unknown_email_fail_identically(db, auth, register):
    register("ada@mail.com")

    with pytest.raises(Unauthorized) as wrong:
        auth.login(db, "ada@mail.com", "Wrong123")
    with pytest.raises(Unauthorized) as unknown:
        auth.login(db, "nobody@mail.com", PASSWORD)

    assert type(wrong.value) is type(unknown.value)
    assert wrong.value.message == unknown.value.message == "Invalid email or password"


def test_inactive_user_cannot_login(db, auth, register):
    session = register("ada@mail.com")
    auth.deactivate(db, session.user.id)

    with pytest.raises(Unauthorized) as exc:
        auth.login(db, "ada@mail.com", PASSWORD)

    assert exc.value.message == "Invalid email or password"


def test_login_records_last_login(db, auth, clock, register):
    register("ada@mail.com")

    session = auth.login(db, "ada@mail.com", PASSWORD)

    assert session.user.last_login is not None
    assert session.user.last_login.replace(tzinfo=None) == clock.now().replace(tzinfo=None)


def test_second_login_invalidates_first_refresh_token(db, auth, register):
    register("ada@mail.com")
    first = auth.login(db, "ada@mail.com", PASSWORD)
    second = auth.login(db, "ada@mail.com", PASSWORD)

    assert first.refresh_token != second.refresh_token
    with pytest.raises(Unauthorized):
        auth.refresh(db, first.refresh_token)

    pair = auth.refresh(db, second.refresh_token)
    assert pair.access_token


def test_refresh_rotates_the_token(db, auth, register):
    session = register("ada@mail.com")

    pair = auth.refresh(db, session.refresh_token)

    assert pair.refresh_token != session.refresh_token
    with pytest.raises(Unauthorized) as exc:
        auth.refresh(db, session.refresh_token)
    assert exc.value.message == "Invalid refresh token"

    assert auth.refresh(db, pair.refresh_token).refresh_token != pair.refresh_token


def test_refresh_token_expires(db, auth, clock, register):
    session = register("ada@mail.com")
    clock.advance(days=31)

    with pytest.raises(Unauthorized):
        auth.refresh(db, session.refresh_token)


def test_access_token_cannot_be_used_as_refresh_token(db, auth, register):
    session = register("ada@mail.com")

    with pytest.raises(Unauthorized):
        auth.refresh(db, session.access_token)


def test_logout_clears_refresh_token(db, auth, register):
    session = register("ada@mail.com")

    auth.logout(db, session.user.id)

    assert db.get(User, session.user.id).refresh_token is None
    with pytest.raises(Unauthorized):
        auth.refresh(db, session.refresh_token)


def test_change_password(db, auth, register):
    session = register("ada@mail.com")

    with pytest.raises(BadRequest) as exc:
        auth.change_password(db, session.user.id, "Wrong123", "NewSecret1")
    assert exc.value.message == "Current password is incorrect"

    auth.change_password(db, session.user.id, PASSWORD, "NewSecret1")

    with pytest.raises(Unauthorized):
        auth.login(db, "ada@mail.com", PASSWORD)
    assert auth.login(db, "ada@mail.com", "NewSecret1").user.id == session.user.id


def test_forgot_password_unknown_email(db, auth):
    with pytest.raises(NotFound) as exc:
        auth.forgot_password(db, "nobody@mail.com")

    assert exc.value.message == "No user found with this email address"


def test_forgot_password_stores_only_the_hash(db, auth, tokens, register):
    session = register("ada@mail.com")

    plain = auth.forgot_password(db, "ada@mail.com")
    user = db.get(User, session.user.id)

    assert len(plain) == 64
    assert user.password_reset_token != plain
    assert user.password_reset_token == tokens.hash_reset_token(plain)
    assert user.password_reset_expires is not None


def test_reset_token_works_once(db, auth, register):
    session = register("ada@mail.com")
    plain = auth.forgot_password(db, "ada@mail.com")

    auth.reset_password(db, plain, "Another123")

    user = db.get(User, session.user.id)
    assert user.password_reset_token is None
    assert user.password_reset_expires is None
    assert auth.login(db, "ada@mail.com", "Another123")

    with pytest.raises(BadRequest) as exc:
        auth.reset_password(db, plain, "Third1234")
    assert exc.value.message == "Invalid or expired reset token"


def test_reset_token_expires_after_ten_minutes(db, auth, clock, register):
    register("ada@mail.com")
    plain = auth.forgot_password(db, "ada@mail.com")

    clock.advance(minutes=11)

    with pytest.raises(BadRequest):
        auth.reset_password(db, plain, "Another123")


def test_reset_token_still_valid_before_expiry(db, auth, clock, register):
    register("ada@mail.com")
    plain = auth.forgot_password(db, "ada@mail.com")

    clock.advance(minutes=9)

    auth.reset_password(db, plain, "Another123")


def test_deactivate_blocks_refresh(db, auth, register):
    session = register("ada@mail.com")

    auth.deactivate(db, session.user.id)

    user = db.get(User, session.user.id)
    assert user.is_active is False
    assert user.refresh_token is None
    with pytest.raises(Unauthorized):
        auth.refresh(db, session.refresh_token)


def test_access_token_still_verifies_after_deactivation(db, auth, tokens, register):
    session = register("ada@mail.com")
    auth.deactivate(db, session.user.id)

    claims = tokens.verify_access_token(session.access_token)

    assert claims["userId"] == str(session.user.id)


def test_update_profile(db, auth, register):
    session = register("ada@mail.com")

    patch = ProfileUpdateRequest(
        first_name="Ada",
        skills=["python", "sql"],
        location={"country": "UK", "city": "London"},
    )
    user = auth.update_profile(db, session.user.id, patch)

    assert user.first_name == "Ada"
    assert user.last_name == "User"
    assert user.skills == ["python", "sql"]
    assert user.location.city == "London"
    assert auth.get_profile(db, session.user.id).first_name == "Ada"


def test_update_profile_clears_nullable_fields(db, auth, register):
    session = register("ada@mail.com")
    auth.update_profile(db, session.user.id, ProfileUpdateRequest(bio="Engines.", hourly_rate=80))

    user = auth.update_profile(
        db, session.user.id, ProfileUpdateRequest(bio=None, hourly_rate=None, first_name=None)
    )

    assert user.bio is None
    assert user.hourly_rate is None
    assert user.first_name == "Test"


def test_registration_race_conflicts(db, auth, register, monkeypatch):
    register("ada@mail.com")
    # the other registration committed after this one checked
    monkeypatch.setattr(auth, "_email_taken", lambda *args: False)

    with pytest.raises(Conflict) as exc:
        register("ada@mail.com", role="client")

    assert exc.value.message == "User already exists with this email"
    assert db.query(User).count() == 1


def test_refresh_loses_to_concurrent_rotation(db, auth, register, monkeypatch):
    session = register("ada@mail.com")
    verify = auth.tokens.verify_refresh_token

    def verify_then_rotate_elsewhere(token, db_):
        user_id = verify(token, db_)
        db_.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=None)
            .execution_options(synchronize_session=False)
        )
        return user_id

    monkeypatch.setattr(auth.tokens, "verify_refresh_token", verify_then_rotate_elsewhere)

    with pytest.raises(Unauthorized) as exc:
        auth.refresh(db, session.refresh_token)

    assert exc.value.message == "Invalid refresh token"
    # the swap was rolled back, so the stored token is unchanged
    db.expire_all()
    assert db.get(User, session.user.id).refresh_token == session.refresh_token
