import uuid

import pytest
from jose import jwt

from gigmarket.core.errors import Unauthorized


def test_access_token_claims(tokens):
    user_id = uuid.uuid4()

    claims = tokens.verify_access_token(tokens.issue_access_token(user_id, "ada@mail.com", "client"))

    assert claims["userId"] == str(user_id)
    assert claims["email"] == "ada@mail.com"
    assert claims["role"] == "client"
    assert claims["type"] == "access"


def test_access_token_expires_after_seven_days(tokens, clock):
    token = tokens.issue_access_token(uuid.uuid4(), "ada@mail.com", "client")

    clock.advance(days=6, hours=23)
    tokens.verify_access_token(token)

    clock.advance(hours=2)
    with pytest.raises(Unauthorized) as exc:
        tokens.verify_access_token(token)
    assert exc.value.message == "Invalid or expired token"


def test_tampered_token_is_rejected(tokens):
    token = tokens.issue_access_token(uuid.uuid4(), "ada@mail.com", "client")
    forged = jwt.encode(jwt.get_unverified_claims(token), "some-other-secret", algorithm="HS256")

    with pytest.raises(Unauthorized):
        tokens.verify_access_token(forged)
    with pytest.raises(Unauthorized):
        tokens.verify_access_token("not-a-jwt")


def test_refresh_token_is_not_an_access_token(tokens):
    token = tokens.issue_refresh_token(uuid.uuid4())

    with pytest.raises(Unauthorized):
        tokens.verify_access_token(token)


def test_refresh_tokens_minted_together_differ(tokens):
    user_id = uuid.uuid4()

    assert tokens.issue_refresh_token(user_id) != tokens.issue_refresh_token(user_id)


def test_reset_token_pair(tokens):
    plain, hashed = tokens.issue_reset_token()

    assert plain != hashed
    assert tokens.hash_reset_token(plain) == hashed
