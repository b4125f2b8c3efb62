"""Tests for credential checks and input validators."""
import pytest
from marshmallow import ValidationError

from models.schemas.common import (
    coerce_page_param,
    parse_file_id,
    validate_user_id,
    validate_user_password,
)
from models.schemas.user import UserCredentialsSchema
from models.user import User
from utils.credentials import CredentialVerifier
from utils.errors import Conflict, InvalidCredentials, ValidationFailed


@pytest.fixture
def verifier(db):
    return CredentialVerifier(db)


def test_register_stores_hash_only(verifier, db):
    verifier.register("1234567", "abcd")

    user = db.get(User, "1234567")
    assert user.password_hash != "abcd"
    assert user.password_hash.startswith("$argon2id$")
    assert "m=65536,t=3,p=4" in user.password_hash
    assert "password_hash" not in user.to_dict()


def test_check_credentials(verifier):
    verifier.register("user@example.com", "abcd")

    assert verifier.check_credentials("user@example.com", "abcd") is True


def test_wrong_password_and_unknown_user_look_the_same(verifier):
    verifier.register("user@example.com", "abcd")

    with pytest.raises(InvalidCredentials) as wrong_password:
        verifier.check_credentials("user@example.com", "abce")
    with pytest.raises(InvalidCredentials) as unknown_user:
        verifier.check_credentials("nobody@example.com", "abcd")

    assert wrong_password.value.message == unknown_user.value.message == "incorrect id or password"
    assert wrong_password.value.status_code == 403


def test_unreadable_hash_is_invalid_credentials(verifier, db):
    db.new(User(id="1234567", password_hash="plain-text"))
    db.save()

    with pytest.raises(InvalidCredentials):
        verifier.check_credentials("1234567", "plain-text")


def test_register_duplicate_id(verifier):
    verifier.register("1234567", "abcd")
    with pytest.raises(Conflict):
        verifier.register("1234567", "efgh")


@pytest.mark.parametrize(
    "password, ok",
    [
        ("ab1", False),
        ("abcd", True),
        ("abcdefghij", True),
        ("01234567890", False),
        ("   ab   ", False),
        ("  abcd  ", True),
        ("", False),
    ],
)
def test_password_length(password, ok):
    if ok:
        validate_user_password(password)
    else:
        with pytest.raises(ValidationError):
            validate_user_password(password)


@pytest.mark.parametrize(
    "user_id, ok",
    [
        ("1234567", True),
        ("123456789012345", True),
        ("123456", False),
        ("1234567890123456", False),
        ("12345ab67", False),
        ("+1234567", False),
        ("1234567\n", False),
        ("١٢٣٤٥٦٧", False),
        ("user@example.com", True),
        ("user@", False),
        ("", False),
    ],
)
def test_user_id_shape(user_id, ok):
    if ok:
        validate_user_id(user_id)
    else:
        with pytest.raises(ValidationError):
            validate_user_id(user_id)


def test_credentials_schema_messages():
    schema = UserCredentialsSchema()

    with pytest.raises(ValidationError) as exc:
        schema.load({"password": "abcd"})
    assert exc.value.messages["id"] == ['"id" param is required']

    data = schema.load({"id": "1234567", "password": " abcd ", "extra": 1})
    assert data == {"id": "1234567", "password": " abcd "}


def test_parse_file_id():
    assert parse_file_id("12") == 12
    assert parse_file_id("1.5") == 1.5
    with pytest.raises(ValidationFailed) as exc:
        parse_file_id("abc")
    assert exc.value.message == "expected id of number type"
    assert exc.value.status_code == 405
    with pytest.raises(ValidationFailed):
        parse_file_id("")
    with pytest.raises(ValidationFailed):
        parse_file_id("nan")


def test_coerce_page_param():
    assert coerce_page_param(None, 10) == 10
    assert coerce_page_param("", 10) == 10
    assert coerce_page_param("3", 10) == 3
    assert coerce_page_param("abc", 10) == 0
    assert coerce_page_param("-4", 10) == 0
    assert coerce_page_param("1e30", 10) == 1_000_000
    assert coerce_page_param("1e400", 10) == 0
