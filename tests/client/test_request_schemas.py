import pytest
from pydantic import ValidationError

from src.app.api.validation import format_errors
from src.client.schemas import (
    ChangePasswordRequest,
    ClientListQuery,
    CreateClientRequest,
    LoginRequest,
    SignupRequest,
    UpdateClientRequest,
)


def violations(schema, data) -> list[dict]:
    with pytest.raises(ValidationError) as exc_info:
        schema.model_validate(data)
    return format_errors(exc_info.value.errors())


def test_create_client_normalizes_input():
    request = CreateClientRequest.model_validate({
        "name": "  Jane Doe ",
        "email": " JANE@X.COM ",
        "client_type": " grower ",
        "phone": "   ",
        "notes": " likes tomatoes ",
    })

    assert request.name == "Jane Doe"
    assert request.email == "jane@x.com"
    assert request.client_type == "grower"
    assert request.status == "prospect"
    assert request.phone is None
    assert request.notes == "likes tomatoes"


def test_create_client_whitespace_name_is_required():
    assert violations(CreateClientRequest, {"name": "   ", "email": "a@x.com", "client_type": "grower"}) == [
        {"field": "name", "message": "Name is required"}
    ]


def test_create_client_length_limits():
    details = violations(CreateClientRequest, {
        "name": "n" * 201,
        "email": "a@x.com",
        "client_type": "grower",
        "phone": "5" * 51,
        "notes": "x" * 5001,
    })

    assert details == [
        {"field": "name", "message": "Must be less than 200 characters"},
        {"field": "phone", "message": "Must be less than 50 characters"},
        {"field": "notes", "message": "Must be less than 5000 characters"},
    ]


def test_update_client_tracks_only_present_keys():
    request = UpdateClientRequest.model_validate({"company": " ", "status": "active"})

    assert request.model_dump(exclude_unset=True) == {"company": None, "status": "active"}


def test_update_client_rejects_null_for_required_columns():
    details = violations(UpdateClientRequest, {"name": None, "notes": None})

    assert [d["field"] for d in details] == ["name"]


def test_update_client_rejects_blank_name():
    assert violations(UpdateClientRequest, {"name": ""}) == [{"field": "name", "message": "Name is required"}]


def test_signup_accepts_camel_case_keys():
    request = SignupRequest.model_validate({
        "fullName": "Gina Grower",
        "email": "Gina@Farm.com",
        "password": "Secret123",
        "confirmPassword": "Secret123",
    })

    assert request.full_name == "Gina Grower"
    assert request.email == "gina@farm.com"
    assert request.confirm_password == "Secret123"


@pytest.mark.parametrize("password, message", [
    ("Sec1", "Password must be at least 8 characters"),
    ("Secret" * 22 + "1", "Password must be less than 128 characters"),
    ("secret123", "Password must contain at least one lowercase letter, one uppercase letter, and one number"),
    ("SecretPass", "Password must contain at least one lowercase letter, one uppercase letter, and one number"),
])
def test_signup_password_rules_report_first_failure(password, message):
    details = violations(SignupRequest, {
        "fullName": "Gina Grower",
        "email": "gina@farm.com",
        "password": password,
        "confirmPassword": password,
    })

    assert details == [{"field": "password", "message": message}]


@pytest.mark.parametrize("full_name, message", [
    ("G", "Full name must be at least 2 characters"),
    ("G" * 101, "Full name must be less than 100 characters"),
    ("Gina-Grower", "Full name can only contain letters and spaces"),
])
def test_signup_full_name_rules(full_name, message):
    details = violations(SignupRequest, {
        "fullName": full_name,
        "email": "gina@farm.com",
        "password": "Secret123",
        "confirmPassword": "Secret123",
    })

    assert details == [{"field": "fullName", "message": message}]


def test_login_rejects_malformed_email():
    assert violations(LoginRequest, {"email": "not-an-email", "password": "x"}) == [
        {"field": "email", "message": "Invalid email format"}
    ]


def test_change_password_mismatch_on_confirmation_only():
    details = violations(ChangePasswordRequest, {
        "currentPassword": "Secret123",
        "newPassword": "Better456",
        "confirmNewPassword": "Better457",
    })

    assert details == [{"field": "confirmNewPassword", "message": "Passwords don't match"}]


def test_change_password_weak_new_password_and_mismatch_both_reported():
    details = violations(ChangePasswordRequest, {
        "currentPassword": "Secret123",
        "newPassword": "weak",
        "confirmNewPassword": "different",
    })

    assert details == [
        {"field": "newPassword", "message": "Password must be at least 8 characters"},
        {"field": "confirmNewPassword", "message": "Passwords don't match"},
    ]


def test_signup_short_password_and_mismatch_both_reported():
    details = violations(SignupRequest, {
        "fullName": "Gina Grower",
        "email": "gina@farm.com",
        "password": "abc",
        "confirmPassword": "xyz",
    })

    assert details == [
        {"field": "password", "message": "Password must be at least 8 characters"},
        {"field": "confirmPassword", "message": "Passwords don't match"},
    ]


def test_signup_missing_password_skips_mismatch():
    details = violations(SignupRequest, {
        "fullName": "Gina Grower",
        "email": "gina@farm.com",
        "confirmPassword": "Secret123",
    })

    assert details == [{"field": "password", "message": "Field required"}]


@pytest.mark.parametrize("email", ["Jane Doe <jane@x.com>", "<jane@x.com>", "jane@x.com (Jane)"])
def test_email_must_be_a_bare_address(email):
    assert violations(CreateClientRequest, {"name": "Jane", "email": email, "client_type": "grower"}) == [
        {"field": "email", "message": "Invalid email format"}
    ]


def test_list_query_keeps_search_as_submitted():
    query = ClientListQuery.model_validate({"search": "  farm ", "status": "all"})

    assert query.search == "  farm "
    assert query.status == "all"
    assert query.type is None
