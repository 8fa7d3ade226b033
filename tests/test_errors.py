from __future__ import annotations

from userdesk.errors import NotFoundError, UserdeskError, ValidationError


def _raise_validation() -> ValidationError:
    return ValidationError("bad input", action="fix it")


def test_errors_carry_message_action_and_status() -> None:
    error = _raise_validation()

    assert isinstance(error, UserdeskError)
    assert str(error) == "bad input"
    assert error.to_dict() == {
        "name": "ValidationError",
        "message": "bad input",
        "action": "fix it",
        "status_code": 400,
    }
    assert "_raise_validation" in error.stack


def test_defaults_fill_missing_fields() -> None:
    error = NotFoundError()

    assert error.status_code == 404
    assert error.message
    assert error.action


def test_status_code_can_be_overridden() -> None:
    error = ValidationError("conflict", status_code=409)
    assert error.status_code == 409
    assert ValidationError.status_code == 400
