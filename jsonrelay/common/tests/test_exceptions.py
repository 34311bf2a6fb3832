import pytest

from jsonrelay.common.exceptions import (
    ERRORS_BY_STATUS,
    HTTP_STATUS_CODES,
    BadRequest,
    Conflict,
    Forbidden,
    HTTPError,
    InternalServerError,
    NotFound,
    Unauthorized,
    UnknownServerError,
    error_class_for_status,
    error_for_status,
    status_for_error,
)
from jsonrelay.common.models.envelope import ResultEnvelope


def test_every_table_status_has_exactly_one_class():
    assert sorted(ERRORS_BY_STATUS) == sorted(HTTP_STATUS_CODES)
    assert len(set(ERRORS_BY_STATUS.values())) == len(HTTP_STATUS_CODES)


@pytest.mark.parametrize("error_class", list(ERRORS_BY_STATUS.values()))
def test_status_mapping_is_bidirectional(error_class):
    assert error_class_for_status(status_for_error(error_class)) is error_class


@pytest.mark.parametrize(
    "error_class, status, body",
    [
        (BadRequest, 400, "Bad Request"),
        (Unauthorized, 401, "Unauthorized"),
        (Forbidden, 403, "Forbidden"),
        (NotFound, 404, "Not Found"),
        (Conflict, 409, "Conflict"),
        (InternalServerError, 500, "Internal Server Error"),
    ],
)
def test_core_kinds(error_class, status, body):
    error = error_class()

    assert error.status == status
    assert error.body == body
    assert error.to_envelope() == ResultEnvelope(status=status, body=body)
    assert isinstance(error, HTTPError)


def test_custom_body():
    error = NotFound({"missing": "user"})

    assert error.body == {"missing": "user"}
    assert str(error) == "[404] {'missing': 'user'}"


def test_body_is_read_only():
    error = Forbidden()

    with pytest.raises(AttributeError):
        error.body = "changed"
    with pytest.raises(AttributeError):
        error.status = 500
    assert error.status == 403


def test_error_for_known_status():
    error = error_for_status(404, "No such user")

    assert type(error) is NotFound
    assert error.body == "No such user"


def test_error_for_status_accepts_numeric_strings():
    assert type(error_for_status("409")) is Conflict


@pytest.mark.parametrize("status", [299, 420, 599, 999])
def test_unknown_status_degrades(status):
    error = error_for_status(status)

    assert type(error) is UnknownServerError
    assert error.status == status
    assert error.to_envelope().status == status
    assert error_class_for_status(status) is None


def test_unparsable_status_degrades():
    error = error_for_status("teapot", "body")

    assert type(error) is UnknownServerError
    assert error.status == 0
    assert error.body == "body"
    assert error.raw_status == "teapot"


def test_unparsable_status_keeps_raw_value_in_default_body():
    error = error_for_status("teapot")

    assert error.status == 0
    assert error.raw_status == "teapot"
    assert error.body == "Unknown Error (teapot)"


def test_envelope_coerce():
    envelope = ResultEnvelope(status=201, body="made")

    assert ResultEnvelope.coerce(envelope) is envelope
    assert ResultEnvelope.coerce([1, 2]) == ResultEnvelope(status=200, body=[1, 2])
    assert ResultEnvelope.coerce(None).is_success
    assert not ResultEnvelope(status=404).is_success
