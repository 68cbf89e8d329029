"""Declarative description of the ID Broker API operations.

Each operation names its HTTP verb, path template, accepted parameters and
the status codes it expects. `interpret()` turns a response into an
`ApiResult`, raising `ServiceError` for any status the operation does not
list.
"""
from __future__ import annotations
import enum
import string
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import quote

from .exceptions import ConfigurationError, ServiceError


class Outcome(enum.Enum):
    SUCCESS_WITH_BODY = "success_with_body"
    SUCCESS_EMPTY = "success_empty"
    NOT_FOUND = "not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    RATE_LIMITED = "rate_limited"


@dataclass(frozen=True)
class ApiResult:
    """Outcome of one API call, before the calling method narrows it."""
    outcome: Outcome
    status_code: int
    body: Any = None


@dataclass(frozen=True)
class BrokerResponse:
    """Status code and parsed body as returned by the transport."""
    status_code: int
    body: Any = None
    text: str = ""


@dataclass(frozen=True)
class Operation:
    name: str
    method: str
    path: str
    params: Tuple[str, ...]
    statuses: Mapping[int, Outcome]
    error_code: int
    # Outcome for any 2xx status not listed in `statuses`
    any_success: Optional[Outcome] = None
    path_params: Tuple[str, ...] = field(init=False)

    def __post_init__(self):
        names = tuple(
            name for _, name, _, _ in string.Formatter().parse(self.path) if name
        )
        object.__setattr__(self, "path_params", names)

    def build_path(self, params: Mapping[str, Any]) -> str:
        missing = [name for name in self.path_params if params.get(name) in (None, "")]
        if missing:
            raise ConfigurationError(f"{self.name} requires {', '.join(missing)}")
        return self.path.format(
            **{name: quote(str(params[name]), safe="") for name in self.path_params}
        )


USER_FIELDS = (
    "employee_id", "first_name", "last_name", "display_name", "username", "email",
    "active", "locked", "manager_email", "require_mfa", "spouse_email", "hide", "groups",
)

_BODY = {200: Outcome.SUCCESS_WITH_BODY}


def _op(name, method, path, params, statuses, error_code, any_success=None) -> Operation:
    return Operation(
        name=name,
        method=method,
        path=path,
        params=tuple(params),
        statuses=dict(statuses),
        error_code=error_code,
        any_success=any_success,
    )


OPERATIONS: Dict[str, Operation] = {
    op.name: op
    for op in (
        # Users
        _op("authenticate", "POST", "/authentication", ("username", "password"),
            {200: Outcome.SUCCESS_WITH_BODY, 400: Outcome.INVALID_CREDENTIALS}, 1490802360),
        _op("authenticateNewUser", "POST", "/authentication", ("invite",),
            {200: Outcome.SUCCESS_WITH_BODY, 400: Outcome.INVALID_CREDENTIALS}, 1544549972),
        _op("createUser", "POST", "/user", USER_FIELDS, _BODY, 1490802526),
        _op("updateUser", "PUT", "/user/{employee_id}", USER_FIELDS, _BODY, 1490808841),
        # 200 only, a 204 here is reported as unexpected
        _op("deactivateUser", "PUT", "/user/{employee_id}", ("employee_id", "active"),
            {200: Outcome.SUCCESS_EMPTY}, 1490808523),
        _op("getSiteStatus", "GET", "/site/status", (),
            {}, 1490806100, any_success=Outcome.SUCCESS_EMPTY),
        _op("getUser", "GET", "/user/{employee_id}", ("employee_id",),
            {200: Outcome.SUCCESS_WITH_BODY, 204: Outcome.NOT_FOUND}, 1490808555),
        _op("listUsers", "GET", "/user", ("fields", "username", "email"), _BODY, 1490808715),
        _op("setPassword", "PUT", "/user/{employee_id}/password", ("employee_id", "password"),
            _BODY, 1490808839),
        # MFA
        _op("mfaCreate", "POST", "/mfa", ("employee_id", "type", "label"), _BODY, 1506710701),
        _op("mfaDelete", "DELETE", "/mfa/{id}", ("id", "employee_id"),
            {204: Outcome.SUCCESS_EMPTY}, 1506710702),
        _op("mfaList", "GET", "/user/{employee_id}/mfa", ("employee_id",), _BODY, 1506710703),
        _op("mfaUpdate", "PUT", "/mfa/{id}", ("id", "employee_id", "label"), _BODY, 1543879805),
        _op("mfaVerify", "POST", "/mfa/{id}/verify", ("id", "employee_id", "value"),
            {
                204: Outcome.SUCCESS_EMPTY,
                400: Outcome.INVALID_CREDENTIALS,
                429: Outcome.RATE_LIMITED,
            }, 1506710704),
        # Recovery methods
        _op("createMethod", "POST", "/method", ("employee_id", "value", "created"),
            _BODY, 1541006274),
        _op("deleteMethod", "DELETE", "/method/{uid}", ("uid", "employee_id"),
            {200: Outcome.SUCCESS_EMPTY, 204: Outcome.SUCCESS_EMPTY}, 1541006315),
        _op("getMethod", "GET", "/method/{uid}", ("uid", "employee_id"), _BODY, 1541006615),
        _op("listMethod", "GET", "/user/{employee_id}/method", ("employee_id",),
            _BODY, 1541006346),
        _op("verifyMethod", "PUT", "/method/{uid}/verify", ("uid", "employee_id", "code"),
            _BODY, 1541006448),
        _op("resendMethod", "PUT", "/method/{uid}/resend", ("uid", "employee_id"),
            {200: Outcome.SUCCESS_EMPTY, 204: Outcome.SUCCESS_EMPTY}, 1541006732),
    )
}


def strip_status_code(body: Any) -> Any:
    """Drop the transport-level statusCode entry from an object body."""
    if isinstance(body, dict):
        return {key: value for key, value in body.items() if key != "statusCode"}
    return body


def report_unexpected_response(operation: Operation, response: BrokerResponse) -> ServiceError:
    raw = response.text if response.text else repr(response.body)
    return ServiceError(
        f"Unexpected response: {response.status_code} {raw}",
        unique_error_code=operation.error_code,
        status_code=response.status_code,
        body=response.body,
    )


def interpret(operation: Operation, response: BrokerResponse) -> ApiResult:
    """Map a response onto the operation's status table.

    Raises:
        ServiceError: If the status code is not expected for this operation
    """
    status = response.status_code
    outcome = operation.statuses.get(status)
    if outcome is None and operation.any_success is not None and 200 <= status < 300:
        outcome = operation.any_success
    if outcome is None:
        raise report_unexpected_response(operation, response)

    body = strip_status_code(response.body) if outcome is Outcome.SUCCESS_WITH_BODY else None
    return ApiResult(outcome=outcome, status_code=status, body=body)
