"""Unit tests for request configuration assembly.

These cover header precedence (general, auth, Accept, Content-Type,
caller), body serialization per content type, query parameters for
methods without a body, timeout overrides and the credential policy.
"""

import pytest

from http_helper.config.settings import load_settings
from http_helper.models import BasicAuth, BearerAuth, ContentType, ResponseType
from http_helper.utils.http import (
    CancelHandle,
    FormData,
    apply_auth,
    build_request_config,
    set_auth_basic,
    set_auth_bearer_token,
)


@pytest.fixture
def settings():
    return load_settings({"TIMEOUT": 3, "GENERAL_HEADERS": {"X-Client": "tests"}})


def build(settings, method="GET", **kwargs):
    return build_request_config(settings, "https://example.test/path", method, **kwargs)


@pytest.mark.unit
def test_method_is_upper_cased(settings):
    assert build(settings, "post").method == "POST"


@pytest.mark.unit
def test_general_headers_are_copied(settings):
    config = build(settings)
    assert config.headers["x-client"] == "tests"
    assert settings.general_headers == {"X-Client": "tests"}


@pytest.mark.unit
def test_json_response_sets_accept(settings):
    assert build(settings).headers["Accept"] == "application/json"


@pytest.mark.unit
def test_raw_response_keeps_client_accept(settings):
    config = build(settings, response_type=ResponseType.ARRAYBUFFER)
    assert "accept" not in config.headers


@pytest.mark.unit
def test_bearer_auth(settings):
    config = build(settings, auth=BearerAuth(token="T"))
    assert config.headers["Authorization"] == "Bearer T"


@pytest.mark.unit
def test_basic_auth(settings):
    config = build(settings, auth=BasicAuth(username="u", password="p"))
    assert config.headers["Authorization"] == "Basic dTpw"


@pytest.mark.unit
def test_no_auth_leaves_authorization_unset(settings):
    assert "authorization" not in build(settings).headers


@pytest.mark.unit
def test_injectors_pass_through_none(settings):
    config = build(settings)
    assert set_auth_bearer_token(config, None) is config
    assert set_auth_basic(config, None) is config
    assert "authorization" not in config.headers


@pytest.mark.unit
def test_apply_auth_dispatches(settings):
    config = apply_auth(build(settings), BearerAuth(token="abc"))
    assert config.headers["authorization"] == "Bearer abc"


@pytest.mark.unit
def test_urlencoded_body(settings):
    config = build(settings, "POST", params={"a": "1", "b": "2"})
    assert config.content == "a=1&b=2"
    assert config.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert config.params is None


@pytest.mark.unit
def test_json_body(settings):
    config = build(
        settings,
        "PUT",
        params={"a": "1", "b": "2"},
        request_content_type=ContentType.JSON,
    )
    assert config.content == '{"a":"1","b":"2"}'
    assert config.headers["Content-Type"] == "application/json"


@pytest.mark.unit
def test_body_method_without_params_has_no_content(settings):
    config = build(settings, "PATCH", request_content_type=ContentType.JSON)
    assert config.content is None
    assert config.headers["Content-Type"] == "application/json"


@pytest.mark.unit
def test_json_body_rejects_unserializable_params(settings):
    with pytest.raises(TypeError):
        build(settings, "POST", params={"x": object()}, request_content_type="json")


@pytest.mark.unit
def test_multipart_body(settings):
    form = FormData(boundary="b0undary")
    form.append("param1", "yellow")

    config = build(
        settings, "POST", params=form, request_content_type=ContentType.MULTIPART
    )

    assert config.headers["Content-Type"] == "multipart/form-data; boundary=b0undary"
    assert config.content == form.read()
    assert b'name="param1"' in config.content


@pytest.mark.unit
def test_multipart_without_headers_fails(settings):
    with pytest.raises(AttributeError):
        build(
            settings,
            "POST",
            params={"a": "1"},
            request_content_type=ContentType.MULTIPART,
        )


@pytest.mark.unit
def test_multipart_headers_without_content_type_fails(settings):
    class NoContentType:
        def get_headers(self):
            return {}

    with pytest.raises(ValueError):
        build(
            settings,
            "POST",
            params=NoContentType(),
            request_content_type=ContentType.MULTIPART,
        )


@pytest.mark.unit
def test_get_params_become_query_params(settings):
    config = build(settings, "GET", params={"param1": "yellow", "skip": None})
    assert config.params == [("param1", "yellow")]
    assert config.content is None
    assert "content-type" not in config.headers


@pytest.mark.unit
def test_delete_params_become_query_params(settings):
    config = build(settings, "DELETE", params={"id": 5})
    assert config.params == [("id", 5)]


@pytest.mark.unit
def test_caller_headers_win_case_insensitively(settings):
    config = build(
        settings,
        "POST",
        params={"a": "1"},
        auth=BearerAuth(token="T"),
        headers={
            "content-type": "text/plain",
            "AUTHORIZATION": "Custom xyz",
            "x-client": "override",
        },
    )
    assert config.headers.get_list("content-type") == ["text/plain"]
    assert config.headers.get_list("authorization") == ["Custom xyz"]
    assert config.headers.get_list("x-client") == ["override"]


@pytest.mark.unit
def test_caller_header_none_removes_header(settings):
    config = build(settings, headers={"Accept": None})
    assert "accept" not in config.headers


@pytest.mark.unit
def test_caller_header_values_are_stringified(settings):
    config = build(settings, headers={"X-Retry": 3})
    assert config.headers["x-retry"] == "3"


@pytest.mark.unit
def test_timeout_defaults_and_override(settings):
    assert build(settings).timeout == 3.0
    assert build(settings, timeout=0.5).timeout == 0.5
    assert build(settings, timeout=0).timeout is None


@pytest.mark.unit
def test_credentials_policy(settings):
    assert build(settings).with_credentials is True
    assert build(settings, without_credentials=True).with_credentials is False
    no_cookies = load_settings({"WITH_CREDENTIALS": False})
    assert build(no_cookies).with_credentials is False


@pytest.mark.unit
def test_cancel_handle_is_kept(settings):
    handle = CancelHandle()
    assert build(settings, cancel_handle=handle).cancel_handle is handle
    assert isinstance(build(settings).cancel_handle, CancelHandle)


@pytest.mark.unit
@pytest.mark.parametrize(
    "response_type,expected",
    [
        (ResponseType.ARRAYBUFFER, b'{"a": 1}'),
        (ResponseType.TEXT, '{"a": 1}'),
        (ResponseType.JSON, {"a": 1}),
    ],
)
def test_response_transforms(settings, response_type, expected):
    config = build(settings, response_type=response_type)
    assert config.transform_response(b'{"a": 1}', "utf-8") == expected


@pytest.mark.unit
def test_build_kwargs(settings):
    config = build(settings, "POST", params={"a": "1"}, timeout=1)
    kwargs = config.build_kwargs()
    assert kwargs["method"] == "POST"
    assert kwargs["url"] == "https://example.test/path"
    assert kwargs["content"] == "a=1"
    assert kwargs["timeout"] == 1
    assert kwargs["params"] is None
    assert kwargs["headers"]["content-type"] == "application/x-www-form-urlencoded"
