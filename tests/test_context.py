from types import SimpleNamespace

from starlette.requests import Request

from gateway.graphql.context import Viewer, build_context_base, context_from_request


def make_request(app, headers=()):
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": "/api/graphql",
            "headers": [(name.encode(), value.encode()) for name, value in headers],
            "app": app,
        }
    )


def fake_app(connection, models):
    return SimpleNamespace(state=SimpleNamespace(mongo=connection, models=models))


def test_anonymous_request(connection, models):
    context = context_from_request(make_request(fake_app(connection, models)))
    assert context["viewer"] == Viewer.anonymous()
    assert not context["viewer"].is_authenticated
    assert context["connection"] is connection
    assert context["models"] is models
    assert context["request_id"]


def test_viewer_from_proxy_headers(connection, models):
    request = make_request(
        fake_app(connection, models),
        headers=[("x-user-id", "u42"), ("x-user-roles", "admins, editors,"), ("x-request-id", "req-1")],
    )
    context = context_from_request(request)
    assert context["viewer"].user_id == "u42"
    assert context["viewer"].roles == frozenset({"admins", "editors"})
    assert context["viewer"].is_admin
    assert context["request_id"] == "req-1"


def test_roles_without_user_are_ignored(connection, models):
    request = make_request(fake_app(connection, models), headers=[("x-user-roles", "admins")])
    viewer = context_from_request(request)["viewer"]
    assert not viewer.is_authenticated
    assert not viewer.is_admin


def test_each_request_gets_its_own_id(connection, models):
    app = fake_app(connection, models)
    first = context_from_request(make_request(app))
    second = context_from_request(make_request(app))
    assert first["request_id"] != second["request_id"]


def test_base_context_covers_request_context(connection, models):
    base = build_context_base(connection, models)
    request_context = context_from_request(make_request(fake_app(connection, models)))
    assert set(request_context) <= set(base)
    assert base["viewer"] == Viewer.anonymous()
    assert base["request"] is None
    assert base["request_id"] is None
