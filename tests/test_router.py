"""Tests for roost.routing.router — ordered pattern table, groups, matching."""

import pytest

from roost.routing.route import Route
from roost.routing.router import METHODS, Router


class TestRegistration:
    def test_add_route_returns_route(self) -> None:
        r = Router()
        route = r.get("users", "UserController", "index", ["AuthMiddleware"])
        assert isinstance(route, Route)
        assert route.method == "GET"
        assert route.target == "UserController@index"
        assert route.middleware == ("AuthMiddleware",)

    def test_method_upper_cased(self) -> None:
        r = Router()
        r.add_route("post", "users", "UserController", "store")
        assert r.match("POST", "/users") is not None
        assert r.match("post", "/users") is not None

    def test_shorthands(self) -> None:
        r = Router()
        r.get("a", "C", "a")
        r.post("a", "C", "b")
        r.put("a", "C", "c")
        r.delete("a", "C", "d")
        r.patch("a", "C", "e")
        actions = {m: r.match(m, "/a").route.action for m in METHODS}
        assert actions == {"GET": "a", "POST": "b", "PUT": "c", "DELETE": "d", "PATCH": "e"}

    def test_options_shorthand(self) -> None:
        r = Router()
        r.options("a", "C", "preflight")
        assert r.match("OPTIONS", "/a").route.action == "preflight"
        assert r.match("GET", "/a") is None

    def test_any_registers_every_method(self) -> None:
        r = Router()
        routes = r.any("ping", "HealthController", "ping")
        assert [route.method for route in routes] == list(METHODS)
        for method in METHODS:
            assert r.match(method, "/ping").route.action == "ping"

    def test_len_and_routes(self) -> None:
        r = Router()
        r.get("a", "C", "a")
        r.get("b", "C", "b")
        r.post("a", "C", "c")
        assert len(r) == 3
        assert [route.key for route in r.routes] == ["a", "b", "a"]

    def test_freeze_blocks_registration(self) -> None:
        r = Router()
        r.freeze()
        assert r.frozen
        with pytest.raises(RuntimeError, match="frozen"):
            r.get("late", "C", "a")


class TestMatching:
    def test_unknown_method(self) -> None:
        r = Router()
        r.get("users", "UserController", "index")
        assert r.match("DELETE", "/users") is None

    def test_no_match(self) -> None:
        r = Router()
        r.get("users", "UserController", "index")
        assert r.match("GET", "/posts") is None

    def test_root(self) -> None:
        r = Router()
        r.get("/", "HomeController", "index")
        match = r.match("GET", "/")
        assert match is not None
        assert match.params == ()

    def test_query_string_ignored(self) -> None:
        r = Router()
        r.get("users/{id}", "UserController", "show")
        match = r.match("GET", "/users/5?tab=posts")
        assert match.params == ("5",)

    def test_params_positional_in_declaration_order(self) -> None:
        r = Router()
        r.get("{year}/{month}/{slug}", "PostController", "show")
        match = r.match("GET", "/2024/05/hello")
        assert match.params == ("2024", "05", "hello")

    def test_custom_regex_rejects(self) -> None:
        r = Router()
        r.get(r"users/{id:\d+}", "UserController", "show")
        assert r.match("GET", "/users/abc") is None
        assert r.match("GET", "/users/12").params == ("12",)

    def test_exact_match_fast_path_has_no_params(self) -> None:
        r = Router()
        r.get("users/{id}", "UserController", "show")
        match = r.match("GET", "/users/{id}")
        assert match is not None
        assert match.params == ()

    def test_trailing_slash_insensitive(self) -> None:
        r = Router()
        r.get("/users/", "UserController", "index")
        assert r.match("GET", "users") is not None
        assert r.match("GET", "/users/") is not None


class TestSeparatorNormalization:
    @pytest.mark.parametrize("registered", ["business-plan", "business_plan"])
    @pytest.mark.parametrize("requested", ["/business-plan", "/business_plan"])
    def test_symmetric(self, registered: str, requested: str) -> None:
        r = Router()
        r.get(registered, "PlanController", "index")
        assert r.match("GET", requested) is not None

    def test_dash_and_underscore_are_one_key(self) -> None:
        r = Router()
        r.get("business-plan", "PlanController", "old")
        r.get("business_plan", "PlanController", "new")
        assert len(r) == 1
        assert r.match("GET", "/business-plan").route.action == "new"

    def test_captured_values_keep_separators(self) -> None:
        r = Router()
        r.get("files/{name}", "FileController", "show")
        assert r.match("GET", "/files/my-report_v2").params == ("my-report_v2",)

    def test_literal_separators_around_params(self) -> None:
        r = Router()
        r.get("post-tags/{slug}", "TagController", "show")
        assert r.match("GET", "/post_tags/hello-world").params == ("hello-world",)
        assert r.match("GET", "/post-tags/hello_world").params == ("hello_world",)

    def test_custom_regex_with_dash(self) -> None:
        r = Router()
        r.get("posts/{slug:[a-z-]+}", "PostController", "show")
        match = r.match("GET", "/posts/hello-world")
        assert match is not None
        assert match.params == ("hello-world",)
        assert r.match("GET", "/posts/hello_world") is None


class TestOrdering:
    def test_first_registered_wins(self) -> None:
        r = Router()
        r.get("users/{id}", "UserController", "show")
        r.get("users/me", "UserController", "me")
        assert r.match("GET", "/users/me").route.action == "show"

    def test_specific_first_wins(self) -> None:
        r = Router()
        r.get("users/me", "UserController", "me")
        r.get("users/{id}", "UserController", "show")
        assert r.match("GET", "/users/me").route.action == "me"
        assert r.match("GET", "/users/9").route.action == "show"

    def test_deterministic(self) -> None:
        r = Router()
        r.get("{a}", "C", "first")
        r.get("{b}", "C", "second")
        results = {r.match("GET", "/x").route.action for _ in range(20)}
        assert results == {"first"}


class TestOverwrite:
    def test_last_write_wins_in_place(self) -> None:
        r = Router()
        r.get("items/{id}", "ItemController", "old")
        r.get("items/special", "ItemController", "special")
        r.get("items/{id}", "ItemController", "new")

        assert len(r) == 2
        assert [route.action for route in r.routes] == ["new", "special"]
        # Keeps its original position, so it still shadows items/special
        assert r.match("GET", "/items/special").route.action == "new"

    def test_overwrite_recorded(self) -> None:
        r = Router()
        r.get("a", "C", "one")
        r.get("/a/", "C", "two")
        [ow] = r.overwrites
        assert ow.previous.action == "one"
        assert ow.replacement.action == "two"

    def test_different_method_is_not_overwrite(self) -> None:
        r = Router()
        r.get("a", "C", "show")
        r.post("a", "C", "store")
        assert r.overwrites == []
        assert len(r) == 2


class TestGroups:
    def test_prefix_and_middleware(self) -> None:
        r = Router()

        def admin(router: Router) -> None:
            router.get("dashboard", "AdminController", "dashboard", ["LogMiddleware"])

        r.group(admin, prefix="admin", middleware=["AuthMiddleware"])
        match = r.match("GET", "/admin/dashboard")
        assert match is not None
        assert match.route.middleware == ("AuthMiddleware", "LogMiddleware")

    def test_nested_groups_concatenate_outer_first(self) -> None:
        r = Router()

        def inner(router: Router) -> None:
            router.get("report", "ReportController", "index")

        def outer(router: Router) -> None:
            router.group(inner, prefix="/reports/", middleware=["B"])

        r.group(outer, prefix="/admin", middleware=["A"])
        match = r.match("GET", "/admin/reports/report")
        assert match is not None
        assert match.route.pattern == "admin/reports/report"
        assert match.route.middleware == ("A", "B")

    def test_group_frame_popped_after(self) -> None:
        r = Router()
        r.group(lambda router: router.get("x", "C", "x"), prefix="g", middleware=["A"])
        route = r.get("y", "C", "y")
        assert route.pattern == "y"
        assert route.middleware == ()

    def test_group_frame_popped_when_callable_raises(self) -> None:
        r = Router()

        def broken(router: Router) -> None:
            router.get("ok", "C", "ok")
            msg = "boom"
            raise ValueError(msg)

        with pytest.raises(ValueError, match="boom"):
            r.group(broken, prefix="g", middleware=["A"])

        route = r.get("after", "C", "after")
        assert route.pattern == "after"
        assert route.middleware == ()
        assert r.match("GET", "/g/ok") is not None

    def test_root_inside_group(self) -> None:
        r = Router()
        r.group(lambda router: router.get("/", "AdminController", "index"), prefix="admin")
        assert r.match("GET", "/admin").route.action == "index"

    def test_empty_prefix_only_adds_middleware(self) -> None:
        r = Router()
        r.group(lambda router: router.get("me", "C", "me"), middleware=["AuthMiddleware"])
        match = r.match("GET", "/me")
        assert match.route.middleware == ("AuthMiddleware",)
