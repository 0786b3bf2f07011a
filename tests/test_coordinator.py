"""Tests for wren.dispatch.coordinator — end-to-end resolution."""

from typing import Any

import pytest

from wren.dispatch.binder import ArgumentBinder
from wren.dispatch.coordinator import DispatchCoordinator
from wren.dispatch.types import RouteRequest
from wren.errors import ConfigurationError
from wren.routing.aliases import AliasTable
from wren.services.base import RestService, SiteService
from wren.services.defaults import FailService, MainService, register_defaults
from wren.services.registry import ServiceRegistry

instances: list[str] = []


class UserProfileService(SiteService):
    def init(self):
        instances.append(self.name)

    def main(self):
        return "profile"

    def doEditName(self, user_id, field="name"):
        return f"{user_id}:{field}"

    def doShow(self, user_id=None):
        return user_id


class CatchAllService(SiteService):
    def fall(self, *args):
        return args


class ItemService(RestService):
    def get(self, item_id=None):
        return item_id

    def delete(self, item_id):
        return item_id


class ExplodingService(SiteService):
    def init(self):
        raise RuntimeError("constructor failed")


def _coordinator(
    routes: dict[str, Any] | None = None, *, regex_use_defaults: bool = False
) -> DispatchCoordinator:
    registry = ServiceRegistry()
    for cls in (UserProfileService, CatchAllService, ItemService, ExplodingService):
        registry.register(cls)
    register_defaults(registry)
    registry.freeze()
    return DispatchCoordinator(
        registry,
        AliasTable.from_mapping(routes),
        binder=ArgumentBinder(regex_use_defaults=regex_use_defaults),
    )


def _resolve(coordinator: DispatchCoordinator, path: str, method: str = "GET"):
    return coordinator.resolve(RouteRequest.from_path(method, path))


@pytest.fixture(autouse=True)
def _reset_instances() -> None:
    instances.clear()


class TestConventionalDispatch:
    def test_root_is_main_service(self) -> None:
        target = _resolve(_coordinator(), "/")
        assert target.name == "MainService"
        assert isinstance(target.service, MainService)
        assert target.method == "main"
        assert target.arguments == ()
        assert target.failure is None
        assert target.status == 200

    def test_service_method_and_arguments(self) -> None:
        target = _resolve(_coordinator(), "/user-profile/edit-name/42")
        assert target.name == "UserProfileService"
        assert target.method == "doEditName"
        assert target.arguments == ("42", "name")
        assert target.service.method == "doEditName"
        assert target.service.arguments == ("42", "name")
        assert not target.is_failure

    def test_first_segment_case_insensitive(self) -> None:
        target = _resolve(_coordinator(), "/User-Profile/edit-name/7/email")
        assert target.name == "UserProfileService"
        assert target.arguments == ("7", "email")

    def test_service_without_method_segment(self) -> None:
        target = _resolve(_coordinator(), "/user-profile")
        assert target.method == "main"
        assert target.arguments == ()

    def test_rest_service_arguments_start_after_service(self) -> None:
        target = _resolve(_coordinator(), "/item/7")
        assert target.method == "get"
        assert target.arguments == ("7",)

    def test_rest_verb(self) -> None:
        target = _resolve(_coordinator(), "/item/9", method="delete")
        assert target.method == "delete"
        assert target.arguments == ("9",)

    def test_request_reaches_service(self) -> None:
        target = _resolve(_coordinator(), "/user-profile/show/3")
        assert target.service.request.path == "/user-profile/show/3"
        assert target.service.request.method == "GET"


class TestFailures:
    def test_unknown_service(self) -> None:
        target = _resolve(_coordinator(), "/foo/bar/1")
        assert target.name == "FailService"
        assert isinstance(target.service, FailService)
        assert target.method == "main"
        assert target.arguments == ()
        assert target.failure is not None
        assert target.failure.code == 404
        assert target.failure.text == "Service not found [FooService]"
        assert target.is_failure
        assert target.status == 404

    def test_unknown_method(self) -> None:
        target = _resolve(_coordinator(), "/user-profile/nope/1")
        assert target.name == "FailService"
        assert target.failure is not None
        assert target.failure.text == (
            "Service method not found [UserProfileService::doNope()]"
        )

    def test_unknown_method_constructs_target_once(self) -> None:
        _resolve(_coordinator(), "/user-profile/nope")
        assert instances == ["UserProfileService"]

    def test_fall_method(self) -> None:
        target = _resolve(_coordinator(), "/catch-all/whatever/a/b")
        assert target.name == "CatchAllService"
        assert target.method == "fall"
        assert target.arguments == ("a", "b")
        assert target.failure is None

    def test_rest_undeclared_verb(self) -> None:
        target = _resolve(_coordinator(), "/item", method="POST")
        assert target.failure is not None
        assert target.failure.text == "Service method not found [ItemService::post()]"

    def test_direct_fail_service_is_terminal(self) -> None:
        target = _resolve(_coordinator(), "/fail/anything/1")
        assert target.name == "FailService"
        assert target.method == "main"
        assert target.arguments == ()
        assert target.failure is None
        assert target.is_failure
        assert target.status == 200

    def test_constructor_exception_propagates(self) -> None:
        with pytest.raises(RuntimeError, match="constructor failed"):
            _resolve(_coordinator(), "/exploding")

    def test_fail_service_required(self) -> None:
        registry = ServiceRegistry()
        registry.register(UserProfileService)
        with pytest.raises(ConfigurationError, match="FailService must be registered"):
            DispatchCoordinator(registry)


class TestAliases:
    def test_alias_target(self) -> None:
        coordinator = _coordinator({"profile": {0: "user-profile"}})
        target = _resolve(coordinator, "/profile/edit-name/5")
        assert target.name == "UserProfileService"
        assert target.method == "doEditName"
        assert target.arguments == ("5", "name")

    def test_alias_case_insensitive(self) -> None:
        coordinator = _coordinator({"profile": {0: "user-profile"}})
        assert _resolve(coordinator, "/PROFILE").name == "UserProfileService"

    def test_alias_method_map(self) -> None:
        coordinator = _coordinator({"p": {0: "user-profile", "methods": {"name": "edit-name"}}})
        target = _resolve(coordinator, "/p/name/5/email")
        assert target.method == "doEditName"
        assert target.arguments == ("5", "email")

    def test_alias_fixed_method(self) -> None:
        coordinator = _coordinator({"me": {0: "user-profile", "method": "doShow"}})
        target = _resolve(coordinator, "/me/ignored/11")
        assert target.method == "doShow"
        assert target.arguments == ("11",)

    def test_alias_to_unknown_service(self) -> None:
        coordinator = _coordinator({"gone": {0: "nothing-here"}})
        target = _resolve(coordinator, "/gone")
        assert target.failure is not None
        assert target.failure.text == "Service not found [NothingHereService]"

    def test_alias_hook(self) -> None:
        def hook(service, method, arguments):
            return (*arguments[:1], "hooked")

        coordinator = _coordinator({"p": {0: "user-profile", "methodFilter": hook}})
        target = _resolve(coordinator, "/p/edit-name/5")
        assert target.arguments == ("5", "hooked")
        assert target.service.arguments == ("5", "hooked")

    def test_alias_beats_regex(self) -> None:
        coordinator = _coordinator(
            {
                "p": {0: "user-profile"},
                "~~": [{0: "item", "pattern": r"^/p", "method": "get"}],
            }
        )
        assert _resolve(coordinator, "/p").name == "UserProfileService"


class TestRegexRoutes:
    def test_captures_used_verbatim(self) -> None:
        coordinator = _coordinator(
            {"~~": [{0: "user-profile", "pattern": r"^/u/(\d+)$", "method": "doEditName"}]}
        )
        target = _resolve(coordinator, "/u/42")
        assert target.name == "UserProfileService"
        assert target.method == "doEditName"
        assert target.arguments == ("42",)

    def test_captures_with_defaults_policy(self) -> None:
        coordinator = _coordinator(
            {"~~": [{0: "user-profile", "pattern": r"^/u/(\d+)$", "method": "doEditName"}]},
            regex_use_defaults=True,
        )
        assert _resolve(coordinator, "/u/42").arguments == ("42", "name")

    def test_unmatched_path_uses_segment(self) -> None:
        coordinator = _coordinator(
            {"~~": [{0: "item", "pattern": r"^/u/(\d+)$", "method": "get"}]}
        )
        assert _resolve(coordinator, "/user-profile").name == "UserProfileService"

    def test_regex_method_missing_falls_to_fail(self) -> None:
        coordinator = _coordinator(
            {"~~": [{0: "user-profile", "pattern": r"^/u$", "method": "doMissing"}]}
        )
        target = _resolve(coordinator, "/u")
        assert target.failure is not None
        assert target.failure.text == (
            "Service method not found [UserProfileService::doMissing()]"
        )

    def test_incomplete_route_raises(self) -> None:
        coordinator = _coordinator({"~~": [{0: "user-profile", "pattern": r"^/u$"}]})
        with pytest.raises(ConfigurationError):
            _resolve(coordinator, "/anything")

    def test_root_never_scans_regex(self) -> None:
        coordinator = _coordinator({"~~": [{0: "user-profile", "pattern": r"^/u$"}]})
        assert _resolve(coordinator, "/").name == "MainService"
