"""Tests for wren.services.registry — descriptors, method tables, lookup."""

import pytest

from wren.errors import ConfigurationError, ServiceError
from wren.http.request import Request
from wren.services.base import RestService, Service, SiteService
from wren.services.registry import ParamSpec, ServiceDescriptor, ServiceRegistry


class UserService(SiteService):
    def main(self):
        return "users"

    def doShow(self, user_id, tab="profile", page=None):
        return user_id

    async def doList(self, *rest):
        return rest

    def doMixed(self, a, *, flag=False):
        return a

    @staticmethod
    def helper(x):
        return x

    def _private(self):
        return None


class ItemService(RestService):
    def get(self, item_id=None):
        return item_id


def _request(path: str = "/") -> Request:
    return Request(method="GET", path=path)


class TestDescriptor:
    def test_from_class_basics(self) -> None:
        descriptor = ServiceDescriptor.from_class(UserService)
        assert descriptor.name == "UserService"
        assert descriptor.factory is UserService
        assert descriptor.protocol == "site"
        assert descriptor.main_only is False
        assert descriptor.source is not None
        assert descriptor.source.endswith("test_registry.py")

    def test_name_override(self) -> None:
        descriptor = ServiceDescriptor.from_class(UserService, name="PeopleService")
        assert descriptor.name == "PeopleService"

    def test_positional_params_with_defaults(self) -> None:
        spec = ServiceDescriptor.from_class(UserService).method("doShow")
        assert spec is not None
        assert spec.params == (
            ParamSpec("user_id", 0),
            ParamSpec("tab", 1, has_default=True, default="profile"),
            ParamSpec("page", 2, has_default=True, default=None),
        )
        assert spec.variadic is False

    def test_variadic(self) -> None:
        spec = ServiceDescriptor.from_class(UserService).method("doList")
        assert spec is not None
        assert spec.params == ()
        assert spec.variadic is True

    def test_keyword_only_params_not_bound(self) -> None:
        spec = ServiceDescriptor.from_class(UserService).method("doMixed")
        assert spec is not None
        assert [p.name for p in spec.params] == ["a"]

    def test_staticmethod_keeps_first_param(self) -> None:
        spec = ServiceDescriptor.from_class(UserService).method("helper")
        assert spec is not None
        assert [p.name for p in spec.params] == ["x"]

    def test_private_and_inherited_methods_skipped(self) -> None:
        methods = ServiceDescriptor.from_class(UserService).methods
        assert "_private" not in methods
        assert "serve" not in methods
        assert "is_allowed_method" not in methods
        assert "is_site" not in methods

    def test_rejects_non_service(self) -> None:
        class NotAService:
            pass

        with pytest.raises(ServiceError, match="not a wren Service subclass"):
            ServiceDescriptor.from_class(NotAService)  # type: ignore[arg-type]


class TestRegistry:
    def test_register_and_exists(self) -> None:
        registry = ServiceRegistry()
        registry.register(UserService)
        assert registry.exists("UserService")
        assert "UserService" in registry
        assert not registry.exists("ItemService")
        assert len(registry) == 1

    def test_register_same_class_twice_is_noop(self) -> None:
        registry = ServiceRegistry()
        first = registry.register(UserService)
        second = registry.register(UserService)
        assert first is second
        assert len(registry) == 1

    def test_name_conflict(self) -> None:
        registry = ServiceRegistry()
        registry.register(UserService)
        with pytest.raises(ConfigurationError, match="already registered"):
            registry.register(ItemService, name="UserService")

    def test_frozen_rejects_register(self) -> None:
        registry = ServiceRegistry()
        registry.freeze()
        with pytest.raises(ConfigurationError, match="frozen"):
            registry.register(UserService)

    def test_frozen_rejects_add(self) -> None:
        registry = ServiceRegistry()
        registry.freeze()
        with pytest.raises(ConfigurationError, match="frozen"):
            registry.add(ServiceDescriptor.from_class(UserService))

    def test_add_keeps_first(self) -> None:
        registry = ServiceRegistry()
        registry.register(UserService)
        registry.add(ServiceDescriptor.from_class(ItemService, name="UserService"))
        assert registry.get("UserService").factory is UserService

    def test_get_missing_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            ServiceRegistry().get("NopeService")

    def test_create_passes_name_and_kwargs(self) -> None:
        registry = ServiceRegistry()
        registry.register(UserService, name="PeopleService")
        request = _request("/people")
        service = registry.create("PeopleService", request, method="doShow")
        assert isinstance(service, UserService)
        assert service.name == "PeopleService"
        assert service.method == "doShow"
        assert service.request is request

    def test_create_propagates_constructor_errors(self) -> None:
        class BrokenService(SiteService):
            def init(self):
                raise RuntimeError("boom")

        registry = ServiceRegistry()
        registry.register(BrokenService)
        with pytest.raises(RuntimeError, match="boom"):
            registry.create("BrokenService", _request())

    def test_iteration_yields_descriptors(self) -> None:
        registry = ServiceRegistry()
        registry.register(UserService)
        registry.register(ItemService)
        assert sorted(d.name for d in registry) == ["ItemService", "UserService"]


class TestMethodExists:
    def test_public_callable(self) -> None:
        service = UserService(_request())
        assert ServiceRegistry.method_exists(service, "doShow")
        assert ServiceRegistry.method_exists(service, "main")

    def test_missing_private_or_empty(self) -> None:
        service = UserService(_request())
        assert not ServiceRegistry.method_exists(service, "doNope")
        assert not ServiceRegistry.method_exists(service, "_private")
        assert not ServiceRegistry.method_exists(service, "")
        assert not ServiceRegistry.method_exists(service, None)
        assert not ServiceRegistry.method_exists(None, "main")

    def test_non_callable_attribute(self) -> None:
        service = UserService(_request())
        assert not ServiceRegistry.method_exists(service, "name")

    def test_fallback(self) -> None:
        class WithFall(Service):
            def fall(self, *args):
                return args

        assert ServiceRegistry.fallback_method_exists(WithFall(_request()))
        assert not ServiceRegistry.fallback_method_exists(UserService(_request()))
        assert not ServiceRegistry.fallback_method_exists(None)
