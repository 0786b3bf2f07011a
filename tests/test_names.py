"""Tests for wren.routing.names — segment to identifier transforms."""

import pytest

from wren.routing.names import to_method_name, to_service_name


class TestServiceName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("user", "UserService"),
            ("user-profile", "UserProfileService"),
            ("foo-bar-baz", "FooBarBazService"),
            ("Main", "MainService"),
            ("main", "MainService"),
        ],
    )
    def test_kebab_to_pascal(self, raw: str, expected: str) -> None:
        assert to_service_name(raw) == expected

    def test_suffix_not_doubled(self) -> None:
        assert to_service_name("UserService") == "UserService"
        assert to_service_name(to_service_name("user-profile")) == "UserProfileService"

    def test_empty_is_bare_suffix(self) -> None:
        assert to_service_name("") == "Service"

    def test_uppercase_after_hyphen(self) -> None:
        assert to_service_name("foo-Bar") == "FooBarService"

    def test_hyphen_before_digit_kept(self) -> None:
        assert to_service_name("v-2") == "V-2Service"


class TestMethodName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("edit", "doEdit"),
            ("edit-name", "doEditName"),
            ("show-all-items", "doShowAllItems"),
        ],
    )
    def test_prefixed_camel(self, raw: str, expected: str) -> None:
        assert to_method_name(raw) == expected

    def test_empty(self) -> None:
        assert to_method_name("") == "do"

    def test_idempotent_over_canonical_input(self) -> None:
        # Already-canonical input only gains the prefix
        assert to_method_name("EditName") == "doEditName"
