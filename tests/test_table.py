"""Tests for switchyard.routing.table — route table compilation."""

import pytest

from switchyard.errors import ConfigurationError
from switchyard.routing.route import ValidationRule
from switchyard.routing.table import build_route, build_router, join_prefix, normalize_validations


class TestJoinPrefix:
    def test_root_prefix_not_duplicated(self) -> None:
        assert join_prefix("/", "/about") == "/about"

    def test_group_prefix(self) -> None:
        assert join_prefix("/admin", "/products") == "/admin/products"


class TestBuildRoute:
    def test_method_uppercased(self) -> None:
        route = build_route("/", {"method": "post", "uri": "/x", "controller": "c", "action": "a"})
        assert route.methods == ("POST",)

    def test_defaults(self) -> None:
        route = build_route("/", {"method": "GET", "uri": "/x", "controller": "c", "action": "a"})
        handler = route.handler
        assert handler.is_public is False
        assert handler.template is None
        assert handler.accept == ()
        assert dict(handler.validations) == {}
        assert handler.middlewares == ()

    def test_full_definition(self) -> None:
        route = build_route(
            "/admin",
            {
                "method": "POST",
                "uri": "/products",
                "controller": "products",
                "action": "store",
                "is_public": True,
                "template": "products/form.html",
                "accept": ["name", "price"],
                "middlewares": ["csrf", "audit"],
            },
        )
        assert route.path == "/admin/products"
        assert route.handler.accept == ("name", "price")
        assert route.handler.middlewares == ("csrf", "audit")
        assert route.handler.template == "products/form.html"
        assert route.handler.name == "products.store"

    def test_several_methods(self) -> None:
        route = build_route(
            "/", {"method": ["get", "post", "GET"], "uri": "/x", "controller": "c", "action": "a"}
        )
        assert route.methods == ("GET", "POST")

    def test_missing_keys(self) -> None:
        with pytest.raises(ConfigurationError, match="missing: controller, action"):
            build_route("/", {"method": "GET", "uri": "/x"})

    def test_descriptor_is_frozen(self) -> None:
        route = build_route("/", {"method": "GET", "uri": "/x", "controller": "c", "action": "a"})
        with pytest.raises(AttributeError):
            route.handler.is_public = True  # type: ignore[misc]


class TestNormalizeValidations:
    def test_mapping_form(self) -> None:
        rules = normalize_validations(
            {
                "price": {
                    "required": {"message": "Price is required"},
                    "min": {"params": {"min": 0}, "message": "Price must be at least {{min}}"},
                }
            }
        )
        assert [r.validator for r in rules["price"]] == ["required", "min"]
        assert rules["price"][1].params == {"min": 0}
        assert rules["price"][1].message == "Price must be at least {{min}}"

    def test_default_message(self) -> None:
        rules = normalize_validations({"name": {"required": {}}})
        assert rules["name"][0].message == "Validation error"
        assert rules["name"][0].params == {}

    def test_custom_default_message(self) -> None:
        rules = normalize_validations({"name": {"required": None}}, default_message="Invalid")
        assert rules["name"][0].message == "Invalid"

    def test_sequence_forms(self) -> None:
        rule = ValidationRule("email", {}, "Bad email")
        rules = normalize_validations(
            {
                "email": [
                    ("required", None, "Email is required"),
                    rule,
                    {"validator": "max_length", "params": {"max": 5}},
                    "url",
                ]
            }
        )
        first, second, third, fourth = rules["email"]
        assert first.message == "Email is required"
        assert second is rule
        assert third.params == {"max": 5}
        assert fourth.validator == "url"

    def test_string_rules_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            normalize_validations({"name": "required"})

    def test_mapping_without_validator_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="no 'validator'"):
            normalize_validations({"name": [{"params": {}}]})


class TestBuildRouter:
    def test_groups_and_prefixes(self) -> None:
        router = build_router(
            {
                "/": [{"method": "GET", "uri": "/", "controller": "home", "action": "index"}],
                "/api": [
                    {"method": "GET", "uri": "/items", "controller": "items", "action": "list"},
                    {"method": "GET", "uri": "/items/{id}", "controller": "items", "action": "show"},
                ],
            }
        )
        assert router.compiled is True
        assert router.match("GET", "/").handler.controller == "home"
        assert router.match("GET", "/api/items/7").path_params == {"id": "7"}

    def test_duplicate_definition(self) -> None:
        definition = {"method": "GET", "uri": "/x", "controller": "c", "action": "a"}
        with pytest.raises(ConfigurationError, match="Duplicate route"):
            build_router({"/": [definition, definition]})
