"""Unit tests for assembly of the semantic model."""

import pytest

from typed_client_gen.annotations import BindingKind
from typed_client_gen.errors import MissingFieldError
from typed_client_gen.models import ActionKind
from typed_client_gen.root import Root, RootOptions

# =============================================================================
# Tests for input validation
# =============================================================================


class TestValidation:
    """Test cases for rejected input graphs."""

    def test_not_a_mapping(self):
        """The input graph must be a mapping."""
        with pytest.raises(MissingFieldError) as exc_info:
            Root(["routes"])
        assert exc_info.value.field == "routes"

    @pytest.mark.parametrize("raw", [{}, {"routes": []}, {"routes": "foo"}])
    def test_missing_routes(self, raw):
        """A graph without routes cannot be built."""
        with pytest.raises(MissingFieldError, match="routes"):
            Root(raw)

    def test_route_without_name(self):
        """Every route needs a name."""
        with pytest.raises(MissingFieldError) as exc_info:
            Root({"routes": [{"name": "ok"}, {"bean": "x.Y"}]})
        assert exc_info.value.field == "routes[1].name"

    def test_class_without_name(self, single_route_defs):
        """Every class needs a name."""
        with pytest.raises(MissingFieldError) as exc_info:
            Root(single_route_defs(classes=[{"members": []}]))
        assert exc_info.value.field == "classes[0].name"


# =============================================================================
# Tests for routes and modules
# =============================================================================


class TestRoutes:
    """Test cases for route assembly."""

    def test_unmapped_route(self, single_route_defs):
        """A route without a mapping annotation still gets a method and pattern."""
        route = Root(single_route_defs()).routes[0]
        assert route.mapped is False
        assert route.method == "GET"
        assert route.pattern == ""
        assert route.parameters == ()
        assert route.return_type is None

    def test_mapping_annotation(self, single_route_defs, ann):
        """Method and pattern come from the mapping annotation."""
        route = Root(single_route_defs(annotations=[ann("PostMapping", value=["/foo"])])).routes[0]
        assert route.mapped is True
        assert route.method == "POST"
        assert route.pattern == "/foo"

    def test_raw_patterns_and_methods(self, single_route_defs, ann):
        """Listed patterns win; listed methods fill in an open mapping."""
        defs = single_route_defs(
            annotations=[ann("RequestMapping", value="/from-annotation")],
            methods=["put"],
            patterns=["/api/foo"],
        )
        route = Root(defs).routes[0]
        assert route.method == "PUT"
        assert route.pattern == "/api/foo"

    def test_unique_names(self):
        """Routes sharing a name get suffixed, even across beans."""
        root = Root({"routes": [{"bean": "a.A", "name": "foo"}, {"bean": "b.B", "name": "foo"}]})
        assert [r.uniq_name for r in root.routes] == ["foo", "foo$1"]

    def test_unique_name_separator(self):
        """The suffix separator follows the options."""
        raw = {"routes": [{"bean": "a.A", "name": "foo"}, {"bean": "a.A", "name": "foo"}]}
        root = Root(raw, RootOptions(unique_name_separator="_"))
        assert [r.uniq_name for r in root.routes] == ["foo", "foo_1"]

    def test_modules(self):
        """Routes are grouped by bean in first-appearance order."""
        raw = {
            "routes": [
                {"bean": "test.UserController", "name": "get"},
                {"bean": "test.OrderController", "name": "list"},
                {"bean": "test.UserController", "name": "save"},
            ]
        }
        modules = Root(raw).modules
        assert [m.identifier for m in modules] == ["userController", "orderController"]
        assert [m.display_name for m in modules] == ["UserController", "OrderController"]
        assert [r.name for r in modules[0].routes] == ["get", "save"]

    def test_module_identifier_collision(self):
        """Beans with the same simple name get distinct identifiers."""
        raw = {"routes": [{"bean": "a.FooApi", "name": "x"}, {"bean": "b.FooApi", "name": "y"}]}
        assert [m.identifier for m in Root(raw).modules] == ["fooApi", "fooApi$1"]

    def test_reserved_module_identifier(self):
        """A bean whose identifier is a reserved word gets a prefixed module name."""
        raw = {"routes": [{"bean": "com.example.Delete", "name": "foo"}]}
        root = Root(raw, RootOptions(reserved_words=frozenset({"delete"})))
        assert [m.identifier for m in root.modules] == ["_delete"]
        assert [m.identifier for m in Root(raw).modules] == ["delete"]

    def test_apis_filter(self):
        """Only selected beans and routes are kept."""
        raw = {
            "routes": [
                {"bean": "test.A", "name": "one"},
                {"bean": "test.A", "name": "two"},
                {"bean": "test.B", "name": "three"},
            ]
        }
        root = Root(raw, RootOptions(apis=("test.A#two", "B")))
        assert [r.name for r in root.routes] == ["two", "three"]

    def test_description(self, single_route_defs, ann):
        """Documentation annotations describe routes."""
        defs = single_route_defs(annotations=[ann("io.swagger.annotations.ApiOperation", value="Find foo")])
        assert Root(defs).routes[0].description == "Find foo"


class TestParameters:
    """Test cases for parameter assembly."""

    def test_unannotated_parameters(self, single_route_defs):
        """Unannotated parameters are optional and bound by the default policy."""
        defs = single_route_defs(
            parameters=[
                {"name": "id", "type": "java.lang.Long"},
                {"name": "user", "type": "test.User"},
            ],
            classes=[{"name": "test.User"}],
        )
        query, form = Root(defs).routes[0].parameters
        assert query.required is False
        assert query.actions[0].kind is ActionKind.QUERY
        assert query.actions[0].args == ("id",)
        assert form.actions[0].kind is ActionKind.FORM

    def test_default_binding_override(self, single_route_defs):
        """A custom policy changes how unannotated structures bind."""
        defs = single_route_defs(parameters=[{"name": "user", "type": "test.User"}], classes=[{"name": "test.User"}])
        options = RootOptions(default_bindings={"GET": (BindingKind.QUERY, BindingKind.BODY)})
        (parameter,) = Root(defs, options).routes[0].parameters
        assert parameter.actions[0].kind is ActionKind.BODY

    def test_annotated_parameter(self, single_route_defs, ann):
        """Binding annotations decide action and requiredness."""
        defs = single_route_defs(parameters=[{"name": "id", "type": "long", "annotations": [ann("PathVariable")]}])
        (parameter,) = Root(defs).routes[0].parameters
        assert parameter.required is True
        assert parameter.actions[0].method == "addPathVariable"

    def test_default_value_makes_optional(self, single_route_defs, ann):
        """A query parameter with a default need not be passed."""
        defs = single_route_defs(
            parameters=[{"name": "size", "type": "int", "annotations": [ann("RequestParam", defaultValue="20")]}]
        )
        assert Root(defs).routes[0].parameters[0].required is False

    def test_unnamed_parameter(self, single_route_defs):
        """Missing names are replaced by positional ones."""
        defs = single_route_defs(parameters=[{"type": "int"}, {"type": "int"}])
        assert [p.name for p in Root(defs).routes[0].parameters] == ["arg0", "arg1"]

    def test_injected_parameter(self, single_route_defs):
        """Framework-supplied parameters are kept but not exposed."""
        defs = single_route_defs(
            parameters=[
                {"name": "request", "type": "javax.servlet.http.HttpServletRequest"},
                {"name": "q", "type": "java.lang.String"},
            ]
        )
        route = Root(defs).routes[0]
        assert len(route.parameters) == 2
        assert [p.name for p in route.exposed_parameters] == ["q"]

    def test_file_upload_content_type(self, single_route_defs, ann):
        """Multipart uploads switch the request content type."""
        defs = single_route_defs(
            parameters=[
                {
                    "name": "file",
                    "type": "org.springframework.web.multipart.MultipartFile",
                    "annotations": [ann("RequestParam", value="file")],
                }
            ]
        )
        route = Root(defs).routes[0]
        assert route.parameters[0].actions[0].kind is ActionKind.FILE
        assert route.request_content_type == "multipart/form-data"

    def test_consumes_content_type(self, single_route_defs, ann):
        """An explicit consumes attribute wins."""
        defs = single_route_defs(annotations=[ann("PostMapping", value="/x", consumes="application/json")])
        assert Root(defs).routes[0].request_content_type == "application/json"

    def test_no_content_type(self, single_route_defs):
        """Plain routes send no content type."""
        assert Root(single_route_defs()).routes[0].request_content_type is None


# =============================================================================
# Tests for declarations
# =============================================================================


class TestDeclarations:
    """Test cases for classes and enums."""

    def test_object_superclass_is_dropped(self, single_route_defs):
        """Extending Object is the same as extending nothing."""
        root = Root(single_route_defs(classes=[{"name": "test.A", "superclass": "java.lang.Object"}]))
        assert root.find_declaration("test.A").superclass is None

    def test_member_optionality(self, single_route_defs, ann):
        """Members are optional unless marked otherwise."""
        defs = single_route_defs(
            classes=[
                {
                    "name": "test.A",
                    "members": [
                        {"name": "plain", "type": "int"},
                        {"name": "checked", "type": "int", "annotations": [ann("javax.validation.constraints.NotNull")]},
                        {"name": "flagged", "type": "int", "required": True},
                        {"name": "relaxed", "type": "int", "optional": True, "annotations": [ann("lombok.NonNull")]},
                    ],
                }
            ]
        )
        members = Root(defs).find_declaration("test.A").members
        assert [m.optional for m in members] == [True, False, False, True]

    def test_simple_name_collision(self, single_route_defs):
        """Declarations sharing a simple name get distinct ones."""
        root = Root(single_route_defs(classes=[{"name": "a.User"}, {"name": "b.User"}], enums=[{"name": "c.User"}]))
        assert root.find_declaration("a.User").simple_name == "User"
        assert root.find_declaration("b.User").simple_name == "User$1"
        assert root.find_declaration("c.User").simple_name == "User$2"

    def test_first_declaration_wins(self, single_route_defs):
        """A repeated qualified name keeps the first record."""
        root = Root(single_route_defs(classes=[{"name": "a.User", "description": "first"}, {"name": "a.User"}]))
        assert root.find_declaration("a.User").description == "first"
        assert len(root.declarations) == 1

    @pytest.mark.parametrize(
        "values,value_type",
        [
            (["a", "b"], "string"),
            ([1, 2], "number"),
            ([1, "b"], "unknown"),
            ([True, False], "unknown"),
        ],
    )
    def test_enum_value_type(self, single_route_defs, values, value_type):
        """The value type is shared by all constants or unknown."""
        constants = [{"name": f"C{i}", "value": v} for i, v in enumerate(values)]
        root = Root(single_route_defs(enums=[{"name": "test.E", "constants": constants}]))
        assert root.find_declaration("test.E").value_type == value_type

    def test_enum_constant_defaults(self, single_route_defs):
        """A constant without a value is its own name; properties become the memo."""
        enums = [{"name": "test.E", "constants": [{"name": "MALE", "properties": {"code": 1, "label": "m"}}]}]
        (constant,) = Root(single_route_defs(enums=enums)).find_declaration("test.E").constants
        assert constant.value == "MALE"
        assert constant.memo == "code: 1, label: m"


class TestReachability:
    """Test cases for declaration collection and ordering."""

    CHAIN = [
        {"name": "test.A", "superclass": "test.B"},
        {"name": "test.B", "superclass": "test.C"},
        {"name": "test.C", "superclass": "test.D"},
        {"name": "test.D"},
    ]

    def test_supertypes_first(self, single_route_defs):
        """Declarations are ordered from the root ancestor down."""
        root = Root(single_route_defs(parameters=[{"name": "a", "type": "test.A"}], classes=self.CHAIN))
        assert [c.simple_name for c in root.declaration_list] == ["D", "C", "B", "A"]

    def test_discovery_order(self, single_route_defs):
        """Parameters are walked before the return type; a generic before its arguments."""
        defs = single_route_defs(
            parameters=[{"name": "q", "type": "test.Query"}],
            return_type="test.Page<test.User>",
            classes=[
                {"name": "test.User"},
                {"name": "test.Page", "typeParameters": ["T"], "members": [{"name": "items", "type": "java.util.List<T>"}]},
                {"name": "test.Query"},
            ],
        )
        assert [c.simple_name for c in Root(defs).declaration_list] == ["Query", "Page", "User"]

    def test_unreachable_kept_without_filter(self, single_route_defs):
        """Without an apis filter every declaration is emitted."""
        defs = single_route_defs(classes=[{"name": "test.Lonely"}], enums=[{"name": "test.Mood"}])
        root = Root(defs)
        assert [c.name for c in root.declaration_list] == ["test.Lonely"]
        assert [e.name for e in root.enum_list] == ["test.Mood"]

    def test_filter_drops_unreachable(self, single_route_defs):
        """With an apis filter only reachable declarations remain."""
        defs = single_route_defs(
            parameters=[{"name": "mood", "type": "test.Mood"}],
            classes=[{"name": "test.Lonely"}],
            enums=[{"name": "test.Mood"}, {"name": "test.Other"}],
        )
        root = Root(defs, RootOptions(apis=("test.FooModule",)))
        assert root.declaration_list == ()
        assert [e.name for e in root.enum_list] == ["test.Mood"]

    def test_members_are_reachable(self, single_route_defs):
        """Member types are collected through their owners."""
        defs = single_route_defs(
            return_type="test.Order",
            classes=[
                {"name": "test.Order", "members": [{"name": "buyer", "type": "test.Buyer"}]},
                {"name": "test.Buyer"},
            ],
        )
        root = Root(defs, RootOptions(apis=("FooModule",)))
        assert [c.simple_name for c in root.declaration_list] == ["Order", "Buyer"]

    def test_unreachable_partial_chain(self, single_route_defs):
        """Unreachable classes keep input order, with each chain rooted before its subclasses."""
        defs = single_route_defs(
            classes=[
                {"name": "test.A", "superclass": "test.B"},
                {"name": "test.B", "superclass": "test.C"},
                {"name": "test.C"},
                {"name": "test.D"},
            ]
        )
        assert [c.simple_name for c in Root(defs).declaration_list] == ["C", "B", "A", "D"]
