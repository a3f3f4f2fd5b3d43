"""
Test 1: Action Controller Resolver (controller/resolver.py)

Tests service controllers ("service:method"), action controllers
("service" + action attribute), class-name instantiation, the Action
suffix convention, application injection and delegation.
"""

from types import SimpleNamespace

import pytest

from actionctl.config import ResolverConfig
from actionctl.app import Application
from actionctl.controller.loader import ClassLoader
from actionctl.controller.resolver import ActionControllerResolver
from actionctl.faults import (
    ControllerResolutionFault,
    InvalidServiceValue,
    MissingActionParameter,
    UnknownClass,
    UnknownService,
)

from conftest import make_request
from support import (
    ApplicationAwareController,
    ServiceController,
    SuffixedController,
    dotted,
)


# ============================================================================
# Service controllers
# ============================================================================

class TestServiceController:

    def test_shared_closure_service_resolves(self, app, resolver):
        app["some_service"] = app.share(lambda app: SimpleNamespace(methodName=lambda: None))

        req = make_request("some_service:methodName")

        assert resolver.get_controller(req) == (app["some_service"], "methodName")

    def test_factory_service_yields_fresh_object(self, app, resolver):
        app["some_service"] = lambda app: ServiceController()

        req = make_request("some_service:example")
        first, _ = resolver.get_controller(req)
        second, _ = resolver.get_controller(req)

        assert isinstance(first, ServiceController)
        assert first is not second

    def test_object_service_is_returned_as_is(self, app, resolver):
        controller = ServiceController()
        app["some_service"] = controller

        assert resolver.get_controller(make_request("some_service:example")) == (controller, "example")

    def test_splits_on_first_colon(self, app, resolver):
        app["blog.posts-v2"] = ServiceController()

        instance, method = resolver.get_controller(make_request("blog.posts-v2:example"))

        assert instance is app["blog.posts-v2"]
        assert method == "example"

    def test_method_name_pattern_is_case_insensitive(self, app, resolver):
        app["svc"] = ServiceController()

        _, method = resolver.get_controller(make_request("svc:ShowALL"))

        assert method == "ShowALL"

    def test_missing_method_is_returned_unchanged(self, app, resolver):
        app["svc"] = ServiceController()

        _, method = resolver.get_controller(make_request("svc:nothing_here"))

        assert method == "nothing_here"


# ============================================================================
# Class-name services
# ============================================================================

class TestClassNameService:

    def test_class_name_creates_instance(self, app, resolver):
        app["some_service"] = dotted(ServiceController)

        instance, method = resolver.get_controller(make_request("some_service:example"))

        assert isinstance(instance, ServiceController)
        assert method == "example"

    def test_class_name_with_colon_separator(self, app, resolver):
        app["some_service"] = f"{ServiceController.__module__}:ServiceController"

        instance, _ = resolver.get_controller(make_request("some_service:example"))

        assert isinstance(instance, ServiceController)

    def test_registered_class_name(self, app, resolver):
        app["class_loader"].register("ServiceController", ServiceController)
        app["some_service"] = "ServiceController"

        instance, _ = resolver.get_controller(make_request("some_service:example"))

        assert isinstance(instance, ServiceController)

    def test_explicit_class_loader_wins(self, app, fallback):
        loader = ClassLoader({"Suffixed": SuffixedController})
        resolver = ActionControllerResolver(fallback, app, class_loader=loader)
        app["some_service"] = "Suffixed"

        instance, _ = resolver.get_controller(make_request("some_service:index"))

        assert isinstance(instance, SuffixedController)

    def test_class_object_creates_instance(self, app, resolver):
        app["some_service"] = ServiceController

        instance, _ = resolver.get_controller(make_request("some_service:example"))

        assert isinstance(instance, ServiceController)

    def test_fresh_instance_per_resolution(self, app, resolver):
        app["some_service"] = dotted(ServiceController)
        req = make_request("some_service:example")

        first = resolver.get_controller(req)
        second = resolver.get_controller(req)

        assert type(first[0]) is type(second[0])
        assert first[1] == second[1]
        assert first[0] is not second[0]

    def test_unknown_class_raises(self, app, resolver):
        app["some_service"] = "FooBar"

        with pytest.raises(UnknownClass, match='Class "FooBar" does not exist.'):
            resolver.get_controller(make_request("some_service:example"))

    def test_unknown_dotted_class_raises(self, app, resolver):
        app["some_service"] = "support.DoesNotExist"

        with pytest.raises(UnknownClass) as exc_info:
            resolver.get_controller(make_request("some_service:example"))

        assert exc_info.value.class_name == "support.DoesNotExist"

    def test_dotted_path_to_function_is_not_a_class(self, app, resolver):
        app["some_service"] = "support.hello"

        with pytest.raises(UnknownClass):
            resolver.get_controller(make_request("some_service:example"))


# ============================================================================
# Action controllers
# ============================================================================

class TestActionController:

    def test_action_param_is_method(self, app, resolver):
        app["some_service"] = dotted(ServiceController)

        instance, method = resolver.get_controller(make_request("some_service", action="example"))

        assert isinstance(instance, ServiceController)
        assert method == "example"

    def test_missing_action_param_raises(self, app, resolver):
        app["some_service"] = dotted(ServiceController)

        with pytest.raises(MissingActionParameter) as exc_info:
            resolver.get_controller(make_request("some_service"))

        assert exc_info.value.message == (
            'To route an action controller, make sure the route contains an "action" parameter.'
        )

    def test_missing_action_is_value_error(self, app, resolver):
        app["some_service"] = ServiceController

        with pytest.raises(ValueError):
            resolver.get_controller(make_request("some_service"))

    def test_action_checked_before_service_lookup(self, resolver):
        with pytest.raises(MissingActionParameter):
            resolver.get_controller(make_request("not_registered"))

    def test_custom_action_attribute(self, fallback):
        app = Application(config=ResolverConfig(action_attribute="_action"))
        app["some_service"] = ServiceController
        resolver = ActionControllerResolver(fallback, app)

        _, method = resolver.get_controller(make_request("some_service", _action="example"))

        assert method == "example"

        with pytest.raises(MissingActionParameter, match='"_action" parameter'):
            resolver.get_controller(make_request("some_service", action="example"))


# ============================================================================
# Action suffix
# ============================================================================

class TestActionSuffix:

    def test_suffix_used_when_exact_method_missing(self, app, resolver):
        app["svc"] = SuffixedController

        _, method = resolver.get_controller(make_request("svc:index"))

        assert method == "indexAction"

    def test_exact_method_wins_over_suffix(self, app, resolver):
        app["svc"] = SuffixedController

        _, method = resolver.get_controller(make_request("svc:show"))

        assert method == "show"

    def test_suffix_applied_to_action_param(self, app, resolver):
        app["svc"] = SuffixedController

        _, method = resolver.get_controller(make_request("svc", action="index"))

        assert method == "indexAction"

    def test_suffix_applied_once(self, app, resolver):
        app["svc"] = SuffixedController

        _, method = resolver.get_controller(make_request("svc:indexAction"))

        assert method == "indexAction"

    def test_non_callable_attribute_is_not_a_method(self, app, resolver):
        app["svc"] = SimpleNamespace(index="not callable", indexAction=lambda: None)

        _, method = resolver.get_controller(make_request("svc:index"))

        assert method == "indexAction"

    def test_configured_suffix(self, fallback):
        class Snake:
            def index_action(self):
                pass

        app = Application(config=ResolverConfig(action_suffix="_action"))
        app["svc"] = Snake
        resolver = ActionControllerResolver(fallback, app)

        _, method = resolver.get_controller(make_request("svc:index"))

        assert method == "index_action"


# ============================================================================
# Application injection
# ============================================================================

class TestApplicationAware:

    def test_app_injected_into_new_instance(self, app, resolver):
        app["svc"] = ApplicationAwareController

        instance, _ = resolver.get_controller(make_request("svc:example"))

        assert instance.app is app

    def test_app_injected_into_object_service(self, app, resolver):
        controller = ApplicationAwareController()
        app["svc"] = controller

        resolver.get_controller(make_request("svc:example"))

        assert controller.app is app

    def test_plain_controller_untouched(self, app, resolver):
        app["svc"] = ServiceController

        instance, _ = resolver.get_controller(make_request("svc:example"))

        assert not hasattr(instance, "app")


# ============================================================================
# Unknown and invalid services
# ============================================================================

class TestServiceErrors:

    def test_missing_service_raises(self, resolver):
        with pytest.raises(UnknownService, match='Service "some_service" does not exist.'):
            resolver.get_controller(make_request("some_service:methodName"))

    def test_service_keys_are_case_sensitive(self, app, resolver):
        app["Blog"] = ServiceController

        with pytest.raises(UnknownService):
            resolver.get_controller(make_request("blog:example"))

    @pytest.mark.parametrize("value", [42, 3.5, True, None, b"bytes"])
    def test_scalar_service_value_raises(self, app, resolver, value):
        app["svc"] = value

        with pytest.raises(InvalidServiceValue) as exc_info:
            resolver.get_controller(make_request("svc:example"))

        assert exc_info.value.service == "svc"
        assert type(value).__name__ in exc_info.value.message

    def test_resolution_faults_share_base(self, resolver):
        with pytest.raises(ControllerResolutionFault) as exc_info:
            resolver.get_controller(make_request("missing:example"))

        assert exc_info.value.code == "UNKNOWN_SERVICE"
        assert str(exc_info.value).startswith("[UNKNOWN_SERVICE]")


# ============================================================================
# Delegation
# ============================================================================

class TestDelegation:

    @pytest.mark.parametrize("controller", [
        None,
        "",
        "pkg.module.Class::method",
        "service:",
        "service:1method",
        "with space",
        "service:method:extra",
        "service\n",
    ])
    def test_non_matching_identifier_delegates(self, resolver, fallback, controller):
        req = make_request(controller)

        result = resolver.get_controller(req)

        assert result == ("fallback-controller", "fallback")
        fallback.get_controller.assert_called_once_with(req)

    def test_callable_controller_delegates(self, resolver, fallback):
        def handler():
            pass

        req = make_request(handler)
        resolver.get_controller(req)

        fallback.get_controller.assert_called_once_with(req)

    def test_missing_attribute_delegates(self, resolver, fallback):
        req = make_request()

        assert resolver.get_controller(req) is fallback.get_controller.return_value

    def test_get_arguments_always_delegates(self, resolver, fallback):
        req = make_request("svc:example")
        handler = (ServiceController(), "example")

        assert resolver.get_arguments(req, handler) == ["fallback-argument"]
        fallback.get_arguments.assert_called_once_with(req, handler)

    def test_matching_identifier_does_not_touch_fallback(self, app, resolver, fallback):
        app["svc"] = ServiceController

        resolver.get_controller(make_request("svc:example"))

        fallback.get_controller.assert_not_called()

    def test_custom_controller_attribute(self, fallback):
        app = Application(config=ResolverConfig(controller_attribute="handler"))
        app["svc"] = ServiceController
        resolver = ActionControllerResolver(fallback, app)

        instance, _ = resolver.get_controller(make_request(handler="svc:example"))
        assert isinstance(instance, ServiceController)

        resolver.get_controller(make_request("svc:example"))
        fallback.get_controller.assert_called_once()
