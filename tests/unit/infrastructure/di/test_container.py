"""Tests for DIContainer binding and recursive resolution."""

import threading
import time
from abc import ABC, abstractmethod
from typing import Optional

import pytest

from bindery.config.schemas.container_schema import ContainerConfig
from bindery.demo import (
    CheckoutController,
    CreditCardPayment,
    NagadPayment,
    NotificationCenter,
    PaymentInterface,
    StandardShipping,
    ShippingCalculator,
)
from bindery.domain.base.di_contracts import DIScope
from bindery.infrastructure.di import injectable
from bindery.infrastructure.di.container import DIContainer
from bindery.infrastructure.di.exceptions import (
    CircularDependencyError,
    DependencyResolutionError,
    FactoryError,
    NotInstantiableError,
    RegistrationClosedError,
    UnresolvableBindingError,
    UntypedParameterError,
)


class Clock:
    pass


class Repository(ABC):
    @abstractmethod
    def find(self, key: str) -> str:
        """Look up a value."""


class InMemoryRepository(Repository):
    def __init__(self, clock: Clock):
        self.clock = clock

    def find(self, key: str) -> str:
        return key


class ReportService:
    def __init__(self, repository: Repository, clock: Clock):
        self.repository = repository
        self.clock = clock


class NeedsPort:
    def __init__(self, port: int):
        self.port = port


class HasDefaults:
    def __init__(self, clock: Clock, retries: int = 3, label="report"):
        self.clock = clock
        self.retries = retries
        self.label = label


class Untyped:
    def __init__(self, thing):
        self.thing = thing


class OptionalRepository:
    def __init__(self, repository: Optional[Repository] = None):
        self.repository = repository


class KeywordOnly:
    def __init__(self, clock: Clock, *, shipping: ShippingCalculator):
        self.clock = clock
        self.shipping = shipping


class Exploding:
    def __init__(self):
        raise RuntimeError("boom")


class Chicken:
    def __init__(self, egg: "Egg"):
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken):
        self.chicken = chicken


class AuditLog:
    def __init__(self, payment, shipping):
        self.payment = payment
        self.shipping = shipping


class OptionalPayment:
    def __init__(self, payment: Optional[PaymentInterface] = None):
        self.payment = payment


class DefaultedEngine:
    def __init__(self, engine: Exploding = None):
        self.engine = engine


@injectable(dependencies=["PaymentInterface"])
class DeclaredCheckout:
    def __init__(self, payment):
        self.payment = payment


@injectable(singleton=True)
class SharedClock:
    pass


class TestBindAndResolve:
    """Test the bind/resolve surface."""

    def setup_method(self):
        """Set up test fixtures."""
        self.container = DIContainer()
        self.container.catalog(CheckoutController, CreditCardPayment, NagadPayment, PaymentInterface)

    def test_bound_key_resolves_to_concrete_type(self):
        self.container.bind(PaymentInterface, CreditCardPayment)

        assert isinstance(self.container.resolve(PaymentInterface), CreditCardPayment)

    def test_string_binding_resolves_checkout_controller(self):
        self.container.bind("PaymentInterface", "CreditCardPayment")

        controller = self.container.resolve("CheckoutController")

        assert isinstance(controller, CheckoutController)
        assert isinstance(controller.payment, CreditCardPayment)

    def test_rebinding_last_write_wins(self):
        self.container.bind("PaymentInterface", "CreditCardPayment")
        self.container.bind("PaymentInterface", "NagadPayment")

        assert isinstance(self.container.resolve("PaymentInterface"), NagadPayment)

    def test_string_key_finds_binding_registered_under_class(self):
        self.container.bind(PaymentInterface, NagadPayment)

        assert isinstance(self.container.resolve("PaymentInterface"), NagadPayment)

    def test_class_key_finds_binding_registered_under_dotted_path(self):
        self.container.bind("bindery.demo.payments.PaymentInterface", NagadPayment)

        assert isinstance(self.container.resolve(PaymentInterface), NagadPayment)

    def test_unbound_dotted_path_is_imported(self):
        container = DIContainer()

        payment = container.resolve("bindery.demo.payments.NagadPayment")

        assert isinstance(payment, NagadPayment)

    def test_factory_binding_receives_container(self):
        received = []

        def factory(container):
            received.append(container)
            return NagadPayment()

        self.container.bind(PaymentInterface, factory)

        assert isinstance(self.container.resolve(PaymentInterface), NagadPayment)
        assert received == [self.container]

    def test_factory_can_resolve_its_own_dependencies(self):
        self.container.bind(Repository, lambda c: InMemoryRepository(c.resolve(Clock)))

        repository = self.container.resolve(Repository)

        assert isinstance(repository.clock, Clock)

    def test_bind_without_target_binds_key_to_itself(self):
        self.container.bind(Clock)

        assert self.container.has(Clock)
        assert isinstance(self.container.resolve(Clock), Clock)

    def test_bind_rejects_non_callable_target(self):
        with pytest.raises(TypeError, match="must be a class"):
            self.container.bind(PaymentInterface, 42)

    def test_target_binding_follows_chain(self):
        self.container.bind("PaymentInterface", "DefaultPayment")
        self.container.bind("DefaultPayment", NagadPayment)

        assert isinstance(self.container.resolve("PaymentInterface"), NagadPayment)


class TestConstructorResolution:
    """Test recursive constructor resolution."""

    def setup_method(self):
        """Set up test fixtures."""
        self.container = DIContainer()

    def test_zero_parameter_constructor_returns_fresh_instances(self):
        first = self.container.resolve(Clock)
        second = self.container.resolve(Clock)

        assert isinstance(first, Clock)
        assert first is not second

    def test_nested_dependencies_are_resolved_in_order(self):
        self.container.bind(Repository, InMemoryRepository)

        service = self.container.resolve(ReportService)

        assert isinstance(service.repository, InMemoryRepository)
        assert isinstance(service.repository.clock, Clock)
        assert isinstance(service.clock, Clock)
        assert service.clock is not service.repository.clock

    def test_unbound_abstract_parameter_is_not_instantiable(self):
        with pytest.raises(NotInstantiableError) as exc_info:
            self.container.resolve(ReportService)

        assert exc_info.value.parameter_name == "repository"
        assert exc_info.value.dependency_key is ReportService
        assert isinstance(exc_info.value.cause, UnresolvableBindingError)

    def test_unbound_abstract_key_is_unresolvable(self):
        with pytest.raises(UnresolvableBindingError, match="abstract contract"):
            self.container.resolve(Repository)

    def test_unknown_string_key_is_unresolvable(self):
        with pytest.raises(UnresolvableBindingError, match="NoSuchService"):
            self.container.resolve("NoSuchService")

    def test_non_class_key_is_unresolvable(self):
        with pytest.raises(UnresolvableBindingError, match="not a class"):
            self.container.resolve(42)

    def test_scalar_parameter_without_default_fails(self):
        with pytest.raises(NotInstantiableError, match="scalar type"):
            self.container.resolve(NeedsPort)

    def test_defaults_are_used_for_scalar_and_untyped_parameters(self):
        instance = self.container.resolve(HasDefaults)

        assert isinstance(instance.clock, Clock)
        assert instance.retries == 3
        assert instance.label == "report"

    def test_untyped_parameter_without_default_fails(self):
        with pytest.raises(UntypedParameterError) as exc_info:
            self.container.resolve(Untyped)

        assert isinstance(exc_info.value, NotInstantiableError)
        assert exc_info.value.parameter_name == "thing"

    def test_optional_parameter_falls_back_to_default(self):
        assert self.container.resolve(OptionalRepository).repository is None

    def test_optional_parameter_uses_binding_when_present(self):
        self.container.bind(Repository, InMemoryRepository)

        assert isinstance(self.container.resolve(OptionalRepository).repository, InMemoryRepository)

    def test_keyword_only_parameters_are_passed_by_keyword(self):
        self.container.bind(ShippingCalculator, StandardShipping)

        instance = self.container.resolve(KeywordOnly)

        assert isinstance(instance.shipping, StandardShipping)

    def test_constructor_failure_is_wrapped(self):
        with pytest.raises(NotInstantiableError) as exc_info:
            self.container.resolve(Exploding)

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_explicit_dependencies_skip_introspection(self):
        self.container.bind(PaymentInterface, NagadPayment)
        self.container.bind(ShippingCalculator, StandardShipping)
        self.container.bind(AuditLog, dependencies=[PaymentInterface, ShippingCalculator])

        audit = self.container.resolve(AuditLog)

        assert isinstance(audit.payment, NagadPayment)
        assert isinstance(audit.shipping, StandardShipping)

    def test_injectable_declared_dependencies(self):
        self.container.bind("PaymentInterface", NagadPayment)

        checkout = self.container.resolve(DeclaredCheckout)

        assert isinstance(checkout.payment, NagadPayment)


class TestFactoryErrors:
    """Test factory failure handling."""

    def test_factory_exception_becomes_factory_error(self, container):
        def factory(_container):
            raise ValueError("gateway offline")

        container.bind(PaymentInterface, factory)

        with pytest.raises(FactoryError, match="gateway offline") as exc_info:
            container.resolve(PaymentInterface)

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_resolution_error_inside_factory_propagates_unchanged(self, container):
        container.bind("Wrapper", lambda c: c.resolve(Repository))

        with pytest.raises(UnresolvableBindingError):
            container.resolve("Wrapper")



class TestDefaultFallback:
    """Test that defaults only stand in for keys with no binding."""

    def test_unbound_optional_parameter_gets_default(self, container):
        assert container.resolve(OptionalPayment).payment is None

    def test_failing_factory_is_not_replaced_by_default(self, container):
        def broken_factory(_container):
            raise ConnectionError("gateway down")

        container.bind(PaymentInterface, broken_factory)

        with pytest.raises(FactoryError, match="gateway down"):
            container.resolve(OptionalPayment)

    def test_failing_constructor_is_not_replaced_by_default(self, container):
        with pytest.raises(NotInstantiableError) as exc_info:
            container.resolve(DefaultedEngine)

        assert exc_info.value.dependency_key is Exploding

    def test_binding_to_missing_type_is_not_replaced_by_default(self, container):
        container.bind("PaymentInterface", "MissingPayment")

        with pytest.raises(NotInstantiableError) as exc_info:
            container.resolve(OptionalPayment)

        assert exc_info.value.parameter_name == "payment"
        assert isinstance(exc_info.value.cause, UnresolvableBindingError)


class TestSelfNamingBindings:
    """Test keys bound to the class they name."""

    def test_bare_name_bound_to_its_class(self, container):
        container.bind("CreditCardPayment", CreditCardPayment)

        assert isinstance(container.resolve("CreditCardPayment"), CreditCardPayment)

    def test_dotted_path_bound_to_its_class(self, container):
        container.bind("bindery.demo.payments.NagadPayment", NagadPayment)

        assert isinstance(container.resolve("bindery.demo.payments.NagadPayment"), NagadPayment)
        assert isinstance(container.resolve(NagadPayment), NagadPayment)

    def test_class_bound_to_its_own_name(self, container):
        container.bind(NagadPayment, "NagadPayment")

        assert isinstance(container.resolve(NagadPayment), NagadPayment)

    def test_bare_name_bound_to_its_dotted_path(self, container):
        container.bind("PaymentInterface", "CreditCardPayment")
        container.bind("CreditCardPayment", "bindery.demo.payments.CreditCardPayment")

        assert isinstance(container.resolve(PaymentInterface), CreditCardPayment)

    def test_singleton_bound_to_its_own_class(self, container):
        container.singleton("CreditCardPayment", CreditCardPayment)

        assert container.resolve("CreditCardPayment") is container.resolve(CreditCardPayment)

    def test_abstract_class_bound_to_its_name_is_unresolvable(self, container):
        container.bind("PaymentInterface", PaymentInterface)

        with pytest.raises(UnresolvableBindingError, match="abstract contract"):
            container.resolve("PaymentInterface")

    def test_explain_self_naming_binding(self, container):
        container.bind("CreditCardPayment", "bindery.demo.payments.CreditCardPayment")

        plan = container.explain("CreditCardPayment")

        assert "error" not in plan
        assert "resolves_to" not in plan
        assert plan["type"] == "bindery.demo.payments.CreditCardPayment"

class TestScopes:
    """Test transient and singleton lifetimes."""

    def test_transient_binding_returns_fresh_instances(self, container):
        container.bind(PaymentInterface, NagadPayment)

        assert container.resolve(PaymentInterface) is not container.resolve(PaymentInterface)

    def test_singleton_returns_same_instance(self, container):
        container.singleton(PaymentInterface, NagadPayment)

        assert container.resolve(PaymentInterface) is container.resolve(PaymentInterface)

    def test_singleton_factory_runs_once(self, container):
        calls = []

        def factory(_container):
            calls.append(1)
            return NotificationCenter()

        container.singleton(NotificationCenter, factory)

        assert container.resolve(NotificationCenter) is container.resolve(NotificationCenter)
        assert len(calls) == 1

    def test_default_scope_from_config(self):
        container = DIContainer(ContainerConfig(default_scope=DIScope.SINGLETON))
        container.bind(Clock)

        assert container.resolve(Clock) is container.resolve(Clock)

    def test_instance_binding_returns_registered_object(self, container):
        payment = NagadPayment()
        container.instance(PaymentInterface, payment)

        assert container.resolve(PaymentInterface) is payment

    def test_rebinding_drops_cached_singleton(self, container):
        container.singleton(PaymentInterface, NagadPayment)
        container.resolve(PaymentInterface)

        container.singleton(PaymentInterface, CreditCardPayment)

        assert isinstance(container.resolve(PaymentInterface), CreditCardPayment)

    def test_concurrent_resolves_build_singleton_once(self, container):
        calls = []

        def slow_factory(_container):
            calls.append(1)
            time.sleep(0.05)
            return NotificationCenter()

        container.singleton(NotificationCenter, slow_factory)
        results = []
        threads = [
            threading.Thread(target=lambda: results.append(container.resolve(NotificationCenter)))
            for _ in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len(results) == 4
        assert all(result is results[0] for result in results)

    def test_register_injectable_class_uses_singleton_metadata(self, container):
        container.register_injectable_class(SharedClock)

        assert container.resolve(SharedClock) is container.resolve(SharedClock)


class TestCycles:
    """Test binding and constructor cycles."""

    def test_binding_cycle_raises_circular_dependency_error(self, container):
        container.bind("ServiceA", "ServiceB")
        container.bind("ServiceB", "ServiceA")

        with pytest.raises(CircularDependencyError) as exc_info:
            container.resolve("ServiceA")

        assert isinstance(exc_info.value, RecursionError)
        assert exc_info.value.chain == ["ServiceA", "ServiceB", "ServiceA"]

    def test_constructor_cycle_is_not_wrapped(self, container):
        with pytest.raises(CircularDependencyError, match="Chicken"):
            container.resolve(Chicken)

    def test_cycle_without_detection_exhausts_the_stack(self):
        container = DIContainer(ContainerConfig(detect_cycles=False))
        container.bind("ServiceA", "ServiceB")
        container.bind("ServiceB", "ServiceA")

        with pytest.raises(RecursionError) as exc_info:
            container.resolve("ServiceA")

        assert not isinstance(exc_info.value, CircularDependencyError)

    def test_stack_is_clean_after_a_failed_resolution(self, container):
        with pytest.raises(DependencyResolutionError):
            container.resolve(ReportService)

        container.bind(Repository, InMemoryRepository)
        assert isinstance(container.resolve(ReportService), ReportService)


class TestRegistrationPhase:
    """Test sealing and registry housekeeping."""

    def test_bind_after_seal_is_rejected(self, container):
        container.bind(PaymentInterface, NagadPayment)
        container.seal()

        with pytest.raises(RegistrationClosedError):
            container.bind(PaymentInterface, CreditCardPayment)

        assert isinstance(container.resolve(PaymentInterface), NagadPayment)

    def test_unbind_after_seal_is_rejected(self, container):
        container.bind(Clock)
        container.seal()

        with pytest.raises(RegistrationClosedError):
            container.unbind(Clock)

    def test_seal_on_first_resolve(self):
        container = DIContainer(ContainerConfig(seal_on_first_resolve=True))
        container.bind(Clock)
        assert not container.is_sealed

        container.resolve(Clock)

        assert container.is_sealed
        with pytest.raises(RegistrationClosedError):
            container.instance(Clock, Clock())

    def test_unbind_and_has(self, container):
        container.bind(PaymentInterface, NagadPayment)

        assert container.has(PaymentInterface)
        assert container.unbind(PaymentInterface) is True
        assert not container.is_bound(PaymentInterface)
        assert container.unbind(PaymentInterface) is False

    def test_get_optional_returns_none_for_unresolvable(self, container):
        assert container.get_optional(Repository) is None
        assert isinstance(container.get_optional(Clock), Clock)

    def test_clear_reopens_container(self, container):
        container.bind(Clock)
        container.seal()

        container.clear()

        assert not container.is_sealed
        assert container.get_registrations() == {}
        container.bind(Clock)

    def test_stats(self, container):
        container.bind(PaymentInterface, NagadPayment)
        container.singleton(Clock)

        stats = container.get_stats()

        assert stats["total_registrations"] == 2
        assert stats["scope_types"] == {"transient": 1, "singleton": 1}
        assert stats["sealed"] is False
