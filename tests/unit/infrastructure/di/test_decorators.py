"""Tests for the @injectable decorator."""

import pytest

from bindery.infrastructure.di.decorators import (
    InjectableMetadata,
    get_injectable_metadata,
    injectable,
    is_injectable,
)


class TestInjectable:
    """Test metadata attached by @injectable."""

    def test_bare_decorator(self):
        @injectable
        class Service:
            pass

        assert is_injectable(Service)
        assert get_injectable_metadata(Service) == InjectableMetadata()

    def test_decorator_with_arguments(self):
        @injectable(singleton=True, dependencies=["PaymentInterface"])
        class Service:
            def __init__(self, payment):
                self.payment = payment

        metadata = get_injectable_metadata(Service)
        assert metadata.singleton is True
        assert metadata.dependencies == ("PaymentInterface",)

    def test_constructor_is_untouched(self):
        @injectable
        class Service:
            def __init__(self, value):
                self.value = value

        assert Service(5).value == 5

    def test_metadata_is_not_inherited(self):
        @injectable(singleton=True)
        class Base:
            pass

        class Child(Base):
            pass

        assert not is_injectable(Child)

    def test_rejects_functions(self):
        with pytest.raises(TypeError, match="only decorate classes"):
            injectable(lambda: None)

    def test_plain_class_is_not_injectable(self):
        assert not is_injectable(object)
        assert get_injectable_metadata("Service") is None
