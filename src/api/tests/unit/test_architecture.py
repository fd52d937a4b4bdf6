"""Architecture tests using pytest-archon.

These tests enforce the layering between the users bounded context, the
shared kernel and the infrastructure package.
"""

from pytest_archon import archrule


class TestUsersDomainLayerBoundaries:
    """The domain layer holds pure business logic."""

    def test_domain_does_not_import_infrastructure(self):
        (
            archrule("users_domain_no_infrastructure")
            .match("users.domain*")
            .should_not_import("users.infrastructure*", "infrastructure*")
            .check("users")
        )

    def test_domain_does_not_import_application(self):
        (
            archrule("users_domain_no_application")
            .match("users.domain*")
            .should_not_import("users.application*")
            .check("users")
        )

    def test_domain_is_framework_agnostic(self):
        (
            archrule("users_domain_no_frameworks")
            .match("users.domain*")
            .should_not_import("fastapi*", "starlette*", "sqlalchemy*", "redis*")
            .check("users")
        )


class TestUsersPortsLayerBoundaries:
    def test_ports_do_not_import_implementations(self):
        (
            archrule("users_ports_no_infrastructure")
            .match("users.ports*")
            .should_not_import("users.infrastructure*", "users.application*")
            .check("users")
        )


class TestUsersApplicationLayerBoundaries:
    def test_application_does_not_import_presentation(self):
        (
            archrule("users_application_no_presentation")
            .match("users.application*")
            .should_not_import("users.presentation*", "fastapi*")
            .check("users")
        )


class TestSharedKernelBoundaries:
    """The shared kernel is imported by everything and imports nothing back."""

    def test_shared_kernel_does_not_import_contexts(self):
        (
            archrule("shared_kernel_no_contexts")
            .match("shared_kernel*")
            .should_not_import("users*", "infrastructure*")
            .check("shared_kernel")
        )

    def test_shared_kernel_does_not_import_frameworks(self):
        (
            archrule("shared_kernel_no_frameworks")
            .match("shared_kernel*")
            .should_not_import("fastapi*", "sqlalchemy*", "redis*", "httpx*")
            .check("shared_kernel")
        )


class TestInfrastructureBoundaries:
    def test_infrastructure_does_not_import_contexts(self):
        """Only the composition root wires bounded contexts together."""
        (
            archrule("infrastructure_no_contexts")
            .match("infrastructure*")
            .exclude("infrastructure.migrations*")
            .should_not_import("users*")
            .check("infrastructure")
        )
