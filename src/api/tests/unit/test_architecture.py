"""Architecture tests using pytest-archon.

These tests enforce DDD architectural boundaries between layers
within the Catalog bounded context.
"""

from pytest_archon import archrule


class TestCatalogDomainLayerBoundaries:
    """Tests that the domain layer has no forbidden dependencies."""

    def test_domain_does_not_import_infrastructure(self):
        """Domain layer should not depend on infrastructure.

        The domain layer holds the one-primary-per-group rules and must not
        know about tables, sessions or object storage.
        """
        (
            archrule("domain_no_infrastructure")
            .match("catalog.domain*")
            .should_not_import("catalog.infrastructure*", "infrastructure*")
            .check("catalog")
        )

    def test_domain_does_not_import_application(self):
        (
            archrule("domain_no_application")
            .match("catalog.domain*")
            .should_not_import("catalog.application*", "catalog.ports*")
            .check("catalog")
        )

    def test_domain_does_not_import_frameworks(self):
        """Domain objects should be framework-agnostic."""
        (
            archrule("domain_no_frameworks")
            .match("catalog.domain*")
            .should_not_import("fastapi*", "starlette*", "sqlalchemy*", "httpx*")
            .check("catalog")
        )


class TestCatalogPortsLayerBoundaries:
    def test_ports_do_not_import_infrastructure(self):
        """Ports define interfaces, not implementations."""
        (
            archrule("ports_no_infrastructure")
            .match("catalog.ports*")
            .should_not_import("catalog.infrastructure*", "sqlalchemy*", "httpx*")
            .check("catalog")
        )

    def test_ports_do_not_import_application(self):
        (
            archrule("ports_no_application")
            .match("catalog.ports*")
            .should_not_import("catalog.application*")
            .check("catalog")
        )


class TestCatalogApplicationLayerBoundaries:
    def test_application_does_not_import_adapters(self):
        """Services depend on ports; concrete repositories are injected."""
        (
            archrule("application_no_adapters")
            .match("catalog.application*")
            .should_not_import("catalog.infrastructure*")
            .check("catalog")
        )

    def test_application_does_not_import_presentation(self):
        (
            archrule("application_no_presentation")
            .match("catalog.application*")
            .should_not_import("catalog.presentation*", "fastapi*")
            .check("catalog")
        )


class TestCatalogInfrastructureLayerBoundaries:
    def test_infrastructure_does_not_import_presentation(self):
        (
            archrule("infrastructure_no_presentation")
            .match("catalog.infrastructure*")
            .should_not_import("catalog.presentation*", "fastapi*")
            .check("catalog")
        )


class TestSharedKernelBoundaries:
    def test_shared_kernel_does_not_import_catalog(self):
        """The shared kernel must stay usable by any bounded context."""
        (
            archrule("shared_kernel_no_catalog")
            .match("shared_kernel*")
            .should_not_import("catalog*")
            .check("shared_kernel")
        )
