from pytest_archon import archrule


def test_dispatch_independence() -> None:
    """
    The dispatch engine is the foundation of every operation.
    It must not import operations, instances, or storage adapters.
    """
    (
        archrule("dispatch_is_independent")
        .match("modelmap.dispatch*")
        .should_not_import("modelmap.adapters*")
        .should_not_import("modelmap.crud*")
        .should_not_import("modelmap.save*")
        .should_not_import("modelmap.instance*")
        .should_not_import("sqlalchemy*")
        .check("modelmap")
    )


def test_ports_layering() -> None:
    """
    Ports (interfaces) should not depend on Adapters (implementations).
    """
    (
        archrule("ports_layering")
        .match("modelmap.ports*")
        .should_not_import("modelmap.adapters*")
        .check("modelmap")
    )


def test_operations_use_ports_only() -> None:
    """
    Operations talk to storage through ``IConnection``; they never
    reach for a concrete adapter or a database driver.
    """
    (
        archrule("operations_use_ports")
        .match("modelmap.crud")
        .match("modelmap.save")
        .match("modelmap.query")
        .match("modelmap.connection")
        .should_not_import("modelmap.adapters*")
        .should_not_import("sqlalchemy*")
        .check("modelmap")
    )


def test_memory_adapter_has_no_database_dependency() -> None:
    """The in-memory adapter must stay usable without SQLAlchemy."""
    (
        archrule("memory_adapter_standalone")
        .match("modelmap.adapters.memory*")
        .should_not_import("modelmap.adapters.sqlalchemy*")
        .should_not_import("sqlalchemy*")
        .check("modelmap")
    )
