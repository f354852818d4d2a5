"""Unit tests for tenant namespace derivation and table construction."""

import pytest

from orgmanager.core.database.tenant import TenantStore, namespace_for, tenant_users_table


class TestNamespaceFor:
    """Tests for namespace_for."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Acme Inc", "org_acme_inc"),
            ("ACME", "org_acme"),
            ("Big   Data\tCo", "org_big_data_co"),
            ("already_snake", "org_already_snake"),
        ],
    )
    def test_derivation(self, name, expected):
        assert namespace_for(name) == expected

    def test_case_and_whitespace_variants_collide(self):
        assert namespace_for("Acme Inc") == namespace_for("ACME   inc")

    def test_long_name_fits_identifier_limit(self):
        name = "Northwind Traders International Holdings Group Subsidiary Operations East"

        namespace = namespace_for(name)

        assert len(namespace.encode()) <= 63
        assert namespace.startswith("org_northwind_traders")
        assert namespace == namespace_for(name)

    def test_long_names_sharing_a_prefix_stay_distinct(self):
        base = "Northwind Traders International Holdings Group Subsidiary Operations"

        assert namespace_for(f"{base} East") != namespace_for(f"{base} West")

    def test_multibyte_name_fits_identifier_limit(self):
        namespace = namespace_for("Société Générale " + "é" * 40)

        assert len(namespace.encode()) <= 63

    def test_name_at_limit_is_not_suffixed(self):
        name = "x" * 59

        assert namespace_for(name) == "org_" + name

    def test_custom_prefix(self):
        assert namespace_for("Acme Inc", prefix="tenant_") == "tenant_acme_inc"

    def test_store_uses_its_prefix(self):
        store = TenantStore(session=None, prefix="t_")  # type: ignore[arg-type]

        assert store.namespace_for("Acme Inc") == "t_acme_inc"
        assert store.resolve("Acme Inc").namespace == "t_acme_inc"


class TestTenantUsersTable:
    """Tests for the per-namespace users table."""

    def test_table_is_bound_to_schema(self):
        table = tenant_users_table("org_acme_inc")

        assert table.name == "users"
        assert table.schema == "org_acme_inc"
        assert {"id", "email", "password_hash", "role", "is_active", "created_at"} <= set(
            table.c.keys()
        )

    def test_table_is_cached_per_namespace(self):
        assert tenant_users_table("org_a") is tenant_users_table("org_a")
        assert tenant_users_table("org_a") is not tenant_users_table("org_b")
