"""Unit tests for TenantScope."""

import pytest

from shared_kernel.tenancy import InvalidTenantError, TenantScope


class TestTenantScope:
    @pytest.mark.parametrize("tenant_id", ["acme", "tenant-a", "T_01", "a" * 64])
    def test_accepts_valid_ids(self, tenant_id):
        assert TenantScope(tenant_id).tenant_id == tenant_id

    @pytest.mark.parametrize("tenant_id", ["", "acme:eu", "acme eu", "a" * 65, "ac/me"])
    def test_rejects_invalid_ids(self, tenant_id):
        with pytest.raises(InvalidTenantError):
            TenantScope(tenant_id)

    def test_invalid_tenant_is_a_value_error(self):
        assert issubclass(InvalidTenantError, ValueError)

    def test_str_is_the_id(self):
        assert str(TenantScope("acme")) == "acme"


class TestTenantScopeFromHeader:
    def test_strips_whitespace(self):
        scope = TenantScope.from_header("  acme ")

        assert scope.tenant_id == "acme"
        assert scope.source == "header"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_header_is_rejected(self, value):
        with pytest.raises(InvalidTenantError, match="missing"):
            TenantScope.from_header(value)
