"""
Test per Settings ed eccezioni di dominio.
"""

import pydantic
import pytest

from app.core.config import Settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessValidationError,
    DuplicateError,
    NotFoundError,
)


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.backend_port == 8000
        assert settings.invoice_payment_terms == "Payment Terms: Net 30 Days"

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("BACKEND_PORT", "9100")
        assert Settings(_env_file=None).backend_port == 9100

    def test_colors_normalised(self):
        assert Settings(_env_file=None, pdf_accent_color="#1A2B3C").pdf_accent_color == "#1a2b3c"

    def test_invalid_color(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, pdf_muted_color="grey")

    def test_default_brokers_deduplicated(self):
        settings = Settings(_env_file=None, default_brokers=["TQL", " TQL ", "", "Landstar"])
        assert settings.default_brokers == ["TQL", "Landstar"]

    def test_production_rejects_defaults(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, app_env="production")


class TestExceptions:

    @pytest.mark.parametrize(
        "exc_class, status_code, error_code",
        [
            (NotFoundError, 404, "RESOURCE_NOT_FOUND"),
            (DuplicateError, 409, "DUPLICATE_RESOURCE"),
            (BusinessValidationError, 422, "BUSINESS_VALIDATION_ERROR"),
            (AuthenticationError, 401, "NOT_AUTHENTICATED"),
            (AuthorizationError, 403, "FORBIDDEN"),
        ],
    )
    def test_status_and_code(self, exc_class, status_code, error_code):
        exc = exc_class()
        assert exc.status_code == status_code
        assert exc.error_code == error_code
        assert exc.detail
        assert str(exc) == exc.detail

    def test_custom_detail_and_extra(self):
        exc = BusinessValidationError("Please fill in all required fields: rate", extra={"missing_fields": ["rate"]})
        assert isinstance(exc, ValueError)
        assert exc.detail == "Please fill in all required fields: rate"
        assert exc.extra == {"missing_fields": ["rate"]}
