"""Unit tests for admin key authentication module."""

import asyncio
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from app.core.auth import parse_api_keys, validate_admin_key, verify_admin_key
from app.core.errors import AuthenticationAppError


class TestParseAPIKeys:
    """Test key parsing utility function."""

    def test_parse_single_key(self) -> None:
        assert parse_api_keys("my-secret-key") == {"my-secret-key"}

    def test_parse_keys_with_whitespace(self) -> None:
        """Test that whitespace is trimmed from keys."""
        assert parse_api_keys("key1 , key2  ,  key3") == {"key1", "key2", "key3"}

    @pytest.mark.parametrize("raw", [None, "", "   ,  ,  "])
    def test_parse_empty_inputs(self, raw) -> None:
        assert parse_api_keys(raw) == set()

    def test_parse_removes_duplicate_keys(self) -> None:
        assert parse_api_keys("key1,key2,key1") == {"key1", "key2"}


class TestValidateAdminKey:
    """Test admin key validation logic."""

    @patch("app.core.auth.settings")
    def test_validate_bypassed_when_auth_disabled(self, mock_settings) -> None:
        """Validation is skipped when APP_ADMIN_KEY_REQUIRED=false."""
        mock_settings.app.admin_key_required = False

        validate_admin_key("any-random-key")
        validate_admin_key("")

    @patch("app.core.auth.settings")
    def test_validate_raises_when_no_keys_configured(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = None

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_admin_key("some-key")

        assert exc_info.value.code == "admin_keys_not_configured"
        assert "no admin keys are configured" in exc_info.value.message

    @patch("app.core.auth.settings")
    def test_validate_accepts_valid_key(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "valid-key-1,valid-key-2"

        validate_admin_key("valid-key-1")
        validate_admin_key("valid-key-2")

    @patch("app.core.auth.settings")
    def test_validate_rejects_invalid_key(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "valid-key-1,valid-key-2"

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_admin_key("invalid-key")

        assert exc_info.value.code == "invalid_admin_key"

    @patch("app.core.auth.settings")
    def test_validate_trims_configured_keys_only(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = " key1 , key2 "

        validate_admin_key("key1")

        with pytest.raises(AuthenticationAppError):
            validate_admin_key(" key1 ")


class TestVerifyAdminKeyDependency:
    """Test FastAPI dependency for admin key verification."""

    @patch("app.core.auth.settings")
    def test_verify_bypassed_when_auth_disabled(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = False

        asyncio.run(verify_admin_key(x_admin_key=None))

    @patch("app.core.auth.settings")
    def test_verify_raises_403_when_header_missing(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "valid-key"

        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(verify_admin_key(x_admin_key=None))

        assert exc_info.value.status_code == 403
        assert "Missing admin key" in exc_info.value.detail

    @patch("app.core.auth.settings")
    def test_verify_raises_403_when_key_invalid(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "valid-key"

        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(verify_admin_key(x_admin_key="wrong-key"))

        assert exc_info.value.status_code == 403
        assert "Invalid or missing admin key" in exc_info.value.detail

    @patch("app.core.auth.settings")
    def test_verify_accepts_valid_key(self, mock_settings) -> None:
        mock_settings.app.admin_key_required = True
        mock_settings.app.admin_api_keys = "my-valid-key,another-key"

        asyncio.run(verify_admin_key(x_admin_key="my-valid-key"))
        asyncio.run(verify_admin_key(x_admin_key="another-key"))
