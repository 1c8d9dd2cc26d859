"""Tests for Kubernetes secrets utilities."""

from __future__ import annotations

import base64
from unittest.mock import Mock

import pytest
from kubernetes import client

from camunda_cloud_operator.utils.errors import CredentialError, CredentialErrorCause
from camunda_cloud_operator.utils.secrets import get_secret_value


class TestGetSecretValue:
    """Test cases for get_secret_value function."""

    def test_get_secret_value_success(self):
        """Test successfully getting a secret value."""
        mock_api = Mock()
        mock_secret = Mock()
        encoded_value = base64.b64encode(b"test-value").decode("utf-8")
        mock_secret.data = {"test-key": encoded_value}
        mock_api.read_namespaced_secret.return_value = mock_secret

        result = get_secret_value(mock_api, "default", "test-secret", "test-key")

        assert result == "test-value"
        mock_api.read_namespaced_secret.assert_called_once_with(
            name="test-secret", namespace="default"
        )

    def test_get_secret_value_bytes(self):
        """Test getting secret value that's already bytes."""
        mock_api = Mock()
        mock_secret = Mock()
        mock_secret.data = {"test-key": b"test-value"}
        mock_api.read_namespaced_secret.return_value = mock_secret

        result = get_secret_value(mock_api, "default", "test-secret", "test-key")

        assert result == "test-value"

    def test_get_secret_value_key_not_found(self):
        """Test error when key not found in secret."""
        mock_api = Mock()
        mock_secret = Mock()
        mock_secret.data = {"other-key": "dmFsdWU="}
        mock_api.read_namespaced_secret.return_value = mock_secret

        with pytest.raises(CredentialError, match="Key 'test-key' not found") as exc_info:
            get_secret_value(mock_api, "default", "test-secret", "test-key")

        assert exc_info.value.cause == CredentialErrorCause.NOT_FOUND

    def test_get_secret_value_empty_secret(self):
        """Test error when the secret has no data at all."""
        mock_api = Mock()
        mock_secret = Mock()
        mock_secret.data = None
        mock_api.read_namespaced_secret.return_value = mock_secret

        with pytest.raises(CredentialError) as exc_info:
            get_secret_value(mock_api, "default", "test-secret", "test-key")

        assert exc_info.value.cause == CredentialErrorCause.NOT_FOUND

    def test_get_secret_value_secret_not_found(self):
        """Test error when secret not found."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = client.exceptions.ApiException(status=404)

        with pytest.raises(CredentialError, match="Secret 'test-secret' not found") as exc_info:
            get_secret_value(mock_api, "default", "test-secret", "test-key")

        assert exc_info.value.cause == CredentialErrorCause.NOT_FOUND

    def test_get_secret_value_api_error(self):
        """Test handling of other API errors."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = client.exceptions.ApiException(status=500)

        with pytest.raises(client.exceptions.ApiException):
            get_secret_value(mock_api, "default", "test-secret", "test-key")

    def test_get_secret_value_invalid_base64(self):
        """Test that undecodable data is a decode error."""
        mock_api = Mock()
        mock_secret = Mock()
        mock_secret.data = {"test-key": "not base64!!"}
        mock_api.read_namespaced_secret.return_value = mock_secret

        with pytest.raises(CredentialError) as exc_info:
            get_secret_value(mock_api, "default", "test-secret", "test-key")

        assert exc_info.value.cause == CredentialErrorCause.DECODE_ERROR

    def test_get_secret_value_invalid_utf8(self):
        """Test that non UTF-8 data is a decode error."""
        mock_api = Mock()
        mock_secret = Mock()
        mock_secret.data = {"test-key": base64.b64encode(b"\xff\xfe").decode("utf-8")}
        mock_api.read_namespaced_secret.return_value = mock_secret

        with pytest.raises(CredentialError) as exc_info:
            get_secret_value(mock_api, "default", "test-secret", "test-key")

        assert exc_info.value.cause == CredentialErrorCause.DECODE_ERROR
