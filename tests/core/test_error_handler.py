"""
Tests for error handler.

This module tests the error taxonomy and the outbound request wrapper.
"""

import pytest
from unittest.mock import patch, MagicMock
import requests
import json

from conceptlab.core.error_handler import (
    APIError,
    ValidationError,
    RequestValidationError,
    ConfigurationError,
    AuthenticationRequired,
    OwnershipViolation,
    handle_api_request,
    log_api_error
)

class TestErrorHandler:
    """
    Tests for the error handler module.
    """

    def test_api_error(self):
        """
        Test APIError exception.
        """
        error = APIError("Test error")

        assert str(error) == "API Error: Test error"
        assert error.message == "Test error"
        assert error.status_code is None
        assert error.response is None
        assert error.endpoint is None
        assert error.request_data is None

        error = APIError(
            message="Test error",
            status_code=404,
            response="Not found",
            endpoint="https://api.example.com",
            request_data={"param": "value"}
        )

        assert "API Error: Test error (Status Code: 404) (Endpoint: https://api.example.com)" in str(error)
        assert error.status_code == 404
        assert error.response == "Not found"

    def test_validation_error(self):
        """
        Test ValidationError exception.
        """
        error = ValidationError("Test error")
        assert str(error) == "Validation Error: Test error"
        assert error.field is None

        error = ValidationError(message="Test error", field="test_field", value="test_value")
        assert "Validation Error: Test error (Field: test_field)" in str(error)
        assert error.value == "test_value"

    def test_request_validation_error_details(self):
        """
        Test RequestValidationError carries per-field details.
        """
        details = [
            {"field": "audience.id", "message": "'id' is a required property"},
            {"field": "tone", "message": "5 is not of type 'string'"}
        ]
        error = RequestValidationError("Invalid request data", details=details)

        assert isinstance(error, ValidationError)
        assert error.details == details
        assert error.field == "audience.id"
        assert error.message == "Invalid request data"

        assert RequestValidationError("Invalid request data").details == []

    def test_configuration_error(self):
        """
        Test ConfigurationError exception.
        """
        error = ConfigurationError(
            message="Test error",
            component="test_component",
            missing_keys=["key1", "key2"]
        )

        assert "Configuration Error: Test error (Component: test_component) (Missing Keys: key1, key2)" in str(error)
        assert error.missing_keys == ["key1", "key2"]

    def test_access_errors_have_default_messages(self):
        """
        Test AuthenticationRequired and OwnershipViolation messages.
        """
        assert "log in" in AuthenticationRequired().message
        assert "your own audiences" in OwnershipViolation().message
        assert OwnershipViolation("custom").message == "custom"

    @patch("requests.post")
    def test_handle_api_request_success(self, mock_post):
        """
        Test handling a successful API request.
        """
        mock_response = MagicMock()
        mock_response.json.return_value = {"status": "success"}
        mock_response.raise_for_status = MagicMock()
        mock_post.return_value = mock_response

        result = handle_api_request(
            requests.post,
            "https://api.example.com",
            {"param": "value"},
            {"Content-Type": "application/json"},
            timeout=5
        )

        mock_post.assert_called_once_with(
            "https://api.example.com",
            json={"param": "value"},
            headers={"Content-Type": "application/json"},
            timeout=5
        )
        assert result == {"status": "success"}

    @patch("requests.post")
    def test_handle_api_request_http_error(self, mock_post):
        """
        Test handling an API request with an HTTP error.
        """
        mock_response = MagicMock()
        mock_response.status_code = 500
        mock_response.text = "Server error"

        mock_http_error = requests.exceptions.HTTPError("500 Server Error")
        mock_http_error.response = mock_response

        mock_response.raise_for_status.side_effect = mock_http_error
        mock_post.return_value = mock_response

        with pytest.raises(APIError) as excinfo:
            handle_api_request(
                requests.post,
                "https://api.example.com",
                {"param": "value"},
                {"Content-Type": "application/json"}
            )

        error = excinfo.value
        assert "API request failed: 500 Server Error" in str(error)
        assert error.status_code == 500
        assert error.response == "Server error"
        assert error.endpoint == "https://api.example.com"
        assert error.request_data == {"param": "value"}

    @patch("requests.post")
    def test_handle_api_request_connection_error(self, mock_post):
        """
        Test handling an API request with a connection error.
        """
        mock_post.side_effect = requests.exceptions.ConnectionError("Connection refused")

        with pytest.raises(APIError) as excinfo:
            handle_api_request(
                requests.post,
                "https://api.example.com",
                {"param": "value"},
                {"Content-Type": "application/json"}
            )

        assert "API request failed: Connection error" in str(excinfo.value)

    @patch("requests.post")
    def test_handle_api_request_timeout(self, mock_post):
        """
        Test handling an API request with a timeout.
        """
        mock_post.side_effect = requests.exceptions.Timeout("Request timed out")

        with pytest.raises(APIError) as excinfo:
            handle_api_request(
                requests.post,
                "https://api.example.com",
                {"param": "value"},
                {"Content-Type": "application/json"},
                error_message="Chat completion request failed",
                timeout=1
            )

        assert "Chat completion request failed: Request timed out" in str(excinfo.value)

    @patch("requests.post")
    def test_handle_api_request_json_decode_error(self, mock_post):
        """
        Test handling an API request whose body is not JSON.
        """
        mock_response = MagicMock()
        mock_response.json.side_effect = json.JSONDecodeError("Invalid JSON", "", 0)
        mock_response.raise_for_status = MagicMock()
        mock_response.status_code = 200
        mock_response.text = "<html>oops</html>"
        mock_post.return_value = mock_response

        with pytest.raises(APIError) as excinfo:
            handle_api_request(
                requests.post,
                "https://api.example.com",
                {"param": "value"},
                {"Content-Type": "application/json"}
            )

        error = excinfo.value
        assert "Failed to parse API response" in str(error)
        assert error.status_code == 200
        assert error.response == "<html>oops</html>"

    def test_log_api_error_redacts_keys(self):
        """
        Test that log_api_error does not log secret values.
        """
        error = APIError(
            message="Test error",
            status_code=401,
            endpoint="https://api.example.com",
            request_data={"api_key": "sk-secret", "model": "m"}
        )

        with patch("conceptlab.core.error_handler.logger") as mock_logger:
            log_api_error(error)

        logged = " ".join(str(call) for call in mock_logger.method_calls)
        assert "sk-secret" not in logged
        assert "***REDACTED***" in logged
        # The caller's error object is left untouched
        assert error.request_data["api_key"] == "sk-secret"
