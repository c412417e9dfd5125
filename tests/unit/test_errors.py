"""Tests for error handling utilities."""

from botocore.exceptions import ClientError

from src.utils.errors import AppError, ErrorCode, handle_error


class TestAppError:
    """Tests for AppError class."""

    def test_app_error_with_message(self) -> None:
        """Test creating AppError with message."""
        error = AppError(ErrorCode.NOT_FOUND, "Parameter not found")

        assert error.error_code == ErrorCode.NOT_FOUND
        assert error.message == "Parameter not found"
        assert error.details == {}
        assert str(error) == "Parameter not found"

    def test_app_error_to_dict(self) -> None:
        """Details are merged into the dict."""
        error = AppError(ErrorCode.CONFIGURATION_ERROR, "Missing variable", {"variable": "GRAPHQL_API_ID_KEY_PATH"})

        result = error.to_dict()

        assert result == {
            "errorCode": ErrorCode.CONFIGURATION_ERROR,
            "message": "Missing variable",
            "variable": "GRAPHQL_API_ID_KEY_PATH",
        }


class TestHandleError:
    """Tests for handle_error function."""

    def test_handle_app_error(self) -> None:
        """Test handling AppError returns error dict."""
        error = AppError(ErrorCode.INVALID_INPUT, "Bad request", {"field": "days"})

        result = handle_error(error)

        assert result["errorCode"] == ErrorCode.INVALID_INPUT
        assert result["field"] == "days"

    def test_handle_client_error(self) -> None:
        """SDK errors keep the AWS error code and operation."""
        error = ClientError(
            {"Error": {"Code": "ApiKeyLimitExceededException", "Message": "Too many keys"}}, "CreateApiKey"
        )

        result = handle_error(error)

        assert result == {
            "errorCode": ErrorCode.AWS_SERVICE_ERROR,
            "message": "Too many keys",
            "awsErrorCode": "ApiKeyLimitExceededException",
            "operation": "CreateApiKey",
        }

    def test_handle_generic_exception(self) -> None:
        """Test handling generic exception returns internal error."""
        result = handle_error(ValueError("Unexpected error"))

        assert result["errorCode"] == ErrorCode.INTERNAL_ERROR
        assert "unexpected" in result["message"].lower()


class TestErrorCode:
    """Tests for ErrorCode constants."""

    def test_error_codes_defined(self) -> None:
        """Test that all expected error codes are defined."""
        assert ErrorCode.NOT_FOUND == "NOT_FOUND"
        assert ErrorCode.INVALID_INPUT == "INVALID_INPUT"
        assert ErrorCode.CONFIGURATION_ERROR == "CONFIGURATION_ERROR"
        assert ErrorCode.AWS_SERVICE_ERROR == "AWS_SERVICE_ERROR"
        assert ErrorCode.INTERNAL_ERROR == "INTERNAL_ERROR"
