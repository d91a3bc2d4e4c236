from authed_http.consts import (
    DEFAULT_ERROR_CODE,
    LOGOUT_URL_PATH,
    PACKAGE_NAME,
    PACKAGE_VERSION,
    REFRESH_URL_PATH,
    USER_AGENT,
)


class TestPackageConstants:
    """Test package constants are properly defined"""

    def test_package_version_defined(self):
        """Test that package version is defined"""
        assert isinstance(PACKAGE_VERSION, str)
        assert "." in PACKAGE_VERSION  # Should be semantic version

    def test_user_agent_format(self):
        """Test that user agent follows expected format"""
        assert USER_AGENT == f"{PACKAGE_NAME}/{PACKAGE_VERSION}"

    def test_url_path_constants(self):
        """Test that URL path constants are properly defined"""
        assert REFRESH_URL_PATH.startswith("/")
        assert LOGOUT_URL_PATH.startswith("/")
        assert "refresh" in REFRESH_URL_PATH
        assert "logout" in LOGOUT_URL_PATH

    def test_default_error_code(self):
        assert DEFAULT_ERROR_CODE == 500
