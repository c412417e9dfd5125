"""Tests for CDK context helpers."""

import pytest
from aws_cdk import App

from marble_cdk.context_helpers import (
    MissingContextError,
    camel_to_snake,
    get_context_bool,
    get_context_by_namespace,
    get_required_context,
    pick_context,
)


class TestGetRequiredContext:
    """Tests for get_required_context."""

    def test_returns_value(self):
        """Present values are returned."""
        app = App(context={"namespace": "marble"})

        assert get_required_context(app.node, "namespace") == "marble"

    def test_missing_raises(self):
        """Missing keys raise MissingContextError naming the key."""
        app = App()

        with pytest.raises(MissingContextError) as exc_info:
            get_required_context(app.node, "oauthTokenPath")

        assert exc_info.value.key == "oauthTokenPath"
        assert "-c oauthTokenPath=" in str(exc_info.value)

    def test_blank_raises(self):
        """Blank strings count as missing."""
        app = App(context={"owner": "  "})

        with pytest.raises(MissingContextError):
            get_required_context(app.node, "owner")

    def test_is_value_error(self):
        """Callers may catch it as a ValueError."""
        assert issubclass(MissingContextError, ValueError)


class TestGetContextBool:
    """Tests for get_context_bool."""

    @pytest.mark.parametrize(
        "value,expected",
        [(True, True), (False, False), ("true", True), ("TRUE", True), ("false", False)],
    )
    def test_values(self, value, expected):
        """Booleans and their string forms are accepted."""
        app = App(context={"createDns": value})

        assert get_context_bool(app.node, "createDns") is expected

    def test_default(self):
        """Missing keys fall back to the default."""
        assert get_context_bool(App().node, "createDns", default=True) is True


class TestCamelToSnake:
    """Tests for camel_to_snake."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("hostnamePrefix", "hostname_prefix"),
            ("appRepoName", "app_repo_name"),
            ("certificateArnPath", "certificate_arn_path"),
            ("namespace", "namespace"),
            ("openIdConnectProvider", "open_id_connect_provider"),
        ],
    )
    def test_conversion(self, name, expected):
        """camelCase keys become keyword argument names."""
        assert camel_to_snake(name) == expected


class TestGetContextByNamespace:
    """Tests for get_context_by_namespace."""

    def test_collects_namespace(self):
        """Only keys of the namespace are returned, without the namespace."""
        app = App(
            context={
                "website:hostnamePrefix": "marble",
                "website:appRepoName": "marble-website-starter",
                "redbox:hostnamePrefix": "redbox",
                "namespace": "marble",
            }
        )

        assert get_context_by_namespace(app.node, "website") == {
            "hostname_prefix": "marble",
            "app_repo_name": "marble-website-starter",
        }

    def test_unknown_namespace(self):
        """Unknown namespaces give an empty dict."""
        assert get_context_by_namespace(App().node, "elsewhere") == {}


class TestPickContext:
    """Tests for pick_context."""

    def test_keeps_requested_names(self):
        """Only the requested, present names are kept."""
        context = {"hostname_prefix": "marble", "app_repo_name": "starter"}

        assert pick_context(context, ["hostname_prefix", "domain_name_override"]) == {"hostname_prefix": "marble"}
