#!/usr/bin/env python3
"""
Configuration Tests

Render options, option parsing helpers and the YAML configuration file.
"""

import pytest

from rback.libs.core.config import ConfigManager, RenderOptions
from rback.libs.core.exceptions import ConfigurationError
from rback.libs.core.utils import normalize_kind, parse_ignored_prefixes, should_ignore


class TestRenderOptions:
    """Test RenderOptions defaults and derived values"""

    def test_defaults(self):
        options = RenderOptions()

        assert options.render_bindings
        assert options.render_rules
        assert options.namespace == ""
        assert options.ignored_prefixes == ["system:"]

    def test_default_prefixes_are_not_shared(self):
        first = RenderOptions()
        first.ignored_prefixes.append("kube-")

        assert RenderOptions().ignored_prefixes == ["system:"]

    @pytest.mark.parametrize("kind", ["sa", "serviceaccounts", "ServiceAccount", "SA"])
    def test_service_account_aliases(self, kind):
        options = RenderOptions(resource_kind=kind, resource_names=["a", "b"])

        assert options.resource_kind == "serviceaccount"
        assert options.service_account_names == ["a", "b"]

    def test_names_of_other_kinds_do_not_scope_service_accounts(self):
        options = RenderOptions(resource_kind="pods", resource_names=["a"])

        assert options.service_account_names == []


class TestOptionHelpers:
    """Test option parsing helpers"""

    def test_normalize_kind(self):
        assert normalize_kind("Pods") == "pods"
        assert normalize_kind("") == ""

    def test_parse_ignored_prefixes(self):
        assert parse_ignored_prefixes("system:,kube-") == ["system:", "kube-"]

    def test_none_disables_filtering(self):
        assert parse_ignored_prefixes("none") == []
        assert parse_ignored_prefixes(None) == []

    def test_empty_entries_are_dropped(self):
        assert parse_ignored_prefixes("system:,,") == ["system:"]

    def test_should_ignore(self):
        assert should_ignore("system:node", ["kube-", "system:"])
        assert not should_ignore("viewer", ["system:"])
        assert not should_ignore("system:node", [])


class TestConfigManager:
    """Test configuration file loading"""

    def test_load_and_defaults(self, tmp_path):
        # Arrange
        config_file = tmp_path / "rback.yaml"
        config_file.write_text(
            "render:\n"
            "  bindings: false\n"
            "  rules: true\n"
            "filter:\n"
            "  namespace: ns1\n"
            "  ignore_prefixes: [\"system:\", \"kube-\"]\n"
            "cluster:\n"
            "  context: dev\n"
            "  skip_tls: true\n"
            "global:\n"
            "  debug: true\n"
        )

        # Act
        manager = ConfigManager(str(config_file))
        manager.load_config()
        defaults = manager.get_defaults_for_argparse()

        # Assert
        assert defaults == {
            "render_bindings": False,
            "render_rules": True,
            "namespace": "ns1",
            "ignore_prefixes": "system:,kube-",
            "context": "dev",
            "skip_tls": True,
            "debug": True,
        }
        assert manager.config_file_path == str(config_file)

    def test_empty_prefix_list_disables_filtering(self, tmp_path):
        config_file = tmp_path / "rback.yaml"
        config_file.write_text("filter:\n  ignore_prefixes: []\n")

        manager = ConfigManager(str(config_file))
        manager.load_config()

        assert manager.get_defaults_for_argparse() == {"ignore_prefixes": "none"}

    def test_environment_variables_are_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RBACK_TEST_NAMESPACE", "from-env")
        config_file = tmp_path / "rback.yaml"
        config_file.write_text("filter:\n  namespace: ${RBACK_TEST_NAMESPACE}\n")

        manager = ConfigManager(str(config_file))
        manager.load_config()

        assert manager.get_section("filter") == {"namespace": "from-env"}

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "rback.yaml"
        config_file.write_text("")

        assert ConfigManager(str(config_file)).load_config() == {}

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigManager(str(tmp_path / "missing.yaml")).load_config()

    def test_no_default_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))

        manager = ConfigManager()

        assert manager.load_config() == {}
        assert manager.get_defaults_for_argparse() == {}

    def test_default_location_is_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "rback.yaml").write_text("render:\n  rules: false\n")

        manager = ConfigManager()
        manager.load_config()

        assert manager.get_defaults_for_argparse() == {"render_rules": False}

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "rback.yaml"
        config_file.write_text("render: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigManager(str(config_file)).load_config()

    def test_wrong_type(self, tmp_path):
        config_file = tmp_path / "rback.yaml"
        config_file.write_text("render:\n  bindings: sometimes\n")

        with pytest.raises(ConfigurationError, match="config.render.bindings must be a bool"):
            ConfigManager(str(config_file)).load_config()

    def test_top_level_must_be_mapping(self, tmp_path):
        config_file = tmp_path / "rback.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="must be a dictionary"):
            ConfigManager(str(config_file)).load_config()

    def test_unknown_keys_are_ignored(self, tmp_path):
        config_file = tmp_path / "rback.yaml"
        config_file.write_text("colors:\n  sa: blue\nrender:\n  bindings: true\n")

        manager = ConfigManager(str(config_file))
        manager.load_config()

        assert manager.get_defaults_for_argparse() == {"render_bindings": True}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
