"""
Tests for RouterConfig loading and validation
"""

import pytest

from connector_router.core.config import RouterConfig
from connector_router.core.exceptions import ConfigError


class TestRouterConfigDefaults:
    """Built-in defaults"""

    def test_defaults(self):
        config = RouterConfig.default()
        assert config.clearance == 20
        assert config.snap_radius == 8
        assert config.alignment_snap == 10
        assert config.min_control_length == 50
        assert config.attached_handle_length == 100
        assert config.log_level == 'INFO'
        assert config.log_file is None

    def test_yaml_round_trip(self, tmp_path):
        path = tmp_path / 'router.yaml'
        path.write_text(RouterConfig.default().to_yaml(), encoding='utf-8')
        assert RouterConfig.from_yaml(str(path)).to_dict() == RouterConfig.default().to_dict()


class TestRouterConfigLoading:
    """YAML files and environment substitution"""

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = tmp_path / 'router.yaml'
        path.write_text("routing:\n  clearance: 35\nanchors:\n  snap_radius: 12\n", encoding='utf-8')
        config = RouterConfig.from_yaml(str(path))
        assert config.clearance == 35
        assert config.snap_radius == 12
        assert config.merge_tolerance == 0.02

    def test_env_substitution_with_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv('ROUTER_CLEARANCE', raising=False)
        path = tmp_path / 'router.yaml'
        path.write_text("routing:\n  clearance: ${ROUTER_CLEARANCE:-30}\n", encoding='utf-8')
        assert RouterConfig.from_yaml(str(path)).clearance == 30

        monkeypatch.setenv('ROUTER_CLEARANCE', '45')
        assert RouterConfig.from_yaml(str(path)).clearance == 45

    def test_env_substitution_without_default(self, monkeypatch):
        monkeypatch.delenv('ROUTER_LOG_FILE', raising=False)
        with pytest.raises(ConfigError):
            RouterConfig({'logging': {'file': '${ROUTER_LOG_FILE}'}})

    def test_log_file_becomes_path(self, tmp_path):
        config = RouterConfig({'logging': {'file': str(tmp_path / 'router.log'), 'level': 'DEBUG'}})
        assert config.log_file == tmp_path / 'router.log'
        assert config.log_level == 'DEBUG'

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RouterConfig.from_yaml(str(tmp_path / 'missing.yaml'))

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / 'router.yaml'
        path.write_text("- just\n- a list\n", encoding='utf-8')
        with pytest.raises(ConfigError):
            RouterConfig.from_yaml(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'router.yaml'
        path.write_text("routing: [unclosed\n", encoding='utf-8')
        with pytest.raises(ConfigError):
            RouterConfig.from_yaml(str(path))


class TestRouterConfigValidation:
    """Pydantic validation errors surface as ConfigError"""

    def test_negative_clearance(self):
        with pytest.raises(ConfigError):
            RouterConfig({'routing': {'clearance': -1}})

    def test_attached_handle_shorter_than_minimum(self):
        with pytest.raises(ConfigError):
            RouterConfig({'curve': {'min_control_length': 80, 'attached_handle_length': 40}})

    def test_unknown_log_level(self):
        with pytest.raises(ConfigError):
            RouterConfig({'logging': {'level': 'VERBOSE'}})

    def test_extra_keys_ignored(self):
        assert RouterConfig({'unknown_section': {'a': 1}}).clearance == 20
