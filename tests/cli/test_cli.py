"""
Tests for the command-line interface and scene files
"""

import io
import json
import logging

import pytest

from connector_router.cli.main import main
from connector_router.cli.output import print_route_summary
from connector_router.cli.scene_loader import load_scene
from connector_router.core.config import RouterConfig
from connector_router.core.exceptions import SceneError

SCENE = """\
name: demo
shapes:
  - {id: a, x: 0, y: 0, w: 100, h: 100}
  - {id: b, x: 300, y: 0, w: 100, h: 100, group: g}
groups:
  - {id: g, members: [b]}
connectors:
  - id: a-b
    source: {shape: a}
    target: {shape: b}
  - id: free
    mode: curve
    source: {point: [0, 300]}
    target: {shape: a, near: [50, 200]}
    label: {distance: 0.5, width: 20, height: 10}
  - id: dangling
    mode: straight
    source: {shape: a, position: [1, 0.5]}
    target: {shape: missing}
"""


@pytest.fixture(autouse=True)
def restore_logging():
    """Drop handlers the CLI attaches to the root logger"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def scene_file(tmp_path):
    path = tmp_path / 'scene.yaml'
    path.write_text(SCENE, encoding='utf-8')
    return path


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'router.yaml'
    path.write_text(RouterConfig.default().to_yaml(), encoding='utf-8')
    return path


class TestSceneLoader:
    """YAML scenes"""

    def test_load_and_route(self, scene_file):
        scene = load_scene(str(scene_file))
        assert scene.name == 'demo'
        assert [c.id for c in scene.connectors] == ['a-b', 'free', 'dangling']

        result = scene.route()
        by_id = {c['id']: c for c in result['connectors']}
        assert by_id['a-b']['routable']
        assert by_id['free']['mode'] == 2
        assert 'label_xywh' in by_id['free']
        assert not by_id['dangling']['routable']

    def test_near_picks_closest_anchor(self, scene_file):
        scene = load_scene(str(scene_file))
        free = scene.connectors[1]
        assert free.target.position == (0.5, 1.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_scene(str(tmp_path / 'nope.yaml'))

    def test_end_needs_shape_or_point(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text(
            "connectors:\n  - id: c\n    source: {}\n    target: {point: [0, 0]}\n", encoding='utf-8'
        )
        with pytest.raises(SceneError):
            load_scene(str(path))

    def test_group_with_unknown_member(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("groups:\n  - {id: g, members: [ghost]}\n", encoding='utf-8')
        with pytest.raises(SceneError):
            load_scene(str(path))

    def test_connector_on_connector(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text(
            "connectors:\n"
            "  - {id: c1, source: {point: [0, 0]}, target: {point: [1, 1]}}\n"
            "  - {id: c2, source: {shape: c1}, target: {point: [1, 1]}}\n",
            encoding='utf-8',
        )
        scene = load_scene(str(path))
        with pytest.raises(SceneError):
            scene.route()

    def test_summary(self, scene_file):
        result = load_scene(str(scene_file)).route()
        stream = io.StringIO()
        print_route_summary(result, stream=stream)
        text = stream.getvalue()
        assert 'Scene: demo (3 connectors)' in text
        assert 'unroutable' in text


class TestInitCommand:
    def test_creates_config(self, tmp_path, capsys):
        path = tmp_path / 'conf' / 'router.yaml'
        assert main(['init', '--path', str(path)]) == 0
        assert RouterConfig.from_yaml(str(path)).clearance == 20

    def test_refuses_to_overwrite(self, config_file, capsys):
        assert main(['init', '--path', str(config_file)]) == 1
        assert 'already exists' in capsys.readouterr().out
        assert main(['init', '--path', str(config_file), '--force']) == 0


class TestRouteCommand:
    def test_json_to_stdout(self, scene_file, config_file, capsys):
        assert main(['route', str(scene_file), '--config', str(config_file)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['scene'] == 'demo'
        assert len(data['connectors']) == 3

    def test_csv_to_file(self, scene_file, config_file, tmp_path):
        output = tmp_path / 'routes.csv'
        code = main([
            'route', str(scene_file), '--config', str(config_file),
            '--format', 'csv', '--output', str(output),
        ])
        assert code == 0
        assert output.read_text(encoding='utf-8').startswith('scene,connector_id')

    def test_defaults_without_config(self, scene_file, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr('connector_router.cli.main.discover_config', lambda explicit=None: None)
        assert main(['route', str(scene_file)]) == 0

    def test_missing_scene(self, tmp_path, config_file, capsys):
        assert main(['route', str(tmp_path / 'missing.yaml'), '--config', str(config_file)]) == 1
        assert 'Scene file not found' in capsys.readouterr().err

    def test_missing_config(self, scene_file, tmp_path, capsys):
        assert main(['route', str(scene_file), '--config', str(tmp_path / 'none.yaml')]) == 1

    def test_invalid_config(self, scene_file, tmp_path, capsys):
        path = tmp_path / 'router.yaml'
        path.write_text("routing:\n  clearance: -5\n", encoding='utf-8')
        assert main(['route', str(scene_file), '--config', str(path)]) == 1
