import json
import logging

import numpy as np
import pytest
import yaml

from gravitybox import (Animator, LimitReachedError, ManualTickSource,
                        SceneLoader, ValueOutOfRangeError, default_scene)

from conftest import RecordingSurface


SCENE = {
    'bodies': [
        {'mass': 0.5, 'position': [10, 0], 'velocity': [0, 0.2],
         'color': 3, 'trail_length': 100, 'trail_thickness': 2.5, 'highlight': True},
        {'position': [-10, 0]},
    ],
    'animator': {'speed': 3, 'scale': 2, 'paused': False},
}


@pytest.fixture
def json_scene(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(SCENE))
    return str(path)


@pytest.fixture
def yaml_scene(tmp_path):
    path = tmp_path / "scene.yaml"
    path.write_text(yaml.safe_dump(SCENE))
    return str(path)


def test_load_json_and_yaml_agree(json_scene, yaml_scene):
    assert SceneLoader.load_config(json_scene) == SceneLoader.load_config(yaml_scene)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        SceneLoader.load_config(str(tmp_path / "nope.json"))


def test_load_unsupported_format(tmp_path):
    path = tmp_path / "scene.toml"
    path.write_text("bodies = []")
    with pytest.raises(ValueError):
        SceneLoader.load_config(str(path))


def test_load_rejects_non_mapping(tmp_path):
    path = tmp_path / "scene.yml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        SceneLoader.load_config(str(path))


def test_empty_yaml_is_empty_scene(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert SceneLoader.load_config(str(path)) == {}


def test_create_collection(json_scene):
    config = SceneLoader.load_config(json_scene)
    collection = SceneLoader.create_collection_from_config(config)

    assert len(collection) == 2
    first, second = collection.bodies
    assert first.mass == 0.5
    assert first.velocity.export_coordinates() == (0.0, 0.2)
    assert first.color_index == 3
    assert first.trail_length == 100
    assert first.trail_thickness == 2.5
    assert first.highlight
    assert second.mass == 1.0
    assert not second.highlight
    # (0.5 * 10 + 1 * -10) / 1.5
    assert collection.center_of_mass.x == pytest.approx(-10 / 3)


def test_create_collection_validates():
    with pytest.raises(ValueOutOfRangeError):
        SceneLoader.create_collection_from_config({'bodies': [{'position': [0, 0], 'mass': 3}]})
    with pytest.raises(ValueError):
        SceneLoader.create_collection_from_config({'bodies': [{'mass': 1}]})
    with pytest.raises(LimitReachedError):
        SceneLoader.create_collection_from_config(
            {'bodies': [{'position': [i, 0]} for i in range(11)]})


def test_unknown_body_keys_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="gravitybox.io"):
        SceneLoader.create_collection_from_config({'bodies': [{'position': [0, 0], 'spin': 1}]})
    assert "spin" in caplog.text


def test_apply_animator_config():
    collection = SceneLoader.create_collection_from_config(SCENE)
    animator = Animator(collection, "c", RecordingSurface, ManualTickSource())
    SceneLoader.apply_animator_config(animator, SCENE)
    assert animator.speed == 3
    assert animator.scale == 2.0
    assert not animator.is_paused


def test_default_scene():
    scene = default_scene()
    collection = SceneLoader.create_collection_from_config(
        scene, rng=np.random.default_rng(0))
    assert [b.position.export_coordinates() for b in collection] == [
        (91.0, -44.0), (-13.0, -32.0), (26.0, 45.0)]
    assert all(b.mass == 1.0 for b in collection)
    assert scene['animator']['scale'] == 1.5

    # callers get their own copy
    scene['bodies'].clear()
    assert len(default_scene()['bodies']) == 3
