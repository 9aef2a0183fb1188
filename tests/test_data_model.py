from vmf_scene.data_model import (
    ImportSettings, LightType, LIGHT_CLASS_MAP, PLACEHOLDER_MATERIAL,
    BRIGHTNESS_DIVISOR, LIGHT_RANGE, MIN_GROUP_TRANSFORMS,
)


def test_light_type_enum():
    assert LightType.POINT == 0
    assert LightType.SPOT == 1


def test_light_class_map():
    assert LIGHT_CLASS_MAP['light'] == LightType.POINT
    assert LIGHT_CLASS_MAP['light_spot'] == LightType.SPOT
    assert 'light_environment' not in LIGHT_CLASS_MAP


def test_constants():
    assert BRIGHTNESS_DIVISOR == 200
    assert LIGHT_RANGE == 25.0
    assert MIN_GROUP_TRANSFORMS == 3


def test_import_settings_defaults():
    s = ImportSettings()
    assert s.import_brushes is True
    assert s.import_world_brushes is True
    assert s.import_detail_brushes is True
    assert s.import_lights is True
    assert s.material_path == PLACEHOLDER_MATERIAL


def test_import_settings_override():
    s = ImportSettings(import_lights=False, material_path='Assets/brick.mat')
    assert s.import_lights is False
    assert s.material_path == 'Assets/brick.mat'
