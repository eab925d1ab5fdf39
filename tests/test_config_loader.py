"""Tests for YAML configuration loading and saving."""

import yaml
import pytest

from config_loader import (
    load_config,
    parse_config,
    save_state,
    create_default_config,
    substitute_env_vars,
    CalendarConfig,
)


def write_yaml(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f, allow_unicode=True)
    return path


class TestLoadConfig:
    def test_default_template_loads(self, tmp_path):
        path = write_yaml(tmp_path / "config.yml", create_default_config())
        config = load_config(str(path))
        assert [s.id for s in config.shifts] == ['1', '2', '3', 'off']
        assert config.preferences.cutoff_hour == 4
        assert config.weekly_plan.to_list()[5:] == ['off', 'off']
        assert config.calendar.timezone == 'America/Denver'

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yml"))

    def test_missing_sections_use_defaults(self):
        config = parse_config({})
        assert len(config.shifts) == 4
        assert config.calendar == CalendarConfig()
        assert not config.rest_detection.match_legacy_names

    def test_environment_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv('SHIFT_TZ', 'Europe/Berlin')
        data = create_default_config()
        data['calendar']['timezone'] = '${SHIFT_TZ}'
        config = load_config(str(write_yaml(tmp_path / "config.yml", data)))
        assert config.calendar.timezone == 'Europe/Berlin'

    def test_substitute_leaves_unknown_vars(self):
        assert substitute_env_vars({'a': ['${SURELY_NOT_SET_VAR}']}) == {'a': ['${SURELY_NOT_SET_VAR}']}

    def test_legacy_rest_names(self):
        data = create_default_config()
        data['shifts'][3] = {'id': '4', 'name': '休', 'start_time': '00:00', 'end_time': '00:00'}
        data['weekly_plan'] = ['1', '1', '1', '1', '1', '4', '4']
        data['rest_detection'] = {'match_legacy_names': True}
        state = parse_config(data).to_state()
        assert state.timeline_for_day(6).is_rest


class TestValidation:
    def test_plan_must_have_seven_days(self):
        data = create_default_config()
        data['weekly_plan'] = ['1'] * 6
        with pytest.raises(ValueError, match="7 entries"):
            parse_config(data)

    def test_plan_must_reference_known_shifts(self):
        data = create_default_config()
        data['weekly_plan'][2] = '99'
        with pytest.raises(ValueError, match="unknown shift"):
            parse_config(data)

    def test_empty_catalog(self):
        with pytest.raises(ValueError):
            parse_config({'shifts': []})

    def test_bad_shift_time(self):
        data = create_default_config()
        data['shifts'][0]['start_time'] = '8 o clock'
        with pytest.raises(ValueError, match="invalid time"):
            parse_config(data)

    def test_duplicate_shift_id(self):
        data = create_default_config()
        data['shifts'][1]['id'] = '1'
        with pytest.raises(ValueError, match="Duplicate"):
            parse_config(data)

    def test_negative_preference(self):
        with pytest.raises(ValueError):
            parse_config({'preferences': {'commute': -5}})

    def test_cutoff_out_of_range(self):
        with pytest.raises(ValueError):
            parse_config({'preferences': {'cutoff_hour': 24}})

    def test_unknown_preference(self):
        with pytest.raises(ValueError):
            parse_config({'preferences': {'nap': 10}})


class TestSaveState:
    def test_round_trip(self, tmp_path):
        state = parse_config(create_default_config()).to_state()
        new_shift = state.add_shift("Split", "06:00", "14:00")
        state.assign_shift(2, new_shift.id)
        state.update_preference('commute', 55)

        path = save_state(state, str(tmp_path / "saved" / "state.yml"))
        reloaded = load_config(str(path)).to_state()

        assert reloaded.shift_for_day(2).name == "Split"
        assert reloaded.preferences.commute == 55
        assert reloaded.weekly_plan.to_list() == state.weekly_plan.to_list()
