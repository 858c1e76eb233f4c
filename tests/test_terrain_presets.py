"""Tests for terrain presets."""

import pytest

from py_mapgen.config.terrain_presets import (
    CAVE_PRESETS, HOUSE_PRESETS, CaveSubtype, GenerationAlgorithm, HouseStory, HouseSubtype,
    TerrainType, get_subtype_config, list_presets, parse_terrain, validate_subtype,
)


class TestTerrainPresets:
    """Test preset lookup and validation."""

    def test_parse_terrain(self):
        """Test terrain names parse to enums."""
        assert parse_terrain("forest") == TerrainType.FOREST
        with pytest.raises(ValueError, match="Unknown terrain"):
            parse_terrain("swamp")

    def test_validate_subtype(self):
        """Test subtype membership checks."""
        assert validate_subtype(TerrainType.HOUSE, "inn") == "inn"
        assert validate_subtype(TerrainType.TOWN, None) is None
        with pytest.raises(ValueError, match="house subtype"):
            validate_subtype(TerrainType.HOUSE, "lava_tubes")

    def test_every_house_has_stories(self):
        """Test that house presets carry per-story sizes."""
        for subtype, config in HOUSE_PRESETS.items():
            assert config.subtype == subtype.value
            stories = [s.story for s in config.stories]
            assert HouseStory.BASEMENT in stories and HouseStory.STORY_1 in stories
            for story in config.stories:
                assert story.min_room_size == story.max_room_size

    def test_story_lookup(self):
        """Test story lookup and the ground-floor fallback."""
        manor = get_subtype_config(TerrainType.HOUSE, "manor")
        assert manor.get_story("story_3").number_of_rooms == 4
        assert manor.get_story(None).story == HouseStory.STORY_1
        cottage = HOUSE_PRESETS[HouseSubtype.COTTAGE]
        assert cottage.get_story("story_3") is None
        basement = cottage.get_story("basement")
        assert (basement.map_width, basement.map_height) == (24, 18)

    def test_cave_algorithms(self):
        """Test the cave subtype to algorithm mapping."""
        assert CAVE_PRESETS[CaveSubtype.LAVA_TUBES].algorithm == GenerationAlgorithm.DRUNKARDS_WALK
        assert CAVE_PRESETS[CaveSubtype.MINE].algorithm == GenerationAlgorithm.BSP
        assert CAVE_PRESETS[CaveSubtype.NATURAL_CAVERN].algorithm == GenerationAlgorithm.CELLULAR_AUTOMATA

    def test_terrains_without_presets(self):
        """Test that forest, town and dungeon subtypes have no preset."""
        assert get_subtype_config(TerrainType.FOREST, "dense_forest") is None
        assert get_subtype_config(TerrainType.DUNGEON, None) is None

    def test_list_presets(self):
        """Test the preset summary."""
        summary = list_presets()
        assert set(summary) == {t.value for t in TerrainType}
        assert summary["cave"]["default_algorithm"] == "cellular_automata"
        assert summary["cave"]["subtypes"]["lava_tubes"]["algorithm"] == "drunkards_walk"
        assert summary["house"]["subtypes"]["wizard_tower"]["stories"] == [
            "basement", "story_1", "story_2", "story_3"
        ]
        assert summary["town"]["subtypes"]["harbor_town"]["name"] == "Harbor Town"
