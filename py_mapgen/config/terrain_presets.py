"""
Terrain and subtype presets for map generation.

This module defines the terrain families the generators understand, the
subtypes of each family, and the per-subtype (and for houses, per-story)
room parameters that override the request defaults.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from enum import Enum


class TerrainType(str, Enum):
    """Terrain families."""

    HOUSE = "house"
    FOREST = "forest"
    CAVE = "cave"
    TOWN = "town"
    DUNGEON = "dungeon"


class GenerationAlgorithm(str, Enum):
    """Layout algorithms."""

    BSP = "bsp"
    CELLULAR_AUTOMATA = "cellular_automata"
    DRUNKARDS_WALK = "drunkards_walk"


class HouseSubtype(str, Enum):
    COTTAGE = "cottage"
    MANOR = "manor"
    INN = "inn"
    CASTLE = "castle"
    WIZARD_TOWER = "wizard_tower"


class HouseStory(str, Enum):
    BASEMENT = "basement"
    STORY_1 = "story_1"
    STORY_2 = "story_2"
    STORY_3 = "story_3"


class CaveSubtype(str, Enum):
    NATURAL_CAVERN = "natural_cavern"
    CRYSTAL_CAVE = "crystal_cave"
    LAVA_TUBES = "lava_tubes"
    UNDERGROUND_LAKE = "underground_lake"
    MINE = "mine"


class ForestSubtype(str, Enum):
    DENSE_FOREST = "dense_forest"
    ENCHANTED_GROVE = "enchanted_grove"
    WOODLAND_TRAIL = "woodland_trail"
    SACRED_GROVE = "sacred_grove"
    OVERGROWN_RUINS = "overgrown_ruins"


class TownSubtype(str, Enum):
    VILLAGE = "village"
    MARKET_DISTRICT = "market_district"
    HARBOR_TOWN = "harbor_town"
    WALLED_CITY = "walled_city"
    CROSSROADS = "crossroads"


class DungeonSubtype(str, Enum):
    CRYPTS = "crypts"
    PRISON = "prison"
    TEMPLE = "temple"
    SEWER = "sewer"
    ANCIENT_RUINS = "ancient_ruins"


SUBTYPES: Dict[TerrainType, type] = {
    TerrainType.HOUSE: HouseSubtype,
    TerrainType.CAVE: CaveSubtype,
    TerrainType.FOREST: ForestSubtype,
    TerrainType.TOWN: TownSubtype,
    TerrainType.DUNGEON: DungeonSubtype,
}

# Room type labels drawn per room; terrains missing here use a fixed label
ROOM_TYPE_LABELS: Dict[TerrainType, List[str]] = {
    TerrainType.HOUSE: ["bedroom", "kitchen", "living_room", "study", "bathroom", "storage"],
    TerrainType.DUNGEON: ["chamber", "corridor", "trap_room", "treasure_room", "guard_room"],
    TerrainType.TOWN: ["house", "shop", "tavern", "stable", "workshop"],
}
FIXED_ROOM_TYPE: Dict[TerrainType, str] = {
    TerrainType.CAVE: "cavern",
    TerrainType.FOREST: "clearing",
}

DEFAULT_ALGORITHMS: Dict[TerrainType, GenerationAlgorithm] = {
    TerrainType.HOUSE: GenerationAlgorithm.BSP,
    TerrainType.FOREST: GenerationAlgorithm.BSP,
    TerrainType.CAVE: GenerationAlgorithm.CELLULAR_AUTOMATA,
    TerrainType.TOWN: GenerationAlgorithm.BSP,
    TerrainType.DUNGEON: GenerationAlgorithm.BSP,
}


class StoryConfig(BaseModel):
    """Room parameters for one house story."""

    story: HouseStory
    number_of_rooms: int = Field(ge=1, description="Rooms on this story")
    min_room_size: int = Field(ge=3, description="Minimum room side")
    max_room_size: int = Field(ge=3, description="Maximum room side")
    room_padding: float = Field(default=0.0, ge=0.0, le=1.0, description="Interior padding fraction")
    corridor_width: int = Field(default=1, ge=1, description="Corridor width in cells")
    min_room_spacing: int = Field(default=1, ge=0, description="Cells between rooms")
    map_width: int = Field(description="Story map width in cells")
    map_height: int = Field(description="Story map height in cells")


class SubtypeConfig(BaseModel):
    """Generation parameters for a terrain subtype."""

    subtype: str
    name: str
    description: str = ""
    room_shape: str = Field(default="rectangle", description="rectangle or circle")
    algorithm: GenerationAlgorithm = GenerationAlgorithm.BSP
    default_room_count: Optional[int] = Field(default=None, description="Rooms when the request gives none")
    min_room_size: Optional[int] = None
    max_room_size: Optional[int] = None
    room_padding: float = Field(default=0.0, ge=0.0, le=1.0)
    corridor_width: int = Field(default=1, ge=1)
    min_room_spacing: int = Field(default=2, ge=0)
    circular_footprint: bool = Field(default=False, description="Rooms are laid out inside a round tower")
    stories: List[StoryConfig] = Field(default_factory=list)

    def get_story(self, story: Optional[str]) -> Optional[StoryConfig]:
        """Look up a story; None falls back to the ground floor if there is one."""
        if not self.stories:
            return None
        wanted = HouseStory(story) if story else HouseStory.STORY_1
        for config in self.stories:
            if config.story == wanted:
                return config
        return None


def _stories(width: int, height: int, spacing: int, rows: List[tuple]) -> List[StoryConfig]:
    """Build story configs from (story, rooms, size, padding, corridor) rows."""
    return [
        StoryConfig(
            story=story,
            number_of_rooms=rooms,
            min_room_size=size,
            max_room_size=size,
            room_padding=padding,
            corridor_width=corridor,
            min_room_spacing=spacing,
            map_width=width,
            map_height=height,
        )
        for story, rooms, size, padding, corridor in rows
    ]


HOUSE_PRESETS: Dict[HouseSubtype, SubtypeConfig] = {
    HouseSubtype.COTTAGE: SubtypeConfig(
        subtype=HouseSubtype.COTTAGE.value,
        name="Cottage",
        description="Small, cozy home",
        min_room_spacing=1,
        stories=_stories(24, 18, 1, [
            (HouseStory.BASEMENT, 2, 4, 0.2, 1),
            (HouseStory.STORY_1, 4, 5, 0.25, 1),
            (HouseStory.STORY_2, 3, 4, 0.2, 1),
        ]),
    ),
    HouseSubtype.MANOR: SubtypeConfig(
        subtype=HouseSubtype.MANOR.value,
        name="Manor",
        description="Large estate with multiple wings",
        min_room_spacing=1,
        stories=_stories(32, 24, 1, [
            (HouseStory.BASEMENT, 6, 6, 0.3, 2),
            (HouseStory.STORY_1, 8, 7, 0.3, 2),
            (HouseStory.STORY_2, 7, 6, 0.25, 2),
            (HouseStory.STORY_3, 4, 5, 0.2, 1),
        ]),
    ),
    HouseSubtype.INN: SubtypeConfig(
        subtype=HouseSubtype.INN.value,
        name="Inn & Tavern",
        description="Common room with guest quarters",
        min_room_spacing=1,
        stories=_stories(28, 21, 1, [
            (HouseStory.BASEMENT, 3, 5, 0.25, 1),
            (HouseStory.STORY_1, 5, 7, 0.3, 2),
            (HouseStory.STORY_2, 8, 4, 0.15, 2),
        ]),
    ),
    HouseSubtype.CASTLE: SubtypeConfig(
        subtype=HouseSubtype.CASTLE.value,
        name="Castle",
        description="Fortified structure with thick walls",
        min_room_spacing=2,
        stories=_stories(40, 30, 2, [
            (HouseStory.BASEMENT, 8, 6, 0.35, 2),
            (HouseStory.STORY_1, 10, 9, 0.35, 3),
            (HouseStory.STORY_2, 8, 7, 0.3, 2),
            (HouseStory.STORY_3, 6, 6, 0.25, 2),
        ]),
    ),
    HouseSubtype.WIZARD_TOWER: SubtypeConfig(
        subtype=HouseSubtype.WIZARD_TOWER.value,
        name="Wizard Tower",
        description="Vertical tower with circular structure",
        min_room_spacing=1,
        circular_footprint=True,
        stories=_stories(30, 30, 1, [
            (HouseStory.BASEMENT, 3, 6, 0.3, 1),
            (HouseStory.STORY_1, 3, 6, 0.25, 1),
            (HouseStory.STORY_2, 3, 5, 0.2, 1),
            (HouseStory.STORY_3, 2, 5, 0.15, 1),
        ]),
    ),
}

CAVE_PRESETS: Dict[CaveSubtype, SubtypeConfig] = {
    CaveSubtype.NATURAL_CAVERN: SubtypeConfig(
        subtype=CaveSubtype.NATURAL_CAVERN.value,
        name="Natural Cavern",
        description="Organic cave system formed by natural erosion",
        algorithm=GenerationAlgorithm.CELLULAR_AUTOMATA,
        default_room_count=8, min_room_size=5, max_room_size=12,
        room_padding=0.1, corridor_width=2, min_room_spacing=2,
    ),
    CaveSubtype.CRYSTAL_CAVE: SubtypeConfig(
        subtype=CaveSubtype.CRYSTAL_CAVE.value,
        name="Crystal Cave",
        description="Glittering underground caverns with crystal formations",
        algorithm=GenerationAlgorithm.CELLULAR_AUTOMATA,
        default_room_count=6, min_room_size=6, max_room_size=10,
        room_padding=0.2, corridor_width=2, min_room_spacing=2,
    ),
    CaveSubtype.LAVA_TUBES: SubtypeConfig(
        subtype=CaveSubtype.LAVA_TUBES.value,
        name="Lava Tubes",
        description="Volcanic tunnels with flowing magma channels",
        algorithm=GenerationAlgorithm.DRUNKARDS_WALK,
        default_room_count=10, min_room_size=4, max_room_size=8,
        room_padding=0.15, corridor_width=3, min_room_spacing=1,
    ),
    CaveSubtype.UNDERGROUND_LAKE: SubtypeConfig(
        subtype=CaveSubtype.UNDERGROUND_LAKE.value,
        name="Underground Lake",
        description="Flooded caverns with water-filled chambers",
        algorithm=GenerationAlgorithm.CELLULAR_AUTOMATA,
        default_room_count=5, min_room_size=8, max_room_size=15,
        room_padding=0.1, corridor_width=2, min_room_spacing=3,
    ),
    CaveSubtype.MINE: SubtypeConfig(
        subtype=CaveSubtype.MINE.value,
        name="Mine",
        description="Carved tunnels with structural supports",
        algorithm=GenerationAlgorithm.BSP,
        default_room_count=12, min_room_size=4, max_room_size=6,
        room_padding=0.3, corridor_width=1, min_room_spacing=2,
    ),
}


def parse_terrain(terrain: str) -> TerrainType:
    """Convert a terrain name, raising ValueError for unknown names."""
    try:
        return TerrainType(terrain)
    except ValueError:
        valid = ", ".join(t.value for t in TerrainType)
        raise ValueError(f"Unknown terrain '{terrain}'. Expected one of: {valid}")


def validate_subtype(terrain: TerrainType, subtype: Optional[str]) -> Optional[str]:
    """Check that subtype belongs to terrain. Returns the normalized name."""
    if subtype is None:
        return None
    enum_cls = SUBTYPES[terrain]
    try:
        return enum_cls(subtype).value
    except ValueError:
        valid = ", ".join(s.value for s in enum_cls)
        raise ValueError(f"Unknown {terrain.value} subtype '{subtype}'. Expected one of: {valid}")


def get_subtype_config(terrain: TerrainType, subtype: Optional[str]) -> Optional[SubtypeConfig]:
    """
    Get the preset for a terrain subtype.

    Args:
        terrain: Terrain family
        subtype: Subtype name, or None

    Returns:
        SubtypeConfig, or None if the terrain has no preset for it
    """
    if subtype is None:
        return None
    if terrain == TerrainType.HOUSE:
        return HOUSE_PRESETS.get(HouseSubtype(subtype))
    if terrain == TerrainType.CAVE:
        return CAVE_PRESETS.get(CaveSubtype(subtype))
    return None


def list_presets() -> Dict[str, dict]:
    """Summarize terrains, subtypes and default algorithms."""
    summary = {}
    for terrain in TerrainType:
        subtypes = {}
        for subtype in SUBTYPES[terrain]:
            config = get_subtype_config(terrain, subtype.value)
            subtypes[subtype.value] = {
                "name": config.name if config else subtype.value.replace("_", " ").title(),
                "algorithm": (config.algorithm if config else DEFAULT_ALGORITHMS[terrain]).value,
                "stories": [s.story.value for s in config.stories] if config else [],
            }
        summary[terrain.value] = {
            "default_algorithm": DEFAULT_ALGORITHMS[terrain].value,
            "subtypes": subtypes,
        }
    return summary
