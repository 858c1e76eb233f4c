"""
Binary space partitioning room generator.

The map interior is recursively split into containers until there are
enough leaves for the requested room count, then one room is inset into
each leaf. The algorithm:

- derives a maximum split depth from the room count,
- splits with a hybrid rule that may stop early once the quota is met,
- trims or tops up the leaf list to hit the room count exactly,
- materializes rooms with terrain-specific labels, shapes and doors.

Every random draw goes through the request's SeededRandom in a fixed order,
so the same seed always rebuilds the same tree.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import structlog

from ..config.terrain_presets import FIXED_ROOM_TYPE, ROOM_TYPE_LABELS, TerrainType
from .errors import RoomCapacityError
from .lcg_prng import SeededRandom
from .map_data import Position, Room, RoomShape, RoomShapeType
from .organic_shapes import organic_outline

logger = structlog.get_logger()

MIN_LEAF_SIZE = 8  # containers below this in either axis are never split
MIN_SPLIT_SIZE = 6  # each side of a split needs at least this much room
MIN_ASPECT_RATIO = 0.4
SPLIT_ATTEMPTS = 5
EARLY_STOP_CHANCE = 0.6
MIN_ROOM_SIZE = 3


@dataclass
class BSPContainer:
    """Axis-aligned partition cell."""

    x: int
    y: int
    w: int
    h: int
    room: Optional[Room] = None

    @property
    def center(self) -> Position:
        return Position(self.x + self.w / 2, self.y + self.h / 2)

    @property
    def area(self) -> int:
        return self.w * self.h


class BSPTree:
    """A partition node. Nodes without children are leaves."""

    def __init__(self, leaf: BSPContainer, parent: Optional["BSPTree"] = None):
        self.leaf = leaf
        self.parent = parent
        self.left: Optional[BSPTree] = None
        self.right: Optional[BSPTree] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def get_leaves(self) -> List["BSPTree"]:
        """Leaf nodes, left to right."""
        if self.is_leaf:
            return [self]
        leaves = []
        if self.left:
            leaves.extend(self.left.get_leaves())
        if self.right:
            leaves.extend(self.right.get_leaves())
        return leaves

    def detach(self) -> None:
        """Remove this node from its parent, pruning parents left empty."""
        node = self
        while node.parent is not None:
            parent = node.parent
            if parent.left is node:
                parent.left = None
            else:
                parent.right = None
            node.parent = None
            if not parent.is_leaf:
                break
            node = parent


@dataclass
class RoomLayout:
    """Resolved parameters for one BSP run."""

    terrain: TerrainType
    target_rooms: int
    width: int
    height: int
    spacing: int = 2
    padding: float = 0.0
    room_shape: str = RoomShapeType.RECTANGLE
    organic_factor: float = 0.0
    min_room_size: int = MIN_ROOM_SIZE
    max_room_size: Optional[int] = None
    circular_footprint: bool = False  # wizard tower: rooms fit inside a round wall


def split_iterations(target_rooms: int) -> int:
    """Maximum split depth for a room count, clamped to 3-7."""
    base = math.ceil(math.log2(max(target_rooms, 1)))
    return max(3, min(base + 1, 7))


def root_container(layout: RoomLayout) -> BSPContainer:
    """Container the partition starts from."""
    if layout.circular_footprint:
        radius = min(layout.width, layout.height) * 0.35
        size = radius * 2 * 0.7
        return BSPContainer(
            math.floor(layout.width / 2 - size / 2),
            math.floor(layout.height / 2 - size / 2),
            math.floor(size),
            math.floor(size),
        )
    return BSPContainer(2, 2, layout.width - 4, layout.height - 4)


def room_capacity(container: BSPContainer) -> int:
    """Upper bound on rooms a container can be partitioned into, one per 8x8 cell."""
    if container.w < MIN_ROOM_SIZE or container.h < MIN_ROOM_SIZE:
        return 0
    return max(1, (container.w * container.h) // (MIN_LEAF_SIZE * MIN_LEAF_SIZE))


class BSPRoomGenerator:
    """
    Generates rooms by recursive binary space partitioning.
    """

    def __init__(self, prng: SeededRandom):
        self.prng = prng

    def generate_rooms(self, layout: RoomLayout) -> Tuple[List[Room], BSPTree]:
        """
        Partition the map and place one room per leaf.

        Args:
            layout: Resolved room parameters

        Returns:
            Tuple of (rooms, partition tree)

        Raises:
            RoomCapacityError: If the room count cannot fit the map area
        """
        root = root_container(layout)
        capacity = room_capacity(root)
        if layout.target_rooms < 1 or layout.target_rooms > capacity:
            raise RoomCapacityError(layout.target_rooms, capacity)

        iterations = split_iterations(layout.target_rooms)
        tree = self._split_hybrid(root, iterations, layout.target_rooms)
        leaves = self._match_room_count(tree.get_leaves(), layout.target_rooms)

        rooms = []
        for index, node in enumerate(leaves):
            room = self._create_room(node.leaf, index, layout)
            node.leaf.room = room
            rooms.append(room)

        logger.info(
            "BSP rooms generated",
            target=layout.target_rooms,
            rooms=len(rooms),
            max_depth=iterations,
        )
        return rooms, tree

    def _split_hybrid(
        self,
        container: BSPContainer,
        max_depth: int,
        target_rooms: int,
        depth: int = 0,
        rooms_so_far: int = 1,
        parent: Optional[BSPTree] = None,
    ) -> BSPTree:
        """Split recursively, stopping early once the quota is reached."""
        tree = BSPTree(container, parent)

        # The early-stop roll is only drawn when the quota is already met
        should_stop = (
            depth >= max_depth
            or container.w < MIN_LEAF_SIZE
            or container.h < MIN_LEAF_SIZE
            or (rooms_so_far >= target_rooms and self.prng.random() < EARLY_STOP_CHANCE)
        )
        if should_stop:
            return tree

        children = self.split_container(container)
        if children is None:
            return tree

        left_quota = math.ceil(target_rooms / 2)
        right_quota = target_rooms - left_quota
        tree.left = self._split_hybrid(
            children[0], max_depth, left_quota, depth + 1, rooms_so_far, tree
        )
        tree.right = self._split_hybrid(
            children[1], max_depth, right_quota, depth + 1, rooms_so_far + 1, tree
        )
        return tree

    def split_container(
        self, container: BSPContainer
    ) -> Optional[Tuple[BSPContainer, BSPContainer]]:
        """
        Split a container in two along a random axis.

        Up to five attempts are made. Each picks an axis, skips it if the
        container is shorter than twice the minimum split size along it, cuts
        at 30-70% of its length and rejects cuts that leave a child thinner
        than the minimum aspect ratio.

        Returns:
            The two children, or None if no attempt succeeded
        """
        for _ in range(SPLIT_ATTEMPTS):
            vertical = self.prng.random() < 0.5

            if vertical and container.w >= MIN_SPLIT_SIZE * 2:
                cut = math.floor(container.w * (0.3 + self.prng.random() * 0.4))
                first = BSPContainer(container.x, container.y, cut, container.h)
                second = BSPContainer(container.x + cut, container.y, container.w - cut, container.h)
                if (first.w / first.h >= MIN_ASPECT_RATIO
                        and second.w / second.h >= MIN_ASPECT_RATIO):
                    return first, second

            elif not vertical and container.h >= MIN_SPLIT_SIZE * 2:
                cut = math.floor(container.h * (0.3 + self.prng.random() * 0.4))
                first = BSPContainer(container.x, container.y, container.w, cut)
                second = BSPContainer(container.x, container.y + cut, container.w, container.h - cut)
                if (first.h / first.w >= MIN_ASPECT_RATIO
                        and second.h / second.w >= MIN_ASPECT_RATIO):
                    return first, second

        return None

    def _match_room_count(self, leaves: List[BSPTree], target: int) -> List[BSPTree]:
        """
        Trim random leaves or split the largest ones until len == target.

        Raises:
            RoomCapacityError: If no leaf can be split while rooms are missing
        """
        leaves = list(leaves)

        while len(leaves) > target:
            index = math.floor(self.prng.random() * len(leaves))
            leaves.pop(index).detach()

        while len(leaves) < target:
            # Largest first; ties keep list order
            order = sorted(range(len(leaves)), key=lambda i: -leaves[i].leaf.area)
            for index in order:
                node = leaves[index]
                children = self.split_container(node.leaf)
                if children is None:
                    continue
                node.left = BSPTree(children[0], node)
                node.right = BSPTree(children[1], node)
                leaves.pop(index)
                leaves.extend([node.left, node.right])
                break
            else:
                logger.warning(
                    "No leaf can be split further",
                    leaves=len(leaves),
                    target=target,
                )
                raise RoomCapacityError(target, len(leaves))

        return leaves

    def _create_room(self, container: BSPContainer, index: int, layout: RoomLayout) -> Room:
        """Inset a room into a leaf container."""
        # Spacing shrinks for tiny leaves so rooms never leave their container
        inset_x = min(layout.spacing, max(0, (container.w - MIN_ROOM_SIZE) // 2))
        inset_y = min(layout.spacing, max(0, (container.h - MIN_ROOM_SIZE) // 2))
        x = container.x + inset_x
        y = container.y + inset_y
        w = max(MIN_ROOM_SIZE, container.w - 2 * inset_x)
        h = max(MIN_ROOM_SIZE, container.h - 2 * inset_y)

        labels = ROOM_TYPE_LABELS.get(layout.terrain)
        if labels:
            room_type = self.prng.choice(labels)
        else:
            room_type = FIXED_ROOM_TYPE.get(layout.terrain, "room")

        shape = self._room_shape(w, h, layout)
        doors = self._generate_doors(x, y, w, h)

        return Room(
            id=f"room-{index}",
            type=room_type,
            position=Position(x, y),
            width=w,
            height=h,
            shape=shape,
            doors=doors,
            padding=layout.padding,
        )

    def _room_shape(self, w: int, h: int, layout: RoomLayout) -> RoomShape:
        organic_terrain = layout.terrain in (TerrainType.CAVE, TerrainType.FOREST)
        if organic_terrain and layout.organic_factor > 0:
            radius = min(w, h) / 2
            if layout.max_room_size:
                radius = min(radius, layout.max_room_size / 2)
            radius = max(radius, layout.min_room_size / 2)
            return RoomShape(
                type=RoomShapeType.ORGANIC,
                points=organic_outline(self.prng, radius, layout.organic_factor),
            )
        if layout.room_shape == RoomShapeType.CIRCLE:
            return RoomShape(type=RoomShapeType.CIRCLE, radius=min(w, h) / 2)
        return RoomShape()

    def _generate_doors(self, x: int, y: int, w: int, h: int) -> List[Position]:
        """One or two doors on random sides of the room outline."""
        doors = []
        for _ in range(1 + math.floor(self.prng.random() * 2)):
            side = math.floor(self.prng.random() * 4)
            if side == 0:  # top
                doors.append(Position(math.floor(x + self.prng.random() * w), y))
            elif side == 1:  # right
                doors.append(Position(x + w, math.floor(y + self.prng.random() * h)))
            elif side == 2:  # bottom
                doors.append(Position(math.floor(x + self.prng.random() * w), y + h))
            else:  # left
                doors.append(Position(x, math.floor(y + self.prng.random() * h)))
        return doors
