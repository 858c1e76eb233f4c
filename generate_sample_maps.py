#!/usr/bin/env python3
"""
Generate sample maps for every terrain family and render them to PNG.

Each map is drawn from its occupancy grid, with rooms outlined, corridor
centre lines traced, and the entrance/exit paths highlighted.

Usage:
    python generate_sample_maps.py [seed]

If no seed is provided, defaults to 12345
"""

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent))

from py_mapgen.core.map_generator import MapGenerationOptions, generate_map
from py_mapgen.core.errors import MapGenerationError
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from matplotlib.patches import Rectangle


SAMPLES = [
    dict(terrain="dungeon"),
    dict(terrain="house", subtype="manor", story="story_1"),
    dict(terrain="house", subtype="wizard_tower", story="basement"),
    dict(terrain="forest", organic_factor=0.7),
    dict(terrain="town", number_of_rooms=12),
    dict(terrain="cave", width=80, height=60),
    dict(terrain="cave", subtype="lava_tubes", width=60, height=45),
    dict(terrain="cave", subtype="mine"),
]


def render_map(generated, output_file):
    """Draw a generated map and save it."""
    fig, ax = plt.subplots(figsize=(10, 10 * generated.height / generated.width))

    # 1 = wall
    cmap = ListedColormap(["#e8dcc0", "#3b3228"])
    ax.imshow(
        generated.grid.astype(int),
        cmap=cmap,
        vmin=0,
        vmax=1,
        extent=(0, generated.width, generated.height, 0),
        interpolation="nearest",
    )

    if generated.algorithm == "bsp":
        for room in generated.rooms:
            ax.add_patch(Rectangle(
                (room.position.x, room.position.y), room.width, room.height,
                fill=False, edgecolor="#8b4513", linewidth=1.0,
            ))
            for door in room.doors:
                ax.plot(door.x, door.y, "s", color="#b22222", markersize=3)

    for corridor in generated.corridors:
        xs = [p.x + 0.5 for p in corridor.points]
        ys = [p.y + 0.5 for p in corridor.points]
        style = "--" if corridor.kind == "connector" else "-"
        ax.plot(xs, ys, style, color="#6b8e23", linewidth=0.6, alpha=0.7)

    record = generated.entrance_exit
    if record and record.entrance_path:
        for path, color in ((record.entrance_path, "#1e90ff"), (record.exit_path or [], "#dc143c")):
            ax.plot([p.x + 0.5 for p in path], [p.y + 0.5 for p in path], color=color, linewidth=1.5)
        ax.plot(record.entrance.x + 0.5, record.entrance.y + 0.5, "o", color="#1e90ff")
        if record.exit:
            ax.plot(record.exit.x + 0.5, record.exit.y + 0.5, "o", color="#dc143c")

    ax.set_xticks([])
    ax.set_yticks([])

    meta = generated.metadata
    title = f"{generated.terrain.title()}"
    if generated.subtype:
        title += f" ({generated.subtype})"
    title += f" - {generated.width}x{generated.height} - {generated.algorithm}\n"
    title += f"Rooms: {meta['room_count']} | Corridors: {meta['corridor_count']} | "
    title += f"Groups: {meta['connected_groups']}"
    ax.set_title(title, fontsize=12, pad=12)

    ax.text(0.98, 0.02, f"Seed: {generated.seed}", transform=ax.transAxes,
            bbox=dict(boxstyle="round,pad=0.3", facecolor="white", alpha=0.8),
            horizontalalignment="right", fontsize=10, family="monospace")

    plt.savefig(output_file, dpi=150, bbox_inches="tight", pad_inches=0.1)
    plt.close()


def main():
    """Generate one sample per terrain preset."""

    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 12345

    print("Generating sample maps")
    print(f"Using seed: {seed}")
    print("=" * 60)

    for sample in SAMPLES:
        name = "_".join(str(v) for k, v in sample.items() if k in ("terrain", "subtype", "story"))
        try:
            generated = generate_map(MapGenerationOptions(seed=seed, **sample))
        except MapGenerationError as e:
            print(f"  ERROR generating {name}: {e}")
            continue

        meta = generated.metadata
        print(f"\n{name}: {generated.width}x{generated.height}, {generated.algorithm}")
        print(f"  {meta['room_count']} rooms, {meta['corridor_count']} corridors, "
              f"{meta['open_cells']} open cells, {meta['runtime_ms']} ms")

        output_file = f"map_{name}_{seed}.png"
        render_map(generated, output_file)
        print(f"  Saved to: {output_file}")

    print("\n" + "=" * 60)
    print("Done.")


if __name__ == "__main__":
    main()
