"""Quick start example for mesh_evolve.

Run this script to render a few meshes, evolve one briefly toward a
synthetic target and check the installation.
"""

from pathlib import Path

import numpy as np


def main():
    print("Mesh Evolve - Quick Start Demo")
    print("=" * 50)

    output_dir = Path("output")
    output_dir.mkdir(exist_ok=True)
    rng = np.random.default_rng(0)

    print("\n1. Rendering a uniform 16x16 mesh (512x512)...")
    from mesh_evolve.mesh import GridImage
    from mesh_evolve.visualization.renderer import render_image, save_rgb_image

    image = GridImage.uniform(16, 16, rng)
    save_rgb_image(render_image(image, (7, 7)), output_dir / "uniform_mesh.png")
    print(f"   Saved to {output_dir / 'uniform_mesh.png'}")

    print("\n2. Applying 5000 structural mutations...")
    for _ in range(5000):
        image.mutate_structure(image.random_inner_vertex(rng), rng=rng)
    save_rgb_image(render_image(image, (7, 7)), output_dir / "mutated_mesh.png")
    print(f"   Saved to {output_dir / 'mutated_mesh.png'}")

    print("\n3. Saving the mutated mesh as SVG with its wireframe...")
    from mesh_evolve.visualization.renderer import save_vector_image

    save_vector_image(image, output_dir / "mutated_mesh.svg", show_wireframe=True)
    print(f"   Saved to {output_dir / 'mutated_mesh.svg'}")

    print("\n4. Comparing the box and scanline rasterizers...")
    import time

    for method in ("box", "scanline"):
        start = time.perf_counter()
        render_image(image, (8, 8), method=method)
        print(f"   {method:<8}: {time.perf_counter() - start:.3f}s at 256x256")

    print("\n5. Evolving an 8x8 mesh toward a gradient for 30 generations...")
    from mesh_evolve.evolution import EvolutionConfig, MeshEvolution, TargetImage

    xs = np.linspace(0, 255, 64, dtype=np.uint8)
    gradient = np.stack(np.broadcast_arrays(xs[None, :], xs[:, None], 128), axis=-1)
    target = TargetImage(gradient)

    config = EvolutionConfig(
        width=8,
        height=8,
        population_size=10,
        generations=30,
        fitness_resolution=32,
        export_interval=30,
        export_resolution=256,
        output_dir=output_dir / "quickstart_evolution",
        verbose=False,
    )
    evolution = MeshEvolution(config, target, seed=0)
    evolution.run()

    history = evolution.history["best_fitness"]
    print(f"   Best fitness: {history[0]} -> {history[-1]}")
    print(f"   Exports in {config.output_dir}")

    print("\n" + "=" * 50)
    print("Demo complete. Check the 'output' folder for images.")
    print("\nNext steps:")
    print("  - Run 'mesh-evolve --help' to see CLI options")
    print("  - Try 'mesh-evolve evolve photo.jpg --time 600'")
    print("  - Time the rasterizers with 'mesh-evolve benchmark --method box'")


if __name__ == "__main__":
    main()
