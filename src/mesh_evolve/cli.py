"""Command-line interface for mesh_evolve."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional


def cmd_evolve(args: argparse.Namespace) -> int:
    """Evolve a mesh toward a target image."""
    from PIL import UnidentifiedImageError

    from mesh_evolve.evolution import EvolutionConfig, MeshEvolution, TargetImage
    from mesh_evolve.utils import create_run, setup_logger

    try:
        target = TargetImage.open(args.target, max_size=args.max_target_size)
    except (FileNotFoundError, UnidentifiedImageError) as e:
        print(f"Cannot load target image: {e}")
        return 1

    config = EvolutionConfig(
        width=args.width,
        height=args.height,
        population_size=args.population,
        mutation_rate=args.mutation_rate,
        generations=args.generations,
        time_limit=args.time,
        fitness_resolution=args.resolution,
        random_offset=not args.fixed_offset,
        workers=args.workers,
        export_interval=args.export_interval,
        export_resolution=args.export_resolution,
    )

    if args.output:
        output_dir = Path(args.output)
        output_dir.mkdir(parents=True, exist_ok=True)
        config.output_dir = output_dir
        logger = setup_logger("mesh_evolve", output_dir / "evolution.log")
        run = None
    else:
        run = create_run(
            run_type="evolve",
            description=Path(args.target).stem,
            config={**config.to_dict(), "target": str(args.target), "seed": args.seed},
            tags=["evolution"],
        )
        config.output_dir = run.exports_dir
        logger = setup_logger("mesh_evolve", run.log_path)
        logger.info(f"Run ID: {run.metadata.run_id}")

    logger.info(f"Target: {args.target} ({target.width}x{target.height})")
    logger.info(f"Output: {config.output_dir}")

    evolution = MeshEvolution(config, target, seed=args.seed)
    best = evolution.run()

    if run is not None:
        summary = {
            "generations": evolution.generation,
            "best_fitness": evolution.best_fitness,
            "elapsed": evolution.elapsed,
        }
        run.save_results({"history": evolution.history}, summary=summary)
        run.complete(status="completed", summary=summary)

    if best is None:
        logger.info("No generation completed")
        return 1

    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Render a randomly mutated mesh."""
    from tqdm import tqdm

    from mesh_evolve.core.rng import seed_rng
    from mesh_evolve.mesh import GridImage, Resolution
    from mesh_evolve.visualization.renderer import (
        render_image,
        save_rgb_image,
        save_vector_image,
    )

    rng = seed_rng(args.seed)
    image = GridImage.uniform(args.width, args.height, rng)

    print(f"Generating {args.width}x{args.height} mesh with {args.mutations} mutations")

    if image.has_inner_vertices():
        for _ in tqdm(range(args.mutations), desc="Mutating", leave=False):
            image.mutate_structure(image.random_inner_vertex(rng), rng=rng)
    elif args.mutations:
        print("Mesh has no inner vertices; skipping structural mutations")

    output = Path(args.output)
    if output.suffix.lower() in (".svg", ".pdf"):
        save_vector_image(image, output, show_wireframe=args.wireframe)
    else:
        resolution = Resolution.square(args.resolution)
        save_rgb_image(render_image(image, resolution, method=args.method), output)

    print(f"Saved to {output}")
    return 0


def cmd_benchmark(args: argparse.Namespace) -> int:
    """Time mutate-plus-rasterize cycles."""
    from tqdm import tqdm

    from mesh_evolve.core.rng import seed_rng
    from mesh_evolve.mesh import GridImage, Resolution

    rng = seed_rng(args.seed)
    image = GridImage.uniform(args.width, args.height, rng)
    resolution = Resolution.square(args.resolution)

    if args.method == "scanline":
        rasterize = image.rasterize_scanline
    else:
        rasterize = image.rasterize_box

    print(f"Benchmarking {args.method} rasterizer: {args.width}x{args.height} mesh, "
          f"{args.resolution}x{args.resolution} pixels, {args.iterations} iterations")

    pixels = 0
    start = time.perf_counter()
    for _ in tqdm(range(args.iterations), desc="Benchmark", leave=False):
        if image.has_inner_vertices():
            image.mutate_structure(image.random_inner_vertex(rng), rng=rng)
        pixels += sum(1 for _ in rasterize(resolution))
    elapsed = time.perf_counter() - start

    print(f"Total time: {elapsed:.3f}s")
    print(f"Per iteration: {elapsed / args.iterations * 1000:.2f}ms")
    print(f"Pixels per second: {pixels / elapsed:,.0f}" if elapsed > 0 else "Pixels per second: n/a")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Evolve triangle meshes toward a target image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    evolve_parser = subparsers.add_parser("evolve", help="Evolve a mesh toward a target image")
    evolve_parser.add_argument("target", help="Target image file")
    evolve_parser.add_argument("--generations", type=int, default=None, help="Number of generations")
    evolve_parser.add_argument("--time", type=float, default=None, help="Time limit in seconds")
    evolve_parser.add_argument("--width", type=int, default=16, help="Mesh vertices per row")
    evolve_parser.add_argument("--height", type=int, default=16, help="Mesh vertices per column")
    evolve_parser.add_argument("--population", type=int, default=25, help="Population size")
    evolve_parser.add_argument("--mutation-rate", type=float, default=0.05, help="Mutation rate")
    evolve_parser.add_argument("--resolution", type=int, default=64, help="Fitness resolution in blocks per axis")
    evolve_parser.add_argument("--fixed-offset", action="store_true", help="Sample fitness without a random offset")
    evolve_parser.add_argument("--workers", type=int, default=None, help="Fitness evaluation threads")
    evolve_parser.add_argument("--export-interval", type=int, default=250, help="Generations between exports")
    evolve_parser.add_argument("--export-resolution", type=int, default=1024, help="Export resolution in blocks per axis")
    evolve_parser.add_argument("--max-target-size", type=int, default=None, help="Downscale the target to this size")
    evolve_parser.add_argument("--output", "-o", default=None, help="Output directory (default: a new run directory)")
    evolve_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    render_parser = subparsers.add_parser("render", help="Render a randomly mutated mesh")
    render_parser.add_argument("--width", type=int, default=16, help="Mesh vertices per row")
    render_parser.add_argument("--height", type=int, default=16, help="Mesh vertices per column")
    render_parser.add_argument("--mutations", type=int, default=1000, help="Structural mutations to apply")
    render_parser.add_argument("--method", choices=["scanline", "box"], default="scanline", help="Rasterizer")
    render_parser.add_argument("--resolution", type=int, default=512, help="Blocks per axis")
    render_parser.add_argument("--wireframe", action="store_true", help="Outline triangles (vector output only)")
    render_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    render_parser.add_argument("--output", "-o", default="mesh.png", help="Output file (.png, .svg, .pdf)")

    bench_parser = subparsers.add_parser("benchmark", help="Time mutate-plus-rasterize cycles")
    bench_parser.add_argument("--iterations", type=int, default=100, help="Number of cycles")
    bench_parser.add_argument("--method", choices=["scanline", "box"], default="scanline", help="Rasterizer")
    bench_parser.add_argument("--width", type=int, default=16, help="Mesh vertices per row")
    bench_parser.add_argument("--height", type=int, default=16, help="Mesh vertices per column")
    bench_parser.add_argument("--resolution", type=int, default=256, help="Blocks per axis")
    bench_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "evolve": cmd_evolve,
        "render": cmd_render,
        "benchmark": cmd_benchmark,
    }

    try:
        return commands[args.command](args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
