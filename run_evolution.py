"""Evolve a triangle mesh toward a target image.

Output is organized in output/runs/ with timestamped directories: the
comparison strips and SVG meshes land in exports/, the log in logs/.
"""

import argparse
from pathlib import Path
from typing import Optional

import numpy as np

from mesh_evolve.evolution import EvolutionConfig, GAImageMember, MeshEvolution, TargetImage
from mesh_evolve.utils import create_run, setup_logger
from mesh_evolve.visualization.renderer import render_image


def run_evolution(
    target: TargetImage,
    generations: Optional[int] = 1000,
    time_limit: Optional[float] = None,
    population: int = 25,
    size: int = 16,
    seed: int = 42,
    description: str = "full",
) -> Optional[GAImageMember]:
    """Run an evolution with organized output.

    Args:
        target: Image to approximate
        generations: Number of generations to evolve
        time_limit: Wall-clock limit in seconds
        population: Population size
        size: Mesh vertices per side
        seed: Random seed for reproducibility
        description: Short description for run directory

    Returns:
        Best member found
    """
    config = EvolutionConfig(
        width=size,
        height=size,
        population_size=population,
        generations=generations,
        time_limit=time_limit,
        export_interval=max(1, (generations or 1000) // 5),
    )

    run = create_run(
        run_type="evolve",
        description=description,
        config={**config.to_dict(), "seed": seed},
        tags=["evolution", f"{size}x{size}"],
    )
    config.output_dir = run.exports_dir
    logger = setup_logger("mesh_evolve", run.log_path)

    logger.info("=" * 70)
    logger.info("TRIANGLE MESH EVOLUTION")
    logger.info("=" * 70)
    logger.info(f"Run ID: {run.metadata.run_id}")
    logger.info(f"Output: {run.run_dir}")
    logger.info(f"Target: {target.width}x{target.height}")

    evolution = MeshEvolution(config, target, seed=seed)
    best = evolution.run()

    status = "completed" if best is not None else "failed"
    summary = {
        "generations": evolution.generation,
        "best_fitness": evolution.best_fitness,
        "elapsed": evolution.elapsed,
    }

    if best is not None:
        # Higher resolution than the periodic exports
        run.save_image(render_image(best.image, (5, 5)), "best_2048")
        logger.info(f"Saved best render to {run.images_dir}")

    run.save_results({"history": evolution.history}, summary=summary)
    run.complete(status=status, summary=summary)

    logger.info("=" * 70)
    logger.info(f"Run complete! Results saved to: {run.run_dir}")
    logger.info("=" * 70)

    return best


def gradient_target(size: int = 128) -> TargetImage:
    """A red/green gradient with a blue disc, for trying things out without an image."""
    ys, xs = np.mgrid[0:size, 0:size]
    pixels = np.zeros((size, size, 3), dtype=np.uint8)
    pixels[..., 0] = xs * 255 // (size - 1)
    pixels[..., 1] = ys * 255 // (size - 1)
    disc = (xs - size / 2) ** 2 + (ys - size / 2) ** 2 < (size / 4) ** 2
    pixels[disc] = (40, 60, 220)
    return TargetImage(pixels)


def quick_test() -> Optional[GAImageMember]:
    """Quick test of the evolution on a synthetic target."""
    print("Running quick test (50 generations, 8x8 mesh)...")
    return run_evolution(
        gradient_target(),
        generations=50,
        population=10,
        size=8,
        seed=123,
        description="quick_test",
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Evolve a triangle mesh toward a target image"
    )
    parser.add_argument(
        "target",
        nargs="?",
        help="Target image (omit with --quick)"
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Run quick test on a synthetic target"
    )
    parser.add_argument(
        "--generations",
        type=int,
        default=1000,
        help="Number of generations (default: 1000)"
    )
    parser.add_argument(
        "--time",
        type=float,
        default=None,
        help="Time limit in seconds"
    )
    parser.add_argument(
        "--population",
        type=int,
        default=25,
        help="Population size (default: 25)"
    )
    parser.add_argument(
        "--size",
        type=int,
        default=16,
        help="Mesh vertices per side (default: 16)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed (default: 42)"
    )
    parser.add_argument(
        "--description",
        type=str,
        default=None,
        help="Short description for this run"
    )

    args = parser.parse_args()

    if args.quick:
        quick_test()
    elif args.target is None:
        parser.error("a target image is required unless --quick is given")
    else:
        run_evolution(
            TargetImage.open(args.target),
            generations=args.generations,
            time_limit=args.time,
            population=args.population,
            size=args.size,
            seed=args.seed,
            description=args.description or Path(args.target).stem,
        )
