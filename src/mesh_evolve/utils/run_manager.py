"""Run directories for evolution, render and benchmark outputs.

Directory Structure:
    output/
        runs/
            YYYYMMDD_HHMMSS_<run_type>_<description>/
                metadata.json     # Run status, tags and summary
                config.json       # Full configuration
                results.json      # Final results with metadata
                exports/          # Periodic comparison strips and meshes
                images/           # Other rendered images
                logs/             # Evolution log

Run Types:
    - evolve: Mesh evolution toward a target image
    - render: Rendering of randomly mutated meshes
    - benchmark: Rasterizer timing
"""

import json
import shutil
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np


@dataclass
class RunMetadata:
    """Metadata for a run."""
    run_id: str
    run_type: str
    description: str
    created_at: str
    completed_at: Optional[str] = None
    status: str = "running"
    config: Optional[Dict[str, Any]] = None
    summary: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'RunMetadata':
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})


class RunManager:
    """Creates and finds timestamped run directories."""

    def __init__(self, base_dir: Optional[Path] = None):
        """Initialize run manager.

        Args:
            base_dir: Base directory for outputs. Defaults to ./output,
                next to src/ when run from inside a checkout.
        """
        if base_dir is None:
            current = Path.cwd()
            while current != current.parent:
                if (current / "src" / "mesh_evolve").exists():
                    base_dir = current / "output"
                    break
                current = current.parent
            else:
                base_dir = Path("output")

        self.base_dir = Path(base_dir)
        self.runs_dir = self.base_dir / "runs"
        self.runs_dir.mkdir(parents=True, exist_ok=True)

    def create_run(
        self,
        run_type: str,
        description: str,
        config: Optional[Dict[str, Any]] = None,
        tags: Optional[List[str]] = None,
    ) -> 'Run':
        """Create a new run with timestamped directory.

        Args:
            run_type: Type of run (evolve, render, benchmark)
            description: Short description (used in directory name)
            config: Configuration dictionary to save
            tags: Optional tags for categorization

        Returns:
            Run object for managing this run
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        safe_desc = description.replace(" ", "_").replace("/", "-")[:30]
        run_id = f"{timestamp}_{run_type}_{safe_desc}"

        run_dir = self.runs_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)
        for sub in ("exports", "images", "logs"):
            (run_dir / sub).mkdir(exist_ok=True)

        metadata = RunMetadata(
            run_id=run_id,
            run_type=run_type,
            description=description,
            created_at=datetime.now().isoformat(),
            config=config,
            tags=tags or [],
        )

        run = Run(run_dir, metadata)
        run._save_metadata()

        if config:
            run.save_config(config)

        return run

    def get_run(self, run_id: str) -> Optional['Run']:
        """Get an existing run by ID, or None if there is no such directory."""
        run_dir = self.runs_dir / run_id
        if not run_dir.is_dir():
            return None

        metadata_file = run_dir / "metadata.json"
        if metadata_file.exists():
            with open(metadata_file) as f:
                metadata = RunMetadata.from_dict(json.load(f))
        else:
            metadata = RunMetadata(
                run_id=run_id,
                run_type="unknown",
                description="No metadata",
                created_at="unknown",
            )

        return Run(run_dir, metadata)

    def list_runs(
        self,
        run_type: Optional[str] = None,
        limit: int = 20,
        include_completed: bool = True,
    ) -> List['Run']:
        """List runs, most recent first.

        Args:
            run_type: Filter by run type
            limit: Maximum number of runs to return
            include_completed: Include completed runs

        Returns:
            List of Run objects
        """
        runs: List['Run'] = []

        # Directory names start with the timestamp
        for run_dir in sorted(self.runs_dir.iterdir(), reverse=True):
            run = self.get_run(run_dir.name)
            if run is None:
                continue

            if run_type and run.metadata.run_type != run_type:
                continue
            if not include_completed and run.metadata.status == "completed":
                continue

            runs.append(run)
            if len(runs) >= limit:
                break

        return runs

    def cleanup_old_runs(
        self,
        keep_count: int = 10,
        run_type: Optional[str] = None,
        dry_run: bool = True,
    ) -> List[str]:
        """Remove old runs, keeping the most recent.

        Args:
            keep_count: Number of runs to keep
            run_type: Only clean up runs of this type
            dry_run: If True, just report what would be deleted

        Returns:
            List of run IDs that were/would be deleted
        """
        runs = self.list_runs(run_type=run_type, limit=1000)

        deleted = []
        for run in runs[keep_count:]:
            if not dry_run:
                shutil.rmtree(run.run_dir)
            deleted.append(run.metadata.run_id)

        return deleted


class Run:
    """A single run directory and its metadata."""

    def __init__(self, run_dir: Path, metadata: RunMetadata):
        self.run_dir = Path(run_dir)
        self.metadata = metadata

    @property
    def exports_dir(self) -> Path:
        return self.run_dir / "exports"

    @property
    def images_dir(self) -> Path:
        return self.run_dir / "images"

    @property
    def logs_dir(self) -> Path:
        return self.run_dir / "logs"

    @property
    def log_path(self) -> Path:
        return self.logs_dir / "run.log"

    def _save_metadata(self):
        with open(self.run_dir / "metadata.json", "w") as f:
            json.dump(self.metadata.to_dict(), f, indent=2)

    def save_config(self, config: Dict[str, Any]):
        """Save configuration to config.json."""
        self.metadata.config = config
        with open(self.run_dir / "config.json", "w") as f:
            json.dump(config, f, indent=2)
        self._save_metadata()

    def save_results(self, results: Dict[str, Any], summary: Optional[Dict[str, Any]] = None):
        """Save results to results.json.

        Args:
            results: Full results dictionary
            summary: Optional summary for quick reference
        """
        results["_run_id"] = self.metadata.run_id
        results["_created_at"] = self.metadata.created_at
        results["_completed_at"] = datetime.now().isoformat()

        with open(self.run_dir / "results.json", "w") as f:
            json.dump(results, f, indent=2)

        if summary:
            self.metadata.summary = summary
            self._save_metadata()

    def save_image(self, image_data: np.ndarray, name: str, format: str = "png") -> Path:
        """Save an RGB array under images/.

        Args:
            image_data: uint8 array of shape (H, W, 3)
            name: Image name (without extension)
            format: Image format (png, jpg)

        Returns:
            Path the image was written to
        """
        from mesh_evolve.visualization.renderer import save_rgb_image

        filepath = self.images_dir / f"{name}.{format}"
        save_rgb_image(image_data, filepath)
        return filepath

    def complete(self, status: str = "completed", summary: Optional[Dict[str, Any]] = None):
        """Mark run as complete.

        Args:
            status: Final status (completed, interrupted, failed)
            summary: Optional summary of results
        """
        self.metadata.status = status
        self.metadata.completed_at = datetime.now().isoformat()
        if summary:
            self.metadata.summary = summary
        self._save_metadata()

    def __repr__(self) -> str:
        return f"Run({self.metadata.run_id}, type={self.metadata.run_type}, status={self.metadata.status})"


_default_manager: Optional[RunManager] = None


def get_run_manager() -> RunManager:
    """Get the default run manager."""
    global _default_manager
    if _default_manager is None:
        _default_manager = RunManager()
    return _default_manager


def create_run(
    run_type: str,
    description: str,
    config: Optional[Dict[str, Any]] = None,
    **kwargs,
) -> Run:
    """Create a new run in the default run manager."""
    return get_run_manager().create_run(run_type, description, config, **kwargs)
