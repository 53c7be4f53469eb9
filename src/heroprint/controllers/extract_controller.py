# src/heroprint/controllers/extract_controller.py
import json
import logging
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import List, Dict, Any, Optional, Iterable, Callable

import pandas as pd

from heroprint.core.managers.config_manager import config_manager
from heroprint.dom.builder import SnapshotBuilder
from heroprint.dom.core import Viewport
from heroprint.engine import extract_snapshot
from heroprint.errors import SnapshotError, ExtractionFailure

logger = logging.getLogger(__name__)

EXPORT_FORMATS = (".csv", ".json", ".xlsx")

ProgressCallback = Callable[[int, int], None]


def _worker_fingerprint(path: str, viewport: Optional[Dict[str, float]]) -> Dict[str, Any]:
    """
    Worker function fingerprinting a single snapshot file in a separate process.
    Returns the fingerprint as a JSON string (or an error record).
    """
    try:
        builder = SnapshotBuilder(Viewport(**viewport) if viewport else None)
        snapshot = builder.load(path)
        fingerprint = extract_snapshot(snapshot)
        # Serialize to JSON to avoid pickling pydantic models on Windows spawn
        return {"path": path, "fingerprint": fingerprint.model_dump_json()}
    except (SnapshotError, ExtractionFailure) as e:
        logger.error(f"Worker failed on {path}: {e}")
        return {"path": path, "error": str(e)}
    except Exception as e:
        logger.error(f"Unexpected worker error on {path}: {e}", exc_info=True)
        return {"path": path, "error": str(e)}


class ExtractController:
    """
    Orchestrates batch fingerprinting: discovers snapshot files, fans them out
    over worker processes and collects the rows for export.
    """

    def __init__(self, workers: Optional[int] = None, viewport: Optional[Viewport] = None):
        self.workers = int(workers or config_manager.get_nested("batch.workers", 4))
        self.viewport = viewport
        self.rows: List[Dict[str, Any]] = []
        self.errors: List[Dict[str, str]] = []

    @staticmethod
    def discover(directory: Path, patterns: Optional[Iterable[str]] = None) -> List[Path]:
        """Snapshot files in `directory`, sorted so batch output is stable."""
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Not a directory: {directory}")
        patterns = list(patterns or config_manager.get_nested("batch.patterns", ["*.json", "*.html"]))
        found = {p for pattern in patterns for p in directory.glob(pattern) if p.is_file()}
        return sorted(found)

    def run_batch(
            self,
            paths: List[Path],
            progress_callback: Optional[ProgressCallback] = None
    ) -> Dict[str, Any]:
        """Fingerprints every path in parallel and buffers the results."""
        self.rows = []
        self.errors = []
        total = len(paths)
        viewport = self.viewport.model_dump() if self.viewport else None

        start = time.perf_counter()
        with ProcessPoolExecutor(max_workers=self.workers) as pool:
            futures = {pool.submit(_worker_fingerprint, str(p), viewport): p for p in paths}
            for i, fut in enumerate(as_completed(futures)):
                if progress_callback:
                    progress_callback(i + 1, total)
                result = fut.result()
                if "error" in result:
                    self.errors.append(result)
                    continue
                row = json.loads(result["fingerprint"])
                row["source"] = result["path"]
                self.rows.append(row)

        # as_completed yields in finishing order
        self.rows.sort(key=lambda r: r["source"])
        self.errors.sort(key=lambda r: r["path"])
        duration = time.perf_counter() - start
        logger.info(f"Fingerprinted {len(self.rows)}/{total} snapshots in {duration:.2f}s")

        return {
            "total": total,
            "succeeded": len(self.rows),
            "failed": len(self.errors),
            "duration": duration,
        }

    def to_dataframe(self) -> pd.DataFrame:
        """One row per snapshot; nested records are flattened into dotted columns."""
        if not self.rows:
            return pd.DataFrame(columns=["source"])
        df = pd.json_normalize(self.rows, max_level=1)
        cols = ["source"] + [c for c in df.columns if c != "source"]
        return df[cols]

    def export(self, output: Path) -> Path:
        output = Path(output)
        suffix = output.suffix.lower()
        if suffix not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format '{suffix}'. Use one of: {', '.join(EXPORT_FORMATS)}")

        output.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".json":
            with open(output, "w", encoding="utf-8") as f:
                json.dump(self.rows, f, ensure_ascii=False, indent=2)
            return output

        df = self.to_dataframe()
        # Lists (ctas, detected_stack, hero_images) don't fit a single cell otherwise
        for col in df.columns:
            if df[col].map(lambda v: isinstance(v, (list, dict))).any():
                df[col] = df[col].map(lambda v: json.dumps(v, ensure_ascii=False) if isinstance(v, (list, dict)) else v)

        if suffix == ".csv":
            df.to_csv(output, index=False)
        else:
            try:
                with pd.ExcelWriter(output, engine='openpyxl') as writer:
                    df.to_excel(writer, sheet_name="Fingerprints", index=False)
            except PermissionError:
                raise PermissionError(f"{output} is currently open. Please close it and try again.")
        logger.info(f"Exported {len(df)} fingerprints to {output}")
        return output
