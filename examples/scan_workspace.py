"""
Example script scanning a directory tree into a reposcope workspace.

Uses a small filesystem scan backend (a directory counts as a git repository
when it holds a .git folder) and a JSON file cache, then prints the
aggregated statistics.

Usage:
    python examples/scan_workspace.py [DIRECTORY] [--add]
"""

import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import aiofiles
from rich.console import Console
from rich.table import Table

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from reposcope import (
    CacheBackend,
    CacheSnapshot,
    ConflictError,
    Repository,
    RepoStatus,
    ReposcopeException,
    ScanBackend,
    ScanMode,
    Workspace,
)
from reposcope.core.progress import ProgressReporter
from reposcope.utils import setup_logging


CACHE_FILE = Path.home() / ".reposcope" / "cache.json"


class FilesystemScanBackend(ScanBackend):
    """Lists the immediate subdirectories of a path"""

    async def scan(
        self,
        directory_path: str,
        add_mode: bool,
        progress: Optional[ProgressReporter] = None,
    ) -> List[Repository]:
        return await asyncio.to_thread(self._scan_sync, directory_path, progress)

    def _scan_sync(self, directory_path: str, progress: Optional[ProgressReporter]) -> List[Repository]:
        root = Path(directory_path)
        if not root.is_dir():
            raise FileNotFoundError(f"Not a directory: {directory_path}")

        children = [p for p in root.iterdir() if p.is_dir() and not p.name.startswith('.')]
        repos = []
        for index, child in enumerate(children, start=1):
            if progress:
                progress(str(child), index, len(children))
            is_git = (child / '.git').is_dir()
            mtime = datetime.fromtimestamp(child.stat().st_mtime, tz=timezone.utc)
            repos.append(Repository(
                name=child.name,
                path=str(child),
                is_git_repo=is_git,
                status=RepoStatus.CLEAN if is_git else RepoStatus.NO_GIT,
                last_activity=mtime,
                size_mb=self._size_mb(child),
            ))
        return repos

    @staticmethod
    def _size_mb(path: Path) -> float:
        total = 0
        for item in path.rglob('*'):
            try:
                if item.is_file():
                    total += item.stat().st_size
            except OSError:
                continue
        return round(total / (1024 * 1024), 2)


class JsonFileCache(CacheBackend):
    """Cache stored as a single JSON document"""

    def __init__(self, path: Path = CACHE_FILE):
        self.path = path

    async def load_cache(self) -> Optional[List[Repository]]:
        if not self.path.exists():
            return None
        async with aiofiles.open(self.path, 'r', encoding='utf-8') as f:
            data = json.loads(await f.read())
        return [Repository.model_validate(item) for item in data.get('repositories', [])]

    async def save_cache(self, snapshot: CacheSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, 'w', encoding='utf-8') as f:
            await f.write(snapshot.model_dump_json(by_alias=True, indent=2))


async def confirm_conflict(conflict) -> bool:
    console = Console()
    console.print(f"[yellow]![/yellow] {conflict.message}")
    answer = await asyncio.to_thread(console.input, "Continue anyway? [y/N] ")
    return answer.strip().lower() == 'y'


async def run(directory: str, mode: ScanMode) -> int:
    console = Console()

    async with Workspace(FilesystemScanBackend(), cache_backend=JsonFileCache()) as workspace:
        if workspace.state.has_data:
            console.print(f"[green]✓[/green] {len(workspace.state.repositories)} repositories loaded from cache")

        try:
            outcome = await workspace.coordinator.request_scan(directory, mode, confirm=confirm_conflict)
        except ConflictError:
            console.print("[yellow]Scan cancelled.[/yellow]")
            return 1
        except ReposcopeException as e:
            console.print(f"[red]✗[/red] {e}")
            return 1

        console.print(f"[bold blue]{workspace.state.current_status}[/bold blue]")
        console.print(f"Collection now holds {outcome.total} repositories\n")

        stats = workspace.state.stats
        summary = Table(title="Statistics")
        summary.add_column("Metric")
        summary.add_column("Value", justify="right")
        summary.add_row("Directories", str(stats.total_directories))
        summary.add_row("Git repositories", str(stats.git_repositories))
        summary.add_row("With remotes", str(stats.repositories_with_remotes))
        summary.add_row("Total size (MB)", f"{stats.total_size_mb:.1f}")
        console.print(summary)

        largest = Table(title="Largest")
        largest.add_column("Name")
        largest.add_column("Size (MB)", justify="right")
        for repo in stats.largest_repos:
            largest.add_row(repo.name, f"{repo.size_mb:.1f}")
        console.print(largest)

        if stats.repos_needing_attention:
            console.print("[bold]Needs attention:[/bold]")
            for repo in stats.repos_needing_attention:
                console.print(f"  - {repo.name} ({repo.status_label})")

    return 0


def main():
    setup_logging("WARNING")
    args = [a for a in sys.argv[1:] if not a.startswith('--')]
    directory = args[0] if args else str(Path.cwd())
    mode = ScanMode.ADD if '--add' in sys.argv else ScanMode.REPLACE
    return asyncio.run(run(directory, mode))


if __name__ == "__main__":
    sys.exit(main())
