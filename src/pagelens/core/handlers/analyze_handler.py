# src/pagelens/core/handlers/analyze_handler.py
import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError
from tqdm.auto import tqdm

from analyzer.controllers.analysis_controller import AnalysisController
from analyzer.model import AnalysisRequest, PerformanceMetrics, ResponseMeta, SiteProbeResult
from analyzer.result_model import AnalysisResult, AnalysisStatus
from pagelens.core.managers.config_manager import config_manager
from pagelens.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


class InputError(Exception):
    """Raised for unreadable or malformed command input."""


def register(subparsers) -> None:
    analyze = subparsers.add_parser("analyze", help="Analyze one saved HTML page.")
    analyze.add_argument("html_file", type=Path, help="Path to the saved HTML document.")
    analyze.add_argument("--url", required=True, help="URL the document was fetched from.")
    analyze.add_argument("--status", type=int, default=200, help="HTTP status code of the response.")
    analyze.add_argument("--headers", default=None, help="Response headers as JSON (inline or a file path).")
    analyze.add_argument("--metrics", default=None, help="Performance metrics as JSON (inline or a file path).")
    analyze.add_argument("--rendered", action="store_true", help="The HTML was captured after rendering.")
    analyze.add_argument("--robots", choices=["present", "missing"], default=None, help="robots.txt status.")
    analyze.add_argument("--sitemap", default=None, help="Sitemap URL of the site.")
    analyze.add_argument("--summary", action="store_true", help="Print the short progress summary only.")
    analyze.add_argument("--out", type=Path, default=None, help="Write the full JSON result to this file.")

    batch = subparsers.add_parser("batch", help="Analyze every page listed in a manifest.")
    batch.add_argument("manifest", type=Path, help="JSON manifest of pages to analyze.")
    batch.add_argument("--out-dir", type=Path, default=None, help="Directory for one JSON result per page.")


# -------- Input helpers --------

def load_json_arg(value: Optional[str]) -> Optional[Any]:
    """Parses an option that holds either inline JSON or a path to a JSON file."""
    if value is None:
        return None
    path = Path(value)
    try:
        if path.is_file():
            return json.loads(path.read_text(encoding="utf-8"))
        return json.loads(value)
    except (OSError, json.JSONDecodeError) as e:
        raise InputError(f"Invalid JSON value '{value[:60]}': {e}") from e


def read_html(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise InputError(f"Cannot read HTML file '{path}': {e}") from e


def build_request(
        url: str,
        html: str,
        status: int = 200,
        headers: Optional[Dict[str, Any]] = None,
        metrics: Optional[Dict[str, Any]] = None,
        rendered: bool = False,
        robots: Optional[str] = None,
        sitemap: Optional[str] = None,
) -> AnalysisRequest:
    """Assembles an AnalysisRequest from loosely typed command input."""
    try:
        site_probe = None
        if robots or sitemap:
            site_probe = SiteProbeResult(robots_txt_status=robots or "not_checked", sitemap_url=sitemap)
        return AnalysisRequest(
            url=url,
            html=html,
            response=ResponseMeta(status_code=status, headers=headers or {}),
            metrics=PerformanceMetrics.model_validate(metrics) if metrics else None,
            rendered=rendered,
            site_probe=site_probe,
        )
    except ValidationError as e:
        raise InputError(f"Invalid input for {url}: {e}") from e


def build_controller() -> AnalysisController:
    """Controller configured from settings.json."""
    return AnalysisController(
        config_manager.analyzer_config(),
        deadline=config_manager.get_nested("analysis.deadline_seconds"),
        collaborator_timeout=config_manager.get_nested("analysis.collaborator_timeout_seconds", 10.0),
        max_workers=config_manager.get_nested("analysis.max_workers"),
    )


def load_manifest(path: Path) -> List[AnalysisRequest]:
    """
    Reads a batch manifest: a JSON list (or {"pages": [...]}) of entries with
    `url` and `file` plus the optional `status`, `headers`, `metrics`,
    `rendered`, `robots` and `sitemap` keys. Relative files resolve against
    the manifest's directory.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise InputError(f"Cannot read manifest '{path}': {e}") from e

    entries = payload.get("pages") if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        raise InputError(f"Manifest '{path}' must contain a list of pages.")

    requests: List[AnalysisRequest] = []
    for n, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict) or "url" not in entry or "file" not in entry:
            raise InputError(f"Manifest entry {n} needs both 'url' and 'file'.")
        html_path = Path(entry["file"])
        if not html_path.is_absolute():
            html_path = path.parent / html_path
        requests.append(build_request(
            url=entry["url"],
            html=read_html(html_path),
            status=entry.get("status", 200),
            headers=entry.get("headers"),
            metrics=entry.get("metrics"),
            rendered=entry.get("rendered", False),
            robots=entry.get("robots"),
            sitemap=entry.get("sitemap"),
        ))
    return requests


def summary_line(result: AnalysisResult) -> str:
    s = result.issues.summary
    return (
        f"{result.url}  score={result.overall_score:>3}  confidence={result.confidence:>3}  "
        f"issues={s.total} (critical={s.critical}, high={s.high})  status={result.status.value}"
    )


# -------- Commands --------

def handle_analyze(args: argparse.Namespace) -> int:
    """Analyzes one page and prints (or writes) the result."""
    try:
        request = build_request(
            url=args.url,
            html=read_html(args.html_file),
            status=args.status,
            headers=load_json_arg(args.headers),
            metrics=load_json_arg(args.metrics),
            rendered=args.rendered,
            robots=args.robots,
            sitemap=args.sitemap,
        )
    except InputError as e:
        logger.error("%s", e)
        print(f"❌ {e}")
        return 1

    with build_controller() as controller:
        result = controller.analyze_sync(request)

    if args.out:
        PathUtils.ensure_dir(args.out.parent)
        args.out.write_text(result.to_json(indent=2), encoding="utf-8")
        print(f"✅ Result written to {args.out}")

    if args.summary:
        print(json.dumps(result.progress_summary(), indent=2))
    elif not args.out:
        print(result.to_json(indent=2))

    if result.status != AnalysisStatus.COMPLETED:
        print(f"⚠️ Analysis ended with status '{result.status.value}': {result.error}")
        return 1
    return 0


async def _run_batch(
        controller: AnalysisController,
        requests: List[AnalysisRequest],
        out_dir: Optional[Path],
) -> List[Tuple[AnalysisRequest, AnalysisResult]]:
    results = []
    for index, request in enumerate(tqdm(requests, desc="Analyzing pages", unit="page"), start=1):
        result = await controller.analyze(request)
        if out_dir is not None:
            target = out_dir / PathUtils.result_filename(request.url, index)
            target.write_text(result.to_json(indent=2), encoding="utf-8")
        results.append((request, result))
    return results


def handle_batch(args: argparse.Namespace) -> int:
    """Analyzes every manifest entry and prints one summary line per page."""
    try:
        requests = load_manifest(args.manifest)
    except InputError as e:
        logger.error("%s", e)
        print(f"❌ {e}")
        return 1

    if not requests:
        print("Manifest lists no pages.")
        return 0

    out_dir = PathUtils.ensure_dir(args.out_dir) if args.out_dir else None
    with build_controller() as controller:
        results = asyncio.run(_run_batch(controller, requests, out_dir))

    for _, result in results:
        print(summary_line(result))

    completed = sum(1 for _, r in results if r.status == AnalysisStatus.COMPLETED)
    print(f"\n✅ {completed}/{len(results)} pages analyzed successfully.")
    if out_dir is not None:
        print(f"Results written to {out_dir}")
    return 0 if completed == len(results) else 1
