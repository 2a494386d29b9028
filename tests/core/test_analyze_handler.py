# tests/core/test_analyze_handler.py
import json

import pytest

from analyzer.result_model import AnalysisResult
from pagelens.app import COMMAND_HANDLERS, build_parser, main
from pagelens.core.handlers.analyze_handler import InputError, build_request, load_json_arg, load_manifest
from pagelens.core.utils.path_utils import PathUtils
from conftest import SECURE_HEADERS, complete_page_html, page_html

URL = "https://example.com/garden"


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "garden.html"
    path.write_text(complete_page_html(URL), encoding="utf-8")
    return path


def run(*argv):
    args = build_parser().parse_args(list(argv))
    return COMMAND_HANDLERS[args.command](args)


# --- Input helpers ---

def test_load_json_arg_inline_and_file(tmp_path):
    assert load_json_arg(None) is None
    assert load_json_arg('{"a": 1}') == {"a": 1}
    path = tmp_path / "headers.json"
    path.write_text('{"Server": "nginx"}')
    assert load_json_arg(str(path)) == {"Server": "nginx"}


def test_load_json_arg_invalid():
    with pytest.raises(InputError):
        load_json_arg("{broken")


def test_build_request_site_facts():
    request = build_request(URL, "<p>x</p>", robots="missing", sitemap="https://example.com/sitemap.xml")
    assert request.site_probe.robots_txt_status == "missing"
    assert request.site_probe.sitemap_url == "https://example.com/sitemap.xml"
    assert build_request(URL, "<p>x</p>").site_probe is None


def test_build_request_rejects_bad_metrics():
    with pytest.raises(InputError):
        build_request(URL, "<p>x</p>", metrics={"device": "tablet"})


def test_result_filename():
    assert PathUtils.result_filename("https://example.com/blog/post/", 3) == "003-example.com-blog-post.json"
    assert PathUtils.result_filename("about:blank", 1) == "001-blank.json"


# --- 'analyze' command ---

def test_analyze_prints_full_result(html_file, capsys):
    code = run("analyze", str(html_file), "--url", URL, "--headers", json.dumps(SECURE_HEADERS))
    result = AnalysisResult.from_json(capsys.readouterr().out)

    assert code == 0
    assert result.url == URL
    assert result.facts.technical.security_headers


def test_analyze_summary(html_file, capsys):
    assert run("analyze", str(html_file), "--url", URL, "--summary") == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["url"] == URL
    assert summary["status"] == "completed"
    assert set(summary["category_scores"]) == {"technical", "content", "onpage", "structured"}


def test_analyze_with_metrics_file_and_robots(html_file, tmp_path, capsys):
    metrics = tmp_path / "metrics.json"
    metrics.write_text(json.dumps({"lcp": 5200, "cls": 0.4, "performance_score": 0.4}))
    out = tmp_path / "out" / "result.json"

    code = run(
        "analyze", str(html_file), "--url", URL, "--metrics", str(metrics),
        "--robots", "missing", "--rendered", "--out", str(out),
    )
    assert code == 0
    assert "Result written to" in capsys.readouterr().out

    result = AnalysisResult.from_json(out.read_text(encoding="utf-8"))
    ids = {i.id for i in result.issues.issues}
    assert {"missing-robots-txt", "poor-core-web-vitals", "poor-page-speed"} <= ids
    assert result.facts.rendered
    assert result.scores.ux is not None


def test_analyze_missing_file(tmp_path, capsys):
    assert run("analyze", str(tmp_path / "nope.html"), "--url", URL) == 1
    assert "Cannot read HTML file" in capsys.readouterr().out


def test_analyze_invalid_headers(html_file, capsys):
    assert run("analyze", str(html_file), "--url", URL, "--headers", "{oops") == 1
    assert "Invalid JSON value" in capsys.readouterr().out


def test_analyze_empty_document_is_reported(tmp_path, capsys):
    empty = tmp_path / "empty.html"
    empty.write_text("")
    assert run("analyze", str(empty), "--url", URL, "--summary") == 1
    assert "status 'failed'" in capsys.readouterr().out


# --- 'batch' command ---

def write_manifest(tmp_path, entries):
    manifest = tmp_path / "manifest.json"
    manifest.write_text(json.dumps(entries), encoding="utf-8")
    return manifest


def test_batch_writes_one_result_per_page(tmp_path, capsys):
    (tmp_path / "a.html").write_text(complete_page_html("https://example.com/a"))
    (tmp_path / "b.html").write_text(page_html(title=None, words=40))
    manifest = write_manifest(tmp_path, {"pages": [
        {"url": "https://example.com/a", "file": "a.html", "headers": SECURE_HEADERS},
        {"url": "http://example.com/b", "file": "b.html", "robots": "missing"},
    ]})
    out_dir = tmp_path / "results"

    assert run("batch", str(manifest), "--out-dir", str(out_dir)) == 0

    output = capsys.readouterr().out
    assert "2/2 pages analyzed successfully" in output
    assert "https://example.com/a  score=" in output
    assert sorted(p.name for p in out_dir.iterdir()) == ["001-example.com-a.json", "002-example.com-b.json"]
    second = AnalysisResult.from_json((out_dir / "002-example.com-b.json").read_text(encoding="utf-8"))
    assert second.issues.get("no-ssl") is not None
    assert second.issues.get("missing-robots-txt") is not None


def test_batch_counts_failed_pages(tmp_path, capsys):
    (tmp_path / "a.html").write_text(complete_page_html("https://example.com/a"))
    (tmp_path / "blank.html").write_text("  ")
    manifest = write_manifest(tmp_path, [
        {"url": "https://example.com/a", "file": "a.html"},
        {"url": "https://example.com/blank", "file": "blank.html"},
    ])
    assert run("batch", str(manifest)) == 1
    assert "1/2 pages analyzed successfully" in capsys.readouterr().out


def test_batch_empty_manifest(tmp_path, capsys):
    assert run("batch", str(write_manifest(tmp_path, []))) == 0
    assert "Manifest lists no pages." in capsys.readouterr().out


@pytest.mark.parametrize("entries, message", [
    ([{"url": "https://example.com/"}], "needs both 'url' and 'file'"),
    ({"pages": "a.html"}, "must contain a list of pages"),
    ([{"url": "https://example.com/", "file": "missing.html"}], "Cannot read HTML file"),
    ([{"url": "https://example.com/", "file": "page.html", "robots": "yes"}], "Invalid input for https://example.com/"),
    ([{"url": "https://example.com/", "file": "page.html", "status": "ok"}], "Invalid input for https://example.com/"),
])
def test_batch_malformed_manifest(tmp_path, capsys, entries, message):
    (tmp_path / "page.html").write_text("<p>x</p>")
    assert run("batch", str(write_manifest(tmp_path, entries))) == 1
    assert message in capsys.readouterr().out


def test_load_manifest_resolves_relative_files(tmp_path):
    sub = tmp_path / "pages"
    sub.mkdir()
    (sub / "x.html").write_text("<p>x</p>")
    manifest = sub / "m.json"
    manifest.write_text(json.dumps([{"url": URL, "file": "x.html", "status": 301}]))
    [request] = load_manifest(manifest)
    assert request.html == "<p>x</p>"
    assert request.response.status_code == 301


def test_load_manifest_rejects_unknown_robots_status(tmp_path):
    (tmp_path / "p.html").write_text("<p>x</p>")
    manifest = write_manifest(tmp_path, [{"url": URL, "file": "p.html", "robots": "yes"}])
    with pytest.raises(InputError, match="Invalid input"):
        load_manifest(manifest)


# --- Entry point ---

def test_main_without_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage: pagelens" in capsys.readouterr().out
