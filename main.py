# main.py

"""
Sample caller: read params (JSON + CLI), walk files, validate each template, print results.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from templatecheck.model import Limits, ScanRow
from templatecheck.report import format_result, format_size, to_row, write_csv
from templatecheck.upload import LocalFile
from templatecheck.validator import TemplateValidator
from templatecheck.walk import iter_candidates

_RULE = "=" * 80
_SUBRULE = "-" * 80


def load_config(path: Path | None) -> Dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        path (Path | None): Path to the JSON configuration file.

    Returns:
        Dict[str, Any]: Configuration dictionary. Empty if no file is provided or read fails.
    """
    if not path:
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        print(f"[WARN] Failed to read config {path}: {exc}", file=sys.stderr)
        return {}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    p = argparse.ArgumentParser(
        description="Validate CSV (UTF-8) and Excel (xls/xlsx) templates."
    )
    p.add_argument("--input", type=str, help="Input file or directory (recursive).")
    p.add_argument("--report", type=str, help="Optional path to a CSV report.")
    p.add_argument("--config", type=str, help="Optional JSON config (flags override).")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return p.parse_args(argv)


def _get_effective_config(args: argparse.Namespace) -> Tuple[Dict[str, Any], Path]:
    """Load CLI + JSON configuration, giving precedence to CLI flags."""
    script_dir = Path(__file__).parent
    default_config_path = script_dir / "params.json"
    config_path = Path(args.config) if args.config else default_config_path
    cfg = load_config(config_path if config_path.exists() else None)
    return cfg, config_path


def _resolve_paths(args: argparse.Namespace, cfg: Dict[str, Any], config_path: Path) -> Tuple[Path, Optional[Path]]:
    """Resolve and validate input and report paths."""
    raw_input = args.input or cfg.get("input", "")
    if not raw_input:
        print(f"[ERR] --input is required (or set 'input' in {config_path.name}).", file=sys.stderr)
        raise SystemExit(2)
    input_path = Path(raw_input)
    if not input_path.exists():
        print(f"[ERR] Input not found: {input_path}", file=sys.stderr)
        raise SystemExit(2)

    report = args.report or cfg.get("report")
    return input_path, Path(report) if report else None


def _limits_from(cfg: Dict[str, Any]) -> Limits:
    defaults = Limits()
    return Limits(
        sniff_bytes=int(cfg.get("sniff_bytes", defaults.sniff_bytes)),
        charset_sample_bytes=int(cfg.get("charset_sample_bytes", defaults.charset_sample_bytes)),
        decode_chunk_chars=int(cfg.get("decode_chunk_chars", defaults.decode_chunk_chars)),
    )


def process_file(validator: TemplateValidator, fp: Path, index: int, count: int) -> ScanRow:
    """Validate a single file, print what was found and return its report row."""
    print(_SUBRULE)
    print(f"[{index}/{count}] Validating: {fp.name}")
    print(_SUBRULE)

    size = fp.stat().st_size
    print("File info:")
    print(f"   - name: {fp.name}")
    print(f"   - size: {format_size(size)}")

    started = time.perf_counter()
    result = validator.validate(LocalFile(fp))
    elapsed_ms = (time.perf_counter() - started) * 1000.0

    print("Result:")
    print(format_result(result))
    if result.ok:
        print(f"[INFO] Valid ({elapsed_ms:.2f} ms)")
    else:
        print(f"[INFO] Invalid: {result.message} ({elapsed_ms:.2f} ms)")
    print()
    return to_row(fp, size, result, elapsed_ms)


def _print_summary(report_path: Optional[Path], total: int, invalid: int, errors: int) -> None:
    """Print summary information to stdout."""
    print(_RULE)
    print(f"[INFO] Done. Total: {total} | Valid: {total - invalid - errors} | Invalid: {invalid} | Errors: {errors}")
    if report_path:
        print(f"[INFO] Report: {report_path.resolve()}")
    print(_RULE)


def main(argv: Optional[List[str]] = None) -> int:
    """Main orchestration function.

    Returns:
        int: Exit code.
    """
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    cfg, config_path = _get_effective_config(args)
    input_path, report_path = _resolve_paths(args, cfg, config_path)

    validator = TemplateValidator(limits=_limits_from(cfg))
    files = list(iter_candidates(input_path))
    rows: List[ScanRow] = []
    invalid = errors = 0

    print(_RULE)
    print(f"[INFO] Scanning: {input_path}")
    print(_RULE)
    for i, fp in enumerate(files, start=1):
        try:
            row = process_file(validator, fp, i, len(files))
        except OSError as exc:
            errors += 1
            print(f"[ERR] {fp}: {type(exc).__name__}: {exc}", file=sys.stderr)
            continue
        if not row.ok:
            invalid += 1
        rows.append(row)

    if report_path:
        write_csv(report_path, rows)
    _print_summary(report_path, len(files), invalid, errors)

    if errors:
        return 3
    if invalid:
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
