"""CLI entrypoints for the TextImage desktop app, headless rendering, and diagnostics."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from textimage_core import (
    DiagnosticsExporter,
    EditorSession,
    build_doctor_payload,
    export_dir,
    initial_state,
    load_config,
)
from textimage_core.logging_setup import configure_logging
from textimage_renderer import (
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    FontLoadError,
    ImageExporter,
    TextImageError,
    font_descriptor,
    system_font_paths,
)


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _alert(error: FontLoadError) -> None:
    print(str(error), file=sys.stderr)


def cmd_run(_args: argparse.Namespace) -> int:
    from .app import run_gui

    return run_gui()


def cmd_render(args: argparse.Namespace) -> int:
    cfg = load_config()
    out_dir = Path(args.out_dir).expanduser() if args.out_dir else export_dir(cfg)
    session = EditorSession(
        state=initial_state(cfg),
        exporter=ImageExporter(out_dir, cfg.export.filename, cfg.export.overwrite),
        on_font_error=_alert,
    )

    report = session.load_font_files(Path(p).expanduser() for p in args.font_file)

    changes = {
        "text": args.text,
        "font_size_px": args.size,
        "font_family": args.font,
        "text_color": args.color,
        "background_color": args.background,
        "bold": args.bold,
        "italic": args.italic,
        "underline": args.underline,
    }
    try:
        with session.batch():
            session.update(**{k: v for k, v in changes.items() if v is not None})
    except TextImageError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.output:
        path = session.export_to(Path(args.output).expanduser())
    else:
        path = session.export()

    _print_json(
        {
            "success": path is not None,
            "path": path,
            "descriptor": font_descriptor(session.state),
            "size": [session.renderer.width, session.renderer.height],
            "fonts_loaded": [f.name for f in report.loaded],
            "font_errors": [str(e) for e in report.errors],
        }
    )
    return 0 if path is not None else 1


def cmd_fonts(args: argparse.Namespace) -> int:
    session = EditorSession(on_font_error=_alert)
    session.load_font_files(Path(p).expanduser() for p in args.font_file)
    _print_json(
        {
            "system": system_font_paths(),
            "custom": [{"name": f.name, "file": f.source_filename} for f in session.registry.fonts()],
            "options": session.font_options(),
        }
    )
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    payload = build_doctor_payload(cfg)

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def _font_size(value: str) -> int:
    size = int(value)
    if not FONT_SIZE_MIN <= size <= FONT_SIZE_MAX:
        raise argparse.ArgumentTypeError(f"size must be between {FONT_SIZE_MIN} and {FONT_SIZE_MAX}")
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="textimage", description="Render styled text to an 800x400 PNG")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run desktop app")
    run_cmd.set_defaults(func=cmd_run)

    render_cmd = sub.add_parser("render", help="Render text to PNG without the GUI")
    render_cmd.add_argument("--text", default=None)
    render_cmd.add_argument("--size", type=_font_size, default=None, help="Font size in px (12-120)")
    render_cmd.add_argument("--font", default=None, help="System font name or a name loaded via --font-file")
    render_cmd.add_argument("--color", default=None, help="Text color, e.g. #ff0000")
    render_cmd.add_argument("--background", default=None, help="Background color, e.g. #ffffff")
    render_cmd.add_argument("--bold", action=argparse.BooleanOptionalAction, default=None)
    render_cmd.add_argument("--italic", action=argparse.BooleanOptionalAction, default=None)
    render_cmd.add_argument("--underline", action=argparse.BooleanOptionalAction, default=None)
    render_cmd.add_argument("--font-file", action="append", default=[], help="TTF/OTF/WOFF/WOFF2 to load (repeatable)")
    render_cmd.add_argument("--out-dir", default=None, help="Directory for generated-text-image.png")
    render_cmd.add_argument("--output", default=None, help="Explicit output file path")
    render_cmd.set_defaults(func=cmd_render)

    fonts_cmd = sub.add_parser("fonts", help="List selectable font families")
    fonts_cmd.add_argument("--font-file", action="append", default=[], help="Font file to load before listing")
    fonts_cmd.set_defaults(func=cmd_fonts)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
