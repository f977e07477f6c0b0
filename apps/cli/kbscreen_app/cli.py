"""CLI entrypoints for streaming, previews, test patterns and diagnostics."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from kbscreen_core import AppConfig, StreamController, build_doctor_payload, device_match, load_config
from kbscreen_core.diagnostics import describe_device
from kbscreen_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from kbscreen_core.stream_controller import status_from_snapshot
from kbscreen_display import DiffTransmitter, KbScreenError, packet_count, payload_size
from kbscreen_display.transport import HidTransport
from kbscreen_renderer import PATTERNS, BitCanvas, PillowGlyphSource, StatusRenderer, TextLayout, build_test_pattern
from kbscreen_telemetry import TelemetryProvider


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _load_glyphs(cfg: AppConfig, font_override: str | None) -> PillowGlyphSource:
    glyphs = PillowGlyphSource(font_override or cfg.render.font_path)
    # Surface font failures before any frame is rendered.
    glyphs.validate(cfg.render.time_size)
    if cfg.render.show_metrics:
        glyphs.validate(cfg.render.metrics_size)
    return glyphs


def build_renderer(cfg: AppConfig, font_override: str | None = None) -> StatusRenderer:
    canvas = BitCanvas(cfg.display.width, cfg.display.height)
    layout = TextLayout(canvas, _load_glyphs(cfg, font_override))
    return StatusRenderer(
        layout,
        time_size=cfg.render.time_size,
        metrics_size=cfg.render.metrics_size,
        metrics_y=cfg.render.metrics_y,
        show_metrics=cfg.render.show_metrics,
    )


def _controller(cfg: AppConfig, renderer: StatusRenderer, path: str | None) -> StreamController:
    return StreamController(
        renderer,
        telemetry=TelemetryProvider(),
        poll_ms=cfg.stream.poll_ms,
        report_length=cfg.device.report_length,
        match=device_match(cfg),
        path_override=path or cfg.device.path_override,
    )


def cmd_run(args: argparse.Namespace) -> int:
    cfg = load_config()
    controller = _controller(cfg, build_renderer(cfg, args.font), args.path)
    controller.connect()
    try:
        frames = controller.run(max_frames=args.frames)
    finally:
        controller.disconnect()
    get_logger().info("run finished", extra={"event": "run_finished", "frame": frames})
    return 0


def cmd_list_devices(_args: argparse.Namespace) -> int:
    match = device_match(load_config())
    _print_json([describe_device(d, match) for d in HidTransport.discover()])
    return 0


def cmd_doctor(_args: argparse.Namespace) -> int:
    _print_json(build_doctor_payload(load_config()))
    return 0


def cmd_preview(args: argparse.Namespace) -> int:
    cfg = load_config()
    renderer = build_renderer(cfg, args.font)
    snapshot = TelemetryProvider().poll() if args.metrics else None
    canvas = renderer.render(status_from_snapshot(snapshot))

    print(canvas.to_text())
    if args.png:
        out = Path(args.png).expanduser()
        canvas.to_image().save(out)
        print(f"saved {out}", file=sys.stderr)
    _print_json(
        {
            "width": canvas.width,
            "height": canvas.height,
            "bytes": len(canvas.data),
            "packets": packet_count(len(canvas.data), payload_size(cfg.device.report_length)),
        }
    )
    return 0


def cmd_send_test_pattern(args: argparse.Namespace) -> int:
    cfg = load_config()
    canvas = build_test_pattern(args.pattern, cfg.display.width, cfg.display.height)
    path = args.path or cfg.device.path_override

    with HidTransport() as transport:
        if path:
            transport.open(path.encode())
        else:
            transport.open_first(device_match(cfg))
        stats = DiffTransmitter(transport, report_length=cfg.device.report_length).send(canvas)

    _print_json({"success": True, "pattern": args.pattern, "stats": asdict(stats)})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kbscreen", description="Keyboard OLED status display driver")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to the console")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Stream the clock and metrics to the display")
    run_cmd.add_argument("--frames", type=int, default=None, help="Stop after this many frames")
    run_cmd.add_argument("--font", default=None, help="Path to a TrueType/OpenType font")
    run_cmd.add_argument("--path", default=None, help="Explicit HID device path")
    run_cmd.set_defaults(func=cmd_run)

    list_cmd = sub.add_parser("list-devices", help="List HID interfaces")
    list_cmd.set_defaults(func=cmd_list_devices)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics and detected devices")
    doctor_cmd.set_defaults(func=cmd_doctor)

    preview_cmd = sub.add_parser("preview", help="Render one frame to the terminal without hardware")
    preview_cmd.add_argument("--font", default=None, help="Path to a TrueType/OpenType font")
    preview_cmd.add_argument("--png", default=None, help="Also save the frame as a PNG")
    preview_cmd.add_argument("--no-metrics", dest="metrics", action="store_false", help="Skip sampling CPU/RAM")
    preview_cmd.set_defaults(func=cmd_preview)

    pat_cmd = sub.add_parser("send-test-pattern", help="Send a deterministic pattern to the display")
    pat_cmd.add_argument("--pattern", default="checkerboard", choices=list(PATTERNS))
    pat_cmd.add_argument("--path", default=None, help="Explicit HID device path")
    pat_cmd.set_defaults(func=cmd_send_test_pattern)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(
        keep_files=load_config().diagnostics.keep_log_files,
        console=args.verbose,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )
    install_crash_hooks()
    try:
        return int(args.func(args))
    except KbScreenError as exc:
        get_logger().error(str(exc), extra={"event": "fatal", "error": type(exc).__name__})
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
