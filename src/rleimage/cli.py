from __future__ import annotations
import argparse, json, logging, sys
from pathlib import Path
from typing import Any, List, Optional, Sequence
from .config import configure_logging, load_settings, use_settings
from .iteration.protocols import iter_lines
from .iteration.scanline import RLEScanlineConstIterator
from .models.common import ImageRegion, Run
from .models.image import RLEImage

log = logging.getLogger(__name__)


def _parse_value(text: str) -> Any:
    for conv in (int, float):
        try:
            return conv(text)
        except ValueError:
            pass
    return text

def parse_line(spec: str) -> List[Run]:
    """
    "3:7,2:8,1:9" -> [Run(3, 7), Run(2, 8), Run(1, 9)]
    """
    runs = []
    for item in spec.split(","):
        length, sep, value = item.strip().partition(":")
        if not sep:
            raise ValueError(f"bad run {item!r}: expected LENGTH:VALUE")
        runs.append(Run(length=int(length), value=_parse_value(value)))
    return runs

def _parse_ints(text: str) -> tuple[int, ...]:
    return tuple(int(t) for t in text.split(","))

def build_image(args) -> RLEImage:
    lines = [parse_line(s) for s in args.line]
    return RLEImage.from_lines(lines, counter_dtype=args.counter)

def build_region(args, image: RLEImage) -> Optional[ImageRegion]:
    if args.index is None and args.size is None:
        return None
    index = _parse_ints(args.index) if args.index else (0,) * image.dimension
    size = _parse_ints(args.size) if args.size else tuple(n - i for n, i in zip(image.shape, index))
    return ImageRegion(index=index, size=size)

def cmd_info(args) -> int:
    img = build_image(args)
    if args.full:
        print(json.dumps(img.model_dump(mode="json"), indent=2))
        return 0
    pixels = img.largest_region.number_of_pixels
    out = {
        "shape": list(img.shape),
        "counter_dtype": img.counter_dtype,
        "lines": img.line_count,
        "total_runs": img.total_runs,
        "runs_per_line": [len(r) for r in img.lines],
        "pixels_per_run": (pixels / img.total_runs) if img.total_runs else 0.0,
    }
    print(json.dumps(out, indent=2))
    return 0

def cmd_walk(args) -> int:
    img = build_image(args)
    region = build_region(args, img)
    cursor = RLEScanlineConstIterator(img, region, checked=args.checked)
    rows = 0
    for values in iter_lines(cursor, reverse=args.reverse):
        # the cursor still stands on the line just read
        print(f"{list(cursor.index[:-1])}: " + " ".join(str(v) for v in values))
        rows += 1
    log.info("walked %d lines (reverse=%s)", rows, args.reverse)
    return 0

def cmd_plot(args) -> int:
    from .viz import plot_image
    plot_image(build_image(args))
    return 0

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rleimage", description="Run-length encoded image utilities")
    p.add_argument("--config", type=Path, default=None, help="YAML settings file")
    p.add_argument("--debug", action="store_true", help="Enable DEBUG logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    def image_args(sp):
        sp.add_argument("--line", action="append", required=True,
                        help='One scanline as LENGTH:VALUE runs, e.g. "3:7,2:8,1:9"; repeat per line')
        sp.add_argument("--counter", default="uint16", help="Run length counter dtype")

    sp = sub.add_parser("info", help="print a JSON summary of the image")
    image_args(sp)
    sp.add_argument("--full", action="store_true", help="Dump every run")
    sp.set_defaults(func=cmd_info)

    sp = sub.add_parser("walk", help="print pixel values scanline by scanline")
    image_args(sp)
    sp.add_argument("--index", default=None, help="Region start, e.g. 0,1")
    sp.add_argument("--size", default=None, help="Region size, e.g. 2,3")
    sp.add_argument("--reverse", action="store_true", help="Read each line from its end")
    sp.add_argument("--checked", action="store_true", default=None, help="Raise on cursor misuse")
    sp.set_defaults(func=cmd_walk)

    sp = sub.add_parser("plot", help="minimal verification plot")
    image_args(sp)
    sp.set_defaults(func=cmd_plot)

    return p

def main(argv: Optional[Sequence[str]] = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    settings = load_settings(ns.config)
    use_settings(settings)
    configure_logging(debug=ns.debug, settings=settings)
    try:
        return ns.func(ns)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
