from __future__ import annotations

import argparse
from pathlib import Path


def _add_detect_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Path to TOML/YAML/JSON config file")
    parser.add_argument("--input", required=True, help="Image file or directory of images")
    parser.add_argument("--grayscale", action="store_true", help="Load images as single-channel")

    parser.add_argument("--model-name", help="Model name label for logs")
    parser.add_argument("--structure-path", help="Network structure file (.prototxt)")
    parser.add_argument("--weights-path", help="Network weights file (.caffemodel)")
    parser.add_argument("--labels-path", help="Newline-delimited class names file")
    parser.add_argument("--weights-url", help="Download URL used when the weights file is missing")
    parser.add_argument("--device", choices=["cpu", "cuda", "opencl"], help="OpenCV dnn backend target")
    parser.add_argument("--input-size", type=int, help="Square network input size")
    parser.add_argument(
        "--cuda-size-jitter",
        action="store_true",
        help="Alternate the input size by +/-32 between runs on the CUDA backend",
    )

    parser.add_argument("--confidence", type=float, help="Confidence threshold (exclusive)")
    parser.add_argument("--nms", type=float, help="NMS threshold")
    parser.add_argument(
        "--suppress-overlaps",
        action="store_true",
        help="Apply non-maximum suppression with the NMS threshold after decoding",
    )

    parser.add_argument("--sink", choices=["measures", "objects"], help="Result sink flavor")
    parser.add_argument("--annotate-dir", help="Write annotated copies of each image here")

    parser.add_argument("--json-logs", action="store_true", help="Emit structured JSON logs")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Runtime log level")
    parser.add_argument("--quiet", action="store_true", help="Suppress non-warning logs")
    parser.add_argument("--prometheus", action="store_true", help="Enable Prometheus metrics endpoint")
    parser.add_argument("--prometheus-host", help="Prometheus bind host")
    parser.add_argument("--prometheus-port", type=int, help="Prometheus bind port")
    parser.add_argument("--event-file", help="Write per-detection JSON events to file")
    parser.add_argument("--no-event-stdout", action="store_true", help="Disable per-detection JSON events on stdout")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ssdnode",
        description="MobileNet-SSD object detection node",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect = subparsers.add_parser("detect", help="Run detection over images")
    _add_detect_args(detect)

    labels = subparsers.add_parser("labels", help="Print the class label table")
    labels.add_argument("--config", help="Path to TOML/YAML/JSON config file")
    labels.add_argument("--labels-path", help="Newline-delimited class names file")
    labels.add_argument("--json", action="store_true", help="Emit JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    repo_root = Path(__file__).resolve().parents[2]

    if args.command == "detect":
        from ssdnode.commands.detect import run_detect

        return run_detect(args, repo_root)
    if args.command == "labels":
        from ssdnode.commands.labels import run_labels

        return run_labels(args, repo_root)

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
