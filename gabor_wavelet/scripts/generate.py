"""Generate a Gabor wavelet kernel and save it as comma-terminated text."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml
from omegaconf.errors import OmegaConfBaseException

from gabor_wavelet.config import GenerationConfig, load_config
from gabor_wavelet.data.matrix_io import MatrixIOError, write_matrix
from gabor_wavelet.kernel.grid import BACKENDS, generate_with_sigma
from gabor_wavelet.kernel.params import InvalidParameterError, WaveletParameters

# flag dest -> dotted config key
_EXPLICIT_KEYS = {
    "beta": "wavelet.beta",
    "gamma": "wavelet.gamma",
    "theta": "wavelet.theta",
    "lambda_": "wavelet.lambda",
    "phi": "wavelet.phi",
    "width": "wavelet.width",
    "height": "wavelet.height",
    "output": "output",
    "workers": "workers",
    "backend": "backend",
}


def build_parser() -> argparse.ArgumentParser:
    defaults = WaveletParameters()
    parser = argparse.ArgumentParser(
        description="Generate a 2-D Gabor wavelet and save it to a CSV file",
        epilog="Trailing key=value arguments are applied as config overrides (e.g. wavelet.beta=1.5).",
    )
    parser.add_argument("--beta", type=float, help=f"the bandwidth of the wavelet (octaves) [{defaults.beta:g}]")
    parser.add_argument("--gamma", type=float, help=f"the aspect ratio of the wavelet [{defaults.gamma:g}]")
    parser.add_argument(
        "--theta", type=float, help=f"the orientation of the wavelet to the horizontal (radians) [{defaults.theta:g}]"
    )
    parser.add_argument(
        "--lambda", dest="lambda_", type=float, help=f"the wavelength of the wavelet (pixels) [{defaults.lambda_:g}]"
    )
    parser.add_argument("--phi", type=float, help=f"the phase angle of the wavelet (radians) [{defaults.phi:g}]")
    parser.add_argument("--width", type=int, help=f"the width of the image (pixels) [{defaults.width}]")
    parser.add_argument("--height", type=int, help=f"the height of the image (pixels) [{defaults.height}]")
    parser.add_argument("--output", type=Path, help="the path of the output file (CSV format) [wavelet.csv]")
    parser.add_argument("--config", type=Path, help="YAML config file")
    parser.add_argument("--workers", type=int, help="number of row worker threads")
    parser.add_argument("--backend", choices=BACKENDS, help="evaluation backend [threads]")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="reject parameters that give a degenerate kernel (e.g. beta=1) before computing",
    )
    parser.add_argument("--quiet", action="store_true", help="do not print progress")
    return parser


def _explicit_values(parsed: argparse.Namespace) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for dest, key in _EXPLICIT_KEYS.items():
        value = getattr(parsed, dest)
        if value is not None:
            values[key] = str(value) if isinstance(value, Path) else value
    if parsed.strict:
        values["strict"] = True
    return values


def _print_parameters(params: WaveletParameters) -> None:
    print(
        f"β :\t {params.beta:f}\n"
        f"γ :\t {params.gamma:f}\n"
        f"θ :\t {params.theta:f}\n"
        f"λ :\t {params.lambda_:f}\n"
        f"φ :\t {params.phi:f}\n"
        f"w :\t {params.width}\n"
        f"h :\t {params.height}"
    )


def run(cfg: GenerationConfig, verbose: bool = True) -> Path:
    """Generate the kernel described by ``cfg`` and write it to ``cfg.output``."""

    # Command-line parameters are single precision.
    params = cfg.wavelet.single_precision()
    if verbose:
        print("\nGenerating wavelet...")
        _print_parameters(params)
    matrix, sigma = generate_with_sigma(params, workers=cfg.workers, strict=cfg.strict, backend=cfg.backend)
    if verbose:
        print(f"σ :\t {sigma:f}")
        print("Done.")
        print("\nSaving to file...")
        print(f"o :\t{cfg.output}")
    path = write_matrix(matrix, cfg.output)
    if verbose:
        print("Done.")
    return path


def main(args: List[str] | None = None) -> None:
    parser = build_parser()
    parsed, overrides = parser.parse_known_args(args)
    unknown_flags = [token for token in overrides if token.startswith("-") or "=" not in token]
    if unknown_flags:
        parser.error(f"unrecognized arguments: {' '.join(unknown_flags)}")

    try:
        cfg = load_config(parsed.config, overrides, _explicit_values(parsed))
    except (OSError, ValueError, yaml.YAMLError, OmegaConfBaseException) as exc:
        parser.error(str(exc))

    try:
        run(cfg, verbose=not parsed.quiet)
    except (InvalidParameterError, MatrixIOError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover
    main()
