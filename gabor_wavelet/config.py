"""Run configuration: defaults, YAML files and dotlist overrides."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from omegaconf import DictConfig, OmegaConf

from gabor_wavelet.kernel.grid import BACKENDS
from gabor_wavelet.kernel.params import WaveletParameters

__all__ = ["GenerationConfig", "default_config", "load_config"]


@dataclass
class GenerationConfig:
    """Everything one generate-and-write run needs."""

    wavelet: WaveletParameters = field(default_factory=WaveletParameters)
    output: Path = Path("wavelet.csv")
    workers: Optional[int] = None
    backend: str = "threads"
    strict: bool = False

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got '{self.backend}'")
        if self.workers is not None and int(self.workers) < 1:
            raise ValueError("workers must be >= 1")
        self.output = Path(self.output)


def default_config() -> DictConfig:
    """Built-in defaults as an OmegaConf tree."""
    return OmegaConf.create(
        {
            "wavelet": WaveletParameters().as_dict(),
            "output": "wavelet.csv",
            "workers": None,
            "backend": "threads",
            "strict": False,
        }
    )


def _to_generation_config(cfg: DictConfig) -> GenerationConfig:
    unknown = sorted(set(cfg.keys()) - {"wavelet", "output", "workers", "backend", "strict"})
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")
    wavelet: Dict[str, Any] = OmegaConf.to_container(cfg.wavelet, resolve=True)  # type: ignore[assignment]
    workers = cfg.get("workers")
    return GenerationConfig(
        wavelet=WaveletParameters.from_mapping(wavelet),
        output=Path(str(cfg.output)),
        workers=None if workers is None else int(workers),
        backend=str(cfg.backend),
        strict=bool(cfg.strict),
    )


def load_config(
    path: Optional[str | Path] = None,
    overrides: Iterable[str] = (),
    explicit: Optional[Mapping[str, Any]] = None,
) -> GenerationConfig:
    """
    Resolve a run configuration.

    Precedence (lowest first): built-in defaults, the YAML file at ``path``,
    ``key=value`` dotlist ``overrides``, then ``explicit`` values (dotted keys,
    e.g. ``{"wavelet.beta": 1.5}``) such as flags given on the command line.
    """
    cfg = default_config()
    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(Path(path)))
    overrides = list(overrides)
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(overrides))
    for key, value in (explicit or {}).items():
        OmegaConf.update(cfg, key, value, merge=True)
    return _to_generation_config(cfg)
