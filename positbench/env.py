from __future__ import annotations

import platform
from importlib import metadata
from typing import Any, Dict, Optional

import numpy as np
import torch

# torch reports these when it runs without a vector ISA dispatch
_NO_SIMD = {"DEFAULT", "NO AVX"}


def _dist_version(name: str) -> Optional[str]:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return None


def cpu_capability() -> str:
    # Available on torch >= 2.1; older builds do not expose the dispatch level
    if hasattr(torch.backends, "cpu") and hasattr(torch.backends.cpu, "get_cpu_capability"):
        return str(torch.backends.cpu.get_cpu_capability())
    return "DEFAULT"


def vectorization_label(capability: Optional[str] = None, machine: Optional[str] = None) -> str:
    cap = (capability if capability is not None else cpu_capability()).upper()
    machine = (machine if machine is not None else platform.machine()).lower()
    if cap in _NO_SIMD:
        if machine in ("arm64", "aarch64"):
            # aarch64 always has NEON; torch only names SVE levels
            return "NEON enabled (ARM)"
        return "No SIMD vectorization"
    return f"{cap} enabled"


def collect_env() -> Dict[str, Any]:
    info: Dict[str, Any] = {}
    info["python"] = {
        "version": platform.python_version(),
        "implementation": platform.python_implementation(),
        "platform": platform.platform(),
    }
    info["os"] = {
        "system": platform.system(),
        "release": platform.release(),
        "machine": platform.machine(),
        "processor": platform.processor(),
    }
    info["torch"] = {
        "version": torch.__version__,
        "num_threads": torch.get_num_threads(),
        "cpu_capability": cpu_capability(),
        "mkldnn": getattr(torch.backends, "mkldnn", None) is not None and torch.backends.mkldnn.is_available(),
    }
    info["numpy"] = {"version": np.__version__}
    info["sfpy"] = {"version": _dist_version("sfpy")}
    info["vectorization"] = vectorization_label(info["torch"]["cpu_capability"], info["os"]["machine"])
    return info
