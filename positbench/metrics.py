import torch


def abs_error(value: torch.Tensor, reference: torch.Tensor) -> torch.Tensor:
    return (reference - value).abs()


def mean_abs_error(value: torch.Tensor, reference: torch.Tensor) -> float:
    """Mean over all elements of |reference - value|; both already in the reference dtype."""
    if value.shape != reference.shape:
        raise ValueError(f"Shape mismatch: {tuple(value.shape)} vs reference {tuple(reference.shape)}")
    return float(abs_error(value, reference).mean().item())
