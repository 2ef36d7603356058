from ndgrad.config import config, setup_logger
from ndgrad.tensor import Op, Tensor
from ndgrad.function import Context, Function
from ndgrad.ops import Add, Mul, ReLU, Tanh

__all__ = [
    "Tensor",
    "Op",
    "Function",
    "Context",
    "Add",
    "Mul",
    "Tanh",
    "ReLU",
    "config",
    "setup_logger",
]
