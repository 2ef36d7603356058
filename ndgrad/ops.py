import numpy as np

from ndgrad.function import Function
from ndgrad.tensor import Op


class Add(Function):
    """Elementwise sum, z = a + b. Both inputs receive the output gradient as is."""

    op = Op.ADD

    @staticmethod
    def forward(ctx, a, b):
        return a + b

    @staticmethod
    def backward(ctx, grad_output):
        return grad_output, grad_output


class Mul(Function):
    """Elementwise product, z = a * b. Each input receives the gradient times the other input."""

    op = Op.MUL

    @staticmethod
    def forward(ctx, a, b):
        # Need to save inputs for product rule in backward pass
        ctx.save_for_backward(a, b)
        return a * b

    @staticmethod
    def backward(ctx, grad_output):
        a, b = ctx.saved_tensors
        # dL/da = dL/dz * b
        # dL/db = dL/dz * a
        return grad_output * b, grad_output * a


class Tanh(Function):
    """Hyperbolic tangent, y = tanh(x)

    The derivative 1 - tanh(x)^2 is taken from the saved output."""

    op = Op.TANH

    @staticmethod
    def forward(ctx, x):
        out = np.tanh(x)
        ctx.save_for_backward(out)
        return out

    @staticmethod
    def backward(ctx, grad_output):
        out, = ctx.saved_tensors
        return grad_output * (1.0 - out * out)


class ReLU(Function):
    op = Op.RELU

    @staticmethod
    def forward(ctx, x):
        out = np.maximum(x, 0).astype(x.dtype, copy=False)
        ctx.save_for_backward(out)
        return out

    @staticmethod
    def backward(ctx, grad_output):
        out, = ctx.saved_tensors
        # relu'(x) is 1 where the output is positive, 0 elsewhere
        return grad_output * (out > 0).astype(out.dtype)
