import logging

import numpy as np

from ndgrad.tensor import Op, Tensor, grad_dtype

logger = logging.getLogger('ndgrad.function')


class Context:
    """Holds what a forward call needs to keep around for its backward call."""

    def __init__(self):
        self.saved_tensors = ()

    def save_for_backward(self, *arrays):
        self.saved_tensors = arrays


def unbroadcast(grad, shape):
    """Sum-reduce grad over the axes that broadcasting added or stretched so it has shape."""
    grad = np.asarray(grad)
    if grad.shape == shape:
        return grad
    # Leading axes added by broadcasting
    extra = grad.ndim - len(shape)
    if extra > 0:
        grad = grad.sum(axis=tuple(range(extra)))
    # Axes stretched from size 1
    axes = tuple(i for i, n in enumerate(shape) if n == 1 and grad.shape[i] != 1)
    if axes:
        grad = grad.sum(axis=axes, keepdims=True)
    return grad.reshape(shape)


class Function:
    """Base class for all differentiable operations.
    Handles the machinery of forward/backward passes and gradient computation.

    Every subclass declares the Op it implements and is registered under it;
    a tensor's backward step is looked up from its op tag."""

    op = Op.NONE
    _registry = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.op in Function._registry:
            raise ValueError(f"Operation {cls.op.value} already registered to {Function._registry[cls.op].__name__}")
        Function._registry[cls.op] = cls

    @classmethod
    def for_op(cls, op):
        return Function._registry[op]

    @classmethod
    def apply(cls, *tensors):
        """Executes the operation and records it in the graph.

        Args:
            tensors: Input tensors for the operation; other values become leaf tensors

        Returns:
            A new tensor pointing at its inputs, tagged with this operation"""

        # Wrap constants so every input is a node in the graph
        tensors = tuple(t if isinstance(t, Tensor) else Tensor(t) for t in tensors)

        # Create context for storing intermediate values
        ctx = Context()

        # Compute forward pass on the raw arrays
        out_data = cls.forward(ctx, *(t.data for t in tensors))

        return Tensor(out_data, _inputs=tensors, _op=cls.op, _ctx=ctx)

    @classmethod
    def propagate(cls, out):
        """Computes gradients of operation with respect to inputs of out.
        This is called during backward() traversal of computational graph."""

        grads = cls.backward(out._ctx, out.grad)
        if not isinstance(grads, tuple):
            grads = (grads,)  # Handle single gradient case

        # Gather all contributions per input before writing any of them,
        # so a tensor used twice (x * x) is updated in a single step
        contributions = {}
        for t, g in zip(out.inputs, grads):
            g = unbroadcast(g, t.data.shape)
            if t in contributions:
                logger.debug(f"Merging aliased gradient contributions for {cls.op.value} input")
                contributions[t] = contributions[t] + g
            else:
                contributions[t] = g

        for t, g in contributions.items():
            # A tensor without a gradient yet starts from zero
            dtype = grad_dtype(t.data)
            previous = t.grad if t.grad is not None else np.zeros_like(t.data, dtype=dtype)
            t.grad = np.asarray(previous + g).astype(dtype, copy=False)

    @staticmethod
    def forward(ctx, *args):
        raise NotImplementedError

    @staticmethod
    def backward(ctx, grad_output):
        raise NotImplementedError
