import logging
import uuid
from enum import Enum

import numpy as np

from ndgrad.config import config

logger = logging.getLogger('ndgrad.tensor')


class Op(Enum):
    """Tag recording which operation produced a tensor."""
    NONE = "none"
    ADD = "add"
    MUL = "multiply"
    TANH = "tanh"
    RELU = "relu"


def grad_dtype(data):
    """Dtype gradients of data are kept in: its own float type, or float64 for integer data."""
    return np.promote_types(data.dtype, np.float32)


class Tensor:
    """Core tensor class that wraps numpy arrays and enables automatic differentiation.
    Tracks the computational graph and handles gradient computation.

    Equality and hashing use a per-tensor identity token, never the data, so
    two tensors holding equal numbers are still different nodes in the graph."""

    # Make numpy defer to __radd__/__rmul__ instead of broadcasting over us
    __array_ufunc__ = None

    def __init__(self, data, _inputs=(), _op=Op.NONE, _ctx=None):
        # Convert input to numpy array; python literals get the configured dtype
        if isinstance(data, (np.ndarray, np.generic)):
            data = np.array(data)
        else:
            data = np.array(data, dtype=config["dtype"])
        data.setflags(write=False)

        self.data = data  # Forward value, read-only after construction
        self.grad = None  # Accumulated gradient, set by backward()
        self._inputs = tuple(_inputs)  # Direct inputs, ordered, may repeat the same tensor
        self._op = _op
        self._ctx = _ctx  # Values saved by the forward for the backward
        self._id = uuid.uuid4()

    @property
    def inputs(self):
        return self._inputs

    @property
    def op(self):
        return self._op

    @property
    def is_leaf(self):
        return not self._inputs

    @property
    def shape(self):
        return self.data.shape

    @property
    def dtype(self):
        return self.data.dtype

    def __hash__(self):
        return hash(self._id)

    def __eq__(self, other):
        return isinstance(other, Tensor) and self._id == other._id

    def __add__(self, other):
        from ndgrad.ops import Add
        return Add.apply(self, other)

    def __radd__(self, other):
        from ndgrad.ops import Add
        return Add.apply(other, self)

    def __mul__(self, other):
        from ndgrad.ops import Mul
        return Mul.apply(self, other)

    def __rmul__(self, other):
        from ndgrad.ops import Mul
        return Mul.apply(other, self)

    def tanh(self):
        from ndgrad.ops import Tanh
        return Tanh.apply(self)

    def relu(self):
        from ndgrad.ops import ReLU
        return ReLU.apply(self)

    def topo_sort(self):
        """Return every tensor reachable from this one, each after all of its inputs.

        This tensor is always last. A tensor reached along several paths is listed once."""
        topo = []
        visited = {self}
        # Explicit stack of (tensor, remaining inputs) so depth is not bound by the recursion limit
        stack = [(self, iter(self._inputs))]
        while stack:
            v, children = stack[-1]
            for child in children:  # Visit all inputs first
                if child not in visited:
                    visited.add(child)
                    stack.append((child, iter(child._inputs)))
                    break
            else:
                stack.pop()
                topo.append(v)
        return topo

    def backward(self, grad=None):
        """Computes gradients of the computational graph starting from this tensor.

        Args:
            grad: External gradient to backpropagate. Required for non-scalar
                 outputs; scalar outputs are seeded with ones.

        Gradients of intermediate tensors are recomputed from scratch on every
        call. Gradients of leaf tensors accumulate across calls; use zero_grad()
        to reset them."""

        if grad is None:
            if self.data.size != 1:
                raise RuntimeError(
                    f"Grad must be specified for non-scalar outputs, got shape {self.data.shape}"
                )
            grad = np.ones_like(self.data, dtype=grad_dtype(self.data))
        else:
            grad = np.asarray(grad)
            # Widen to the gradient dtype, never narrow the seed
            dtype = np.result_type(grad, grad_dtype(self.data))
            grad = np.broadcast_to(grad.astype(dtype, copy=False), self.data.shape).copy()

        # Build list of all tensors in computational graph in topological order
        topo = self.topo_sort()
        logger.debug(f"Backward pass over {len(topo)} tensors from {self._op.value} node")

        for v in topo:
            if not v.is_leaf:
                v.grad = None

        if self.is_leaf and self.grad is not None:
            self.grad = self.grad + grad
        else:
            self.grad = grad

        # Backpropagate gradients through the graph in reverse order
        for v in reversed(topo):
            v._backward()

    def _backward(self):
        # Leaves have nothing to propagate into
        if self.is_leaf:
            return
        from ndgrad.function import Function
        Function.for_op(self._op).propagate(self)

    def zero_grad(self):
        """Clear the gradient of this tensor and of everything it was computed from."""
        for v in self.topo_sort():
            v.grad = None

    def __repr__(self):
        return f"Tensor({self.data}, grad={self.grad}, op={self._op.value})"
