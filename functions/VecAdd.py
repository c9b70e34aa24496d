import torch
from torch.profiler import record_function
from kernels.vec_add import vec_add, DEFAULT_BLOCK_SIZE


class VecAdd(torch.autograd.Function):

    @staticmethod
    def forward(ctx, a, b, block_size=DEFAULT_BLOCK_SIZE):
        """
        c = a + b computed by the triton kernel.
        Nothing is saved for backward: the jacobian of an add is the identity
        for both inputs.
        """
        with record_function("VecAdd::FP"):
            c = vec_add(a, b, block_size=block_size)
            ctx.block_size = block_size
            return c

    @staticmethod
    def backward(ctx, dc):
        with record_function("VecAdd::BP"):
            da = dc if ctx.needs_input_grad[0] else None
            db = dc if ctx.needs_input_grad[1] else None
            return da, db, None # None for block_size


vec_add_fn = VecAdd.apply
