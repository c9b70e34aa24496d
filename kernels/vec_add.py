import torch
from torch import tensor
import triton
import triton.language as tl
from kernels.triton_utils import check_tensor_gpu_ready, check_same_device, is_power_of_2, get_device

DEFAULT_BLOCK_SIZE = 128


@triton.jit
def vec_add_kernel(a_ptr, b_ptr, c_ptr, n, BLOCK_SIZE: tl.constexpr):
    """
    Triton kernel for element-wise vector addition.

    This kernel performs parallel element-wise addition of two vectors using
    Triton's GPU programming model. Each program instance processes a block
    of elements.

    Args:
        a_ptr: Pointer to the first input tensor in device memory
        b_ptr: Pointer to the second input tensor in device memory
        c_ptr: Pointer to the output tensor in device memory
        n: Total number of elements in the vectors
        BLOCK_SIZE: Number of elements processed per program instance (compile-time constant)

    Notes:
        - Uses masking to handle cases where n is not divisible by BLOCK_SIZE
        - Each program instance (identified by program_id) processes one contiguous block
        - Memory accesses are coalesced for optimal performance
    """
    # locate starting point
    pid = tl.program_id(0)
    block_start = pid * BLOCK_SIZE

    # get offsets
    offsets = block_start + tl.arange(0, BLOCK_SIZE)

    # pointers of this block
    a_offsets = a_ptr + offsets
    b_offsets = b_ptr + offsets
    c_offsets = c_ptr + offsets

    # only the last block can have lanes with offsets >= n
    mask = offsets < n
    block_a = tl.load(a_offsets, mask=mask)
    block_b = tl.load(b_offsets, mask=mask)
    block_add = tl.add(block_a, block_b)
    tl.store(c_offsets, block_add, mask=mask)


@triton.autotune(
    configs=[
        triton.Config({'BLOCK_SIZE': 128}, num_warps=4),
        triton.Config({'BLOCK_SIZE': 256}, num_warps=4),
        triton.Config({'BLOCK_SIZE': 512}, num_warps=8),
        triton.Config({'BLOCK_SIZE': 1024}, num_warps=8),
    ],
    key=['n'], # re-tune when n changes
)
@triton.jit
def vec_add_autotune_kernel(a_ptr, b_ptr, c_ptr, n, BLOCK_SIZE: tl.constexpr):
    """
    Same as vec_add_kernel, BLOCK_SIZE is picked by the autotuner.
    Every config compiles into its own specialized binary.
    """
    pid = tl.program_id(0)
    offsets = pid * BLOCK_SIZE + tl.arange(0, BLOCK_SIZE)
    mask = offsets < n
    a = tl.load(a_ptr + offsets, mask=mask)
    b = tl.load(b_ptr + offsets, mask=mask)
    tl.store(c_ptr + offsets, a + b, mask=mask)


def _check_inputs(a:tensor, b:tensor, out:tensor=None):
    assert a.shape == b.shape, 'a and b should have the same shape.'
    assert a.dtype == b.dtype, 'a and b should have the same dtype.'
    check_same_device(a, b)
    check_tensor_gpu_ready(a, b)
    if out is not None:
        assert out.shape == a.shape, 'out should have the same shape as a.'
        assert out.dtype == a.dtype, 'out should have the same dtype as a.'
        check_same_device(a, out)
        check_tensor_gpu_ready(out)


# api
def vec_add(a:tensor, b:tensor, out:tensor=None, block_size:int=DEFAULT_BLOCK_SIZE):
    """
    Perform element-wise addition of two tensors using Triton.

    Args:
        a: First input tensor (any shape)
        b: Second input tensor (must match shape, dtype and device of a)
        out: Optional output tensor, written in place and returned
        block_size: Number of elements processed per program instance (default: 128)
                    Must be a power of 2 (tl.arange) and divisible by 32 (one warp)

    Returns:
        The tensor containing the element-wise sum of a and b

    Raises:
        AssertionError: If a and b differ in shape, dtype or device, if a tensor is
                        not contiguous / not on cuda, or if block_size is invalid

    Example:
        >>> a = torch.randn(1000, device='cuda')
        >>> b = torch.randn(1000, device='cuda')
        >>> c = vec_add(a, b)
        >>> assert torch.allclose(c, a + b)

    Notes:
        - The grid is automatically sized to cover all elements
        - Uses ceiling division to ensure all elements are processed
        - Output tensor is allocated with the same properties as input a
    """

    _check_inputs(a, b, out)
    assert is_power_of_2(block_size), 'block_size must be a power of 2.'
    assert block_size % 32 == 0, 'block_size must be divisible by 32.'

    c = torch.empty_like(a) if out is None else out
    n = a.numel()
    if n == 0:
        return c

    # grid = lambda meta: (tl.cdiv(n, meta['BLOCK_SIZE']), ) # got an Error!
    grid = lambda meta: (triton.cdiv(n, meta['BLOCK_SIZE']), )
    ## rk's Note
    #  - 'tl.cdiv' is a compile time ceiling function used in kernel
    #  - 'triton.cdiv' is a python level utility function used in host code

    vec_add_kernel[grid](a, b, c, n, BLOCK_SIZE=block_size)
    return c


def vec_add_autotune(a:tensor, b:tensor):
    _check_inputs(a, b)
    c = torch.empty_like(a)
    n = a.numel()
    if n == 0:
        return c

    # BLOCK_SIZE is not passed, meta carries the config picked by the autotuner
    grid = lambda meta: (triton.cdiv(n, meta['BLOCK_SIZE']), )
    vec_add_autotune_kernel[grid](a, b, c, n)
    return c


def main(args):
    torch.manual_seed(0)
    device = get_device()
    a = torch.rand(args.size, device=device)
    b = torch.rand(args.size, device=device)

    c = vec_add(a, b, block_size=args.block_size)
    c_torch = a + b
    print(f'size={args.size}, block_size={args.block_size}, '
          f'num_programs={triton.cdiv(args.size, args.block_size)}')
    max_diff = torch.max(torch.abs(c - c_torch)).item() if c.numel() else 0.0
    print('Torch == Triton:', torch.allclose(c, c_torch), max_diff)

if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument('--size', type=int, default=98432,
                        help='number of elements in each vector')
    parser.add_argument('--block_size', type=int, default=DEFAULT_BLOCK_SIZE,
                        help='number of elements processed by one program')
    args = parser.parse_args()

    main(args)

# commandline: python -m kernels.vec_add
