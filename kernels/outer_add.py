import torch
from torch import tensor
import triton
import triton.language as tl
from kernels.triton_utils import check_tensor_gpu_ready, check_same_device, is_power_of_2

# z[j, i] = x[i] + y[j]
# A 2D grid: program_id(0) walks along x (columns of z), program_id(1) along y (rows of z).

@triton.jit
def outer_add_kernel(
    x_ptr, y_ptr, z_ptr,
    N0, N1, stride_z,
    B0: tl.constexpr, B1: tl.constexpr,
):
    pid_0 = tl.program_id(0)
    pid_1 = tl.program_id(1)

    off_x = pid_0 * B0 + tl.arange(0, B0)
    off_y = pid_1 * B1 + tl.arange(0, B1)
    off_z = off_y[:, None] * stride_z + off_x[None, :]

    # one mask per axis, the mask of the tile is their outer AND
    mask_x = off_x < N0
    mask_y = off_y < N1
    mask_z = mask_y[:, None] & mask_x[None, :]

    x = tl.load(x_ptr + off_x, mask=mask_x)
    y = tl.load(y_ptr + off_y, mask=mask_y)

    z = x[None, :] + y[:, None]
    tl.store(z_ptr + off_z, z, mask=mask_z)


def outer_add(x:tensor, y:tensor, block_x:int=32, block_y:int=32):
    """
    Outer sum of two vectors: returns z of shape (len(y), len(x)) with z[j, i] = x[i] + y[j].

    Example:
        >>> x = torch.arange(100., device='cuda')
        >>> y = torch.arange(90., device='cuda')
        >>> assert torch.allclose(outer_add(x, y), x[None, :] + y[:, None])
    """
    assert x.dim() == 1 and y.dim() == 1, 'x and y should be 1D tensors.'
    assert x.dtype == y.dtype, 'x and y should have the same dtype.'
    assert is_power_of_2(block_x) and is_power_of_2(block_y), 'block sizes must be powers of 2.'
    check_same_device(x, y)
    check_tensor_gpu_ready(x, y)

    N0, N1 = x.numel(), y.numel()
    z = torch.empty((N1, N0), dtype=x.dtype, device=x.device)
    if z.numel() == 0:
        return z

    grid = lambda meta: (triton.cdiv(N0, meta['B0']), triton.cdiv(N1, meta['B1']))
    outer_add_kernel[grid](
        x, y, z,
        N0, N1, z.stride(0),
        B0=block_x, B1=block_y,
    )
    return z
