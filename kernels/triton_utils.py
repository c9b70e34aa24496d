# utils functions
import os
import torch
import triton

def is_interpret_mode():
    # TRITON_INTERPRET needs to be set *before* triton is imported
    return os.environ.get('TRITON_INTERPRET') == '1'

def get_device():
    """
    Device on which kernels of this repo are launched.
    In interpreter mode kernels run on numpy views of cpu tensors.
    """
    if is_interpret_mode():
        return torch.device('cpu')
    return triton.runtime.driver.active.get_active_torch_device()

def is_power_of_2(n:int):
    return n > 0 and (n & (n - 1)) == 0

def check_tensor_gpu_ready(*tensors):
    for t in tensors:
        assert t.is_contiguous(), 'A tensor is not contiguous.'
        if not is_interpret_mode():
            assert t.is_cuda, 'A tensor is not on cuda device.'

def check_same_device(*tensors):
    device = tensors[0].device
    for t in tensors[1:]:
        assert t.device == device, f'tensors are on different devices: {device} vs {t.device}.'
