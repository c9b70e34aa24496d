import numpy as np
import torch
from torch.profiler import ProfilerActivity, record_function
from typing import Callable, Tuple

# helper function
def if_cuda_then_sync():
    if torch.cuda.is_available():
        torch.cuda.synchronize()

# timing
def time_fwd(func, inputs, warm_up=2, num_trials=5):
    for _ in range(warm_up):
        func(*inputs)
    if_cuda_then_sync()

    times = []
    for _ in range(num_trials):
        start_event = torch.cuda.Event(enable_timing=True)
        end_event = torch.cuda.Event(enable_timing=True)

        start_event.record()
        func(*inputs)
        end_event.record()

        # ensures the GPU has finished works before we ask for the elapsed time.
        torch.cuda.synchronize()
        times.append(start_event.elapsed_time(end_event))  # already in ms

    return np.mean(times), np.std(times)

def bandwidth_gbps(ms, numel, element_size, n_tensors=3):
    """
    Effective memory bandwidth of an elementwise kernel.
    vec_add reads a and b and writes c, so n_tensors=3.
    """
    return n_tensors * numel * element_size * 1e-9 / (ms * 1e-3)

# torch profile
def profile(func: Callable, inputs: Tuple, do=None, warm_up=1, profile_memory:bool=False, descript: str='func'):
    for _ in range(warm_up):
        func(*inputs)
    if_cuda_then_sync()

    activities = [ProfilerActivity.CPU]
    if torch.cuda.is_available():
        activities.append(ProfilerActivity.CUDA)

    with torch.profiler.profile(
        activities=activities,
        profile_memory=profile_memory,
    ) as prof:
        # use record_function decorator to label arbitrary code ranges with customized name
        with record_function(descript):
            o = func(*inputs)
            if_cuda_then_sync()

            if do is not None:
                o.backward(do)
                if_cuda_then_sync()

            for i in inputs:
                if torch.is_tensor(i) and i.grad is not None:
                    i.grad.zero_()

    sort_by = 'cuda_time_total' if torch.cuda.is_available() else 'cpu_time_total'
    table = prof.key_averages().table(
        sort_by=sort_by, max_name_column_width=30, row_limit=20
    )

    return table
