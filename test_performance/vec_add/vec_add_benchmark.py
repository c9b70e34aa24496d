import torch
import triton
import torch.cuda.nvtx as nvtx
from kernels.vec_add import vec_add, vec_add_autotune
from test_performance.performance_utils import bandwidth_gbps, time_fwd

DEVICE = triton.runtime.driver.active.get_active_torch_device()

@triton.testing.perf_report(
    triton.testing.Benchmark(
        x_names=['size'],
        x_vals=[2**i for i in range(12, 28, 1)],
        x_log=True,
        line_arg='provider',
        line_vals=['triton', 'triton_autotune', 'torch'],
        line_names=['Triton', 'Triton (autotune)', 'Torch'],
        styles=[('blue', '-'), ('red', '--'), ('green', '-')],
        ylabel='GB/s',
        plot_name='vec-add-performance',
        args={},
    ))
def benchmark(size, provider):
    a = torch.rand(size, device=DEVICE, dtype=torch.float32)
    b = torch.rand(size, device=DEVICE, dtype=torch.float32)
    quantiles = [0.5, 0.2, 0.8]
    if provider == 'torch':
        ms, min_ms, max_ms = triton.testing.do_bench(lambda: a + b, quantiles=quantiles)
    elif provider == 'triton':
        ms, min_ms, max_ms = triton.testing.do_bench(lambda: vec_add(a, b, block_size=1024), quantiles=quantiles)
    elif provider == 'triton_autotune':
        ms, min_ms, max_ms = triton.testing.do_bench(lambda: vec_add_autotune(a, b), quantiles=quantiles)
    else:
        raise ValueError('wrong provider, only support: triton, triton_autotune, torch')

    gbps = lambda t: bandwidth_gbps(t, a.numel(), a.element_size())
    # a smaller time gives a larger bandwidth, so min/max swap
    return gbps(ms), gbps(max_ms), gbps(min_ms)


def sweep_block_size(size=2**24):
    """
    Effect of the compile-time constant BLOCK_SIZE on a fixed size.
    Each block size is a different specialization of vec_add_kernel.
    """
    a = torch.rand(size, device=DEVICE, dtype=torch.float32)
    b = torch.rand(size, device=DEVICE, dtype=torch.float32)
    for block_size in [32, 64, 128, 256, 512, 1024, 2048]:
        nvtx.range_push('block_size'+str(block_size))
        mean, std = time_fwd(vec_add, (a, b, None, block_size), warm_up=5, num_trials=20)
        nvtx.range_pop()
        print(f'block_size={block_size:5d}: {mean:.4f}ms (std {std:.4f}), '
              f'{bandwidth_gbps(mean, size, a.element_size()):.1f} GB/s')


def main(args):
    if args.sweep:
        sweep_block_size()
        return
    benchmark.run(print_data=True, show_plots=args.show_plots, save_path=args.save_path)

if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument('--save_path', default='', help='folder for the csv/png of perf_report')
    parser.add_argument('--show_plots', action='store_true', help='show the plot of perf_report')
    parser.add_argument('--sweep', action='store_true', help='time vec_add for several block sizes')
    args = parser.parse_args()

    main(args)

# commandline: python -m test_performance.vec_add.vec_add_benchmark
