import argparse

import pytest
import torch

from kernels.triton_utils import is_interpret_mode
from kernels.vec_add import vec_add, vec_add_autotune, main, DEFAULT_BLOCK_SIZE


@pytest.mark.parametrize('size', [1, 31, DEFAULT_BLOCK_SIZE - 1, DEFAULT_BLOCK_SIZE,
                                  DEFAULT_BLOCK_SIZE + 1, 1000, 98432])
def test_vec_add_matches_torch(size, device):
    a = torch.rand(size, device=device)
    b = torch.rand(size, device=device)

    c = vec_add(a, b)

    torch.testing.assert_close(c, a + b)


@pytest.mark.parametrize('block_size', [32, 64, 256, 1024])
def test_vec_add_tail_block_is_masked(block_size, device):
    # the last program only owns 7 valid lanes
    size = 3 * block_size + 7
    a = torch.rand(size, device=device)
    b = torch.rand(size, device=device)

    c = vec_add(a, b, block_size=block_size)

    torch.testing.assert_close(c, a + b)


def test_vec_add_does_not_write_past_n(device):
    # c is a view of the first 100 elements, the rest of the buffer must stay untouched
    buffer = torch.full((256,), -1.0, device=device)
    out = buffer[:100]
    a = torch.ones(100, device=device)
    b = torch.ones(100, device=device)

    vec_add(a, b, out=out)

    torch.testing.assert_close(buffer[:100], torch.full((100,), 2.0, device=device))
    torch.testing.assert_close(buffer[100:], torch.full((156,), -1.0, device=device))


def test_vec_add_keeps_shape(device):
    a = torch.rand((4, 33, 5), device=device)
    b = torch.rand((4, 33, 5), device=device)

    c = vec_add(a, b)

    assert c.shape == a.shape
    torch.testing.assert_close(c, a + b)


@pytest.mark.parametrize('dtype', [torch.float16, torch.float32, torch.int32])
def test_vec_add_dtypes(dtype, device):
    a = (torch.rand(517, device=device) * 100).to(dtype)
    b = (torch.rand(517, device=device) * 100).to(dtype)

    c = vec_add(a, b)

    assert c.dtype == dtype
    torch.testing.assert_close(c, a + b)


def test_vec_add_writes_out(device):
    a = torch.rand(300, device=device)
    b = torch.rand(300, device=device)
    out = torch.empty_like(a)

    c = vec_add(a, b, out=out)

    assert c is out
    torch.testing.assert_close(out, a + b)


def test_vec_add_empty(device):
    a = torch.empty(0, device=device)
    b = torch.empty(0, device=device)

    c = vec_add(a, b)

    assert c.numel() == 0


def test_vec_add_shape_mismatch(device):
    with pytest.raises(AssertionError, match='same shape'):
        vec_add(torch.rand(10, device=device), torch.rand(11, device=device))


def test_vec_add_dtype_mismatch(device):
    a = torch.rand(10, device=device)
    with pytest.raises(AssertionError, match='same dtype'):
        vec_add(a, a.to(torch.float64))


def test_vec_add_device_mismatch(device):
    a = torch.rand(10, device=device)
    b = torch.rand(10, device='meta')
    with pytest.raises(AssertionError, match='different devices'):
        vec_add(a, b)


def test_vec_add_not_contiguous(device):
    a = torch.rand((16, 16), device=device).t()
    b = torch.rand((16, 16), device=device)
    with pytest.raises(AssertionError, match='not contiguous'):
        vec_add(a, b)


@pytest.mark.parametrize('block_size', [0, 16, 96, 100])
def test_vec_add_bad_block_size(block_size, device):
    a = torch.rand(10, device=device)
    with pytest.raises(AssertionError, match='block_size'):
        vec_add(a, a, block_size=block_size)


def test_vec_add_bad_out(device):
    a = torch.rand(10, device=device)
    with pytest.raises(AssertionError, match='out should have the same shape'):
        vec_add(a, a, out=torch.empty(9, device=device))


@pytest.mark.skipif(is_interpret_mode(), reason='autotuner benchmarks configs on a cuda device')
@pytest.mark.parametrize('size', [1, 1000, 98432])
def test_vec_add_autotune_matches_torch(size, device):
    a = torch.rand(size, device=device)
    b = torch.rand(size, device=device)

    c = vec_add_autotune(a, b)

    torch.testing.assert_close(c, a + b)


def test_vec_add_out_dtype_mismatch(device):
    a = torch.rand(10, device=device)
    with pytest.raises(AssertionError, match='out should have the same dtype'):
        vec_add(a, a, out=torch.empty(10, device=device, dtype=torch.float64))


def test_vec_add_out_device_mismatch(device):
    a = torch.rand(10, device=device)
    with pytest.raises(AssertionError, match='different devices'):
        vec_add(a, a, out=torch.empty(10, device='meta'))


def test_vec_add_requires_cuda_outside_interpreter(monkeypatch):
    monkeypatch.delenv('TRITON_INTERPRET', raising=False)
    a = torch.rand(10, device='cpu')
    with pytest.raises(AssertionError, match='not on cuda'):
        vec_add(a, a)


def test_vec_add_autotune_shape_mismatch(device):
    # the checks run before the launch, so this holds in interpreter mode too
    with pytest.raises(AssertionError, match='same shape'):
        vec_add_autotune(torch.rand(3, device=device), torch.rand(4, device=device))


def test_vec_add_autotune_dtype_mismatch(device):
    a = torch.rand(3, device=device)
    with pytest.raises(AssertionError, match='same dtype'):
        vec_add_autotune(a, a.to(torch.float64))


def test_vec_add_autotune_empty(device):
    c = vec_add_autotune(torch.empty(0, device=device), torch.empty(0, device=device))
    assert c.numel() == 0


@pytest.mark.parametrize('size', [0, 1000])
def test_main_prints_check(size, capsys):
    main(argparse.Namespace(size=size, block_size=128))

    printed = capsys.readouterr().out
    assert f'size={size}, block_size=128' in printed
    assert 'Torch == Triton: True' in printed
