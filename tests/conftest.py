import os

import pytest
import torch

# TRITON_INTERPRET needs to be set *before* triton is imported.
# Without a cuda device the kernels run in the interpreter on cpu tensors.
if not torch.cuda.is_available():
    os.environ.setdefault('TRITON_INTERPRET', '1')

from kernels.triton_utils import get_device, is_interpret_mode  # noqa: E402


@pytest.fixture
def device():
    return get_device()


@pytest.fixture
def interpret():
    return is_interpret_mode()


@pytest.fixture(autouse=True)
def _seed():
    torch.manual_seed(37)
